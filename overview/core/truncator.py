#!/usr/bin/env python3
"""
可见长度截断器

按“可见字符数”截断原始内容：标签不计数，字符引用按 1 个字符计数，
图片块整块保留且不占预算，截断点不会落在标签、引用或图片记号内部。
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from typing import Optional

from .token_parser import TokenParser

logger = logging.getLogger(__name__)


@dataclass
class TruncationResult:
    """截断结果"""
    content: str  # 原始内容切片
    was_truncated: bool
    text_length: int  # 原始文本的可见长度
    kept_images: int = 0  # 保留的图片块数


class VisibleLengthTruncator:
    """Segment-preserving truncation over raw overview content."""

    _HIDDEN_BLOCK_RE = re.compile(
        r"<(script|style|noscript|template|iframe|object|textarea|title)\b[^>]*>.*?</\1\s*>",
        re.I | re.S,
    )
    _TAG_RE = re.compile(r"<[A-Za-z/!?][^>]*>")
    _ENTITY_RE = re.compile(r"&(?:#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")

    def __init__(self, parser: Optional[TokenParser] = None):
        self.parser = parser or TokenParser()

    @classmethod
    def visible_length(cls, markup: str | None) -> int:
        """Visible characters in markup: hidden blocks and tags removed, references decoded."""
        if not markup:
            return 0
        text = cls._HIDDEN_BLOCK_RE.sub("", markup)
        text = cls._TAG_RE.sub("", text)
        return len(html.unescape(text))

    def text_length(self, raw: str | None) -> int:
        """Visible length of the text runs only; image blocks do not count."""
        return self.visible_length(self.parser.parse(raw).text_content)

    def truncate(self, raw: str | None, budget: int) -> TruncationResult:
        """
        截断原始内容

        Args:
            raw: 原始内容（未清洗）
            budget: 可见字符预算

        Returns:
            TruncationResult，content 为需要重新渲染的原始切片
        """
        raw = raw or ""
        budget = max(0, int(budget))

        parsed = self.parser.parse(raw)
        total = self.visible_length(parsed.text_content)
        if total <= budget:
            return TruncationResult(
                content=raw,
                was_truncated=False,
                text_length=total,
                kept_images=len(parsed.image_blocks),
            )

        pieces: list[str] = []
        consumed = 0
        kept_images = 0

        for node in parsed.nodes:
            if node.is_image_block:
                pieces.append(node.source)
                kept_images += 1
                continue

            remaining = budget - consumed
            length = self.visible_length(node.source)
            if length <= remaining:
                pieces.append(node.source)
                consumed += length
                continue

            pieces.append(self.cut_text(node.source, remaining))
            break

        logger.debug(
            "Truncated %d visible chars to budget %d, kept %d image blocks",
            total, budget, kept_images,
        )
        return TruncationResult(
            content="".join(pieces),
            was_truncated=True,
            text_length=total,
            kept_images=kept_images,
        )

    def cut_text(self, text: str, limit: int) -> str:
        """Copy ``text`` until ``limit`` visible characters have been taken."""
        out: list[str] = []
        count = 0
        i = 0
        n = len(text)

        while i < n and count < limit:
            ch = text[i]

            if ch == "<":
                match = self._HIDDEN_BLOCK_RE.match(text, i) or self._TAG_RE.match(text, i)
                if match:
                    out.append(match.group(0))
                    i = match.end()
                    continue

            if ch == "&":
                match = self._ENTITY_RE.match(text, i)
                decoded = html.unescape(match.group(0)) if match else ""
                if match and decoded != match.group(0):
                    out.append(match.group(0))
                    count += len(decoded)
                    i = match.end()
                    continue

            out.append(ch)
            count += 1
            i += 1

        return "".join(out)
