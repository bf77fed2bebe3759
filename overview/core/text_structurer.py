#!/usr/bin/env python3
"""
纯文本结构化。

职责：
- 内容里没有任何标签、但有换行时，把空行分隔的段落包成 <p>
- 段内单个换行转为 <br>
- 丢弃空段落
已经带标签的内容不做处理（换行交给原有 HTML 语义）。
"""

from __future__ import annotations

import re


class PlainTextStructurer:
    """Wrap markup-free text into minimal paragraph markup."""

    _TAG_RE = re.compile(r"<[A-Za-z/!?][^>]*>")
    _PARAGRAPH_SPLIT_RE = re.compile(r"\n[^\S\n]*\n")

    def has_markup(self, text: str) -> bool:
        return bool(text and self._TAG_RE.search(text))

    def should_structure(self, text: str) -> bool:
        """Only plain text with at least one line break needs structure."""
        if not text or not text.strip():
            return False
        return "\n" in text and not self.has_markup(text)

    def structure(self, text: str) -> str:
        if not text:
            return ""

        normalized = text.replace("\r\n", "\n").replace("\r", "\n")

        paragraphs: list[str] = []
        for block in self._PARAGRAPH_SPLIT_RE.split(normalized):
            lines = [line.strip() for line in block.split("\n")]
            lines = [line for line in lines if line]
            if lines:
                paragraphs.append("<p>" + "<br>".join(lines) + "</p>")

        return "".join(paragraphs)
