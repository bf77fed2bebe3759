#!/usr/bin/env python3
"""
粘贴内容清洗器

把从搜索引擎 AI 摘要框里复制出来的富文本清洗成可以安全渲染的标记：
- 删除脚本、内嵌框架、交互控件等可执行/危险元素
- 删除事件处理、追踪、自动化属性，以及平台排版残留（可配置）
- 行内样式只保留排版相关属性，黄色高亮统一映射为强调色
- <mark> 归一化为带高亮 class 的 <strong>
- 压缩连续空白
"""

from __future__ import annotations

import logging
import re
import warnings

from bs4 import BeautifulSoup, CData, Comment, Declaration, Doctype, ProcessingInstruction

from ..constants.markup_tokens import (
    BLOCKED_TAGS,
    DEFAULT_HIGHLIGHT_COLOR,
    HIGHLIGHT_CLASS,
    INTERACTIVE_TAGS,
    PLATFORM_ATTRIBUTES,
    SAFE_URL_SCHEMES,
    TRACKING_ATTRIBUTES,
    URL_ATTRIBUTES,
    WRAPPER_TAGS,
    is_allowed_style_property,
)

logger = logging.getLogger(__name__)


# 常见的“黄色荧光笔”背景
_YELLOW_HIGHLIGHT_RE = re.compile(
    r"\b(?:light)?yellow\b"
    r"|#ff0\b|#ffff00\b"
    r"|rgba?\(\s*255\s*,\s*255\s*,\s*0\s*[,)]"
    r"|#(?:fef08a|fde047|fff59d|fff176|ffeb3b|ffff99|ffff66)\b",
    re.I,
)
_UNSAFE_STYLE_VALUE_RE = re.compile(r"url\s*\(|expression\s*\(|javascript:|@import|behavior\s*:", re.I)
_URL_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.\-]*):", re.I)
_URL_NOISE_RE = re.compile(r"[\x00-\x20\x7f]+")
_ATTRIBUTE_NAME_RE = re.compile(r"^[a-zA-Z_:][-a-zA-Z0-9_:.]*$")

_NON_TEXT_NODES = (Comment, Doctype, Declaration, CData, ProcessingInstruction)

_INLINE_WS_RE = re.compile(r"[^\S\n]{2,}")
_NEWLINE_PAD_RE = re.compile(r"[^\S\n]*\n[^\S\n]*")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


class HtmlSanitizer:
    """Rich paste sanitizer backed by BeautifulSoup."""

    def __init__(
        self,
        strip_platform_artifacts: bool = True,
        highlight_color: str = DEFAULT_HIGHLIGHT_COLOR,
    ):
        self.strip_platform_artifacts = strip_platform_artifacts
        self.highlight_color = highlight_color

    def sanitize(self, content: str | None) -> str:
        """Return safe markup for ``content``; empty input gives ``""``."""
        if not content:
            return ""

        with warnings.catch_warnings():
            # bs4 warns when a short paste looks like a bare URL or filename
            warnings.simplefilter("ignore", UserWarning)
            soup = BeautifulSoup(content, "html.parser")

        for node in soup.find_all(string=lambda s: isinstance(s, _NON_TEXT_NODES)):
            node.extract()

        for tag in soup.find_all(list(BLOCKED_TAGS) + list(INTERACTIVE_TAGS)):
            if not tag.decomposed:
                tag.decompose()

        if self.strip_platform_artifacts:
            for tag in soup.find_all(lambda t: t.name in WRAPPER_TAGS or "-" in t.name):
                tag.unwrap()

        for tag in soup.find_all(True):
            self._clean_attributes(tag)

        for mark in soup.find_all("mark"):
            mark.name = "strong"
            mark.attrs = {"class": [HIGHLIGHT_CLASS]}

        return self.collapse_whitespace(soup.decode(formatter="minimal"))

    @staticmethod
    def collapse_whitespace(markup: str) -> str:
        """Collapse whitespace runs, keeping at most one blank line."""
        text = markup.replace("\r\n", "\n").replace("\r", "\n")
        text = _INLINE_WS_RE.sub(" ", text)
        text = _NEWLINE_PAD_RE.sub("\n", text)
        text = _BLANK_LINES_RE.sub("\n\n", text)
        return text.strip()

    def _clean_attributes(self, tag) -> None:
        cleaned: dict = {}
        for name, value in tag.attrs.items():
            lowered = name.lower()

            if not _ATTRIBUTE_NAME_RE.match(name):
                continue
            if lowered.startswith("on") or lowered.startswith("data-") or lowered.startswith("js"):
                continue
            if lowered in TRACKING_ATTRIBUTES:
                continue
            if self.strip_platform_artifacts and (
                lowered in PLATFORM_ATTRIBUTES or lowered.startswith("aria-")
            ):
                continue

            if lowered in URL_ATTRIBUTES:
                if not self.is_safe_url(value):
                    logger.debug("Dropped unsafe %s on <%s>", lowered, tag.name)
                    continue
            elif lowered == "style":
                value = self.filter_style(value)
                if not value:
                    continue

            cleaned[name] = value

        if tag.name == "a" and "target" in cleaned:
            cleaned["rel"] = "noopener noreferrer"

        tag.attrs = cleaned

    @staticmethod
    def is_safe_url(value) -> bool:
        """Relative URLs and http(s)/mailto pass; every other scheme is rejected."""
        if isinstance(value, list):
            value = " ".join(value)
        candidate = _URL_NOISE_RE.sub("", str(value or ""))
        match = _URL_SCHEME_RE.match(candidate)
        if match is None:
            return True
        return match.group(1).lower() in SAFE_URL_SCHEMES

    def filter_style(self, style) -> str:
        """Reduce an inline style to typographic declarations plus the highlight rewrite."""
        if isinstance(style, list):
            style = " ".join(style)

        kept: list[str] = []
        highlighted = False

        for declaration in str(style or "").split(";"):
            prop, sep, value = declaration.partition(":")
            prop = prop.strip().lower()
            value = value.strip()
            if not sep or not prop or not value:
                continue
            if _UNSAFE_STYLE_VALUE_RE.search(value):
                continue

            if prop in ("background", "background-color"):
                if not highlighted and _YELLOW_HIGHLIGHT_RE.search(value):
                    kept.append(f"background-color: {self.highlight_color}")
                    highlighted = True
                continue

            if is_allowed_style_property(prop):
                kept.append(f"{prop}: {value}")

        return "; ".join(kept)
