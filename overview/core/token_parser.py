#!/usr/bin/env python3
"""
图片记号解析器

把内容切分成有类型的节点：文本段、单图、图片行。

    image        := "[" url "]"
    group        := lbrace image+ rbrace
    lbrace       := "{" | "&#123;" | "&lbrace;"
    rbrace       := "}" | "&#125;" | "&rbrace;"
    url (valid)  := "http://" | "https://" ... one of {jpg,jpeg,png,gif,webp,svg,bmp} [ "?" querystring ]

无效的单图、一个有效图片都没有的图片行，原样留在文本段里。
标签内部（属性值等）不做记号识别。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from ..constants.markup_tokens import BRACE_VARIANTS, IMAGE_EXTENSIONS


class NodeType(Enum):
    """节点类型"""
    TEXT = "text"
    IMAGE = "image"
    IMAGE_GROUP = "image_group"


@dataclass
class ContentNode:
    """内容节点"""
    type: NodeType
    source: str  # 原文切片，拼回去等于输入
    urls: list[str] = field(default_factory=list)  # 仅有效链接
    variant: str = ""  # 图片行使用的括号变体

    @property
    def is_image_block(self) -> bool:
        return self.type != NodeType.TEXT


@dataclass
class ParsedContent:
    """解析结果"""
    nodes: list[ContentNode]
    raw_content: str

    @property
    def text_content(self) -> str:
        """所有文本段拼接（不含图片块）"""
        return "".join(node.source for node in self.nodes if node.type == NodeType.TEXT)

    @property
    def image_blocks(self) -> list[ContentNode]:
        return [node for node in self.nodes if node.is_image_block]

    @property
    def image_count(self) -> int:
        return sum(len(node.urls) for node in self.nodes if node.is_image_block)


_EXTENSIONS = "|".join(IMAGE_EXTENSIONS)
_URL_CHARS = r"[^\s\[\]<>\"'?]"

_VALID_URL_RE = re.compile(
    rf"^https?://{_URL_CHARS}+\.(?:{_EXTENSIONS})(?:\?[^\s\[\]<>\"']*)?$",
    re.I,
)


def is_valid_image_url(url: str) -> bool:
    """Absolute http(s) URL ending in an image extension, optional query string."""
    return bool(_VALID_URL_RE.match((url or "").strip()))


def _group_pattern(variant: str) -> str:
    opening, closing = BRACE_VARIANTS[variant]
    return rf"{re.escape(opening)}(?:\s*\[[^\[\]<>]*\])+\s*{re.escape(closing)}"


class TokenParser:
    """图片记号解析器"""

    PATTERNS = {
        'tag': re.compile(r'<[A-Za-z/!?][^>]*>'),
        'inner_image': re.compile(r'\[([^\[\]<>]*)\]'),
    }

    # 同一位置按 普通括号 → 数字引用 → 命名引用 → 单图 的顺序尝试
    _TOKEN_RE = re.compile(
        r"(?P<tag><[A-Za-z/!?][^>]*>)"
        rf"|(?P<brace>{_group_pattern('brace')})"
        rf"|(?P<numeric>{_group_pattern('numeric')})"
        rf"|(?P<named>{_group_pattern('named')})"
        r"|(?P<image>\[[^\[\]<>]*\])"
    )

    def parse(self, content: str | None) -> ParsedContent:
        """解析内容为节点序列"""
        content = content or ""
        nodes: list[ContentNode] = []
        text_start = 0

        for match in self._TOKEN_RE.finditer(content):
            kind = match.lastgroup
            if kind == 'tag':
                continue

            source = match.group(0)
            if kind == 'image':
                url = source[1:-1].strip()
                if not is_valid_image_url(url):
                    continue
                node = ContentNode(type=NodeType.IMAGE, source=source, urls=[url])
            else:
                urls = [
                    inner.strip()
                    for inner in self.PATTERNS['inner_image'].findall(source)
                    if is_valid_image_url(inner)
                ]
                if not urls:
                    continue
                node = ContentNode(type=NodeType.IMAGE_GROUP, source=source, urls=urls, variant=kind)

            if match.start() > text_start:
                nodes.append(ContentNode(type=NodeType.TEXT, source=content[text_start:match.start()]))
            nodes.append(node)
            text_start = match.end()

        if text_start < len(content):
            nodes.append(ContentNode(type=NodeType.TEXT, source=content[text_start:]))

        return ParsedContent(nodes=nodes, raw_content=content)
