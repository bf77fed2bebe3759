#!/usr/bin/env python3
"""
图片记号展开器

把解析出的节点一次性渲染为标记：图片行 → 可横向滚动的容器，
单图 → 独立图片块，文本段原样输出（或交给 text_filter 处理）。
每个节点只渲染一次，不存在二次匹配。
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..constants.markup_tokens import (
    IMAGE_CLASS,
    IMAGE_ROW_CLASS,
    IMAGE_ROW_ID_PREFIX,
    IMAGE_ROW_ITEM_CLASS,
    IMAGE_ROW_TRACK_CLASS,
    IMAGE_SINGLE_CLASS,
    make_image_row_id,
)
from .token_parser import NodeType, ParsedContent

logger = logging.getLogger(__name__)


@dataclass
class ExpandedContent:
    """展开结果"""
    markup: str
    container_ids: list[str] = field(default_factory=list)
    image_count: int = 0


class ImageTokenExpander:
    """Render parsed image tokens to safe image markup."""

    def __init__(self, id_prefix: str = IMAGE_ROW_ID_PREFIX):
        self.id_prefix = id_prefix

    def expand(
        self,
        parsed: ParsedContent,
        *,
        scope: str = "",
        text_filter: Optional[Callable[[str], str]] = None,
    ) -> ExpandedContent:
        """
        渲染节点序列

        Args:
            parsed: TokenParser 的解析结果（已清洗的内容）
            scope: 图片行 id 的作用域后缀，同一输入保持不变
            text_filter: 文本段的可选处理（纯文本结构化）

        Returns:
            ExpandedContent
        """
        parts: list[str] = []
        container_ids: list[str] = []
        image_count = 0

        for node in parsed.nodes:
            if node.type == NodeType.TEXT:
                parts.append(text_filter(node.source) if text_filter else node.source)
            elif node.type == NodeType.IMAGE:
                parts.append(self.render_single(node.urls[0]))
                image_count += 1
            else:
                container_id = make_image_row_id(scope, len(container_ids) + 1, self.id_prefix)
                container_ids.append(container_id)
                parts.append(self.render_group(node.urls, container_id))
                image_count += len(node.urls)

        if container_ids:
            logger.debug("Expanded %d image rows, %d images", len(container_ids), image_count)

        return ExpandedContent(markup="".join(parts), container_ids=container_ids, image_count=image_count)

    @staticmethod
    def _img(url: str, css_class: str) -> str:
        # sanitized text may carry &amp; inside the query string
        src = html.escape(html.unescape(url.strip()), quote=True)
        return (
            f'<img class="{css_class}" src="{src}" alt="" '
            f'loading="lazy" referrerpolicy="no-referrer">'
        )

    def render_single(self, url: str) -> str:
        return f'<div class="{IMAGE_SINGLE_CLASS}">{self._img(url, IMAGE_CLASS)}</div>'

    def render_group(self, urls: list[str], container_id: str) -> str:
        images = "".join(self._img(url, IMAGE_ROW_ITEM_CLASS) for url in urls)
        return (
            f'<div class="{IMAGE_ROW_CLASS}" id="{html.escape(container_id, quote=True)}" '
            f'data-image-count="{len(urls)}">'
            f'<div class="{IMAGE_ROW_TRACK_CLASS}">{images}</div>'
            f'</div>'
        )
