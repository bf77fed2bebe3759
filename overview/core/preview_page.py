#!/usr/bin/env python3
"""
预览页

把渲染结果包成一张独立的“AI Overview”卡片页面，用于运营核对粘贴效果。
图片行只给出横向滚动样式；滚动提示等交互由宿主页面负责。
"""

from __future__ import annotations

import html
from typing import Optional

from ..constants.markup_tokens import (
    HIGHLIGHT_CLASS,
    IMAGE_CLASS,
    IMAGE_ROW_CLASS,
    IMAGE_ROW_ITEM_CLASS,
    IMAGE_ROW_TRACK_CLASS,
    IMAGE_SINGLE_CLASS,
)
from .pipeline import RenderResult


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        * {{
            box-sizing: border-box;
        }}
        body {{
            font-family: {font_family};
            background: #ffffff;
            margin: 0;
            padding: 24px;
        }}
        .ai-card {{
            max-width: 48rem;
            margin: 1rem 0;
        }}
        .ai-header {{
            display: flex;
            align-items: center;
            gap: 0.5rem;
            margin-bottom: 0.5rem;
            color: #666666;
            font-size: 14px;
            font-weight: 500;
        }}
        .ai-body {{
            font-size: 16px;
            line-height: 1.6;
            color: #000000;
            white-space: pre-wrap;
            word-wrap: break-word;
        }}
        .ai-body .{highlight_class} {{
            background-color: {highlight_color};
        }}
        .{single_class} {{
            margin: 12px 0;
        }}
        .{single_class} .{image_class} {{
            max-width: 100%;
            border-radius: 8px;
            display: block;
        }}
        .{row_class} {{
            position: relative;
            margin: 12px 0;
            overflow-x: auto;
            overflow-y: hidden;
            scrollbar-width: thin;
        }}
        .{track_class} {{
            display: flex;
            gap: 8px;
            white-space: nowrap;
        }}
        .{row_item_class} {{
            flex: 0 0 auto;
            height: 160px;
            border-radius: 8px;
            object-fit: cover;
        }}
        .ai-toggle {{
            display: inline-block;
            margin-top: 8px;
            color: {accent_color};
            font-size: 14px;
            text-decoration: none;
        }}
        .ai-footer {{
            margin-top: 12px;
            font-size: 11px;
            color: #70757a;
        }}
    </style>
</head>
<body>
    <section class="ai-card">
        <div class="ai-header">{heading}</div>
        <div class="ai-body">{body}</div>
        {toggle_html}
        <div class="ai-footer">AI responses may include mistakes</div>
    </section>
</body>
</html>"""

DEFAULT_FONT_FAMILY = '-apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif'


def build_preview_page(
    result: RenderResult,
    *,
    title: str = "AI Overview Preview",
    heading: str = "AI Overview",
    toggle_href: Optional[str] = None,
    highlight_color: str = "#d3e3fd",
    accent_color: str = "#1a73e8",
) -> str:
    """
    生成预览页 HTML

    Args:
        result: OverviewRenderer 的渲染结果
        title: 页面标题
        heading: 卡片标题
        toggle_href: 截断时“Show more”链接地址；None 时不显示链接
        highlight_color: 高亮背景色
        accent_color: 链接颜色

    Returns:
        完整 HTML 文本
    """
    toggle_html = ""
    if result.was_truncated and toggle_href is not None:
        toggle_html = f'<a class="ai-toggle" href="{html.escape(toggle_href, quote=True)}">Show more</a>'

    return PAGE_TEMPLATE.format(
        title=html.escape(title),
        heading=html.escape(heading),
        body=result.markup,
        toggle_html=toggle_html,
        font_family=DEFAULT_FONT_FAMILY,
        highlight_class=HIGHLIGHT_CLASS,
        highlight_color=highlight_color,
        accent_color=accent_color,
        single_class=IMAGE_SINGLE_CLASS,
        image_class=IMAGE_CLASS,
        row_class=IMAGE_ROW_CLASS,
        track_class=IMAGE_ROW_TRACK_CLASS,
        row_item_class=IMAGE_ROW_ITEM_CLASS,
    )
