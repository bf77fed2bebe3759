# Core modules for overview-content-studio
from .sanitizer import HtmlSanitizer
from .token_parser import TokenParser, ParsedContent, ContentNode, NodeType, is_valid_image_url
from .image_expander import ImageTokenExpander, ExpandedContent
from .text_structurer import PlainTextStructurer
from .truncator import VisibleLengthTruncator, TruncationResult
from .image_rows import ImageRowRegistry
from .pipeline import (
    OverviewRenderer,
    RenderResult,
    get_default_renderer,
    render,
    render_truncated,
    visible_text_length,
)
from .preview_page import build_preview_page

__all__ = [
    "HtmlSanitizer",
    "TokenParser",
    "ParsedContent",
    "ContentNode",
    "NodeType",
    "is_valid_image_url",
    "ImageTokenExpander",
    "ExpandedContent",
    "PlainTextStructurer",
    "VisibleLengthTruncator",
    "TruncationResult",
    "ImageRowRegistry",
    "OverviewRenderer",
    "RenderResult",
    "get_default_renderer",
    "render",
    "render_truncated",
    "visible_text_length",
    "build_preview_page",
]
