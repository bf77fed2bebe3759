"""
REST 路由
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from overview.config import OverviewConfig
from overview.constants.markup_tokens import NOTATION_HELP
from overview.core import OverviewRenderer, RenderResult, build_preview_page

from .schemas import ConfigResponse, RenderRequest, RenderResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

UPLOAD_EXTENSIONS = ('.html', '.htm', '.txt', '.md')

# Shared renderer (resolved lazily so a bad env surfaces as an API error)
_renderer: Optional[OverviewRenderer] = None


def get_renderer() -> OverviewRenderer:
    global _renderer
    if _renderer is None:
        try:
            _renderer = OverviewRenderer(OverviewConfig.resolve())
        except (ValueError, FileNotFoundError) as exc:
            logger.error("Invalid overview configuration: %s", exc)
            raise HTTPException(500, f"配置错误: {exc}") from exc
    return _renderer


def set_renderer(renderer: Optional[OverviewRenderer]) -> None:
    """Replace the shared renderer (None re-reads configuration on next use)."""
    global _renderer
    _renderer = renderer


def _render(req: RenderRequest) -> RenderResult:
    renderer = get_renderer()
    if req.expanded:
        return renderer.render(req.content)
    return renderer.render_truncated(req.content, req.budget, expanded=False)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

@router.get("/config", response_model=ConfigResponse)
async def get_config():
    """当前生效的渲染配置与图片记号说明"""
    config = get_renderer().config
    return ConfigResponse(
        truncation_budget=config.truncation_budget,
        strip_platform_artifacts=config.strip_platform_artifacts,
        highlight_color=config.highlight_color,
        notation_help=list(NOTATION_HELP),
    )


# ---------------------------------------------------------------------------
# Render
# ---------------------------------------------------------------------------

@router.post("/render", response_model=RenderResponse)
async def render_overview(req: RenderRequest):
    """渲染粘贴内容（可选折叠截断）"""
    result = _render(req)
    return RenderResponse(
        markup=result.markup,
        was_truncated=result.was_truncated,
        visible_length=result.visible_length,
        image_count=result.image_count,
        container_ids=list(result.container_ids),
    )


@router.post("/preview")
async def preview_overview(req: RenderRequest):
    """渲染为完整预览页"""
    result = _render(req)
    html_content = build_preview_page(
        result,
        highlight_color=get_renderer().config.highlight_color,
    )
    return HTMLResponse(content=html_content)


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------

@router.post("/upload", response_model=UploadResponse)
async def upload_content(file: UploadFile = File(...)):
    """上传 .html / .txt / .md 文件，返回文本内容"""
    if not file.filename or not file.filename.lower().endswith(UPLOAD_EXTENSIONS):
        raise HTTPException(400, "仅支持 .html / .htm / .txt / .md 文件")
    content = await file.read()
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        text = content.decode("gbk", errors="replace")
    return UploadResponse(filename=file.filename, content=text)
