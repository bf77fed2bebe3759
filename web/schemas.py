"""
Pydantic 请求/响应模型
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Optional


class RenderRequest(BaseModel):
    """渲染请求"""
    content: str = Field(default="", description="粘贴的原始内容（富文本 / 纯文本 / 图片记号）")
    budget: Optional[int] = Field(default=None, ge=0, description="折叠预览预算（留空则用配置）")
    expanded: bool = Field(default=False, description="展开状态：true 时不截断")


class RenderResponse(BaseModel):
    """渲染响应"""
    markup: str
    was_truncated: bool = False
    visible_length: int = 0
    image_count: int = 0
    container_ids: list[str] = Field(default_factory=list)


class ConfigResponse(BaseModel):
    """当前生效配置"""
    truncation_budget: int
    strip_platform_artifacts: bool
    highlight_color: str
    notation_help: list[str]


class UploadResponse(BaseModel):
    """上传文件响应"""
    filename: str
    content: str
