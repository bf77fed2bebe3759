#!/usr/bin/env python3
"""
概览内容渲染管线

原始内容 → 清洗 → 记号解析 → 图片展开（+ 纯文本结构化） → 渲染结果。
折叠预览时先在原始内容上确定截断点，再对截断后的切片重跑整条管线。

任何输入都会得到输出：解析/截断出错时退回到转义文本或未截断的完整结果。
"""

from __future__ import annotations

import hashlib
import html
import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Optional

from ..config import OverviewConfig
from .image_expander import ImageTokenExpander
from .sanitizer import HtmlSanitizer
from .text_structurer import PlainTextStructurer
from .token_parser import TokenParser
from .truncator import VisibleLengthTruncator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    """渲染结果"""
    markup: str
    was_truncated: bool = False
    visible_length: int = 0
    image_count: int = 0
    container_ids: list[str] = field(default_factory=list)


def visible_text_length(markup: str | None) -> int:
    """渲染标记的可见字符数（去标签、解码字符引用）"""
    return VisibleLengthTruncator.visible_length(markup)


def content_scope(raw: str) -> str:
    """Stable per-input suffix for generated container ids."""
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()[:8]


class OverviewRenderer:
    """AI 概览富内容渲染器"""

    def __init__(self, config: Optional[OverviewConfig] = None):
        self.config = config or OverviewConfig()
        self._sanitizer = HtmlSanitizer(
            strip_platform_artifacts=self.config.strip_platform_artifacts,
            highlight_color=self.config.highlight_color,
        )
        self._parser = TokenParser()
        self._expander = ImageTokenExpander()
        self._structurer = PlainTextStructurer()
        self._truncator = VisibleLengthTruncator(self._parser)

        self._cache: dict[tuple, RenderResult] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, raw: str | None) -> RenderResult:
        """Full transform, no truncation."""
        raw = self._coerce(raw)
        if not raw:
            return RenderResult(markup="")

        key = (raw, None, True)
        cached = self._cache_get(key)
        if cached is not None:
            return cached

        result = self._transform(raw, scope=content_scope(raw))
        self._cache_put(key, result)
        return result

    def render_truncated(
        self,
        raw: str | None,
        budget: Optional[int] = None,
        expanded: bool = False,
    ) -> RenderResult:
        """
        折叠预览渲染

        Args:
            raw: 原始内容
            budget: 可见字符预算，默认取配置
            expanded: True 时不截断，结果与 render 相同

        Returns:
            RenderResult（was_truncated 标记是否发生截断）
        """
        raw = self._coerce(raw)
        if not raw:
            return RenderResult(markup="")

        if expanded:
            return self.render(raw)

        full = self.render(raw)

        try:
            limit = max(0, int(self.config.truncation_budget if budget is None else budget))
        except (TypeError, ValueError):
            logger.warning(f"Unusable truncation budget {budget!r}, showing full content")
            return full

        key = (raw, limit, False)
        cached = self._cache_get(key)
        if cached is not None:
            return cached

        try:
            if full.visible_length <= limit and self._truncator.text_length(raw) <= limit:
                result = full
            else:
                result = self._truncate(raw, limit)
        except Exception as exc:
            logger.warning(f"Truncation failed, showing full content: {exc}")
            return full

        self._cache_put(key, result)
        return result

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce(raw) -> str:
        if raw is None:
            return ""
        return raw if isinstance(raw, str) else str(raw)

    def _transform(self, raw: str, scope: str) -> RenderResult:
        try:
            sanitized = self._sanitizer.sanitize(raw)
            if not sanitized:
                return RenderResult(markup="")

            parsed = self._parser.parse(sanitized)
            text_filter = (
                self._structurer.structure
                if self._structurer.should_structure(parsed.text_content)
                else None
            )
            expanded = self._expander.expand(parsed, scope=scope, text_filter=text_filter)
        except Exception:
            logger.exception("Overview render failed, falling back to escaped text")
            escaped = html.escape(raw)
            return RenderResult(markup=escaped, visible_length=visible_text_length(escaped))

        return RenderResult(
            markup=expanded.markup,
            visible_length=visible_text_length(expanded.markup),
            image_count=expanded.image_count,
            container_ids=expanded.container_ids,
        )

    def _truncate(self, raw: str, budget: int) -> RenderResult:
        """
        Cut on the raw content and re-render the slice.

        Sanitizing can make a slice measure longer than its raw count (a dangling
        ``<`` keeps its references undecoded), so the cut budget shrinks by the
        overflow until the render fits. It only ever decreases, down to 0.
        """
        scope = content_scope(raw)
        cut_budget = budget

        while True:
            cut = self._truncator.truncate(raw, cut_budget)
            result = self._transform(cut.content, scope=scope)
            if result.visible_length <= budget:
                return replace(result, was_truncated=True)
            if cut_budget == 0:
                break

            overflow = result.visible_length - budget
            logger.debug(f"Truncated render over budget by {overflow}, cutting again")
            cut_budget = max(0, cut_budget - overflow)

        result = self._transform(self._leading_images(raw), scope=scope)
        if result.visible_length > budget:
            return RenderResult(markup="", was_truncated=True)
        return replace(result, was_truncated=True)

    def _leading_images(self, raw: str) -> str:
        """Image blocks ahead of the first visible text run."""
        blocks: list[str] = []
        for node in self._parser.parse(raw).nodes:
            if node.is_image_block:
                blocks.append(node.source)
            elif self._truncator.visible_length(node.source):
                break
        return "".join(blocks)

    def _cache_get(self, key: tuple) -> Optional[RenderResult]:
        with self._lock:
            return self._cache.get(key)

    def _cache_put(self, key: tuple, result: RenderResult) -> None:
        if self.config.cache_size <= 0:
            return
        with self._lock:
            if len(self._cache) >= self.config.cache_size:
                # 满了整体清空
                self._cache.clear()
            self._cache[key] = result


_default_renderer: Optional[OverviewRenderer] = None
_default_lock = threading.Lock()


def get_default_renderer() -> OverviewRenderer:
    """进程内共享的渲染器（配置取自环境变量）"""
    global _default_renderer
    with _default_lock:
        if _default_renderer is None:
            _default_renderer = OverviewRenderer(OverviewConfig.resolve())
        return _default_renderer


def render(raw_content: str | None) -> str:
    """完整渲染，不截断"""
    return get_default_renderer().render(raw_content).markup


def render_truncated(
    raw_content: str | None,
    budget: Optional[int] = None,
    expanded: bool = False,
) -> RenderResult:
    """折叠预览渲染；expanded=True 时等同 render"""
    return get_default_renderer().render_truncated(raw_content, budget, expanded)
