"""
图片行登记表

渲染面（前端 / 宿主）为每个可横向滚动的图片行挂载滚动监听，
这里负责 container_id → handle 的归属和挂载/释放生命周期。
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


class ImageRowRegistry:
    """Owns the listener handle of every painted image row."""

    def __init__(
        self,
        attach: Callable[[str], Any],
        detach: Optional[Callable[[str, Any], None]] = None,
    ):
        """
        Args:
            attach: 挂载回调；返回 None 表示容器尚未绘制，下次 sync 再试
            detach: 释放回调；容器已消失时抛出的异常会被记录并忽略
        """
        self._attach = attach
        self._detach = detach
        self._handles: dict[str, Any] = {}
        self._lock = threading.Lock()

    def sync(self, container_ids: Iterable[str]) -> list[str]:
        """Attach rows that appeared, release rows that are gone; returns newly attached ids."""
        wanted = list(dict.fromkeys(container_ids))

        with self._lock:
            stale = [cid for cid in self._handles if cid not in wanted]
            pending = [cid for cid in wanted if cid not in self._handles]

        for cid in stale:
            self.release(cid)

        attached: list[str] = []
        for cid in pending:
            handle = self._attach(cid)
            if handle is None:
                logger.debug("Image row %s not painted yet", cid)
                continue
            with self._lock:
                owned = cid not in self._handles
                if owned:
                    self._handles[cid] = handle
            if not owned:
                # 另一个 sync 已经挂载
                logger.debug("Image row %s attached concurrently, dropping duplicate", cid)
                self._detach_handle(cid, handle)
                continue
            attached.append(cid)

        return attached

    def release(self, container_id: str) -> bool:
        """释放单个图片行；未登记时是 no-op"""
        with self._lock:
            handle = self._handles.pop(container_id, None)
        if handle is None:
            return False

        self._detach_handle(container_id, handle)
        return True

    def _detach_handle(self, container_id: str, handle: Any) -> None:
        if self._detach is None:
            return
        try:
            self._detach(container_id, handle)
        except Exception as exc:
            logger.warning(f"Detach failed for image row {container_id}: {exc}")

    def clear(self) -> None:
        """释放全部图片行（卸载时调用）"""
        for cid in self.attached_ids:
            self.release(cid)

    @property
    def attached_ids(self) -> list[str]:
        with self._lock:
            return list(self._handles)

    def get(self, container_id: str) -> Any:
        with self._lock:
            return self._handles.get(container_id)

    def __contains__(self, container_id: object) -> bool:
        with self._lock:
            return container_id in self._handles

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)
