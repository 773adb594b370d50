# どこで: `src/tweak3d/interactive/runtime/resize.py`。
# 何を: ウィンドウのリサイズでカメラの aspect/射影行列と出力サイズを更新し、その場で 1 回描画する。
# なぜ: 表示中のフレームがリサイズに遅れず、古い aspect のまま描かれることがないようにするため。

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from tweak3d.core.scene import PerspectiveCamera

_logger = logging.getLogger(__name__)


class SizedRenderer(Protocol):
    def set_size(self, width: int, height: int) -> None: ...


class ResizeHandler:
    """リサイズイベント 1 回につき、射影更新とサイズ更新と描画を 1 回ずつ行う。"""

    def __init__(
        self,
        camera: PerspectiveCamera,
        renderer: SizedRenderer,
        render_now: Callable[[], None],
    ) -> None:
        self._camera = camera
        self._renderer = renderer
        self._render_now = render_now
        self.resize_count = 0

    def handle(self, width: int, height: int) -> bool:
        """新しいサイズ（論理ピクセル）を反映する。

        Returns
        -------
        bool
            反映して描画した場合 True。高さ/幅が 0（最小化など）の場合は何もせず False。
        """

        w, h = int(width), int(height)
        if w <= 0 or h <= 0:
            _logger.debug("サイズ 0 のリサイズを無視します: %dx%d", w, h)
            return False

        camera = self._camera
        camera.aspect = w / h
        camera.update_projection_matrix()
        self._renderer.set_size(w, h)
        self._render_now()
        self.resize_count += 1
        return True

    def on_resize(self, width: int, height: int) -> None:
        self.handle(width, height)

    def attach(self, window: Any) -> None:
        """pyglet ウィンドウの `on_resize` を購読する。"""

        window.push_handlers(on_resize=self.on_resize)


__all__ = ["ResizeHandler"]
