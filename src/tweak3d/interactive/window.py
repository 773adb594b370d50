# どこで: `src/tweak3d/interactive/window.py`。
# 何を: 描画用 pyglet ウィンドウの生成と、ウィンドウの DPI 倍率取得を行う。
# なぜ: pyglet 依存をこの層に閉じ込め、core/demos をヘッドレスに保つため。

from __future__ import annotations

from typing import Any

import pyglet
from pyglet.gl import Config
from pyglet.window import Window

from tweak3d.interactive.render_settings import RenderSettings


def create_draw_window(settings: RenderSettings) -> Window:
    """設定に基づき描画ウィンドウ（リサイズ可）を生成する。"""

    samples = int(settings.samples)
    config = Config(  # type: ignore[abstract]
        double_buffer=True,
        depth_size=24,
        sample_buffers=1 if samples > 1 else 0,
        samples=samples if samples > 1 else 0,
    )
    width, height = settings.window_size
    return pyglet.window.Window(  # type: ignore[abstract]
        width=int(width),
        height=int(height),
        resizable=True,
        caption=str(settings.caption),
        config=config,
    )


def window_pixel_ratio(window: Any) -> float:
    """ウィンドウの backing scale（論理 -> 物理ピクセル倍率）を返す。"""

    get_pixel_ratio = getattr(window, "get_pixel_ratio", None)
    if callable(get_pixel_ratio):
        return float(max(float(get_pixel_ratio()), 1.0))

    get_framebuffer_size = getattr(window, "get_framebuffer_size", None)
    if callable(get_framebuffer_size) and int(window.width) > 0:
        fb_w, _fb_h = get_framebuffer_size()
        return float(max(float(fb_w) / float(window.width), 1.0))

    return 1.0
