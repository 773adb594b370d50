# どこで: `src/tweak3d/interactive/runtime/draw_window_system.py`。
# 何を: AppContext のシーンを描画ウィンドウへ描くサブシステム（renderer/リサイズ/周回操作の配線）を提供する。
# なぜ: `src/tweak3d/api/runner.py` の `run()` を「配線」に寄せ、描画責務を独立させるため。

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tweak3d.core.context import AppContext
from tweak3d.interactive.gl.scene_renderer import SceneRenderer
from tweak3d.interactive.orbit_controls import OrbitControls
from tweak3d.interactive.render_settings import RenderSettings
from tweak3d.interactive.runtime.perf import PerfCollector
from tweak3d.interactive.runtime.resize import ResizeHandler
from tweak3d.interactive.window import create_draw_window, window_pixel_ratio

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from tweak3d.interactive.runtime.monitor import RuntimeMonitor


class DrawWindowSystem:
    """描画（メインウィンドウ）のサブシステム。"""

    def __init__(
        self,
        ctx: AppContext,
        *,
        settings: RenderSettings,
        monitor: RuntimeMonitor | None = None,
        perf: PerfCollector | None = None,
    ) -> None:
        """描画用の window/renderer を初期化し、リサイズと周回操作を購読する。"""

        self._ctx = ctx
        self._monitor = monitor
        self._perf = perf if perf is not None else PerfCollector(enabled=False)

        # 描画用の pyglet window を作成し、その window の OpenGL コンテキストに紐づく renderer を作る。
        self.window = create_draw_window(settings)
        self.renderer = SceneRenderer(
            self.window,
            output_srgb=settings.output_srgb,
            clear_color=settings.clear_color,
        )
        self.renderer.set_pixel_ratio(window_pixel_ratio(self.window))

        self.orbit: OrbitControls | None = None
        orbit = ctx.view.orbit
        if orbit is not None:
            self.orbit = OrbitControls(
                ctx.camera,
                target=orbit.target,
                min_distance=orbit.min_distance,
                max_distance=orbit.max_distance,
            )
            self.orbit.attach(self.window)

        self.resize = ResizeHandler(ctx.camera, self.renderer, self.render_now)
        self.resize.attach(self.window)
        # 初期サイズでも aspect を合わせる（以後はイベントで追従する）。
        self.resize.handle(self.window.width, self.window.height)

    def render_now(self) -> None:
        """このウィンドウへ 1 フレーム描画して flip する。"""

        window = self.window
        if getattr(window, "has_exit", False):
            return
        window.switch_to()
        renderer = self.renderer
        renderer.set_pixel_ratio(window_pixel_ratio(window))
        renderer.render(self._ctx.scene, self._ctx.camera)

        monitor = self._monitor
        if monitor is not None:
            monitor.set_draw_counts(draw_calls=renderer.draw_calls, vertices=renderer.vertices)

        perf = self._perf
        if perf.enabled and perf.gpu_finish:
            with perf.section("gpu_finish"):
                renderer.finish()
        window.flip()

    def close(self) -> None:
        """GPU / window 資源を解放する。"""

        # renderer が保持している GPU リソースを破棄してから window を閉じる。
        try:
            self.window.switch_to()
            self.renderer.release()
        except Exception:
            _logger.exception("Failed to release renderer")
        self.window.close()
