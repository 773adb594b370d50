# どこで: `src/tweak3d/interactive/parameter_gui/gui.py`。
# 何を: ParamStore の内容を pyimgui で表示し、操作を ParamChanged として返す GUI（初期化/1フレーム描画/破棄）を提供する。
# なぜ: 依存の重い ImGui のライフサイクル管理を 1 箇所に閉じ込め、他モジュールを純粋に保つため。

from __future__ import annotations

import time
from typing import Any

from tweak3d.core.bindings import ParamChanged
from tweak3d.core.parameters import ParamStore, rows_from_store

from .monitor_bar import render_monitor_bar
from .panel import render_parameter_panel
from .pyglet_backend import _create_imgui_pyglet_renderer, _sync_imgui_io_for_window


class ParameterGUI:
    """pyimgui のコントロールパネル。

    `draw_frame()` を呼ぶことで 1 フレーム分の UI を描画し、そのフレームの変更を返す。
    ストアへの書き込みは行わない（呼び出し側がバインディング層へ配送する）。
    """

    def __init__(
        self,
        gui_window: Any,
        *,
        store: ParamStore,
        monitor: Any | None = None,
        title: str = "Controls",
    ) -> None:
        """GUI の初期化（ImGui コンテキスト / renderer 作成）。"""

        import imgui  # type: ignore[import-untyped]

        try:
            from imgui.integrations import pyglet as imgui_pyglet  # type: ignore[import-untyped]
        except Exception as exc:
            raise RuntimeError(f"imgui.integrations.pyglet を import できない: {exc}") from exc

        self._window = gui_window
        self._store = store
        self._monitor = monitor
        self._title = str(title)

        # ImGui は「グローバルな current context」前提なので、自前コンテキストを作って切り替えて使う。
        self._imgui = imgui
        self._context = imgui.create_context()
        imgui.set_current_context(self._context)
        imgui.style_colors_dark()
        self._renderer = _create_imgui_pyglet_renderer(imgui_pyglet, gui_window)

        self._prev_time = time.monotonic()
        self._closed = False

    def draw_frame(self) -> list[ParamChanged]:
        """1 フレーム分の GUI を描画し、発生した変更を返す。

        `flip()` は呼ばない。呼び出し側が `switch_to()` と `flip()` を担当する。
        """

        if self._closed:
            return []

        now = time.monotonic()
        dt = now - self._prev_time
        self._prev_time = now

        imgui = self._imgui
        imgui.set_current_context(self._context)

        imgui.new_frame()
        _sync_imgui_io_for_window(imgui, self._window, dt=dt)

        # 1 ウィンドウで全面表示する（位置/サイズ固定）。
        imgui.set_next_window_position(0, 0)
        imgui.set_next_window_size(self._window.width, self._window.height)
        imgui.begin(
            self._title,
            flags=imgui.WINDOW_NO_RESIZE | imgui.WINDOW_NO_COLLAPSE | imgui.WINDOW_NO_TITLE_BAR,
        )
        try:
            monitor = self._monitor
            if monitor is not None:
                render_monitor_bar(imgui, monitor.snapshot())
            events = render_parameter_panel(imgui, rows_from_store(self._store))
        finally:
            imgui.end()

        imgui.render()

        import pyglet

        pyglet.gl.glClearColor(0.12, 0.12, 0.12, 1.0)
        self._window.clear()
        self._renderer.render(imgui.get_draw_data())
        return events

    def close(self) -> None:
        """GUI を終了し、コンテキストとウィンドウを破棄する（二重 close 可）。"""

        if self._closed:
            return
        self._closed = True

        shutdown = getattr(self._renderer, "shutdown", None)
        if callable(shutdown):
            shutdown()
        self._imgui.destroy_context(self._context)
        self._window.close()
