"""
どこで: `src/tweak3d/api/runner.py`。公開 API のランナー実装。
何を: デモを AppContext として組み立て、pyglet + ModernGL の描画ウィンドウとコントロールパネルで回す。
なぜ: 各サブシステム（描画/GUI/監視/テクスチャ）の生成順と破棄順を 1 箇所で管理するため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pyglet

from tweak3d.core.context import AppContext, DemoSetup, create_context
from tweak3d.core.runtime_config import runtime_config, set_config_path
from tweak3d.interactive.image_io import decode_image_file
from tweak3d.interactive.render_settings import RenderSettings
from tweak3d.interactive.runtime.draw_window_system import DrawWindowSystem
from tweak3d.interactive.runtime.perf import PerfCollector
from tweak3d.interactive.runtime.render_loop import RenderLoop
from tweak3d.interactive.runtime.scheduler import PygletFrameScheduler

_logger = logging.getLogger(__name__)


def _resolve_setup(demo: str | DemoSetup) -> tuple[str, DemoSetup]:
    if callable(demo):
        return str(getattr(demo, "__name__", "demo")), demo

    from tweak3d.demos import demo_registry

    return str(demo), demo_registry.get(str(demo))


def run(
    demo: str | DemoSetup,
    *,
    config_path: str | Path | None = None,
    fps: float | None = None,
    parameter_gui: bool = True,
) -> None:
    """デモを組み立て、いずれかのウィンドウが閉じられるまで描画する。

    Parameters
    ----------
    demo : str | Callable[[AppContext], None]
        登録済みデモ名（例: `"cubemap"`）、または組み立て関数。
    config_path : str | Path | None
        設定ファイル（config.yaml）のパス。指定した場合は探索より優先する。
    fps : float | None
        目標フレームレート。None の場合は config の `runtime.fps`。
        `<=0` の場合はスロットリングせず、可能な限り速く回す。
    parameter_gui : bool
        True の場合、別ウィンドウでコントロールパネルと監視バーを表示する。

    Returns
    -------
    None
        どちらかのウィンドウを閉じると制御を返す。
    """

    set_config_path(config_path)
    cfg = runtime_config()
    name, setup = _resolve_setup(demo)
    target_fps = float(cfg.fps if fps is None else fps)

    # True にするとコントロールパネルのクリックやドラッグが抜ける事がある。
    pyglet.options["vsync"] = False

    ctx: AppContext = create_context(setup, config=cfg, decode=decode_image_file)
    _logger.info("demo '%s' を開始します（settings=%d）", name, len(ctx.store))

    # `closers` は teardown 用（作成順に積み、逆順で閉じる）。
    closers: list[Callable[[], None]] = [ctx.close]
    try:
        monitor = None
        if parameter_gui:
            from tweak3d.interactive.runtime.monitor import RuntimeMonitor

            monitor = RuntimeMonitor()

        perf = PerfCollector.from_env()
        settings = RenderSettings(
            window_size=cfg.draw_window_size,
            caption=f"tweak3d - {name}",
            output_srgb=ctx.view.output_srgb,
            clear_color=ctx.view.clear_color,
        )
        draw_window = DrawWindowSystem(ctx, settings=settings, monitor=monitor, perf=perf)
        closers.append(draw_window.close)
        draw_window.window.set_location(*cfg.window_pos_draw)
        windows = [draw_window.window]

        # テクスチャ完了の取り込みは毎フレーム描画前に行う。
        before_render: list[Callable[[], object]] = [ctx.loader.poll]
        if parameter_gui:
            # GUI は依存が重い（pyimgui）ので、使うときだけ遅延 import する。
            from tweak3d.interactive.runtime.parameter_gui_system import (
                ParameterGUIWindowSystem,
            )

            gui = ParameterGUIWindowSystem(
                store=ctx.store,
                bindings=ctx.bindings,
                config=cfg,
                monitor=monitor,
            )
            closers.append(gui.close)
            gui.window.set_location(*cfg.window_pos_parameter_gui)
            windows.append(gui.window)
            # GUI の変更は同じフレームの描画に反映させる。
            before_render.insert(0, gui.draw_frame)

        scheduler = PygletFrameScheduler(target_fps)
        loop = RenderLoop(
            scheduler,
            draw_window.render_now,
            overlay=monitor,
            before_render=before_render,
            perf=perf,
        )

        def request_exit(*_: object) -> None:
            # on_close には引数が来る場合があるため *args で受ける。
            loop.stop()
            pyglet.app.exit()

        # どれかのウィンドウを閉じたら、ループ全体を止める。
        for window in windows:
            window.push_handlers(on_close=request_exit)

        loop.start()
        scheduler.run()
        _logger.info("demo '%s' を終了します（frames=%d）", name, loop.frame_count)
    finally:
        # 例外でも確実に後始末する。後に作ったサブシステムから先に破棄する。
        for close in reversed(closers):
            try:
                close()
            except Exception:
                _logger.exception("Failed to close %r", close)


__all__ = ["run"]
