# どこで: `src/tweak3d/interactive/runtime/render_loop.py`。
# 何を: 毎フレーム「次フレームを再要求 -> 前処理 -> 描画 -> オーバーレイ更新」を行う描画ループを提供する。
# なぜ: 無限ループを明示的な自己再投入タスクにし、スケジューラ差し替えと停止を可能にするため。

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol

from .perf import PerfCollector
from .scheduler import FrameScheduler


class FrameOverlay(Protocol):
    """フレーム境界ごとに通知を受ける監視表示。"""

    def tick_frame(self) -> None: ...


class RenderLoop:
    """1 tick で `draw()` をちょうど 1 回呼ぶ描画ループ。

    Parameters
    ----------
    scheduler : FrameScheduler
        次のフレームを要求する先。
    draw : Callable[[], None]
        1 フレーム分の描画。
    overlay : FrameOverlay | None
        描画後に `tick_frame()` を呼ぶ監視表示。
    before_render : Iterable[Callable[[], None]]
        描画前に毎フレーム呼ぶフック（GUI 入力の反映、テクスチャ完了の取り込みなど）。
    perf : PerfCollector | None
        区間計測。None の場合は無効な計測器を使う。
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        draw: Callable[[], None],
        *,
        overlay: FrameOverlay | None = None,
        before_render: Iterable[Callable[[], None]] = (),
        perf: PerfCollector | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._draw = draw
        self._overlay = overlay
        self._before_render = tuple(before_render)
        self._perf = perf if perf is not None else PerfCollector(enabled=False)
        self._started = False
        self._stopped = False
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        """これまでに `draw()` を呼んだ回数。"""

        return self._frame_count

    @property
    def running(self) -> bool:
        return self._started and not self._stopped

    def start(self) -> None:
        """最初のフレームを要求する。

        Raises
        ------
        RuntimeError
            既に start 済みの場合。
        """

        if self._started:
            raise RuntimeError("RenderLoop は既に開始されている")
        self._started = True
        self._scheduler.request_frame(self._tick)

    def stop(self) -> None:
        """以降の tick を止める（次の tick は何もせず、再要求もしない）。"""

        self._stopped = True

    def _tick(self, _dt: float) -> None:
        if self._stopped:
            return
        self._scheduler.request_frame(self._tick)

        perf = self._perf
        with perf.frame():
            for hook in self._before_render:
                with perf.section("before_render"):
                    hook()
            with perf.section("draw"):
                self._draw()
            self._frame_count += 1

            overlay = self._overlay
            if overlay is not None:
                overlay.tick_frame()


__all__ = ["FrameOverlay", "RenderLoop"]
