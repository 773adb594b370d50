# どこで: `src/tweak3d/interactive/runtime/scheduler.py`。
# 何を: 「次のフレームでこの関数を 1 回呼ぶ」を表すフレームスケジューラ（pyglet 実装とテスト用の手動実装）を提供する。
# なぜ: 描画ループを自己再投入タスクとして書き、テストからは任意のタイミングでフレームを進められるようにするため。

from __future__ import annotations

import logging
from typing import Callable, Protocol

_logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameScheduler(Protocol):
    """次のフレームで呼ぶコールバックを受け付ける。"""

    def request_frame(self, callback: FrameCallback) -> None: ...


class _RequestQueue:
    """要求されたコールバックを 1 回の pump でまとめて呼ぶ。

    pump 中に要求されたコールバックは次の pump で呼ぶ。
    """

    def __init__(self) -> None:
        self._requested: list[FrameCallback] = []
        self.pump_count = 0

    def request_frame(self, callback: FrameCallback) -> None:
        self._requested.append(callback)

    @property
    def pending_count(self) -> int:
        return len(self._requested)

    def _pump(self, dt: float) -> int:
        callbacks = self._requested
        self._requested = []
        self.pump_count += 1
        for callback in callbacks:
            callback(float(dt))
        return len(callbacks)


class ManualFrameScheduler(_RequestQueue):
    """`step()` を呼んだときだけフレームを進めるスケジューラ（ヘッドレス/テスト用）。"""

    def step(self, dt: float = 1.0 / 60.0) -> int:
        """1 フレーム分進め、呼んだコールバック数を返す。"""

        return self._pump(dt)

    def run(self, frames: int, *, dt: float = 1.0 / 60.0) -> None:
        """`frames` フレーム分進める。"""

        for _ in range(int(frames)):
            self.step(dt)


class PygletFrameScheduler(_RequestQueue):
    """`pyglet.clock` の周期コールバックで要求を pump するスケジューラ。

    Parameters
    ----------
    fps : float
        目標フレームレート。`<=0` の場合はスロットリングせず、可能な限り回す。
    """

    def __init__(self, fps: float) -> None:
        super().__init__()
        self.fps = float(fps)
        self._scheduled = False

    def start(self) -> None:
        """pyglet.clock への登録を行う（二重登録はしない）。"""

        if self._scheduled:
            return
        import pyglet

        if self.fps <= 0:
            pyglet.clock.schedule(self._pump)
        else:
            pyglet.clock.schedule_interval(self._pump, 1.0 / self.fps)
        self._scheduled = True
        _logger.debug("frame scheduler started: fps=%s", self.fps)

    def stop(self) -> None:
        if not self._scheduled:
            return
        import pyglet

        pyglet.clock.unschedule(self._pump)
        self._scheduled = False

    def run(self) -> None:
        """いずれかのウィンドウが閉じられるまで pyglet のアプリループを回す。"""

        import pyglet

        self.start()
        try:
            pyglet.app.run(interval=None)
        finally:
            self.stop()


__all__ = [
    "FrameCallback",
    "FrameScheduler",
    "ManualFrameScheduler",
    "PygletFrameScheduler",
]
