"""
どこで: `src/tweak3d/interactive/runtime/perf.py`。
何を: 描画ループ向けの最小区間計測（集計 + 周期出力）を提供する。
なぜ: 1 フレームの時間がテクスチャ取り込み/GUI/描画のどこで消えているかを切り分けるため。
"""

from __future__ import annotations

import contextlib
import os
import time
from collections.abc import Iterator, Mapping

_FALSE_WORDS = {"", "0", "false", "no", "off"}


def _env_flag(environ: Mapping[str, str], name: str) -> bool:
    value = environ.get(name)
    return value is not None and str(value).strip().lower() not in _FALSE_WORDS


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(environ.get(name, default))
    except (TypeError, ValueError):
        return int(default)


class PerfCollector:
    """フレーム区間計測の集計器。

    Notes
    -----
    無効時は `frame()` / `section()` が何もしないコンテキストを返す。
    """

    def __init__(
        self,
        *,
        enabled: bool,
        print_every: int = 60,
        gpu_finish: bool = False,
        clock_ns=time.perf_counter_ns,
    ) -> None:
        self.enabled = bool(enabled)
        self.print_every = int(print_every) if int(print_every) > 0 else 60
        self.gpu_finish = bool(gpu_finish)
        self._clock_ns = clock_ns

        self._window_frames = 0
        self._sum_ns: dict[str, int] = {}
        self._calls: dict[str, int] = {}
        self.last_report: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PerfCollector:
        """環境変数から設定して作成する。

        - `TWEAK3D_PERF=1` で有効化する。
        - `TWEAK3D_PERF_EVERY=60` で何フレームごとに出力するかを指定する。
        - `TWEAK3D_PERF_GPU_FINISH=1` で描画後に `ctx.finish()` を挟み、GPU 完了まで含めて測る。
        """

        env = os.environ if environ is None else environ
        return cls(
            enabled=_env_flag(env, "TWEAK3D_PERF"),
            print_every=_env_int(env, "TWEAK3D_PERF_EVERY", 60),
            gpu_finish=_env_flag(env, "TWEAK3D_PERF_GPU_FINISH"),
        )

    @contextlib.contextmanager
    def _timed(self, name: str) -> Iterator[None]:
        t0 = self._clock_ns()
        try:
            yield
        finally:
            self._add(name, int(self._clock_ns() - t0))

    def section(self, name: str) -> contextlib.AbstractContextManager[None]:
        """`with` で囲った区間の時間を `name` へ加算する。"""

        if not self.enabled:
            return contextlib.nullcontext()
        return self._timed(str(name))

    @contextlib.contextmanager
    def frame(self) -> Iterator[None]:
        """1 フレーム全体を計測し、`print_every` フレームごとに集計を出力する。"""

        if not self.enabled:
            yield
            return

        with self._timed("frame"):
            yield
        self._window_frames += 1
        if self._window_frames >= self.print_every:
            self.last_report = self.report()
            print("[tweak3d-perf]", self.last_report)
            self._reset()

    def _add(self, name: str, dt_ns: int) -> None:
        self._sum_ns[name] = self._sum_ns.get(name, 0) + int(dt_ns)
        self._calls[name] = self._calls.get(name, 0) + 1

    def report(self) -> str:
        """現在の集計窓の 1 フレームあたり平均を 1 行の文字列で返す。"""

        frames = max(1, self._window_frames)

        def _ms(total_ns: int) -> str:
            return f"{total_ns / frames / 1_000_000.0:.3f}ms"

        parts = [f"frame={_ms(self._sum_ns.get('frame', 0))}"]
        for name in sorted(k for k in self._sum_ns if k != "frame"):
            calls_per_frame = self._calls.get(name, 0) / frames
            text = f"{name}={_ms(self._sum_ns[name])}"
            if calls_per_frame >= 1.5:
                text += f" ({calls_per_frame:.1f}x)"
            parts.append(text)
        return " ".join(parts)

    def _reset(self) -> None:
        self._window_frames = 0
        self._sum_ns.clear()
        self._calls.clear()


__all__ = ["PerfCollector"]
