# どこで: `src/tweak3d/interactive/runtime/monitor.py`。
# 何を: 実行中の軽量メトリクス（FPS/CPU/RSS/draw call/頂点数）を計測し、GUI 表示用スナップショットを提供する。
# なぜ: コントロールパネル上で描画負荷を即座に把握できるようにするため。

from __future__ import annotations

import os
import time
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MonitorSnapshot:
    """コントロールパネルに表示する監視値のスナップショット。"""

    fps: float
    cpu_percent: float
    rss_mb: float
    draw_calls: int
    vertices: int


class RuntimeMonitor:
    """実行中のメトリクスを軽量に集計する。

    描画ループのオーバーレイとして、毎フレーム `tick_frame()` を呼ぶ。
    """

    def __init__(
        self,
        *,
        cpu_mem_sample_interval_s: float = 0.5,
        fps_sample_interval_s: float = 0.5,
        clock=time.perf_counter,
    ) -> None:
        """監視を初期化する。

        Parameters
        ----------
        cpu_mem_sample_interval_s : float
            cpu/memory を psutil でサンプリングする最小間隔（秒）。
        fps_sample_interval_s : float
            FPS を更新する最小間隔（秒）。
        clock : Callable[[], float]
            単調増加する秒時計。テストでは差し替える。
        """

        import psutil  # type: ignore[import-untyped]

        self._clock = clock
        self._cpu_mem_sample_interval_s = float(cpu_mem_sample_interval_s)

        self._fps_sample_interval_s = float(fps_sample_interval_s)
        self._fps = 0.0
        self._fps_window_t0: float | None = None
        self._fps_window_frames = 0
        self._frames_total = 0

        self._last_sample_t: float | None = None
        self._last_cpu_total_s: float | None = None
        self._cpu_percent = 0.0
        self._rss_mb = 0.0

        self._draw_calls = 0
        self._vertices = 0

        self._process = psutil.Process(int(os.getpid()))

    @property
    def frames_total(self) -> int:
        return self._frames_total

    def tick_frame(self) -> None:
        """フレーム境界を通知し、FPS/CPU/Mem を更新する。"""

        now = float(self._clock())
        self._frames_total += 1

        # --- FPS ---
        if self._fps_window_t0 is None:
            self._fps_window_t0 = now
            self._fps_window_frames = 0

        self._fps_window_frames += 1
        dt = now - self._fps_window_t0
        if dt >= self._fps_sample_interval_s and dt > 0.0:
            self._fps = float(self._fps_window_frames) / dt
            self._fps_window_t0 = now
            self._fps_window_frames = 0

        # --- CPU / Mem（一定周期）---
        last = self._last_sample_t
        if last is None:
            self._last_sample_t = now
            self._last_cpu_total_s = self._cpu_total_s()
            self._rss_mb = float(self._rss_bytes()) / (1024.0 * 1024.0)
            return

        if now - last < self._cpu_mem_sample_interval_s:
            return

        cpu_total_s = self._cpu_total_s()
        prev_cpu_total_s = float(self._last_cpu_total_s or 0.0)
        wall_dt = now - last
        if cpu_total_s >= prev_cpu_total_s and wall_dt > 0.0:
            self._cpu_percent = 100.0 * (cpu_total_s - prev_cpu_total_s) / wall_dt

        self._rss_mb = float(self._rss_bytes()) / (1024.0 * 1024.0)
        self._last_sample_t = now
        self._last_cpu_total_s = cpu_total_s

    def set_draw_counts(self, *, draw_calls: int, vertices: int) -> None:
        """直近フレームの draw call 数/頂点数を設定する。"""

        self._draw_calls = int(draw_calls)
        self._vertices = int(vertices)

    def snapshot(self) -> MonitorSnapshot:
        """現在の監視値をスナップショットとして返す。"""

        return MonitorSnapshot(
            fps=float(self._fps),
            cpu_percent=float(self._cpu_percent),
            rss_mb=float(self._rss_mb),
            draw_calls=int(self._draw_calls),
            vertices=int(self._vertices),
        )

    def _cpu_total_s(self) -> float:
        t = self._process.cpu_times()
        return float(getattr(t, "user", 0.0)) + float(getattr(t, "system", 0.0))

    def _rss_bytes(self) -> int:
        return int(self._process.memory_info().rss)


__all__ = ["MonitorSnapshot", "RuntimeMonitor"]
