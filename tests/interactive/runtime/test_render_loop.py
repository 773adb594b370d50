import pytest

from tweak3d.interactive.runtime.perf import PerfCollector
from tweak3d.interactive.runtime.render_loop import RenderLoop
from tweak3d.interactive.runtime.scheduler import ManualFrameScheduler


class _Overlay:
    def __init__(self, log: list[str]) -> None:
        self.log = log

    def tick_frame(self) -> None:
        self.log.append("overlay")


def test_each_tick_draws_exactly_once():
    scheduler = ManualFrameScheduler()
    draws: list[int] = []
    loop = RenderLoop(scheduler, lambda: draws.append(1))

    loop.start()
    scheduler.run(5)

    assert len(draws) == 5
    assert loop.frame_count == 5
    assert loop.running


def test_start_twice_raises():
    loop = RenderLoop(ManualFrameScheduler(), lambda: None)
    loop.start()

    with pytest.raises(RuntimeError):
        loop.start()


def test_stop_ends_the_loop_without_rescheduling():
    scheduler = ManualFrameScheduler()
    loop = RenderLoop(scheduler, lambda: None)
    loop.start()
    scheduler.run(2)

    loop.stop()
    scheduler.run(3)

    assert loop.frame_count == 2
    assert scheduler.pending_count == 0
    assert not loop.running


def test_hooks_run_before_draw_then_overlay():
    scheduler = ManualFrameScheduler()
    log: list[str] = []
    loop = RenderLoop(
        scheduler,
        lambda: log.append("draw"),
        overlay=_Overlay(log),
        before_render=[lambda: log.append("gui"), lambda: log.append("poll")],
    )

    loop.start()
    scheduler.run(2)

    assert log == ["gui", "poll", "draw", "overlay"] * 2


def test_next_frame_is_requested_even_if_draw_raises():
    scheduler = ManualFrameScheduler()

    def draw() -> None:
        raise ValueError("boom")

    loop = RenderLoop(scheduler, draw)
    loop.start()

    with pytest.raises(ValueError):
        scheduler.step()
    assert scheduler.pending_count == 1
    assert loop.frame_count == 0


def test_perf_sections_are_recorded(capsys: pytest.CaptureFixture[str]):
    ticks = iter(range(0, 10_000_000, 1_000))
    perf = PerfCollector(enabled=True, print_every=2, clock_ns=lambda: next(ticks))
    scheduler = ManualFrameScheduler()
    loop = RenderLoop(scheduler, lambda: None, before_render=[lambda: None], perf=perf)

    loop.start()
    scheduler.run(2)

    assert perf.last_report is not None
    assert "draw=" in perf.last_report
    assert "before_render=" in perf.last_report
    assert "[tweak3d-perf]" in capsys.readouterr().out
