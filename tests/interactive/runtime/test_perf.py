import pytest

from tweak3d.interactive.runtime.perf import PerfCollector


def _clock(step_ns: int):
    state = {"t": 0}

    def clock_ns() -> int:
        state["t"] += step_ns
        return state["t"]

    return clock_ns


def test_from_env_reads_flags():
    perf = PerfCollector.from_env(
        {"TWEAK3D_PERF": "1", "TWEAK3D_PERF_EVERY": "10", "TWEAK3D_PERF_GPU_FINISH": "yes"}
    )

    assert perf.enabled is True
    assert perf.print_every == 10
    assert perf.gpu_finish is True


def test_from_env_defaults_to_disabled():
    perf = PerfCollector.from_env({"TWEAK3D_PERF": "0", "TWEAK3D_PERF_EVERY": "bad"})

    assert perf.enabled is False
    assert perf.print_every == 60
    assert perf.gpu_finish is False


def test_disabled_collector_records_nothing():
    perf = PerfCollector(enabled=False, print_every=1)

    with perf.frame():
        with perf.section("draw"):
            pass

    assert perf.last_report is None
    assert perf.report() == "frame=0.000ms"


def test_report_prints_every_n_frames(capsys: pytest.CaptureFixture[str]):
    perf = PerfCollector(enabled=True, print_every=2, clock_ns=_clock(1_000_000))

    for _ in range(2):
        with perf.frame():
            with perf.section("draw"):
                pass
            with perf.section("poll"):
                pass
            with perf.section("poll"):
                pass

    out = capsys.readouterr().out
    assert out.startswith("[tweak3d-perf] frame=")
    assert "draw=1.000ms" in perf.last_report
    assert "poll=2.000ms (2.0x)" in perf.last_report
    # 出力後は集計窓をリセットする。
    assert perf.report() == "frame=0.000ms"
