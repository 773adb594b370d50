import pytest

from tweak3d.__main__ import main


def test_list_prints_registered_demos(capsys: pytest.CaptureFixture[str]):
    assert main(["--list"]) == 0

    out = capsys.readouterr().out
    assert "cubemap" in out
    assert "lines" in out


def test_unknown_demo_returns_usage_error(capsys: pytest.CaptureFixture[str]):
    assert main(["nope"]) == 2

    captured = capsys.readouterr()
    assert "nope" in captured.err
    assert "cubemap" in captured.out


def test_missing_demo_returns_usage_error(capsys: pytest.CaptureFixture[str]):
    assert main([]) == 2
    assert "--list" in capsys.readouterr().err


def test_known_demo_is_passed_to_run(monkeypatch: pytest.MonkeyPatch):
    import tweak3d.api as api

    calls: list[tuple] = []
    monkeypatch.setattr(api, "run", lambda *a, **kw: calls.append((a, kw)))

    assert main(["lines", "--fps", "30", "--no-gui", "--log-level", "debug"]) == 0
    assert calls == [(("lines",), {"config_path": None, "fps": 30.0, "parameter_gui": False})]
