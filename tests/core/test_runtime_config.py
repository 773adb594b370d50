from pathlib import Path

import pytest

from tweak3d.core.runtime_config import runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_packaged_defaults_are_loaded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.texture_dir == Path("data") / "input" / "cube"
    assert cfg.texture_extension == "jpg"
    assert cfg.texture_names() == ("bridge", "park", "pisa", "room")
    assert cfg.texture_folder("bridge") == "Bridge2"
    assert cfg.draw_window_size == (960, 720)
    assert cfg.window_pos_draw == (25, 25)
    assert cfg.window_pos_parameter_gui == (1000, 25)
    assert cfg.parameter_gui_window_size == (420, 360)
    assert cfg.fps == 60.0


def test_runtime_config_is_cached_until_path_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    first = runtime_config()
    assert runtime_config() is first

    set_config_path(None)
    assert runtime_config() is not first


def test_discovered_config_overrides_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = _write(
        tmp_path / ".tweak3d" / "config.yaml",
        'paths:\n  texture_dir: "./cubes"\nruntime:\n  fps: 30\n',
    )

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.texture_dir == Path("cubes")
    assert cfg.fps == 30.0
    # 触れていない項目は同梱デフォルトのまま。
    assert cfg.texture_extension == "jpg"
    assert cfg.draw_window_size == (960, 720)


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    _write(tmp_path / ".tweak3d" / "config.yaml", 'paths:\n  texture_dir: "./cubes_discovered"\n')
    explicit = _write(
        tmp_path / "explicit.yaml",
        'paths:\n  texture_dir: "./cubes_explicit"\nui:\n  draw_window_size: [640, 480]\n',
    )
    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.texture_dir == Path("cubes_explicit")
    assert cfg.draw_window_size == (640, 480)


def test_texture_sets_are_replaced_not_merged(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = _write(
        tmp_path / "explicit.yaml",
        'textures:\n  extension: ".png"\n  sets:\n    lab: "Lab"\n',
    )
    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.texture_names() == ("lab",)
    assert cfg.texture_extension == "png"
    with pytest.raises(KeyError):
        cfg.texture_folder("bridge")


def test_unsupported_version_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(_write(tmp_path / "v2.yaml", "version: 2\n"))

    with pytest.raises(RuntimeError, match="version"):
        runtime_config()


def test_invalid_window_size_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(_write(tmp_path / "bad.yaml", "ui:\n  draw_window_size: [1, 2, 3]\n"))

    with pytest.raises(RuntimeError, match="draw_window_size"):
        runtime_config()


def test_explicit_config_path_missing_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(tmp_path / "missing.yaml")

    with pytest.raises(FileNotFoundError):
        runtime_config()
