# どこで: `src/tweak3d/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: テクスチャの置き場所やウィンドウ配置を、コードを触らずにユーザーが差し替えられるようにするため。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """tweak3d の実行時設定。"""

    config_path: Path | None
    texture_dir: Path
    texture_extension: str
    texture_sets: tuple[tuple[str, str], ...]
    draw_window_size: tuple[int, int]
    window_pos_draw: tuple[int, int]
    window_pos_parameter_gui: tuple[int, int]
    parameter_gui_window_size: tuple[int, int]
    fps: float

    def texture_names(self) -> tuple[str, ...]:
        """テクスチャセット名を定義順で返す。"""

        return tuple(name for name, _folder in self.texture_sets)

    def texture_folder(self, name: str) -> str:
        """テクスチャセット名に対応するフォルダ名を返す。"""

        for set_name, folder in self.texture_sets:
            if set_name == name:
                return folder
        raise KeyError(f"未登録のテクスチャセットです: {name!r}")


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    p = Path(str(path)).expanduser()
    _EXPLICIT_CONFIG_PATH = p
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".tweak3d" / "config.yaml",
        home / ".config" / "tweak3d" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        x = int(seq[0])
        y = int(seq[1])
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc
    return (x, y)


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_texture_sets(value: Any, *, key: str) -> tuple[tuple[str, str], ...]:
    sets = _as_mapping(value, key=key)
    out: list[tuple[str, str]] = []
    for name, folder in sets.items():
        folder_text = "" if folder is None else str(folder).strip()
        if not folder_text:
            raise RuntimeError(f"{key}.{name} のフォルダ名が空です")
        out.append((str(name), folder_text))
    return tuple(out)


def _require(value: Any, *, key: str) -> Any:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        import yaml  # type: ignore[import-untyped]
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(f"PyYAML を import できません: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("tweak3d")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="tweak3d/resource/default_config.yaml")


def _merge_section(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping を 1 段ずつ再帰的にマージして返す（後勝ち）。"""

    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            # textures.sets は「セット一覧」なので、部分マージせず丸ごと置き換える。
            if key == "sets":
                merged[key] = dict(value)
            else:
                merged[key] = _merge_section(current, value)
        else:
            merged[key] = value
    return merged


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。"""

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge_section(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_section(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    texture_dir = _require(_as_optional_path(paths.get("texture_dir")), key="paths.texture_dir")

    textures = _as_mapping(payload.get("textures"), key="textures")
    extension = str(_require(textures.get("extension"), key="textures.extension")).lstrip(".")
    if not extension:
        raise RuntimeError("textures.extension が空です")
    texture_sets = _as_texture_sets(textures.get("sets"), key="textures.sets")
    if not texture_sets:
        raise RuntimeError("textures.sets に 1 つ以上のセットが必要です")

    ui = _as_mapping(payload.get("ui"), key="ui")
    draw_window_size = _require(
        _as_int_pair(ui.get("draw_window_size"), key="ui.draw_window_size"),
        key="ui.draw_window_size",
    )
    window_positions = _as_mapping(ui.get("window_positions"), key="ui.window_positions")
    window_pos_draw = _require(
        _as_int_pair(window_positions.get("draw"), key="ui.window_positions.draw"),
        key="ui.window_positions.draw",
    )
    window_pos_parameter_gui = _require(
        _as_int_pair(
            window_positions.get("parameter_gui"),
            key="ui.window_positions.parameter_gui",
        ),
        key="ui.window_positions.parameter_gui",
    )
    parameter_gui = _as_mapping(ui.get("parameter_gui"), key="ui.parameter_gui")
    parameter_gui_window_size = _require(
        _as_int_pair(parameter_gui.get("window_size"), key="ui.parameter_gui.window_size"),
        key="ui.parameter_gui.window_size",
    )

    runtime = _as_mapping(payload.get("runtime"), key="runtime")
    fps = _require(_as_float(runtime.get("fps"), key="runtime.fps"), key="runtime.fps")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        texture_dir=texture_dir,
        texture_extension=extension,
        texture_sets=texture_sets,
        draw_window_size=draw_window_size,
        window_pos_draw=window_pos_draw,
        window_pos_parameter_gui=window_pos_parameter_gui,
        parameter_gui_window_size=parameter_gui_window_size,
        fps=float(fps),
    )
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
