# どこで: `src/tweak3d/core/parameters/store.py`。
# 何を: ParamStore（設定名 -> 現在値 + 定義域）を定義する。
# なぜ: コントロールパネルとシーン更新が共有する設定値の置き場所を 1 つに固定するため。

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .meta import ParamMeta
from .meta_spec import meta_from_spec
from .view import canonicalize_ui_value


@dataclass(frozen=True, slots=True)
class SettingEntry:
    """1 つの設定エントリのスナップショット。"""

    name: str
    value: Any
    meta: ParamMeta
    folder: str | None
    label: str


@dataclass
class _ParamState:
    value: Any
    meta: ParamMeta
    folder: str | None
    label: str


class ParamStore:
    """設定名 -> 現在値を保持するストア。

    Notes
    -----
    - 外部へはミュータブルな参照を渡さない（`entry()` はスナップショットを返す）。
    - 値の変更は `ui_ops.update_value_from_ui()` 経由で行う。
    """

    def __init__(self) -> None:
        self._states: dict[str, _ParamState] = {}

    def define(
        self,
        name: str,
        *,
        default: Any,
        meta: ParamMeta | Mapping[str, object],
        folder: str | None = None,
        label: str | None = None,
    ) -> None:
        """設定エントリを既定値つきで登録する。

        Raises
        ------
        ValueError
            同名のエントリが登録済みの場合。
        """

        key = str(name)
        if key in self._states:
            raise ValueError(f"設定 '{key}' は既に登録されている")
        m = meta_from_spec(meta)
        self._states[key] = _ParamState(
            value=canonicalize_ui_value(default, m),
            meta=m,
            folder=None if folder is None else str(folder),
            label=key if label is None else str(label),
        )

    def __contains__(self, name: object) -> bool:
        return name in self._states

    def __len__(self) -> int:
        return len(self._states)

    def get(self, name: str) -> Any:
        """現在値を返す。未登録なら KeyError。"""

        return self._state(name).value

    def get_meta(self, name: str) -> ParamMeta:
        """ParamMeta を返す。未登録なら KeyError。"""

        return self._state(name).meta

    def entry(self, name: str) -> SettingEntry:
        """エントリのスナップショットを返す。"""

        state = self._state(name)
        return SettingEntry(
            name=str(name),
            value=state.value,
            meta=state.meta,
            folder=state.folder,
            label=state.label,
        )

    def names(self) -> tuple[str, ...]:
        """登録済みの設定名を定義順で返す。"""

        return tuple(self._states.keys())

    def folders(self) -> dict[str | None, tuple[str, ...]]:
        """folder -> 設定名列（いずれも定義順）を返す。"""

        grouped: dict[str | None, list[str]] = {}
        for name, state in self._states.items():
            grouped.setdefault(state.folder, []).append(name)
        return {folder: tuple(names) for folder, names in grouped.items()}

    def values(self) -> dict[str, Any]:
        """設定名 -> 現在値のコピーを返す。"""

        return {name: state.value for name, state in self._states.items()}

    # --- 内部 API（ops からのみ利用する想定）---
    def _state(self, name: str) -> _ParamState:
        state = self._states.get(str(name))
        if state is None:
            raise KeyError(f"未登録の設定です: {name!r}")
        return state

    def _set_value(self, name: str, value: Any) -> None:
        self._state(name).value = value


__all__ = ["ParamStore", "SettingEntry"]
