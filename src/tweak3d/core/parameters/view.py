# どこで: `src/tweak3d/core/parameters/view.py`。
# 何を: ParamStore から UI 行モデルを生成し、UI 入力を正規化する純粋関数群を提供する。
# なぜ: imgui 依存部と切り離し、型変換・検証を単体テスト可能に保つため。

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

from .meta import ParamMeta

if TYPE_CHECKING:
    from .store import ParamStore


@dataclass(frozen=True, slots=True)
class ParameterRow:
    """GUI 表示用の行モデル。"""

    name: str
    label: str
    folder: str | None
    kind: str
    value: Any
    ui_min: Any | None
    ui_max: Any | None
    step: float | None
    choices: Sequence[str] | None


def rows_from_store(store: ParamStore) -> list[ParameterRow]:
    """ParamStore の全エントリを定義順の ParameterRow 列として返す。"""

    rows: list[ParameterRow] = []
    for name in store.names():
        entry = store.entry(name)
        meta = entry.meta
        rows.append(
            ParameterRow(
                name=entry.name,
                label=entry.label,
                folder=entry.folder,
                kind=meta.kind,
                value=entry.value,
                ui_min=meta.ui_min,
                ui_max=meta.ui_max,
                step=meta.step,
                choices=meta.choices,
            )
        )
    return rows


_TRUE_WORDS = frozenset({"true", "1", "on", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "off", "no"})


def _to_bool(value: Any, _meta: ParamMeta) -> tuple[Any | None, str | None]:
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True, None
        if word in _FALSE_WORDS:
            return False, None
    return bool(value), None


def _to_number(cast: type, err: str):
    def convert(value: Any, _meta: ParamMeta) -> tuple[Any | None, str | None]:
        # True/False を 1/0 として受け付けない。
        if isinstance(value, bool):
            return None, err
        try:
            return cast(value), None
        except (TypeError, ValueError, OverflowError):
            return None, err

    return convert


def _to_int(value: Any, _meta: ParamMeta) -> tuple[Any | None, str | None]:
    if isinstance(value, bool):
        return None, "invalid_int"
    try:
        if isinstance(value, float) and not value.is_integer():
            # 小数部は切り捨てて反映し、丸めたことを伝える。
            return int(value), "int_truncated"
        return int(value), None
    except (TypeError, ValueError, OverflowError):
        return None, "invalid_int"


def _to_choice(value: Any, meta: ParamMeta) -> tuple[Any | None, str | None]:
    text = str(value)
    choices = tuple(meta.choices or ())
    if choices and text not in choices:
        # 選択肢外は先頭へ寄せ、呼び出し側には丸めたことを伝える。
        return choices[0], "choice_coerced"
    return text, None


_NORMALIZERS = {
    "bool": _to_bool,
    "int": _to_int,
    "float": _to_number(float, "invalid_float"),
    "choice": _to_choice,
}

_FALLBACKS: dict[str, Any] = {"bool": False, "int": 0, "float": 0.0}


def normalize_input(value: Any, meta: ParamMeta) -> tuple[Any | None, str | None]:
    """UI 入力を meta.kind の値へ変換し、(値, エラー種別) を返す。

    変換できない場合の値は None。未知 kind は入力をそのまま返す。
    """

    convert = _NORMALIZERS.get(meta.kind)
    if convert is None:
        return value, None
    return convert(value, meta)


def canonicalize_ui_value(value: Any, meta: ParamMeta) -> Any:
    """既定値を kind の正規形へ寄せる。変換できなければ kind ごとの既定値を返す。"""

    normalized, _err = normalize_input(value, meta)
    if normalized is not None:
        return normalized
    if meta.kind == "choice":
        return str(meta.choices[0]) if meta.choices else ""
    return _FALLBACKS.get(meta.kind, value)


__all__ = ["ParameterRow", "canonicalize_ui_value", "normalize_input", "rows_from_store"]
