# どこで: `src/tweak3d/core/parameters/ui_ops.py`。
# 何を: UI 入力（文字列/数値等）を ParamStore へ反映する更新手続きを提供する。
# なぜ: ストア内部状態の参照リークを避け、書き込み経路を ops に固定するため。

from __future__ import annotations

from typing import Any

from .store import ParamStore
from .view import normalize_input


def update_value_from_ui(
    store: ParamStore,
    name: str,
    ui_input_value: Any,
) -> tuple[bool, str | None]:
    """UI から渡された入力を正規化し、対応する設定値に反映する。

    Returns
    -------
    applied : bool
        値を反映した場合 True。変換できない入力では False（値は変更しない）。
    err : str | None
        エラー種別。丸めて反映した場合（choice 外の値など）も種別を返す。
    """

    meta = store.get_meta(name)
    normalized, err = normalize_input(ui_input_value, meta)
    if normalized is None:
        return False, err

    store._set_value(name, normalized)
    return True, err


__all__ = ["update_value_from_ui"]
