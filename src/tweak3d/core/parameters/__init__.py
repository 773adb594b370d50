# どこで: `src/tweak3d/core/parameters/__init__.py`。
# 何を: 設定ストアまわりの公開エイリアスをまとめる。
# なぜ: デモ/GUI 層から最小インポートで使えるようにするため。

from .meta import ParamMeta
from .meta_spec import meta_from_spec
from .store import ParamStore, SettingEntry
from .ui_ops import update_value_from_ui
from .view import ParameterRow, normalize_input, rows_from_store

__all__ = [
    "ParamMeta",
    "meta_from_spec",
    "ParamStore",
    "SettingEntry",
    "update_value_from_ui",
    "ParameterRow",
    "normalize_input",
    "rows_from_store",
]
