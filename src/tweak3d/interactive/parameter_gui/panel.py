# どこで: `src/tweak3d/interactive/parameter_gui/panel.py`。
# 何を: ParamStore の行をフォルダ（折りたたみヘッダ）ごとに描画し、操作を ParamChanged の列として返す。
# なぜ: GUI はストアを直接書き換えず、変更をメッセージとしてバインディング層へ渡すため。

from __future__ import annotations

from typing import Any

from tweak3d.core.bindings import ParamChanged
from tweak3d.core.parameters.view import ParameterRow

from .widgets import render_value_widget

_LABEL_COLUMN_PX = 140.0


def group_rows_by_folder(rows: list[ParameterRow]) -> list[tuple[str | None, list[ParameterRow]]]:
    """行を folder ごとにまとめる（folder の初出順、folder 内は元の順）。"""

    groups: dict[str | None, list[ParameterRow]] = {}
    for row in rows:
        groups.setdefault(row.folder, []).append(row)
    return list(groups.items())


def _render_row(imgui: Any, row: ParameterRow) -> ParamChanged | None:
    imgui.push_id(row.name)
    try:
        imgui.align_text_to_frame_padding()
        imgui.text(row.label)
        imgui.same_line(_LABEL_COLUMN_PX)
        imgui.push_item_width(-1)
        try:
            changed, value = render_value_widget(row)
        finally:
            imgui.pop_item_width()
    finally:
        imgui.pop_id()
    if not changed:
        return None
    return ParamChanged(name=row.name, value=value)


def render_parameter_panel(imgui: Any, rows: list[ParameterRow]) -> list[ParamChanged]:
    """設定行を描画し、このフレームで発生した変更を返す。

    folder を持つ行は既定で開いた折りたたみヘッダの下へまとめる。
    """

    events: list[ParamChanged] = []
    for folder, folder_rows in group_rows_by_folder(rows):
        if folder is not None:
            expanded, _visible = imgui.collapsing_header(folder, flags=imgui.TREE_NODE_DEFAULT_OPEN)
            if not expanded:
                continue
        for row in folder_rows:
            event = _render_row(imgui, row)
            if event is not None:
                events.append(event)
    return events


__all__ = ["group_rows_by_folder", "render_parameter_panel"]
