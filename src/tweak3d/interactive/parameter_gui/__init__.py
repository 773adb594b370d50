# どこで: `src/tweak3d/interactive/parameter_gui/__init__.py`。
# 何を: コントロールパネルの公開 API を集約する。
# なぜ: 実装を責務ごとに分割しつつ、利用側の import パスを安定させるため。

from __future__ import annotations

from .gui import ParameterGUI
from .panel import render_parameter_panel
from .pyglet_backend import create_parameter_gui_window

__all__ = [
    "ParameterGUI",
    "create_parameter_gui_window",
    "render_parameter_panel",
]
