# どこで: `src/tweak3d/interactive/runtime/parameter_gui_system.py`。
# 何を: コントロールパネルを「1 フレーム描画して変更を配送する」サブシステムとして提供する。
# なぜ: `src/tweak3d/api/runner.py` の `run()` から GUI 初期化/描画/後始末を分離し、肥大化を防ぐため。

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tweak3d.core.bindings import BindingTable
from tweak3d.core.parameters import ParamStore
from tweak3d.interactive.parameter_gui import ParameterGUI, create_parameter_gui_window

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from tweak3d.core.runtime_config import RuntimeConfig
    from tweak3d.interactive.runtime.monitor import RuntimeMonitor


class ParameterGUIWindowSystem:
    """コントロールパネル（別ウィンドウ）のサブシステム。"""

    def __init__(
        self,
        *,
        store: ParamStore,
        bindings: BindingTable,
        config: RuntimeConfig,
        monitor: RuntimeMonitor | None = None,
    ) -> None:
        """GUI 用の window と ParameterGUI を初期化する。"""

        w, h = config.parameter_gui_window_size
        self.window = create_parameter_gui_window(width=w, height=h, vsync=False)
        self._bindings = bindings
        self._gui = ParameterGUI(self.window, store=store, monitor=monitor)

    def draw_frame(self) -> int:
        """1 フレーム分の GUI を描いて flip し、発生した変更を配送する。

        Returns
        -------
        int
            ハンドラまで届いた変更の件数。
        """

        window = self.window
        if getattr(window, "has_exit", False):
            return 0
        window.switch_to()
        events = self._gui.draw_frame()
        window.flip()
        if not events:
            return 0
        _logger.debug("GUI changes: %s", ", ".join(f"{e.name}={e.value!r}" for e in events))
        return self._bindings.dispatch_all(events)

    def close(self) -> None:
        """GUI を終了し、ウィンドウを破棄する。"""

        self._gui.close()
