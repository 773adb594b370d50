# どこで: `src/tweak3d/core/bindings.py`。
# 何を: 設定変更メッセージ（ParamChanged）と、設定名 -> 変更ハンドラの表（BindingTable）を提供する。
# なぜ: GUI コールバックがシーンのハンドルを直接掴まず、表引きでハンドラへ配送されるようにするため。

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from tweak3d.core.parameters import ParamStore, update_value_from_ui

_logger = logging.getLogger(__name__)

ChangeHandler = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class ParamChanged:
    """コントロールパネル操作 1 回分の変更通知。"""

    name: str
    value: Any


class BindingTable:
    """設定名ごとにちょうど 1 つの変更ハンドラを保持し、変更を配送する。

    ハンドラは確定値を同期的に受け取り、シーンのハンドルをその場で書き換える。
    戻り値は持たない。
    """

    def __init__(self, store: ParamStore) -> None:
        self._store = store
        self._handlers: dict[str, ChangeHandler] = {}

    def bind(self, name: str, handler: ChangeHandler | None = None):
        """`name` にハンドラを登録する。デコレータとしても使える。

        Raises
        ------
        KeyError
            `name` が ParamStore に未登録の場合。
        ValueError
            `name` にハンドラが登録済みの場合。
        """

        key = str(name)
        if key not in self._store:
            raise KeyError(f"未登録の設定にはバインドできない: {key!r}")

        def decorator(fn: ChangeHandler) -> ChangeHandler:
            if key in self._handlers:
                raise ValueError(f"設定 '{key}' のハンドラは既に登録されている")
            self._handlers[key] = fn
            return fn

        if handler is None:
            return decorator
        return decorator(handler)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def names(self) -> tuple[str, ...]:
        """ハンドラ登録済みの設定名を登録順で返す。"""

        return tuple(self._handlers.keys())

    def verify_complete(self) -> None:
        """ParamStore の全エントリにハンドラがあることを検証する。"""

        missing = [name for name in self._store.names() if name not in self._handlers]
        if missing:
            raise RuntimeError(f"ハンドラ未登録の設定があります: {', '.join(missing)}")

    def dispatch(self, event: ParamChanged) -> bool:
        """変更をストアへ書き込み、成功したらハンドラへ確定値を渡す。

        Returns
        -------
        bool
            ハンドラを呼んだ場合 True。
        """

        name = str(event.name)
        handler = self._handlers.get(name)
        if handler is None:
            raise KeyError(f"ハンドラ未登録の設定です: {name!r}")

        applied, err = update_value_from_ui(self._store, name, event.value)
        if not applied:
            _logger.warning("設定 %s への入力を無視します: value=%r err=%s", name, event.value, err)
            return False
        if err is not None:
            _logger.debug("設定 %s の入力を丸めました: value=%r err=%s", name, event.value, err)

        handler(self._store.get(name))
        return True

    def dispatch_all(self, events: list[ParamChanged]) -> int:
        """複数の変更を順に配送し、ハンドラを呼んだ件数を返す。"""

        count = 0
        for event in events:
            if self.dispatch(event):
                count += 1
        return count


__all__ = ["BindingTable", "ChangeHandler", "ParamChanged"]
