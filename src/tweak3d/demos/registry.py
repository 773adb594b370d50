# どこで: `src/tweak3d/demos/registry.py`。
# 何を: デモ名 -> 組み立て関数（`setup(ctx)`）のレジストリと `@demo` デコレータを提供する。
# なぜ: CLI やランナーがデモ名だけで組み立て関数を引けるようにするため。

from __future__ import annotations

from collections.abc import ItemsView
from typing import Callable

from tweak3d.core.context import DemoSetup


class DemoRegistry:
    """デモ名と組み立て関数を対応付けるレジストリ。"""

    def __init__(self) -> None:
        self._items: dict[str, DemoSetup] = {}
        self._descriptions: dict[str, str] = {}

    def _register(self, name: str, setup: DemoSetup, *, description: str = "") -> None:
        """デモを登録する（`@demo` デコレータからのみ呼ぶ）。"""

        if name in self._items:
            raise ValueError(f"demo '{name}' は既に登録されている")
        self._items[name] = setup
        self._descriptions[name] = str(description)

    def get(self, name: str) -> DemoSetup:
        """デモ名に対応する組み立て関数を返す。

        Raises
        ------
        KeyError
            未登録のデモ名が指定された場合。
        """

        try:
            return self._items[name]
        except KeyError:
            known = ", ".join(sorted(self._items)) or "(none)"
            raise KeyError(f"未登録の demo です: {name!r}（登録済み: {known}）") from None

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __getitem__(self, name: str) -> DemoSetup:
        return self.get(name)

    def items(self) -> ItemsView[str, DemoSetup]:
        return self._items.items()

    def names(self) -> tuple[str, ...]:
        return tuple(self._items.keys())

    def get_description(self, name: str) -> str:
        return self._descriptions.get(name, "")


demo_registry = DemoRegistry()
"""グローバルな demo レジストリインスタンス。"""


def demo(name: str, *, description: str = "") -> Callable[[DemoSetup], DemoSetup]:
    """グローバル demo レジストリ用デコレータ。

    Examples
    --------
    @demo("cubemap")
    def setup(ctx: AppContext) -> None:
        ...
    """

    def decorator(f: DemoSetup) -> DemoSetup:
        demo_registry._register(str(name), f, description=description)
        return f

    return decorator


__all__ = ["DemoRegistry", "demo", "demo_registry"]
