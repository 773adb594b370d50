# どこで: `src/tweak3d/demos/__init__.py`。
# 何を: 組み込みデモを import してレジストリへ登録し、公開名をまとめる。
# なぜ: `demo_registry` を引く側が個々のデモモジュールを知らなくて済むようにするため。

from __future__ import annotations

from . import cubemap, line_materials  # noqa: F401
from .registry import DemoRegistry, demo, demo_registry

__all__ = ["DemoRegistry", "demo", "demo_registry"]
