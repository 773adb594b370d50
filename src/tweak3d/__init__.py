# どこで: `src/tweak3d/__init__.py`。
# 何を: ルート `tweak3d` パッケージを定義する。
# なぜ: import 起点を `tweak3d` に統一するため。

from __future__ import annotations

from tweak3d.api import demo, demo_registry, run

__version__ = "0.1.0"

__all__ = ["demo", "demo_registry", "run"]
