# どこで: `src/tweak3d/interactive/runtime/__init__.py`。
# 何を: 実行時の「ループ/スケジューラ/サブシステム」実装をまとめるパッケージ定義。
# なぜ: `src/tweak3d/api/runner.py` の肥大化を防ぎ、責務ごとの実装差し替えを容易にするため。

from __future__ import annotations

__all__: list[str] = []
