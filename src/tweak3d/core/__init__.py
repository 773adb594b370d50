# どこで: `src/tweak3d/core/__init__.py`。
# 何を: ヘッドレスなコア層（設定/シーン/バインディング/文脈）のパッケージ定義。
# なぜ: window/GPU/GUI に依存しない部分を 1 つの層に閉じ込め、単体テスト可能に保つため。

from __future__ import annotations

__all__: list[str] = []
