# どこで: `src/tweak3d/interactive/__init__.py`。
# 何を: ウィンドウ/GPU/GUI に依存する層のパッケージ定義。
# なぜ: pyglet/moderngl/imgui への依存をこの層に閉じ込め、core と demos をヘッドレスに保つため。

from __future__ import annotations

__all__: list[str] = []
