# どこで: `src/tweak3d/interactive/gl/__init__.py`。
# 何を: ModernGL によるシーン描画まわりのパッケージ定義。
# なぜ: GPU 依存をこのサブパッケージへ閉じ込めるため。

from __future__ import annotations

from .scene_renderer import SceneRenderer

__all__ = ["SceneRenderer"]
