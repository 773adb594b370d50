# どこで: `src/tweak3d/interactive/render_settings.py`。
# 何を: 描画ウィンドウとレンダラーの設定値を束ねるデータクラスを定義する。
# なぜ: `run` の引数と AppContext.view を 1 つにまとめ、ウィンドウ生成側の引数を簡潔に保つため。

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RenderSettings:
    """リアルタイム描画に用いる設定値の集合。"""

    window_size: tuple[int, int] = (960, 720)
    caption: str = "tweak3d"
    samples: int = 4
    output_srgb: bool = False
    clear_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
