# どこで: `src/tweak3d/interactive/image_io.py`。
# 何を: 画像ファイルを pyglet でデコードし、RGB の numpy 配列（上から下の行順）で返す。
# なぜ: CubeTextureLoader へ渡すデコード関数を、GPU やウィンドウに依存しない形で提供するため。

from __future__ import annotations

from pathlib import Path

import numpy as np


def decode_image_file(path: str | Path) -> np.ndarray:
    """画像ファイルを shape (H, W, 3) の uint8 配列へデコードする。

    Raises
    ------
    FileNotFoundError
        ファイルが存在しない場合。
    """

    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"画像ファイルが見つかりません: {p}")

    import pyglet

    image = pyglet.image.load(str(p)).get_image_data()
    width, height = int(image.width), int(image.height)
    raw = image.get_data("RGB", width * 3)
    # pyglet の行順は下から上なので反転する。
    rows = np.frombuffer(raw, dtype=np.uint8).reshape(height, width, 3)
    return np.ascontiguousarray(rows[::-1])


__all__ = ["decode_image_file"]
