# どこで: `src/tweak3d/core/scene/textures.py`。
# 何を: 6 面画像からなる CubeTexture と、面画像パスの規約を定義する。
# なぜ: 「先にテクスチャを割り当て、画像は後から届く」非同期ロードをシーン側で表現するため。

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np

CUBE_REFLECTION_MAPPING = "cube_reflection"
CUBE_REFRACTION_MAPPING = "cube_refraction"
_MAPPINGS = (CUBE_REFLECTION_MAPPING, CUBE_REFRACTION_MAPPING)

# +X, -X, +Y, -Y, +Z, -Z の順。
FACE_NAMES = ("px", "nx", "py", "ny", "pz", "nz")


def cube_face_paths(root: str | Path, folder: str, extension: str = "jpg") -> tuple[Path, ...]:
    """`{root}/{folder}/{px,nx,py,ny,pz,nz}.{extension}` の 6 パスを返す。"""

    ext = str(extension).lstrip(".")
    base = Path(root) / str(folder)
    return tuple(base / f"{face}.{ext}" for face in FACE_NAMES)


class CubeTexture:
    """キューブマップ。`faces` が届くまでは未準備（描画側は無視する）。

    Notes
    -----
    `version` は faces が差し替わるたびに増える。GPU 側はこの値で再アップロードを判定する。
    """

    def __init__(self, *, mapping: str = CUBE_REFLECTION_MAPPING, source: str = "") -> None:
        if mapping not in _MAPPINGS:
            raise ValueError(f"未知の mapping です: {mapping!r}")
        self.mapping = str(mapping)
        self.source = str(source)
        self.srgb = True
        self.faces: tuple[np.ndarray, ...] | None = None
        self.version = 0

    @property
    def is_ready(self) -> bool:
        return self.faces is not None

    @property
    def size(self) -> int:
        if self.faces is None:
            return 0
        return int(self.faces[0].shape[0])

    def set_faces(self, faces: Sequence[np.ndarray]) -> None:
        """6 面分の RGB 画像（上から下の行順、正方形、同サイズ）を設定する。"""

        arrays = tuple(np.ascontiguousarray(f, dtype=np.uint8) for f in faces)
        if len(arrays) != 6:
            raise ValueError(f"キューブマップには 6 面が必要: got={len(arrays)}")
        shape0 = arrays[0].shape
        if len(shape0) != 3 or shape0[2] != 3 or shape0[0] != shape0[1]:
            raise ValueError(f"面画像は shape (S,S,3) である必要がある: got={shape0}")
        for i, arr in enumerate(arrays):
            if arr.shape != shape0:
                raise ValueError(
                    f"面画像のサイズが揃っていない: face={FACE_NAMES[i]}, got={arr.shape}, expected={shape0}"
                )
        # 変換不要な tuple はそのまま保持する（同じデコード結果を複数のテクスチャで共有する）。
        if isinstance(faces, tuple) and all(a is f for a, f in zip(arrays, faces)):
            arrays = faces
        self.faces = arrays
        self.version += 1

    def __repr__(self) -> str:
        state = "ready" if self.is_ready else "pending"
        return f"CubeTexture(source={self.source!r}, mapping={self.mapping!r}, {state})"


__all__ = [
    "CUBE_REFLECTION_MAPPING",
    "CUBE_REFRACTION_MAPPING",
    "CubeTexture",
    "FACE_NAMES",
    "cube_face_paths",
]
