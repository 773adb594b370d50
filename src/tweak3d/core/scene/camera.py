# どこで: `src/tweak3d/core/scene/camera.py`。
# 何を: 透視投影カメラ（PerspectiveCamera）を定義する。
# なぜ: aspect 更新と射影行列の再計算をリサイズ処理から明示的に呼べるようにするため。

from __future__ import annotations

import numpy as np

from . import math3d
from .objects import Object3D


class PerspectiveCamera(Object3D):
    """垂直画角 `fov`（度）の透視投影カメラ。

    Notes
    -----
    `aspect` / `fov` / `near` / `far` / `zoom` を変えたら `update_projection_matrix()` を呼ぶ。
    呼ぶまでは `projection_matrix` は古い値のまま。
    """

    def __init__(
        self,
        fov: float = 50.0,
        aspect: float = 1.0,
        near: float = 0.1,
        far: float = 2000.0,
        *,
        name: str = "camera",
    ) -> None:
        super().__init__(name=name)
        if near <= 0.0 or far <= near:
            raise ValueError(f"near/far が不正です: near={near}, far={far}")
        self.fov = float(fov)
        self.aspect = float(aspect)
        self.near = float(near)
        self.far = float(far)
        self.zoom = 1.0
        self.projection_matrix = np.eye(4, dtype=np.float64)
        self.update_projection_matrix()

    def _looks_from_position(self) -> bool:
        return True

    def update_projection_matrix(self) -> None:
        """現在の fov/aspect/near/far/zoom から射影行列を再計算する。"""

        self.projection_matrix = math3d.perspective(
            self.fov,
            self.aspect,
            self.near,
            self.far,
            zoom=self.zoom,
        )

    def view_matrix(self) -> np.ndarray:
        """ワールド -> カメラ座標の変換行列を返す。"""

        return np.linalg.inv(self.world_matrix())


__all__ = ["PerspectiveCamera"]
