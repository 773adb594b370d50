"""
どこで: `src/tweak3d/interactive/orbit_controls.py`。
何を: マウスドラッグでカメラを注視点の周りに回し、スクロールで距離を変える周回操作を提供する。
なぜ: 描画ウィンドウの入力イベントをカメラ位置の更新へ変換する処理を、描画ループから分離するため。
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from tweak3d.core.scene import PerspectiveCamera

# 極付近で up と視線が平行になるのを避ける。
_POLAR_EPS = 1e-6


class OrbitControls:
    """注視点 `target` を中心とする球面座標でカメラを動かす。

    Notes
    -----
    - 球面座標は y 上向き: 方位角 theta は y 軸まわり、極角 phi は +y からの角度。
    - 距離は `[min_distance, max_distance]` に、極角は `[min_polar_angle, max_polar_angle]` に丸める。
    - 位置を変えるたびにカメラは注視点を向く。
    """

    def __init__(
        self,
        camera: PerspectiveCamera,
        *,
        target: tuple[float, float, float] = (0.0, 0.0, 0.0),
        min_distance: float = 0.0,
        max_distance: float = math.inf,
        min_polar_angle: float = 0.0,
        max_polar_angle: float = math.pi,
        rotate_speed: float = 1.0,
        zoom_speed: float = 1.0,
    ) -> None:
        if min_distance < 0.0 or max_distance < min_distance:
            raise ValueError(
                f"min_distance/max_distance が不正です: min={min_distance}, max={max_distance}"
            )
        self.camera = camera
        self.target = np.asarray(target, dtype=np.float64)
        self.min_distance = float(min_distance)
        self.max_distance = float(max_distance)
        self.min_polar_angle = float(min_polar_angle)
        self.max_polar_angle = float(max_polar_angle)
        self.rotate_speed = float(rotate_speed)
        self.zoom_speed = float(zoom_speed)
        self.enabled = True
        self._viewport_height = 1.0

        offset = camera.position.to_array() - self.target
        self.radius = float(np.linalg.norm(offset))
        if self.radius > 0.0:
            self.theta = math.atan2(float(offset[0]), float(offset[2]))
            self.phi = math.acos(max(-1.0, min(1.0, float(offset[1]) / self.radius)))
        else:
            self.theta = 0.0
            self.phi = 0.5 * math.pi
        self.update()

    def rotate(self, delta_theta: float, delta_phi: float) -> None:
        """方位角/極角を加算してカメラを更新する。"""

        self.theta += float(delta_theta)
        self.phi += float(delta_phi)
        self.update()

    def dolly(self, scale: float) -> None:
        """距離を `scale` 倍してカメラを更新する（<1 で近づく）。"""

        if scale <= 0.0:
            raise ValueError(f"dolly の scale は正である必要があります: got={scale}")
        self.radius *= float(scale)
        self.update()

    def update(self) -> None:
        """球面座標を制約内へ丸め、カメラ位置と向きへ反映する。"""

        lo = max(self.min_polar_angle, _POLAR_EPS)
        hi = min(self.max_polar_angle, math.pi - _POLAR_EPS)
        self.phi = max(lo, min(hi, self.phi))
        self.radius = max(self.min_distance, min(self.max_distance, self.radius))

        sin_phi = math.sin(self.phi)
        offset = (
            self.radius * sin_phi * math.sin(self.theta),
            self.radius * math.cos(self.phi),
            self.radius * sin_phi * math.cos(self.theta),
        )
        tx, ty, tz = (float(v) for v in self.target)
        self.camera.position.set(tx + offset[0], ty + offset[1], tz + offset[2])
        self.camera.look_at(tx, ty, tz)

    # --- pyglet イベント ---
    def on_resize(self, _width: int, height: int) -> None:
        self._viewport_height = float(max(1, int(height)))

    def on_mouse_drag(self, _x: int, _y: int, dx: int, dy: int, buttons: int, _modifiers: int) -> None:
        from pyglet.window import mouse

        if not self.enabled or not (buttons & mouse.LEFT):
            return
        # ウィンドウ高さ 1 つ分のドラッグで 1 周する。
        per_pixel = 2.0 * math.pi * self.rotate_speed / self._viewport_height
        # pyglet の y は上向きなので、上へのドラッグで極角が増える（カメラが下がる）。
        self.rotate(-float(dx) * per_pixel, float(dy) * per_pixel)

    def on_mouse_scroll(self, _x: int, _y: int, _scroll_x: float, scroll_y: float) -> None:
        if not self.enabled or scroll_y == 0:
            return
        self.dolly(0.95 ** (float(scroll_y) * self.zoom_speed))

    def attach(self, window: Any) -> None:
        """ウィンドウのマウス/リサイズイベントを購読する。"""

        self._viewport_height = float(max(1, int(window.height)))
        window.push_handlers(
            on_mouse_drag=self.on_mouse_drag,
            on_mouse_scroll=self.on_mouse_scroll,
            on_resize=self.on_resize,
        )


__all__ = ["OrbitControls"]
