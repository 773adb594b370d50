from __future__ import annotations

# どこで: `src/tweak3d/core/scene/math3d.py`。
# 何を: 4x4 変換行列（TRS 合成 / オイラー角 / lookAt / 透視投影）の小さなユーティリティを提供する。
# なぜ: シーングラフとレンダラーで座標系の定義を一箇所に集約するため。

import math

import numpy as np


def euler_xyz_to_matrix(x: float, y: float, z: float) -> np.ndarray:
    """XYZ 順のオイラー角（ラジアン）から 3x3 回転行列を返す。"""

    cx, sx = math.cos(x), math.sin(x)
    cy, sy = math.cos(y), math.sin(y)
    cz, sz = math.cos(z), math.sin(z)
    rx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]], dtype=np.float64)
    ry = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]], dtype=np.float64)
    rz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]], dtype=np.float64)
    return rx @ ry @ rz


def euler_xyz_from_matrix(m: np.ndarray) -> tuple[float, float, float]:
    """3x3（または 4x4 の左上）回転行列から XYZ 順のオイラー角を返す。"""

    m13 = float(m[0, 2])
    y = math.asin(max(-1.0, min(1.0, m13)))
    if abs(m13) < 0.9999999:
        x = math.atan2(-float(m[1, 2]), float(m[2, 2]))
        z = math.atan2(-float(m[0, 1]), float(m[0, 0]))
    else:
        x = math.atan2(float(m[2, 1]), float(m[1, 1]))
        z = 0.0
    return x, y, z


def compose(
    position: tuple[float, float, float],
    rotation: tuple[float, float, float],
    scale: tuple[float, float, float],
) -> np.ndarray:
    """位置・XYZ オイラー回転・スケールから 4x4 行列を返す（列ベクトル規約）。"""

    out = np.eye(4, dtype=np.float64)
    rot = euler_xyz_to_matrix(*rotation)
    out[:3, :3] = rot * np.asarray(scale, dtype=np.float64)[np.newaxis, :]
    out[:3, 3] = np.asarray(position, dtype=np.float64)
    return out


def look_at_rotation(
    eye: np.ndarray,
    target: np.ndarray,
    up: np.ndarray,
) -> np.ndarray:
    """`eye` から `target` を向く 3x3 回転行列を返す（-Z が前方）。"""

    z = np.asarray(eye, dtype=np.float64) - np.asarray(target, dtype=np.float64)
    if float(np.dot(z, z)) == 0.0:
        z = np.array([0.0, 0.0, 1.0])
    z = z / np.linalg.norm(z)

    x = np.cross(np.asarray(up, dtype=np.float64), z)
    if float(np.dot(x, x)) == 0.0:
        # up と視線が平行: z をわずかにずらして x を作り直す。
        if abs(float(up[2])) == 1.0:
            z = z + np.array([0.0001, 0.0, 0.0])
        else:
            z = z + np.array([0.0, 0.0, 0.0001])
        z = z / np.linalg.norm(z)
        x = np.cross(np.asarray(up, dtype=np.float64), z)
    x = x / np.linalg.norm(x)
    y = np.cross(z, x)

    rot = np.empty((3, 3), dtype=np.float64)
    rot[:, 0] = x
    rot[:, 1] = y
    rot[:, 2] = z
    return rot


def perspective(
    fov_deg: float,
    aspect: float,
    near: float,
    far: float,
    *,
    zoom: float = 1.0,
) -> np.ndarray:
    """垂直画角 `fov_deg` の透視投影行列（OpenGL クリップ空間）を返す。"""

    top = near * math.tan(math.radians(0.5 * fov_deg)) / zoom
    height = 2.0 * top
    width = aspect * height
    left = -0.5 * width
    right = left + width
    bottom = top - height

    out = np.zeros((4, 4), dtype=np.float64)
    out[0, 0] = 2.0 * near / (right - left)
    out[0, 2] = (right + left) / (right - left)
    out[1, 1] = 2.0 * near / (top - bottom)
    out[1, 2] = (top + bottom) / (top - bottom)
    out[2, 2] = -(far + near) / (far - near)
    out[2, 3] = -2.0 * far * near / (far - near)
    out[3, 2] = -1.0
    return out


def normal_matrix(model: np.ndarray) -> np.ndarray:
    """モデル行列から法線変換用の 3x3 行列を返す。"""

    return np.linalg.inv(model[:3, :3]).T


def to_gl(matrix: np.ndarray) -> bytes:
    """行列を ModernGL の uniform へ書き込めるバイト列（列優先 f4）へ変換する。"""

    return np.ascontiguousarray(matrix.T, dtype="f4").tobytes()
