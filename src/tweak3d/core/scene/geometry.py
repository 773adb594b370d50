"""
どこで: `src/tweak3d/core/scene/geometry.py`。
何を: 頂点属性を numpy 配列で保持する BufferGeometry と、球/軸ジオメトリの生成関数を提供する。
なぜ: メッシュ・点・線のいずれも同じ頂点表現から描けるようにし、GPU 転送側を単純に保つため。
"""

from __future__ import annotations

import math

import numpy as np


class BufferGeometry:
    """頂点属性（positions/normals/colors + 任意属性）と index を保持する。

    Notes
    -----
    - positions は shape (N, 3) の float32。
    - index は None（非 index）または shape (M,) の uint32。
    - `version` はレンダラーの GPU キャッシュ更新判定に使う。
    """

    def __init__(
        self,
        positions: np.ndarray,
        *,
        normals: np.ndarray | None = None,
        colors: np.ndarray | None = None,
        index: np.ndarray | None = None,
    ) -> None:
        pos = np.ascontiguousarray(positions, dtype=np.float32)
        if pos.ndim != 2 or pos.shape[1] != 3:
            raise ValueError(f"positions は shape (N,3) である必要がある: got={pos.shape}")
        self.positions = pos
        self.normals = None if normals is None else self._as_attr(normals, "normals")
        self.colors = None if colors is None else self._as_attr(colors, "colors")
        if index is None:
            self.index = None
        else:
            idx = np.ascontiguousarray(index, dtype=np.uint32).reshape(-1)
            if idx.size and int(idx.max()) >= pos.shape[0]:
                raise ValueError("index が頂点数を超えている")
            self.index = idx
        self.attributes: dict[str, np.ndarray] = {}
        self.version = 0

    def _as_attr(self, values: np.ndarray, name: str) -> np.ndarray:
        arr = np.ascontiguousarray(values, dtype=np.float32)
        if arr.shape != self.positions.shape:
            raise ValueError(
                f"{name} は positions と同じ shape である必要がある: "
                f"got={arr.shape}, positions={self.positions.shape}"
            )
        return arr

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def draw_count(self) -> int:
        """描画順に並べたときの頂点数（index があれば index 長）。"""

        if self.index is not None:
            return int(self.index.size)
        return self.vertex_count

    def to_non_indexed(self) -> BufferGeometry:
        """index を展開した新しいジオメトリを返す（index なしならコピー）。"""

        order = self.index if self.index is not None else np.arange(self.vertex_count, dtype=np.uint32)
        out = BufferGeometry(
            self.positions[order],
            normals=None if self.normals is None else self.normals[order],
            colors=None if self.colors is None else self.colors[order],
        )
        for name, values in self.attributes.items():
            out.attributes[name] = np.ascontiguousarray(values[order])
        return out


def sphere_geometry(
    radius: float = 1.0,
    width_segments: int = 32,
    height_segments: int = 16,
    *,
    phi_start: float = 0.0,
    phi_length: float = 2.0 * math.pi,
    theta_start: float = 0.0,
    theta_length: float = math.pi,
) -> BufferGeometry:
    """UV 球のジオメトリ（index 付き、法線つき）を返す。"""

    w = max(3, int(width_segments))
    h = max(2, int(height_segments))
    theta_end = min(theta_start + theta_length, math.pi)

    u = np.linspace(0.0, 1.0, w + 1, dtype=np.float64)
    v = np.linspace(0.0, 1.0, h + 1, dtype=np.float64)
    phi = phi_start + u[np.newaxis, :] * phi_length
    theta = theta_start + v[:, np.newaxis] * theta_length

    x = -radius * np.cos(phi) * np.sin(theta)
    y = radius * np.cos(theta) * np.ones_like(phi)
    z = radius * np.sin(phi) * np.sin(theta)
    positions = np.stack([x, y, z], axis=-1).reshape(-1, 3)

    norms = np.linalg.norm(positions, axis=1, keepdims=True)
    normals = np.divide(positions, norms, out=np.zeros_like(positions), where=norms > 0)

    grid = np.arange((w + 1) * (h + 1), dtype=np.uint32).reshape(h + 1, w + 1)
    a = grid[:-1, 1:]
    b = grid[:-1, :-1]
    c = grid[1:, :-1]
    d = grid[1:, 1:]

    tris: list[np.ndarray] = []
    for iy in range(h):
        row: list[np.ndarray] = []
        # 極の行は退化三角形を作らない。
        if iy != 0 or theta_start > 0.0:
            row.append(np.stack([a[iy], b[iy], d[iy]], axis=-1))
        if iy != h - 1 or theta_end < math.pi:
            row.append(np.stack([b[iy], c[iy], d[iy]], axis=-1))
        if row:
            tris.append(np.stack(row, axis=1).reshape(-1, 3))
    index = np.concatenate(tris, axis=0).reshape(-1) if tris else np.zeros((0,), dtype=np.uint32)

    return BufferGeometry(positions, normals=normals, index=index)


def axes_geometry(size: float = 1.0) -> BufferGeometry:
    """X/Y/Z 軸の線分 3 本（頂点色つき）のジオメトリを返す。"""

    s = float(size)
    positions = np.array(
        [[0, 0, 0], [s, 0, 0], [0, 0, 0], [0, s, 0], [0, 0, 0], [0, 0, s]],
        dtype=np.float32,
    )
    colors = np.array(
        [[1, 0, 0], [1, 0.6, 0], [0, 1, 0], [0.6, 1, 0], [0, 0, 1], [0, 0.6, 1]],
        dtype=np.float32,
    )
    return BufferGeometry(positions, colors=colors)


def line_distances(positions: np.ndarray, *, segments: bool = False) -> np.ndarray:
    """頂点列に沿った累積距離を返す。

    `segments=True` は (0,1), (2,3), ... を独立線分として扱い、
    各線分の終点に始点までの累積距離 + 線分長を入れる。
    """

    pos = np.asarray(positions, dtype=np.float64)
    n = int(pos.shape[0])
    out = np.zeros((n,), dtype=np.float32)
    if n < 2:
        return out

    if not segments:
        seg = np.linalg.norm(np.diff(pos, axis=0), axis=1)
        out[1:] = np.cumsum(seg)
        return out

    if n % 2 != 0:
        raise ValueError(f"線分の頂点数は偶数である必要がある: got={n}")
    seg = np.linalg.norm(pos[1::2] - pos[0::2], axis=1)
    ends = np.cumsum(seg)
    starts = np.concatenate([[0.0], ends[:-1]])
    out[0::2] = starts
    out[1::2] = ends
    return out


__all__ = ["BufferGeometry", "axes_geometry", "line_distances", "sphere_geometry"]
