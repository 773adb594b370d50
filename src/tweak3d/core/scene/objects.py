# どこで: `src/tweak3d/core/scene/objects.py`。
# 何を: シーングラフのノード（Object3D / Group / Scene / Mesh / Points / Line / ライト）を定義する。
# なぜ: バインディングのハンドラがフィールド代入でその場更新できる、素直なオブジェクトモデルを持つため。

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

import numpy as np

from . import math3d
from .geometry import BufferGeometry, axes_geometry, line_distances

if TYPE_CHECKING:
    from .materials import LineBasicMaterial, Material, PointsMaterial
    from .textures import CubeTexture


def color_to_rgb(value: Any) -> tuple[float, float, float]:
    """`0xRRGGBB` / `"#RRGGBB"` / RGB01 タプルを RGB01 タプルへ正規化する。"""

    if isinstance(value, bool):
        raise TypeError(f"色として解釈できない値です: {value!r}")
    if isinstance(value, int):
        if value < 0 or value > 0xFFFFFF:
            raise ValueError(f"色は 0x000000..0xFFFFFF の範囲である必要があります: {value:#x}")
        return (
            ((value >> 16) & 0xFF) / 255.0,
            ((value >> 8) & 0xFF) / 255.0,
            (value & 0xFF) / 255.0,
        )
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) != 6:
            raise ValueError(f"色文字列は #RRGGBB 形式である必要があります: {value!r}")
        return color_to_rgb(int(text, 16))
    try:
        r, g, b = value
    except Exception as exc:
        raise TypeError(f"色として解釈できない値です: {value!r}") from exc
    return float(r), float(g), float(b)


class Vector3:
    """x/y/z を個別に代入できる 3 成分ベクトル。"""

    __slots__ = ("x", "y", "z")

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def set(self, x: float, y: float, z: float) -> Vector3:
        self.x, self.y, self.z = float(x), float(y), float(z)
        return self

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.to_tuple() == other.to_tuple()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x!r}, {self.y!r}, {self.z!r})"


class Euler(Vector3):
    """XYZ 順のオイラー角（ラジアン）。"""

    __slots__ = ()


class Object3D:
    """シーングラフの基本ノード。"""

    def __init__(self, *, name: str = "") -> None:
        self.name = str(name)
        self.position = Vector3()
        self.rotation = Euler()
        self.scale = Vector3(1.0, 1.0, 1.0)
        self.up = Vector3(0.0, 1.0, 0.0)
        self.visible = True
        self.parent: Object3D | None = None
        self.children: list[Object3D] = []

    def add(self, *objects: Object3D) -> Object3D:
        """子ノードを追加する（別の親からは取り外す）。"""

        for obj in objects:
            if obj is self:
                raise ValueError("自分自身を子に追加することはできない")
            if obj.parent is not None:
                obj.parent.remove(obj)
            obj.parent = self
            self.children.append(obj)
        return self

    def remove(self, *objects: Object3D) -> Object3D:
        for obj in objects:
            if obj in self.children:
                self.children.remove(obj)
                obj.parent = None
        return self

    def traverse(self) -> Iterator[Object3D]:
        """自身と子孫を深さ優先で列挙する。"""

        yield self
        for child in self.children:
            yield from child.traverse()

    def traverse_visible(self) -> Iterator[Object3D]:
        if not self.visible:
            return
        yield self
        for child in self.children:
            yield from child.traverse_visible()

    def local_matrix(self) -> np.ndarray:
        return math3d.compose(
            self.position.to_tuple(),
            self.rotation.to_tuple(),
            self.scale.to_tuple(),
        )

    def world_matrix(self) -> np.ndarray:
        local = self.local_matrix()
        if self.parent is None:
            return local
        return self.parent.world_matrix() @ local

    def world_position(self) -> np.ndarray:
        return self.world_matrix()[:3, 3].copy()

    def _looks_from_position(self) -> bool:
        # カメラとライトは「自分から target を見る」、それ以外は「target から自分を見る」向きになる。
        return False

    def look_at(self, x: float, y: float = 0.0, z: float = 0.0) -> None:
        """ワールド座標 (x, y, z) を向くように rotation を更新する。"""

        target = np.array([float(x), float(y), float(z)], dtype=np.float64)
        position = self.world_position()
        up = self.up.to_array()
        if self._looks_from_position():
            rot = math3d.look_at_rotation(position, target, up)
        else:
            rot = math3d.look_at_rotation(target, position, up)

        if self.parent is not None:
            parent_rot = self.parent.world_matrix()[:3, :3]
            parent_rot = parent_rot / np.linalg.norm(parent_rot, axis=0)[np.newaxis, :]
            rot = parent_rot.T @ rot
        self.rotation.set(*math3d.euler_xyz_from_matrix(rot))


class Group(Object3D):
    """子ノードをまとめて変換するための空ノード。"""


class Scene(Object3D):
    """描画対象のルート。`background` は CubeTexture / RGB / None。"""

    def __init__(self, *, name: str = "") -> None:
        super().__init__(name=name)
        self.background: CubeTexture | tuple[float, float, float] | None = None


class Mesh(Object3D):
    """三角形メッシュ。"""

    def __init__(self, geometry: BufferGeometry, material: Material, *, name: str = "") -> None:
        super().__init__(name=name)
        self.geometry = geometry
        self.material = material


class Points(Object3D):
    """頂点を点として描画する。"""

    def __init__(self, geometry: BufferGeometry, material: PointsMaterial, *, name: str = "") -> None:
        super().__init__(name=name)
        self.geometry = geometry
        self.material = material


class Line(Object3D):
    """頂点を描画順に結んだ折れ線（LINE_STRIP）。"""

    strip = True

    def __init__(self, geometry: BufferGeometry, material: LineBasicMaterial, *, name: str = "") -> None:
        super().__init__(name=name)
        self.geometry = geometry
        self.material = material

    def compute_line_distances(self) -> Line:
        """破線描画に必要な累積距離属性 `line_distance` を計算する。

        index 付きジオメトリは描画順に展開してから計算する。
        """

        geometry = self.geometry
        if geometry.index is not None:
            geometry = geometry.to_non_indexed()
        geometry.attributes["line_distance"] = line_distances(
            geometry.positions, segments=not self.strip
        )
        self.geometry = geometry
        return self


class LineSegments(Line):
    """頂点 2 つずつを独立した線分として描画する（LINES）。"""

    strip = False


class AxesHelper(LineSegments):
    """X/Y/Z 軸を赤/緑/青の線分で表示する。"""

    def __init__(self, size: float = 1.0, *, name: str = "axes") -> None:
        from .materials import LineBasicMaterial

        super().__init__(axes_geometry(size), LineBasicMaterial(vertex_colors=True), name=name)


class Light(Object3D):
    def __init__(self, color: Any = 0xFFFFFF, intensity: float = 1.0, *, name: str = "") -> None:
        super().__init__(name=name)
        self.color = color_to_rgb(color)
        self.intensity = float(intensity)

    def _looks_from_position(self) -> bool:
        return True


class AmbientLight(Light):
    """全方向から一様に当たる環境光。"""


class PointLight(Light):
    """点光源。`distance=0` は減衰なし。"""

    def __init__(
        self,
        color: Any = 0xFFFFFF,
        intensity: float = 1.0,
        distance: float = 0.0,
        decay: float = 1.0,
        *,
        name: str = "",
    ) -> None:
        super().__init__(color, intensity, name=name)
        self.distance = float(distance)
        self.decay = float(decay)


__all__ = [
    "AmbientLight",
    "AxesHelper",
    "Euler",
    "Group",
    "Light",
    "Line",
    "LineSegments",
    "Mesh",
    "Object3D",
    "PointLight",
    "Points",
    "Scene",
    "Vector3",
    "color_to_rgb",
]
