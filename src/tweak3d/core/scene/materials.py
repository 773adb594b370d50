# どこで: `src/tweak3d/core/scene/materials.py`。
# 何を: メッシュ/点/線のマテリアル（描画パラメータの入れ物）を定義する。
# なぜ: バインディングのハンドラが reflectivity や env_map をフィールド代入で直接更新できるようにするため。

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .objects import color_to_rgb

if TYPE_CHECKING:
    from .textures import CubeTexture

# env_map と下地色の合成方法。
MULTIPLY_OPERATION = "multiply"
MIX_OPERATION = "mix"
ADD_OPERATION = "add"
_COMBINE_OPERATIONS = (MULTIPLY_OPERATION, MIX_OPERATION, ADD_OPERATION)


class Material:
    """マテリアル共通の属性。"""

    def __init__(self, *, color: Any = 0xFFFFFF, opacity: float = 1.0, name: str = "") -> None:
        self.name = str(name)
        self.color = color_to_rgb(color)
        self.opacity = float(opacity)
        self.visible = True


class MeshLambertMaterial(Material):
    """Lambert 拡散 + 任意の環境マップ（反射/屈折）を持つメッシュ用マテリアル。

    Notes
    -----
    env_map の写像（反射 or 屈折）は CubeTexture.mapping が決める。
    reflectivity は反射写像で、refraction_ratio は屈折写像で使われる。
    """

    def __init__(
        self,
        *,
        color: Any = 0xFFFFFF,
        env_map: CubeTexture | None = None,
        reflectivity: float = 1.0,
        refraction_ratio: float = 0.98,
        combine: str = MULTIPLY_OPERATION,
        opacity: float = 1.0,
        name: str = "",
    ) -> None:
        super().__init__(color=color, opacity=opacity, name=name)
        if combine not in _COMBINE_OPERATIONS:
            raise ValueError(f"未知の combine です: {combine!r}")
        self.env_map = env_map
        self.reflectivity = float(reflectivity)
        self.refraction_ratio = float(refraction_ratio)
        self.combine = str(combine)


class PointsMaterial(Material):
    """点の描画サイズ（px）と距離減衰の有無を持つ。"""

    def __init__(
        self,
        *,
        color: Any = 0xFFFFFF,
        size: float = 1.0,
        size_attenuation: bool = True,
        opacity: float = 1.0,
        name: str = "",
    ) -> None:
        super().__init__(color=color, opacity=opacity, name=name)
        self.size = float(size)
        self.size_attenuation = bool(size_attenuation)


class LineBasicMaterial(Material):
    """単色（または頂点色）の実線。"""

    dashed = False

    def __init__(
        self,
        *,
        color: Any = 0xFFFFFF,
        vertex_colors: bool = False,
        opacity: float = 1.0,
        name: str = "",
    ) -> None:
        super().__init__(color=color, opacity=opacity, name=name)
        self.vertex_colors = bool(vertex_colors)


class LineDashedMaterial(LineBasicMaterial):
    """破線。Line 側で `compute_line_distances()` 済みである必要がある。"""

    dashed = True

    def __init__(
        self,
        *,
        color: Any = 0xFFFFFF,
        dash_size: float = 3.0,
        gap_size: float = 1.0,
        scale: float = 1.0,
        vertex_colors: bool = False,
        opacity: float = 1.0,
        name: str = "",
    ) -> None:
        super().__init__(color=color, vertex_colors=vertex_colors, opacity=opacity, name=name)
        self.dash_size = float(dash_size)
        self.gap_size = float(gap_size)
        self.scale = float(scale)


__all__ = [
    "ADD_OPERATION",
    "LineBasicMaterial",
    "LineDashedMaterial",
    "MIX_OPERATION",
    "MULTIPLY_OPERATION",
    "Material",
    "MeshLambertMaterial",
    "PointsMaterial",
]
