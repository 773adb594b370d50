# どこで: `src/tweak3d/core/scene/__init__.py`。
# 何を: シーングラフ（オブジェクト/カメラ/ジオメトリ/マテリアル/テクスチャ）の公開名をまとめる。
# なぜ: デモ側が `from tweak3d.core.scene import ...` の 1 行で組み立てられるようにするため。

from __future__ import annotations

from .camera import PerspectiveCamera
from .geometry import BufferGeometry, axes_geometry, line_distances, sphere_geometry
from .materials import (
    LineBasicMaterial,
    LineDashedMaterial,
    Material,
    MeshLambertMaterial,
    PointsMaterial,
)
from .objects import (
    AmbientLight,
    AxesHelper,
    Euler,
    Group,
    Light,
    Line,
    LineSegments,
    Mesh,
    Object3D,
    PointLight,
    Points,
    Scene,
    Vector3,
    color_to_rgb,
)
from .texture_loader import CubeTextureLoader
from .textures import (
    CUBE_REFLECTION_MAPPING,
    CUBE_REFRACTION_MAPPING,
    FACE_NAMES,
    CubeTexture,
    cube_face_paths,
)

__all__ = [
    "AmbientLight",
    "AxesHelper",
    "BufferGeometry",
    "CUBE_REFLECTION_MAPPING",
    "CUBE_REFRACTION_MAPPING",
    "CubeTexture",
    "CubeTextureLoader",
    "Euler",
    "FACE_NAMES",
    "Group",
    "Light",
    "Line",
    "LineBasicMaterial",
    "LineDashedMaterial",
    "LineSegments",
    "Material",
    "Mesh",
    "MeshLambertMaterial",
    "Object3D",
    "PerspectiveCamera",
    "PointLight",
    "Points",
    "PointsMaterial",
    "Scene",
    "Vector3",
    "axes_geometry",
    "color_to_rgb",
    "cube_face_paths",
    "line_distances",
    "sphere_geometry",
]
