# どこで: `src/tweak3d/demos/line_materials.py`。
# 何を: 点/実線/破線マテリアルの球を並べ、グループ回転とカメラ距離を操作するデモを組み立てる。
# なぜ: 複数オブジェクトを束ねた Group の変換を、設定ハンドラからその場更新する例にするため。

from __future__ import annotations

import math

from tweak3d.core.context import CAMERA_KEY, SCENE_KEY, AppContext
from tweak3d.core.parameters import ParamMeta
from tweak3d.core.scene import (
    AxesHelper,
    Group,
    Line,
    LineBasicMaterial,
    LineDashedMaterial,
    PerspectiveCamera,
    Points,
    PointsMaterial,
    Scene,
    sphere_geometry,
)

from .registry import demo

GROUP = "group"
POINTS = "points"
BASIC_LINE = "basic_line"
DASHED_LINE = "dashed_line"

_AXES = ("x", "y", "z")


def _define_settings(ctx: AppContext) -> None:
    store = ctx.store
    for axis in _AXES:
        store.define(
            f"group.rotation.{axis}",
            default=0.0,
            meta=ParamMeta(kind="float", ui_min=0.0, ui_max=2.0 * math.pi, step=0.01),
            folder="Group",
            label=axis,
        )
    store.define(
        "camera.position.z",
        default=500.0,
        meta=ParamMeta(kind="float", ui_min=0.0, ui_max=1000.0, step=1.0),
        folder="Camera",
        label="z",
    )


def _build_scene(ctx: AppContext) -> None:
    registry = ctx.registry
    width, height = ctx.config.draw_window_size

    camera = registry.register(CAMERA_KEY, PerspectiveCamera(45, width / height, 1, 1000))
    camera.position.set(0, 0, ctx.store.get("camera.position.z"))
    camera.look_at(0, 0, 0)

    scene = registry.register(SCENE_KEY, Scene())
    scene.add(AxesHelper(500))

    group = registry.register(GROUP, Group(name=GROUP))
    group.rotation.set(*(ctx.store.get(f"group.rotation.{axis}") for axis in _AXES))
    scene.add(group)

    points = registry.register(
        POINTS,
        Points(sphere_geometry(100, 25, 25), PointsMaterial(color=0xFF0000, size=3), name=POINTS),
    )
    points.position.x = -220
    group.add(points)

    basic = registry.register(
        BASIC_LINE,
        Line(sphere_geometry(100, 25, 25), LineBasicMaterial(color=0x00FF00), name=BASIC_LINE),
    )
    group.add(basic)

    dashed = registry.register(
        DASHED_LINE,
        Line(
            sphere_geometry(100, 25, 25),
            LineDashedMaterial(color=0x0000FF, dash_size=10, gap_size=5),
            name=DASHED_LINE,
        ),
    )
    dashed.compute_line_distances()
    dashed.position.x = 220
    group.add(dashed)


def _bind_settings(ctx: AppContext) -> None:
    bindings = ctx.bindings
    group: Group = ctx.registry.get(GROUP)
    camera = ctx.camera

    def rotation_handler(axis: str):
        def _on_rotation(value: float) -> None:
            setattr(group.rotation, axis, value)

        return _on_rotation

    for axis in _AXES:
        bindings.bind(f"group.rotation.{axis}", rotation_handler(axis))

    @bindings.bind("camera.position.z")
    def _on_camera_z(value: float) -> None:
        camera.position.z = value


@demo("lines", description="点/実線/破線マテリアルとグループ回転")
def setup_line_materials(ctx: AppContext) -> None:
    _define_settings(ctx)
    _build_scene(ctx)
    _bind_settings(ctx)


__all__ = ["BASIC_LINE", "DASHED_LINE", "GROUP", "POINTS", "setup_line_materials"]
