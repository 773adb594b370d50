# どこで: `src/tweak3d/demos/cubemap.py`。
# 何を: キューブマップの反射球/屈折球デモ（テクスチャ切替・反射率・屈折比）を組み立てる。
# なぜ: 環境マップ付きマテリアルを、設定 -> ハンドラ表 -> シーン更新の流れで操作する最小例にするため。

from __future__ import annotations

from tweak3d.core.context import (
    CAMERA_KEY,
    SCENE_KEY,
    AppContext,
    OrbitSettings,
    ViewOptions,
)
from tweak3d.core.parameters import ParamMeta
from tweak3d.core.scene import (
    CUBE_REFLECTION_MAPPING,
    CUBE_REFRACTION_MAPPING,
    AmbientLight,
    CubeTexture,
    Mesh,
    MeshLambertMaterial,
    PerspectiveCamera,
    PointLight,
    Scene,
    cube_face_paths,
    sphere_geometry,
)

from .registry import demo

DEFAULT_TEXTURE = "bridge"
TEXTURE_CHANNEL = "texture"

REFLECTION_MESH = "reflection_mesh"
REFRACTION_MESH = "refraction_mesh"

_FOLDER = "Settings"


def _define_settings(ctx: AppContext) -> None:
    names = ctx.config.texture_names()
    default_texture = DEFAULT_TEXTURE if DEFAULT_TEXTURE in names else names[0]
    store = ctx.store
    store.define(
        "texture",
        default=default_texture,
        meta=ParamMeta(kind="choice", choices=names),
        folder=_FOLDER,
    )
    store.define(
        "reflectivity",
        default=1.0,
        meta=ParamMeta(kind="float", ui_min=0.0, ui_max=1.0, step=0.01),
        folder=_FOLDER,
    )
    store.define(
        "refractionRatio",
        default=0.98,
        meta=ParamMeta(kind="float", ui_min=0.0, ui_max=1.0, step=0.01),
        folder=_FOLDER,
    )


def load_cube_textures(ctx: AppContext, texture_name: str) -> tuple[CubeTexture, CubeTexture]:
    """テクスチャセットの反射用/屈折用 CubeTexture を要求し、背景へ反射用を割り当てる。

    テクスチャは空のまま返り、画像は `ctx.loader.poll()` で後から入る。
    """

    cfg = ctx.config
    paths = cube_face_paths(cfg.texture_dir, cfg.texture_folder(texture_name), cfg.texture_extension)
    reflection, refraction = ctx.loader.load(
        paths,
        mappings=(CUBE_REFLECTION_MAPPING, CUBE_REFRACTION_MAPPING),
        channel=TEXTURE_CHANNEL,
        source=texture_name,
    )
    ctx.scene.background = reflection
    return reflection, refraction


def _build_scene(ctx: AppContext) -> None:
    cfg = ctx.config
    registry = ctx.registry
    width, height = cfg.draw_window_size

    camera = registry.register(
        CAMERA_KEY, PerspectiveCamera(50, width / height, 1, 5000)
    )
    camera.position.z = 1000

    scene = registry.register(SCENE_KEY, Scene())
    scene.add(AmbientLight(0xFFFFFF, name="ambient"))
    scene.add(PointLight(0xFFFFFF, 2, name="point_light"))

    reflection, refraction = load_cube_textures(ctx, ctx.store.get("texture"))

    # 2 つの球は同じジオメトリを共有する。
    geometry = sphere_geometry(150, 100, 100)

    reflection_mesh = registry.register(
        REFLECTION_MESH,
        Mesh(
            geometry,
            MeshLambertMaterial(env_map=reflection, reflectivity=ctx.store.get("reflectivity")),
            name=REFLECTION_MESH,
        ),
    )
    reflection_mesh.position.set(-200, 0, 0)
    scene.add(reflection_mesh)

    refraction_mesh = registry.register(
        REFRACTION_MESH,
        Mesh(
            geometry,
            MeshLambertMaterial(
                env_map=refraction,
                refraction_ratio=ctx.store.get("refractionRatio"),
            ),
            name=REFRACTION_MESH,
        ),
    )
    refraction_mesh.position.set(200, 0, 0)
    scene.add(refraction_mesh)

    ctx.view = ViewOptions(
        output_srgb=True,
        orbit=OrbitSettings(min_distance=500, max_distance=2000),
    )


def _bind_settings(ctx: AppContext) -> None:
    bindings = ctx.bindings
    reflection_mesh: Mesh = ctx.registry.get(REFLECTION_MESH)
    refraction_mesh: Mesh = ctx.registry.get(REFRACTION_MESH)

    @bindings.bind("texture")
    def _on_texture(value: str) -> None:
        reflection, refraction = load_cube_textures(ctx, value)
        reflection_mesh.material.env_map = reflection
        refraction_mesh.material.env_map = refraction

    @bindings.bind("reflectivity")
    def _on_reflectivity(value: float) -> None:
        reflection_mesh.material.reflectivity = value

    @bindings.bind("refractionRatio")
    def _on_refraction_ratio(value: float) -> None:
        refraction_mesh.material.refraction_ratio = value


@demo("cubemap", description="キューブマップによる反射球と屈折球")
def setup_cubemap(ctx: AppContext) -> None:
    _define_settings(ctx)
    _build_scene(ctx)
    _bind_settings(ctx)


__all__ = [
    "DEFAULT_TEXTURE",
    "REFLECTION_MESH",
    "REFRACTION_MESH",
    "TEXTURE_CHANNEL",
    "load_cube_textures",
    "setup_cubemap",
]
