from concurrent.futures import Future
from pathlib import Path

import numpy as np

from tweak3d.core.bindings import ParamChanged
from tweak3d.core.context import AppContext, create_context
from tweak3d.core.runtime_config import RuntimeConfig
from tweak3d.core.scene import CUBE_REFLECTION_MAPPING, CUBE_REFRACTION_MAPPING
from tweak3d.demos import demo_registry
from tweak3d.demos.cubemap import REFLECTION_MESH, REFRACTION_MESH, setup_cubemap


class _ImmediateExecutor:
    def submit(self, fn, *args):
        future: Future = Future()
        future.set_result(fn(*args))
        return future


def _config() -> RuntimeConfig:
    return RuntimeConfig(
        config_path=None,
        texture_dir=Path("cubes"),
        texture_extension="jpg",
        texture_sets=(("bridge", "Bridge2"), ("room", "room")),
        draw_window_size=(800, 600),
        window_pos_draw=(0, 0),
        window_pos_parameter_gui=(0, 0),
        parameter_gui_window_size=(300, 300),
        fps=60.0,
    )


def _context(decoded: list[Path] | None = None) -> AppContext:
    def decode(path: Path) -> np.ndarray:
        if decoded is not None:
            decoded.append(path)
        return np.zeros((2, 2, 3), dtype=np.uint8)

    return create_context(setup_cubemap, config=_config(), decode=decode, executor=_ImmediateExecutor())


def test_cubemap_is_registered():
    assert demo_registry.get("cubemap") is setup_cubemap


def test_setup_builds_two_spheres_with_shared_geometry():
    ctx = _context()
    reflection = ctx.registry.get(REFLECTION_MESH)
    refraction = ctx.registry.get(REFRACTION_MESH)

    assert ctx.store.names() == ("texture", "reflectivity", "refractionRatio")
    assert ctx.store.get("texture") == "bridge"
    assert reflection.geometry is refraction.geometry
    assert reflection.position.to_tuple() == (-200.0, 0.0, 0.0)
    assert refraction.position.to_tuple() == (200.0, 0.0, 0.0)
    assert reflection.material.env_map.mapping == CUBE_REFLECTION_MAPPING
    assert refraction.material.env_map.mapping == CUBE_REFRACTION_MAPPING
    assert ctx.scene.background is reflection.material.env_map
    assert ctx.camera.position.z == 1000.0
    assert ctx.camera.aspect == 800 / 600
    assert ctx.view.output_srgb is True
    assert ctx.view.orbit.min_distance == 500
    assert ctx.view.orbit.max_distance == 2000
    ctx.close()


def test_textures_arrive_on_poll():
    decoded: list[Path] = []
    ctx = _context(decoded)
    env_map = ctx.registry.get(REFLECTION_MESH).material.env_map

    assert not env_map.is_ready
    ctx.loader.poll()

    assert env_map.is_ready
    assert [p.name for p in decoded] == ["px.jpg", "nx.jpg", "py.jpg", "ny.jpg", "pz.jpg", "nz.jpg"]
    assert decoded[0].parent == Path("cubes") / "Bridge2"
    ctx.close()


def test_reflectivity_changes_only_reflection_material():
    ctx = _context()
    reflection = ctx.registry.get(REFLECTION_MESH).material
    refraction = ctx.registry.get(REFRACTION_MESH).material
    before = (refraction.reflectivity, refraction.refraction_ratio, reflection.refraction_ratio)

    ctx.bindings.dispatch(ParamChanged("reflectivity", 0.5))

    assert reflection.reflectivity == 0.5
    assert (refraction.reflectivity, refraction.refraction_ratio, reflection.refraction_ratio) == before
    ctx.close()


def test_refraction_ratio_changes_only_refraction_material():
    ctx = _context()
    reflection = ctx.registry.get(REFLECTION_MESH).material
    refraction = ctx.registry.get(REFRACTION_MESH).material

    ctx.bindings.dispatch(ParamChanged("refractionRatio", 0.5))

    assert refraction.refraction_ratio == 0.5
    assert reflection.refraction_ratio == 0.98
    assert reflection.reflectivity == 1.0
    ctx.close()


def test_texture_change_swaps_env_maps_and_background():
    ctx = _context()
    reflection_mesh = ctx.registry.get(REFLECTION_MESH)
    refraction_mesh = ctx.registry.get(REFRACTION_MESH)
    old_reflection = reflection_mesh.material.env_map
    old_refraction = refraction_mesh.material.env_map

    ctx.bindings.dispatch(ParamChanged("texture", "room"))

    new_reflection = reflection_mesh.material.env_map
    new_refraction = refraction_mesh.material.env_map
    assert new_reflection is not old_reflection
    assert new_refraction is not old_refraction
    assert new_reflection.source == "room"
    assert ctx.scene.background is new_reflection
    # 位置は変わらない。
    assert reflection_mesh.position.to_tuple() == (-200.0, 0.0, 0.0)
    assert refraction_mesh.position.to_tuple() == (200.0, 0.0, 0.0)

    ctx.loader.poll()
    assert new_reflection.is_ready
    # 追い越された bridge のロードは反映しない。
    assert not old_reflection.is_ready
    ctx.close()
