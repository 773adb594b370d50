# どこで: `src/tweak3d/interactive/gl/scene_renderer.py`。
# 何を: シーングラフ（Mesh/Points/Line/ライト/背景）を ModernGL で描画するレンダラーを提供する。
# なぜ: コンテキスト生成・シェーダ設定・GPU キャッシュを 1 箇所にまとめ、`render(scene, camera)` だけを外へ見せるため。

from __future__ import annotations

from typing import Any

import moderngl
import numpy as np

from tweak3d.core.scene import (
    CUBE_REFLECTION_MAPPING,
    AmbientLight,
    CubeTexture,
    Line,
    LineDashedMaterial,
    Mesh,
    MeshLambertMaterial,
    PerspectiveCamera,
    PointLight,
    Points,
    Scene,
)
from tweak3d.core.scene import math3d
from tweak3d.core.scene.materials import MIX_OPERATION, MULTIPLY_OPERATION

from .gpu_mesh import GpuGeometryCache
from .gpu_textures import GpuTextureCache
from .shaders import (
    MAX_POINT_LIGHTS,
    Shader,
    set_uniform,
    set_uniform_array,
    write_uniform,
)

_COMBINE_CODES = {MULTIPLY_OPERATION: 0, MIX_OPERATION: 1}


class SceneRenderer:
    """シーンを描画ウィンドウへ描くレンダラー。

    Notes
    -----
    - `set_size()` は論理ピクセル、`set_pixel_ratio()` は論理 -> 物理の倍率。
      ビューポートは両者の積になる。
    - 呼び出し側が描画先ウィンドウのコンテキストを current にしてから `render()` を呼ぶ。
    """

    def __init__(
        self,
        window: Any,
        *,
        output_srgb: bool = False,
        clear_color: tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> None:
        window.switch_to()
        self.ctx = moderngl.create_context(require=410)
        self.ctx.enable(moderngl.PROGRAM_POINT_SIZE)
        self.programs = Shader.create_programs(self.ctx)
        self._geometries = GpuGeometryCache(self.ctx)
        self._textures = GpuTextureCache(self.ctx)

        quad = np.array([-1.0, -1.0, 3.0, -1.0, -1.0, 3.0], dtype="f4")
        self._background_vbo = self.ctx.buffer(quad.tobytes())
        self._background_vao = self.ctx.vertex_array(
            self.programs.background, [(self._background_vbo, "2f", "in_ndc")]
        )

        self.output_srgb = bool(output_srgb)
        self.clear_color = tuple(float(c) for c in clear_color)
        self._width = int(window.width)
        self._height = int(window.height)
        self._pixel_ratio = 1.0

        self.draw_calls = 0
        self.vertices = 0

    # --- サイズ ---
    def set_size(self, width: int, height: int) -> None:
        """出力サイズ（論理ピクセル）を設定する。"""

        self._width = max(0, int(width))
        self._height = max(0, int(height))

    def set_pixel_ratio(self, ratio: float) -> None:
        self._pixel_ratio = max(float(ratio), 1e-6)

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    def framebuffer_size(self) -> tuple[int, int]:
        return (
            int(round(self._width * self._pixel_ratio)),
            int(round(self._height * self._pixel_ratio)),
        )

    # --- 描画 ---
    def render(self, scene: Scene, camera: PerspectiveCamera) -> None:
        """`camera` から見た `scene` を 1 フレーム描画する（`flip()` はしない）。"""

        ctx = self.ctx
        ctx.screen.use()
        fb_w, fb_h = self.framebuffer_size()
        ctx.viewport = (0, 0, fb_w, fb_h)
        self.draw_calls = 0
        self.vertices = 0

        background = scene.background
        clear = self.clear_color
        if isinstance(background, tuple):
            clear = background
        ctx.clear(*clear, 1.0, depth=1.0)
        if fb_w <= 0 or fb_h <= 0:
            return

        view = camera.view_matrix()
        projection = camera.projection_matrix
        camera_position = tuple(float(v) for v in camera.world_position())

        if isinstance(background, CubeTexture):
            self._draw_background(background, view, projection)

        ambient, point_lights = self._collect_lights(scene)

        ctx.enable(moderngl.DEPTH_TEST)
        try:
            for obj in scene.traverse_visible():
                if isinstance(obj, Mesh):
                    self._draw_mesh(obj, view, projection, camera_position, ambient, point_lights)
                elif isinstance(obj, Points):
                    self._draw_points(obj, view, projection, fb_h)
                elif isinstance(obj, Line):
                    self._draw_line(obj, view, projection)
        finally:
            ctx.disable(moderngl.DEPTH_TEST)

        self._geometries.end_frame()
        self._textures.end_frame()

    def _collect_lights(
        self, scene: Scene
    ) -> tuple[tuple[float, float, float], list[tuple[np.ndarray, tuple[float, float, float], float, float]]]:
        ambient = np.zeros(3, dtype=np.float64)
        point_lights = []
        for obj in scene.traverse_visible():
            if isinstance(obj, AmbientLight):
                ambient += np.asarray(obj.color) * obj.intensity
            elif isinstance(obj, PointLight) and len(point_lights) < MAX_POINT_LIGHTS:
                color = tuple(float(c) * obj.intensity for c in obj.color)
                point_lights.append((obj.world_position(), color, obj.distance, obj.decay))
        return (float(ambient[0]), float(ambient[1]), float(ambient[2])), point_lights

    def _set_transform(self, program: Any, model: np.ndarray, view: np.ndarray, projection: np.ndarray) -> None:
        write_uniform(program, "u_model", math3d.to_gl(model))
        write_uniform(program, "u_view", math3d.to_gl(view))
        write_uniform(program, "u_projection", math3d.to_gl(projection))

    def _draw_background(self, texture: CubeTexture, view: np.ndarray, projection: np.ndarray) -> None:
        gpu = self._textures.get(texture)
        if gpu is None:
            return
        program = self.programs.background
        # 背景は向きだけを使う（平行移動を除く）。
        rotation_only = view.copy()
        rotation_only[:3, 3] = 0.0
        inverse = np.linalg.inv(projection @ rotation_only)
        write_uniform(program, "u_inverse_view_projection", math3d.to_gl(inverse))
        gpu.use(location=0)
        set_uniform(program, "u_env_map", 0)
        set_uniform(program, "u_output_srgb", int(self.output_srgb))
        self._background_vao.render(moderngl.TRIANGLES, vertices=3)
        self.draw_calls += 1

    def _draw_mesh(
        self,
        mesh: Mesh,
        view: np.ndarray,
        projection: np.ndarray,
        camera_position: tuple[float, ...],
        ambient: tuple[float, float, float],
        point_lights: list,
    ) -> None:
        material = mesh.material
        if not material.visible:
            return
        program = self.programs.mesh
        model = mesh.world_matrix()
        self._set_transform(program, model, view, projection)
        write_uniform(program, "u_normal_matrix", math3d.to_gl(math3d.normal_matrix(model)))
        set_uniform(program, "u_color", material.color)
        set_uniform(program, "u_opacity", material.opacity)
        set_uniform(program, "u_camera_position", camera_position)
        set_uniform(program, "u_output_srgb", int(self.output_srgb))

        set_uniform(program, "u_ambient", ambient)
        set_uniform(program, "u_num_point_lights", len(point_lights))
        set_uniform_array(
            program,
            "u_point_light_position",
            [tuple(float(v) for v in p[0]) for p in point_lights],
            fill=(0.0, 0.0, 0.0),
        )
        set_uniform_array(program, "u_point_light_color", [p[1] for p in point_lights], fill=(0.0, 0.0, 0.0))
        set_uniform_array(
            program,
            "u_point_light_range",
            [(float(p[2]), float(p[3])) for p in point_lights],
            fill=(0.0, 1.0),
        )

        env_mode = 0
        if isinstance(material, MeshLambertMaterial) and material.env_map is not None:
            gpu = self._textures.get(material.env_map)
            if gpu is not None:
                env_mode = 1 if material.env_map.mapping == CUBE_REFLECTION_MAPPING else 2
                gpu.use(location=0)
                set_uniform(program, "u_env_map", 0)
                set_uniform(program, "u_combine", _COMBINE_CODES.get(material.combine, 2))
                set_uniform(program, "u_reflectivity", material.reflectivity)
                set_uniform(program, "u_refraction_ratio", material.refraction_ratio)
        set_uniform(program, "u_env_mode", env_mode)

        gpu_geometry = self._geometries.get(mesh.geometry)
        gpu_geometry.vao(program).render(moderngl.TRIANGLES, vertices=gpu_geometry.draw_count)
        self.draw_calls += 1
        self.vertices += gpu_geometry.draw_count

    def _draw_points(self, points: Points, view: np.ndarray, projection: np.ndarray, fb_height: int) -> None:
        material = points.material
        if not material.visible:
            return
        program = self.programs.points
        self._set_transform(program, points.world_matrix(), view, projection)
        set_uniform(program, "u_color", material.color)
        set_uniform(program, "u_opacity", material.opacity)
        set_uniform(program, "u_size", material.size * self._pixel_ratio)
        set_uniform(program, "u_scale", 0.5 * float(fb_height))
        set_uniform(program, "u_size_attenuation", int(material.size_attenuation))
        set_uniform(program, "u_output_srgb", int(self.output_srgb))

        gpu_geometry = self._geometries.get(points.geometry)
        gpu_geometry.vao(program).render(moderngl.POINTS, vertices=gpu_geometry.draw_count)
        self.draw_calls += 1
        self.vertices += gpu_geometry.draw_count

    def _draw_line(self, line: Line, view: np.ndarray, projection: np.ndarray) -> None:
        material = line.material
        if not material.visible:
            return
        program = self.programs.line
        self._set_transform(program, line.world_matrix(), view, projection)
        set_uniform(program, "u_color", material.color)
        set_uniform(program, "u_opacity", material.opacity)
        set_uniform(program, "u_vertex_colors", int(material.vertex_colors))
        set_uniform(program, "u_output_srgb", int(self.output_srgb))
        if isinstance(material, LineDashedMaterial):
            set_uniform(program, "u_dashed", 1)
            set_uniform(program, "u_dash_scale", material.scale)
            set_uniform(program, "u_dash_size", material.dash_size)
            set_uniform(program, "u_total_size", material.dash_size + material.gap_size)
        else:
            set_uniform(program, "u_dashed", 0)
            set_uniform(program, "u_dash_scale", 1.0)

        gpu_geometry = self._geometries.get(line.geometry)
        mode = moderngl.LINE_STRIP if line.strip else moderngl.LINES
        gpu_geometry.vao(program).render(mode, vertices=gpu_geometry.draw_count)
        self.draw_calls += 1
        self.vertices += gpu_geometry.draw_count

    def release(self) -> None:
        """GPU リソースを解放する。"""

        self._geometries.release()
        self._textures.release()
        self._background_vao.release()
        self._background_vbo.release()
        self.programs.release()
        self.ctx.release()

    def finish(self) -> None:
        """GPU の完了を待つ（計測用）。"""

        self.ctx.finish()


__all__ = ["SceneRenderer"]
