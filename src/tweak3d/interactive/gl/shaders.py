"""
どこで: `src/tweak3d/interactive/gl/shaders.py`。
何を: メッシュ（Lambert + 環境マップ）/ 点 / 線（破線）/ キューブ背景の GLSL と ModernGL プログラム生成を提供する。
なぜ: シェーダ文字列とプログラムのライフサイクルを renderer 本体から分離するため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# 点光源の最大数（シェーダ内の配列長）。
MAX_POINT_LIGHTS = 4

_COLOR_SPACE_GLSL = """
vec3 srgb_to_linear(vec3 c) {
    return mix(c / 12.92, pow((c + 0.055) / 1.055, vec3(2.4)), step(vec3(0.04045), c));
}

vec3 linear_to_srgb(vec3 c) {
    c = clamp(c, 0.0, 1.0);
    return mix(c * 12.92, 1.055 * pow(c, vec3(1.0 / 2.4)) - 0.055, step(vec3(0.0031308), c));
}

vec4 encode_output(vec3 rgb, float alpha, int output_srgb) {
    return vec4(output_srgb == 1 ? linear_to_srgb(rgb) : rgb, alpha);
}
"""

MESH_VERTEX_SHADER = """
#version 410

uniform mat4 u_model;
uniform mat4 u_view;
uniform mat4 u_projection;
uniform mat3 u_normal_matrix;

in vec3 in_position;
in vec3 in_normal;

out vec3 v_world_position;
out vec3 v_world_normal;

void main() {
    vec4 world = u_model * vec4(in_position, 1.0);
    v_world_position = world.xyz;
    v_world_normal = normalize(u_normal_matrix * in_normal);
    gl_Position = u_projection * u_view * world;
}
"""

MESH_FRAGMENT_SHADER = (
    """
#version 410

uniform vec3 u_color;
uniform float u_opacity;
uniform vec3 u_camera_position;
uniform int u_output_srgb;

uniform vec3 u_ambient;
uniform int u_num_point_lights;
uniform vec3 u_point_light_position[%(max_lights)d];
uniform vec3 u_point_light_color[%(max_lights)d];
uniform vec2 u_point_light_range[%(max_lights)d];

// env map: u_env_mode 0=なし 1=反射 2=屈折 / u_combine 0=multiply 1=mix 2=add
uniform samplerCube u_env_map;
uniform int u_env_mode;
uniform int u_combine;
uniform float u_reflectivity;
uniform float u_refraction_ratio;

in vec3 v_world_position;
in vec3 v_world_normal;

out vec4 f_color;
"""
    % {"max_lights": MAX_POINT_LIGHTS}
    + _COLOR_SPACE_GLSL
    + """
void main() {
    vec3 normal = normalize(v_world_normal);
    if (!gl_FrontFacing) {
        normal = -normal;
    }

    vec3 irradiance = u_ambient;
    for (int i = 0; i < %(max_lights)d; ++i) {
        if (i >= u_num_point_lights) {
            break;
        }
        vec3 to_light = u_point_light_position[i] - v_world_position;
        float dist = length(to_light);
        vec3 light_dir = to_light / max(dist, 1e-6);
        float cutoff = u_point_light_range[i].x;
        float decay = u_point_light_range[i].y;
        float attenuation = 1.0;
        if (cutoff > 0.0) {
            attenuation = pow(clamp(1.0 - dist / cutoff, 0.0, 1.0), decay);
        }
        irradiance += u_point_light_color[i] * max(dot(normal, light_dir), 0.0) * attenuation;
    }

    vec3 outgoing = u_color * irradiance;

    if (u_env_mode != 0) {
        vec3 view_dir = normalize(v_world_position - u_camera_position);
        vec3 dir = u_env_mode == 1
            ? reflect(view_dir, normal)
            : refract(view_dir, normal, u_refraction_ratio);
        // キューブテクスチャは x 軸を反転して引く。
        vec3 env = srgb_to_linear(texture(u_env_map, vec3(-dir.x, dir.yz)).rgb);
        if (u_combine == 0) {
            outgoing = mix(outgoing, outgoing * env, u_reflectivity);
        } else if (u_combine == 1) {
            outgoing = mix(outgoing, env, u_reflectivity);
        } else {
            outgoing += env * u_reflectivity;
        }
    }

    f_color = encode_output(outgoing, u_opacity, u_output_srgb);
}
"""
    % {"max_lights": MAX_POINT_LIGHTS}
)

POINTS_VERTEX_SHADER = """
#version 410

uniform mat4 u_model;
uniform mat4 u_view;
uniform mat4 u_projection;
uniform float u_size;
uniform float u_scale;
uniform int u_size_attenuation;

in vec3 in_position;

void main() {
    vec4 mv = u_view * u_model * vec4(in_position, 1.0);
    gl_Position = u_projection * mv;
    float size = u_size;
    if (u_size_attenuation == 1) {
        size *= u_scale / max(-mv.z, 1e-6);
    }
    gl_PointSize = max(size, 1.0);
}
"""

POINTS_FRAGMENT_SHADER = (
    """
#version 410

uniform vec3 u_color;
uniform float u_opacity;
uniform int u_output_srgb;

out vec4 f_color;
"""
    + _COLOR_SPACE_GLSL
    + """
void main() {
    f_color = encode_output(u_color, u_opacity, u_output_srgb);
}
"""
)

LINE_VERTEX_SHADER = """
#version 410

uniform mat4 u_model;
uniform mat4 u_view;
uniform mat4 u_projection;
uniform float u_dash_scale;

in vec3 in_position;
in vec3 in_color;
in float in_line_distance;

out vec3 v_color;
out float v_line_distance;

void main() {
    v_color = in_color;
    v_line_distance = u_dash_scale * in_line_distance;
    gl_Position = u_projection * u_view * u_model * vec4(in_position, 1.0);
}
"""

LINE_FRAGMENT_SHADER = (
    """
#version 410

uniform vec3 u_color;
uniform float u_opacity;
uniform int u_vertex_colors;
uniform int u_dashed;
uniform float u_dash_size;
uniform float u_total_size;
uniform int u_output_srgb;

in vec3 v_color;
in float v_line_distance;

out vec4 f_color;
"""
    + _COLOR_SPACE_GLSL
    + """
void main() {
    if (u_dashed == 1 && mod(v_line_distance, u_total_size) > u_dash_size) {
        discard;
    }
    vec3 rgb = u_vertex_colors == 1 ? u_color * v_color : u_color;
    f_color = encode_output(rgb, u_opacity, u_output_srgb);
}
"""
)

BACKGROUND_VERTEX_SHADER = """
#version 410

uniform mat4 u_inverse_view_projection;

in vec2 in_ndc;

out vec3 v_direction;

void main() {
    vec4 far_point = u_inverse_view_projection * vec4(in_ndc, 1.0, 1.0);
    vec4 near_point = u_inverse_view_projection * vec4(in_ndc, -1.0, 1.0);
    v_direction = far_point.xyz / far_point.w - near_point.xyz / near_point.w;
    gl_Position = vec4(in_ndc, 1.0, 1.0);
}
"""

BACKGROUND_FRAGMENT_SHADER = (
    """
#version 410

uniform samplerCube u_env_map;
uniform int u_output_srgb;

in vec3 v_direction;

out vec4 f_color;
"""
    + _COLOR_SPACE_GLSL
    + """
void main() {
    vec3 dir = normalize(v_direction);
    vec3 env = srgb_to_linear(texture(u_env_map, vec3(-dir.x, dir.yz)).rgb);
    f_color = encode_output(env, 1.0, u_output_srgb);
}
"""
)


@dataclass(frozen=True, slots=True)
class ScenePrograms:
    """SceneRenderer が使うシェーダプログラム一式。"""

    mesh: Any
    points: Any
    line: Any
    background: Any

    def release(self) -> None:
        for program in (self.mesh, self.points, self.line, self.background):
            program.release()


class Shader:
    """ModernGL プログラムの生成窓口。"""

    @staticmethod
    def create_programs(ctx: Any) -> ScenePrograms:
        """コンテキスト `ctx` 上にシーン描画用プログラムを作成する。"""

        return ScenePrograms(
            mesh=ctx.program(
                vertex_shader=MESH_VERTEX_SHADER,
                fragment_shader=MESH_FRAGMENT_SHADER,
            ),
            points=ctx.program(
                vertex_shader=POINTS_VERTEX_SHADER,
                fragment_shader=POINTS_FRAGMENT_SHADER,
            ),
            line=ctx.program(
                vertex_shader=LINE_VERTEX_SHADER,
                fragment_shader=LINE_FRAGMENT_SHADER,
            ),
            background=ctx.program(
                vertex_shader=BACKGROUND_VERTEX_SHADER,
                fragment_shader=BACKGROUND_FRAGMENT_SHADER,
            ),
        )


def set_uniform(program: Any, name: str, value: Any) -> None:
    """`name` がプログラムに残っていれば値を設定する（最適化で消えた uniform は無視）。"""

    uniform = program.get(name, None)
    if uniform is None:
        return
    uniform.value = value


def write_uniform(program: Any, name: str, data: bytes) -> None:
    """`name` がプログラムに残っていればバイト列を書き込む。"""

    uniform = program.get(name, None)
    if uniform is None:
        return
    uniform.write(data)


def set_uniform_array(program: Any, name: str, rows: list[tuple[float, ...]], *, fill: tuple[float, ...]) -> None:
    """配列 uniform を、実際の配列長に合わせて `fill` で詰めてから設定する。"""

    uniform = program.get(name, None)
    if uniform is None:
        return
    n = int(getattr(uniform, "array_length", 1))
    values = list(rows[:n]) + [fill] * max(0, n - len(rows))
    uniform.value = values if n > 1 else values[0]


__all__ = [
    "MAX_POINT_LIGHTS",
    "ScenePrograms",
    "Shader",
    "set_uniform",
    "set_uniform_array",
    "write_uniform",
]
