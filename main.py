"""
どこで: リポジトリ直下 `main.py`。
何を: 組み立て関数を 1 つ書いて run でプレビュー表示する、最小のデモ定義例。
なぜ: 登録済みデモを使わずに動作確認するための入口として利用するため。
"""

import sys

sys.path.append("src")

from tweak3d import run
from tweak3d.core.context import CAMERA_KEY, SCENE_KEY, AppContext, OrbitSettings, ViewOptions
from tweak3d.core.scene import (
    AmbientLight,
    Mesh,
    MeshLambertMaterial,
    PerspectiveCamera,
    PointLight,
    Scene,
    sphere_geometry,
)


def setup(ctx: AppContext) -> None:
    store = ctx.store
    store.define("scale", default=1.0, meta={"kind": "float", "ui_min": 0.1, "ui_max": 3.0, "step": 0.05})
    store.define("visible", default=True, meta={"kind": "bool"})

    width, height = ctx.config.draw_window_size
    camera = ctx.registry.register(CAMERA_KEY, PerspectiveCamera(50, width / height, 1, 2000))
    camera.position.z = 600

    scene = ctx.registry.register(SCENE_KEY, Scene())
    light = PointLight(0xFFFFFF, 1.5)
    light.position.set(400, 400, 400)
    scene.add(AmbientLight(0x404040), light)
    ball = Mesh(sphere_geometry(120, 48, 32), MeshLambertMaterial(color=0xFF8844))
    scene.add(ball)
    ctx.view = ViewOptions(orbit=OrbitSettings(min_distance=200, max_distance=1500))

    @ctx.bindings.bind("scale")
    def _on_scale(value: float) -> None:
        ball.scale.set(value, value, value)

    @ctx.bindings.bind("visible")
    def _on_visible(value: bool) -> None:
        ball.visible = value


if __name__ == "__main__":
    run(setup, parameter_gui=True)
