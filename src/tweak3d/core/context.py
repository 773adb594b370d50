# どこで: `src/tweak3d/core/context.py`。
# 何を: デモ 1 本分の実行状態（設定ストア/シーン/バインディング/テクスチャローダー）を束ねる AppContext を提供する。
# なぜ: モジュールグローバルに状態を置かず、1 つのコンストラクタで組み立てた文脈を各部へ渡すため。

from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Callable

from tweak3d.core.bindings import BindingTable
from tweak3d.core.parameters import ParamStore
from tweak3d.core.runtime_config import RuntimeConfig
from tweak3d.core.scene import CubeTextureLoader, PerspectiveCamera, Scene
from tweak3d.core.scene.texture_loader import DecodeFn

_logger = logging.getLogger(__name__)

SCENE_KEY = "scene"
CAMERA_KEY = "camera"


class SceneRegistry:
    """起動時に作ったシーン/カメラ/名前付きオブジェクトを保持する。

    Notes
    -----
    登録したハンドルは差し替えない（同名の再登録は ValueError）。
    状態の変更はハンドルのフィールド代入で行う。
    """

    def __init__(self) -> None:
        self._items: dict[str, Any] = {}

    def register(self, name: str, obj: Any) -> Any:
        """`name` で `obj` を登録し、そのまま返す。"""

        key = str(name)
        if key in self._items:
            raise ValueError(f"'{key}' は既に登録されている")
        self._items[key] = obj
        return obj

    def get(self, name: str) -> Any:
        try:
            return self._items[str(name)]
        except KeyError:
            raise KeyError(f"未登録のオブジェクトです: {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)

    def names(self) -> tuple[str, ...]:
        return tuple(self._items.keys())

    def verify_complete(self) -> None:
        """シーンとカメラが正しい型で登録済みであることを検証する。"""

        _ = self.scene, self.camera

    @property
    def scene(self) -> Scene:
        scene = self.get(SCENE_KEY)
        if not isinstance(scene, Scene):
            raise TypeError(f"'{SCENE_KEY}' は Scene である必要があります: got={type(scene).__name__}")
        return scene

    @property
    def camera(self) -> PerspectiveCamera:
        camera = self.get(CAMERA_KEY)
        if not isinstance(camera, PerspectiveCamera):
            raise TypeError(
                f"'{CAMERA_KEY}' は PerspectiveCamera である必要があります: got={type(camera).__name__}"
            )
        return camera


@dataclass(frozen=True, slots=True)
class OrbitSettings:
    """マウス操作による周回カメラの設定。"""

    min_distance: float = 0.0
    max_distance: float = float("inf")
    target: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True, slots=True)
class ViewOptions:
    """描画出力まわりのデモ固有設定。"""

    output_srgb: bool = False
    clear_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    orbit: OrbitSettings | None = None


class AppContext:
    """デモ 1 本分の実行状態。`create_context()` でのみ生成する。"""

    def __init__(
        self,
        *,
        config: RuntimeConfig,
        store: ParamStore,
        registry: SceneRegistry,
        bindings: BindingTable,
        loader: CubeTextureLoader,
    ) -> None:
        self.config = config
        self.store = store
        self.registry = registry
        self.bindings = bindings
        self.loader = loader
        self.view = ViewOptions()

    @property
    def scene(self) -> Scene:
        return self.registry.scene

    @property
    def camera(self) -> PerspectiveCamera:
        return self.registry.camera

    def close(self) -> None:
        """テクスチャローダーを停止する。"""

        self.loader.close()


DemoSetup = Callable[[AppContext], None]


def create_context(
    setup: DemoSetup,
    *,
    config: RuntimeConfig,
    decode: DecodeFn,
    executor: Executor | None = None,
) -> AppContext:
    """空の文脈を作り、`setup` に設定定義/シーン構築/バインドを行わせて返す。

    Parameters
    ----------
    setup : Callable[[AppContext], None]
        デモの組み立て関数。設定定義 -> シーン構築 -> ハンドラ登録の順に行う。
    config : RuntimeConfig
        実行時設定（テクスチャの置き場所など）。
    decode : Callable[[Path], np.ndarray]
        テクスチャ画像のデコード関数。
    executor : Executor | None
        テクスチャデコード用 Executor。None なら内部でスレッドプールを作る。

    Raises
    ------
    RuntimeError
        ハンドラ未登録の設定が残っている場合。
    KeyError
        `setup` がシーンまたはカメラを登録しなかった場合。
    TypeError
        シーン/カメラとして登録した値の型が違う場合。
    """

    store = ParamStore()
    ctx = AppContext(
        config=config,
        store=store,
        registry=SceneRegistry(),
        bindings=BindingTable(store),
        loader=CubeTextureLoader(decode, executor),
    )
    try:
        setup(ctx)
        ctx.bindings.verify_complete()
        ctx.registry.verify_complete()
    except Exception:
        ctx.close()
        raise
    _logger.debug(
        "AppContext を構築しました: settings=%d objects=%d",
        len(store),
        len(ctx.registry),
    )
    return ctx


__all__ = [
    "AppContext",
    "CAMERA_KEY",
    "DemoSetup",
    "OrbitSettings",
    "SCENE_KEY",
    "SceneRegistry",
    "ViewOptions",
    "create_context",
]
