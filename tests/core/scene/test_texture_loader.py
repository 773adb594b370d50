import logging
from concurrent.futures import Future
from pathlib import Path

import numpy as np
import pytest

from tweak3d.core.scene import (
    CUBE_REFLECTION_MAPPING,
    CUBE_REFRACTION_MAPPING,
    CubeTexture,
    CubeTextureLoader,
    cube_face_paths,
)


class _ImmediateExecutor:
    """submit 時にその場で実行する Executor。"""

    def submit(self, fn, *args):
        future: Future = Future()
        try:
            future.set_result(fn(*args))
        except Exception as exc:
            future.set_exception(exc)
        return future


class _DeferredExecutor:
    """`complete(i)` を呼ぶまで i 番目の submit を完了させない Executor。"""

    def __init__(self) -> None:
        self.jobs: list[tuple[Future, object, tuple]] = []

    def submit(self, fn, *args):
        future: Future = Future()
        self.jobs.append((future, fn, args))
        return future

    def complete(self, i: int) -> None:
        future, fn, args = self.jobs[i]
        future.set_result(fn(*args))


def _decode_by_folder(path: Path) -> np.ndarray:
    # フォルダ名の長さで塗り分け、どのロード結果が反映されたかを判別する。
    return np.full((4, 4, 3), len(path.parent.name), dtype=np.uint8)


def test_cube_face_paths_follow_face_order():
    paths = cube_face_paths("cubes", "Bridge2", ".jpg")

    assert [p.name for p in paths] == ["px.jpg", "nx.jpg", "py.jpg", "ny.jpg", "pz.jpg", "nz.jpg"]
    assert all(p.parent == Path("cubes") / "Bridge2" for p in paths)


def test_cube_texture_set_faces_validates_shape():
    texture = CubeTexture(source="x")
    face = np.zeros((8, 8, 3), dtype=np.uint8)

    with pytest.raises(ValueError):
        texture.set_faces([face] * 5)
    with pytest.raises(ValueError):
        texture.set_faces([face] * 5 + [np.zeros((4, 4, 3), dtype=np.uint8)])
    with pytest.raises(ValueError):
        texture.set_faces([np.zeros((8, 4, 3), dtype=np.uint8)] * 6)
    assert not texture.is_ready

    texture.set_faces([face] * 6)
    assert texture.is_ready
    assert texture.size == 8
    assert texture.version == 1


def test_cube_texture_keeps_uint8_face_tuple_as_is():
    faces = tuple(np.full((4, 4, 3), i, dtype=np.uint8) for i in range(6))
    first = CubeTexture(source="x")
    second = CubeTexture(source="x")

    first.set_faces(faces)
    second.set_faces(faces)

    assert first.faces is faces
    assert first.faces is second.faces


def test_cube_texture_converts_non_uint8_faces():
    faces = tuple(np.full((4, 4, 3), 7, dtype=np.int64) for _ in range(6))
    texture = CubeTexture(source="x")

    texture.set_faces(faces)

    assert texture.faces is not faces
    assert isinstance(texture.faces, tuple)
    assert all(f.dtype == np.uint8 for f in texture.faces)


def test_load_returns_empty_textures_until_poll():
    loader = CubeTextureLoader(_decode_by_folder, _ImmediateExecutor())

    reflection, refraction = loader.load(
        cube_face_paths("cubes", "room"),
        mappings=(CUBE_REFLECTION_MAPPING, CUBE_REFRACTION_MAPPING),
    )

    assert reflection.mapping == CUBE_REFLECTION_MAPPING
    assert refraction.mapping == CUBE_REFRACTION_MAPPING
    assert not reflection.is_ready
    assert loader.pending_count == 1

    assert loader.poll() == 1
    assert reflection.is_ready and refraction.is_ready
    # 同じ 6 面は 1 回だけデコードして共有する。
    assert reflection.faces is refraction.faces
    assert loader.pending_count == 0


def test_load_validates_arguments():
    loader = CubeTextureLoader(_decode_by_folder, _ImmediateExecutor())

    with pytest.raises(ValueError):
        loader.load(cube_face_paths("cubes", "room")[:5])
    with pytest.raises(ValueError):
        loader.load(cube_face_paths("cubes", "room"), mappings=())

    loader.close()
    with pytest.raises(RuntimeError):
        loader.load(cube_face_paths("cubes", "room"))


def test_stale_channel_result_is_discarded_when_it_finishes_last():
    executor = _DeferredExecutor()
    loader = CubeTextureLoader(_decode_by_folder, executor)

    (old,) = loader.load(cube_face_paths("cubes", "Bridge2"), channel="texture")
    (new,) = loader.load(cube_face_paths("cubes", "pisa"), channel="texture")
    assert loader.latest_seq("texture") == 2

    # 新しい方が先に完了する。
    executor.complete(1)
    assert loader.poll() == 1
    assert new.is_ready
    assert int(new.faces[0][0, 0, 0]) == len("pisa")

    executor.complete(0)
    assert loader.poll() == 0
    assert not old.is_ready
    assert loader.pending_count == 0


def test_stale_channel_result_is_discarded_when_it_finishes_first():
    executor = _DeferredExecutor()
    loader = CubeTextureLoader(_decode_by_folder, executor)

    (old,) = loader.load(cube_face_paths("cubes", "Bridge2"), channel="texture")
    (new,) = loader.load(cube_face_paths("cubes", "pisa"), channel="texture")

    executor.complete(0)
    assert loader.poll() == 0
    assert not old.is_ready
    assert loader.pending_count == 1

    executor.complete(1)
    assert loader.poll() == 1
    assert new.is_ready


def test_channels_are_independent():
    executor = _DeferredExecutor()
    loader = CubeTextureLoader(_decode_by_folder, executor)

    (a,) = loader.load(cube_face_paths("cubes", "a"), channel="left")
    (b,) = loader.load(cube_face_paths("cubes", "b"), channel="right")
    executor.complete(0)
    executor.complete(1)

    assert loader.poll() == 2
    assert a.is_ready and b.is_ready
    assert loader.latest_seq("left") == 1
    assert loader.latest_seq("unused") == 0


def test_decode_failure_is_logged_and_texture_stays_empty(caplog: pytest.LogCaptureFixture):
    def broken_decode(path: Path) -> np.ndarray:
        raise FileNotFoundError(path)

    loader = CubeTextureLoader(broken_decode, _ImmediateExecutor())
    (texture,) = loader.load(cube_face_paths("cubes", "room"), source="room")

    with caplog.at_level(logging.ERROR, logger="tweak3d.core.scene.texture_loader"):
        assert loader.poll() == 0

    assert not texture.is_ready
    assert "room" in caplog.text
    assert loader.pending_count == 0


def test_close_cancels_pending_loads():
    executor = _DeferredExecutor()
    loader = CubeTextureLoader(_decode_by_folder, executor)
    loader.load(cube_face_paths("cubes", "room"))

    loader.close()

    assert loader.pending_count == 0
    assert executor.jobs[0][0].cancelled()
