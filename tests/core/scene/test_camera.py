import math

import numpy as np
import pytest

from tweak3d.core.scene import PerspectiveCamera


def test_projection_is_stale_until_update():
    camera = PerspectiveCamera(50, 1.0, 1, 5000)
    before = camera.projection_matrix.copy()

    camera.aspect = 2.0
    np.testing.assert_allclose(camera.projection_matrix, before)

    camera.update_projection_matrix()
    assert camera.projection_matrix[0, 0] == pytest.approx(before[0, 0] / 2.0)
    assert camera.projection_matrix[1, 1] == pytest.approx(before[1, 1])


def test_projection_matches_vertical_fov():
    camera = PerspectiveCamera(90, 1.0, 1, 100)

    assert camera.projection_matrix[1, 1] == pytest.approx(1.0 / math.tan(math.radians(45)))
    assert camera.projection_matrix[3, 2] == -1.0


def test_invalid_near_far_raises():
    with pytest.raises(ValueError):
        PerspectiveCamera(50, 1.0, 0, 10)
    with pytest.raises(ValueError):
        PerspectiveCamera(50, 1.0, 10, 5)


def test_view_matrix_moves_world_into_camera_space():
    camera = PerspectiveCamera(50, 1.0, 1, 5000)
    camera.position.z = 1000
    camera.look_at(0, 0, 0)

    origin = camera.view_matrix() @ np.array([0.0, 0.0, 0.0, 1.0])

    np.testing.assert_allclose(origin[:3], [0.0, 0.0, -1000.0], atol=1e-9)


def test_camera_look_at_faces_target_along_minus_z():
    camera = PerspectiveCamera(50, 1.0, 1, 5000)
    camera.position.set(300, 0, 0)
    camera.look_at(0, 0, 0)

    forward = -camera.world_matrix()[:3, 2]

    np.testing.assert_allclose(forward, [-1.0, 0.0, 0.0], atol=1e-9)
