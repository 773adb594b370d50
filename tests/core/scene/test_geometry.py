import numpy as np
import pytest

from tweak3d.core.scene import BufferGeometry, line_distances, sphere_geometry


def test_sphere_geometry_vertex_and_triangle_counts():
    geometry = sphere_geometry(150, 8, 6)

    assert geometry.vertex_count == (8 + 1) * (6 + 1)
    # 極の行は三角形 1 枚ずつ、それ以外は 2 枚ずつ。
    triangles = 8 * (6 - 2) * 2 + 8 * 2
    assert geometry.draw_count == triangles * 3
    assert int(geometry.index.max()) < geometry.vertex_count


def test_sphere_geometry_lies_on_radius_with_unit_normals():
    geometry = sphere_geometry(100, 12, 8)

    radii = np.linalg.norm(geometry.positions, axis=1)
    np.testing.assert_allclose(radii, 100.0, rtol=1e-5)
    np.testing.assert_allclose(np.linalg.norm(geometry.normals, axis=1), 1.0, rtol=1e-5)


def test_buffer_geometry_validates_shapes():
    with pytest.raises(ValueError):
        BufferGeometry(np.zeros((4, 2)))
    with pytest.raises(ValueError):
        BufferGeometry(np.zeros((4, 3)), normals=np.zeros((3, 3)))
    with pytest.raises(ValueError):
        BufferGeometry(np.zeros((4, 3)), index=np.array([0, 1, 4]))


def test_to_non_indexed_expands_attributes_in_draw_order():
    positions = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0]], dtype=np.float32)
    geometry = BufferGeometry(positions, index=np.array([2, 0, 1, 2]))
    geometry.attributes["weight"] = np.array([0.0, 1.0, 2.0], dtype=np.float32)

    flat = geometry.to_non_indexed()

    assert flat.index is None
    np.testing.assert_array_equal(flat.positions, positions[[2, 0, 1, 2]])
    np.testing.assert_array_equal(flat.attributes["weight"], [2.0, 0.0, 1.0, 2.0])


def test_line_distances_accumulate_along_strip():
    positions = np.array([[0, 0, 0], [3, 4, 0], [3, 4, 2]], dtype=np.float32)

    np.testing.assert_allclose(line_distances(positions), [0.0, 5.0, 7.0])


def test_line_distances_for_segments_restart_at_each_pair():
    positions = np.array([[0, 0, 0], [1, 0, 0], [5, 0, 0], [5, 2, 0]], dtype=np.float32)

    np.testing.assert_allclose(line_distances(positions, segments=True), [0.0, 1.0, 1.0, 3.0])

    with pytest.raises(ValueError):
        line_distances(positions[:3], segments=True)
