import math

import numpy as np
import pytest

from mandelview.camera.pose import CameraPose


def test_default_basis() -> None:
    pose = CameraPose()
    np.testing.assert_array_equal(pose.position, [0, 0, 0])
    np.testing.assert_array_equal(pose.up, [0, 1, 0])
    np.testing.assert_array_equal(pose.side, [1, 0, 0])
    np.testing.assert_array_equal(pose.forward, [0, 0, 1])


def test_rejects_wrong_shape() -> None:
    with pytest.raises(ValueError):
        CameraPose(position=(1.0, 2.0))


def test_rotate_x_turns_forward_towards_up() -> None:
    pose = CameraPose()
    pose.rotate_x(math.pi / 2)
    np.testing.assert_allclose(pose.forward, [0, 1, 0], atol=1e-12)
    np.testing.assert_allclose(pose.up, [0, 0, -1], atol=1e-12)
    np.testing.assert_array_equal(pose.side, [1, 0, 0])


def test_rotate_y_and_z_touch_only_their_axes() -> None:
    pose = CameraPose()
    pose.rotate_y(math.pi / 2)
    np.testing.assert_allclose(pose.forward, [1, 0, 0], atol=1e-12)
    np.testing.assert_allclose(pose.side, [0, 0, -1], atol=1e-12)
    np.testing.assert_array_equal(pose.up, [0, 1, 0])

    pose = CameraPose()
    pose.rotate_z(math.pi / 2)
    np.testing.assert_allclose(pose.up, [1, 0, 0], atol=1e-12)
    np.testing.assert_allclose(pose.side, [0, -1, 0], atol=1e-12)
    np.testing.assert_array_equal(pose.forward, [0, 0, 1])


def test_rotation_renormalises_rotated_axes() -> None:
    pose = CameraPose(up=(0, 2, 0), forward=(0, 0, 3))
    pose.rotate_x(0.3)
    assert np.linalg.norm(pose.up) == pytest.approx(1.0)
    assert np.linalg.norm(pose.forward) == pytest.approx(1.0)


def test_many_rotations_stay_orthonormal() -> None:
    pose = CameraPose()
    for i in range(200):
        pose.rotate_x(0.01 * i)
        pose.rotate_y(-0.02)
        pose.rotate_z(0.005)
    assert abs(float(np.dot(pose.up, pose.forward))) < 1e-9
    assert np.linalg.norm(pose.side) == pytest.approx(1.0)


def test_interpolate_is_linear_and_not_normalised() -> None:
    a = CameraPose(position=(0, 0, 0))
    b = CameraPose(position=(2, 4, 6), up=(1, 0, 0), side=(0, 1, 0), forward=(0, 0, -1))
    mid = a.interpolate(b, 0.5)
    np.testing.assert_allclose(mid.position, [1, 2, 3])
    np.testing.assert_allclose(mid.up, [0.5, 0.5, 0])
    np.testing.assert_allclose(mid.forward, [0, 0, 0])
    assert np.linalg.norm(mid.up) < 1.0
    assert a.interpolate(b, 0.0) == a
    assert a.interpolate(b, 1.0) == b


def test_rotation_matrix_columns() -> None:
    pose = CameraPose()
    m = pose.rotation_matrix()
    np.testing.assert_array_equal(m[:, 0], -pose.side)
    np.testing.assert_array_equal(m[:, 1], pose.up)
    np.testing.assert_array_equal(m[:, 2], -pose.forward)


def test_copy_is_independent() -> None:
    pose = CameraPose(position=(1, 2, 3))
    clone = pose.copy()
    clone.position[0] = 99.0
    clone.rotate_x(1.0)
    assert pose.position[0] == 1.0
    assert pose == CameraPose(position=(1, 2, 3))
