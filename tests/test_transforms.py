import numpy as np
import pytest

from arkengine.transforms import (
    angle_axis,
    look_at,
    normalize,
    perspective,
    quat_to_mat4,
    scaling,
    translation,
)


def _apply(m, p):
    out = m @ np.array([*p, 1.0])
    return out[:3] / out[3]


def test_normalize_has_unit_length_and_same_direction():
    v = (3.0, -4.0, 12.0)
    n = normalize(v)
    assert np.isclose(np.linalg.norm(n), 1.0)
    assert np.allclose(n * np.linalg.norm(v), v)


def test_normalize_zero_vector_raises():
    with pytest.raises(ValueError):
        normalize((0.0, 0.0, 0.0))


def test_translation_moves_point():
    offset = np.array([1.5, -2.0, 3.25])
    point = np.array([0.5, 0.5, 0.5])
    assert np.allclose(_apply(translation(offset), point), point + offset)


def test_scaling_scales_each_axis():
    factors = np.array([2.0, 0.5, 3.0])
    point = np.array([1.0, 4.0, -2.0])
    assert np.allclose(_apply(scaling(factors), point), point * factors)


def test_zero_angle_gives_identity_rotation():
    q = angle_axis(0.0, (0.0, 1.0, 0.0))
    assert np.allclose(quat_to_mat4(q), np.eye(4))


def test_rotation_matrix_is_orthonormal():
    r = quat_to_mat4(angle_axis(37.0, (1.0, 2.0, -0.5)))[:3, :3]
    assert np.allclose(r @ r.T, np.eye(3))
    assert np.isclose(np.linalg.det(r), 1.0)


def test_quarter_turn_about_y_sends_x_to_minus_z():
    r = quat_to_mat4(angle_axis(90.0, (0.0, 1.0, 0.0)))
    assert np.allclose(_apply(r, (1.0, 0.0, 0.0)), (0.0, 0.0, -1.0))


def test_angle_axis_normalizes_axis():
    assert np.allclose(angle_axis(45.0, (0.0, 5.0, 0.0)), angle_axis(45.0, (0.0, 1.0, 0.0)))


def test_angle_axis_is_unit_quaternion():
    assert np.isclose(np.linalg.norm(angle_axis(123.0, (1.0, 1.0, 1.0))), 1.0)


def test_perspective_maps_near_and_far_planes():
    near, far = 0.1, 100.0
    p = perspective(45.0, 16 / 9, near, far)
    assert np.isclose(_apply(p, (0.0, 0.0, -near))[2], -1.0)
    assert np.isclose(_apply(p, (0.0, 0.0, -far))[2], 1.0)


def test_perspective_rejects_zero_aspect():
    with pytest.raises(ValueError):
        perspective(45.0, 0.0, 0.1, 100.0)


def test_look_at_puts_eye_at_origin_and_target_ahead():
    eye = np.array([1.0, 2.0, 5.0])
    center = np.array([-1.0, 0.5, 0.0])
    view = look_at(eye, center, (0.0, 1.0, 0.0))
    assert np.allclose(_apply(view, eye), np.zeros(3))
    target = _apply(view, center)
    assert np.allclose(target[:2], np.zeros(2))
    assert np.isclose(target[2], -np.linalg.norm(center - eye))


def test_look_at_along_minus_z_is_translation():
    view = look_at((0.0, 0.0, 3.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    assert np.allclose(view, translation((0.0, 0.0, -3.0)))