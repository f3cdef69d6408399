import math

import numpy as np
import pytest

from arkengine.camera import Camera, Direction


def test_initial_state():
    cam = Camera()
    assert np.allclose(cam.position, [0, 0, 3])
    assert np.allclose(cam.front, [0, 0, -1])
    assert cam.yaw == -90.0
    assert cam.pitch == 0.0


def test_view_maps_eye_to_origin():
    cam = Camera()
    eye = np.append(cam.position, 1.0)
    assert np.allclose(cam.view_matrix @ eye, [0, 0, 0, 1])


@pytest.mark.parametrize("direction", list(Direction))
def test_move_distance_matches_speed(direction):
    cam = Camera()
    start = cam.position.copy()
    cam.move([direction], 0.4)
    assert np.linalg.norm(cam.position - start) == pytest.approx(2.5 * 0.4)


def test_opposite_directions_cancel():
    cam = Camera()
    start = cam.position.copy()
    cam.move([Direction.FORWARD, Direction.BACKWARD], 1.0)
    assert np.allclose(cam.position, start)


def test_diagonal_movement_is_normalized():
    cam = Camera()
    start = cam.position.copy()
    cam.move([Direction.FORWARD, Direction.RIGHT, Direction.UP], 1.0)
    assert np.linalg.norm(cam.position - start) == pytest.approx(2.5)


def test_move_updates_view():
    cam = Camera()
    cam.move([Direction.FORWARD], 1.0)
    eye = np.append(cam.position, 1.0)
    assert np.allclose(cam.view @ eye, [0, 0, 0, 1])


def test_first_mouse_event_does_not_turn():
    cam = Camera()
    cam.on_mouse(500.0, 300.0)
    assert np.allclose(cam.front, [0, 0, -1])
    assert cam.first_mouse is False
    assert (cam.last_x, cam.last_y) == (500.0, 300.0)


def test_mouse_turns_yaw():
    cam = Camera()
    cam.on_mouse(0.0, 0.0)
    cam.on_mouse(900.0, 0.0)
    assert cam.yaw == pytest.approx(0.0)
    assert np.allclose(cam.front, [1, 0, 0])


def test_pitch_is_clamped():
    cam = Camera()
    cam.on_mouse(0.0, 0.0)
    cam.on_mouse(0.0, -10000.0)
    assert cam.pitch == 89.0
    assert cam.front[1] == pytest.approx(math.sin(math.radians(89.0)))
    cam.on_mouse(0.0, 10000.0)
    assert cam.pitch == -89.0


def test_front_stays_unit_length():
    cam = Camera()
    for x, y in [(0, 0), (13, 7), (-40, 22), (5, -90)]:
        cam.on_mouse(float(x), float(y))
        assert np.linalg.norm(cam.front) == pytest.approx(1.0)


def test_paused_ignores_mouse():
    cam = Camera()
    cam.paused = True
    cam.on_mouse(100.0, 100.0)
    assert cam.first_mouse is True
    assert np.allclose(cam.front, [0, 0, -1])


def test_reset_mouse():
    cam = Camera()
    cam.on_mouse(0.0, 0.0)
    cam.reset_mouse(5.0, 6.0)
    assert cam.first_mouse is True
    assert (cam.last_x, cam.last_y) == (5.0, 6.0)
    cam.on_mouse(200.0, 200.0)
    assert np.allclose(cam.front, [0, 0, -1])