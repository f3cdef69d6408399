import numpy as np
import pytest

from arkengine.level import ObjectType
from arkengine.mesh import cube, plane
from arkengine.renderer import (
    FPS_TITLE,
    FpsCounter,
    PauseToggle,
    frame_wait,
    group_by_prototype,
)
from arkengine.scene import Scene, SceneObject


def test_frame_wait_disabled_for_non_positive_target():
    assert frame_wait(0.0, 0.0, 0.0) == 0.0
    assert frame_wait(0.0, 0.0, -5.0) == 0.0


def test_frame_wait_full_frame_when_no_time_passed():
    assert frame_wait(10.0, 10.0, 300.0) == pytest.approx(1.0 / 300.0)


def test_frame_wait_zero_when_frame_already_too_long():
    assert frame_wait(0.0, 1.0, 300.0) == 0.0


def test_frame_wait_plus_elapsed_is_frame_time():
    for now in (0.0, 0.002, 0.005, 0.009):
        assert frame_wait(0.0, now, 100.0) + now == pytest.approx(1.0 / 100.0)


def test_frame_wait_shrinks_as_time_passes():
    assert frame_wait(0.0, 0.001, 60.0) > frame_wait(0.0, 0.01, 60.0)


def test_fps_counter_reports_after_one_second():
    counter = FpsCounter(start=0.0)
    assert counter.tick(0.25) is None
    assert counter.tick(0.5) is None
    assert counter.tick(1.0) == 3
    assert counter.frames == 0
    assert counter.last_time == 1.0


def test_fps_counter_starts_a_new_second():
    counter = FpsCounter(start=0.0)
    counter.tick(1.0)
    assert counter.tick(1.5) is None
    assert counter.tick(2.0) == 2


def test_fps_title_format():
    assert FPS_TITLE.format(42) == "3D Renderer - FPS: 42"


def test_pause_toggle_flips_once_per_press():
    toggle = PauseToggle()
    assert toggle.update(True) is True
    assert toggle.paused is True
    assert toggle.update(True) is False
    assert toggle.paused is True
    assert toggle.update(False) is False
    assert toggle.update(True) is True
    assert toggle.paused is False


def test_pause_toggle_ignores_release():
    toggle = PauseToggle()
    assert toggle.update(False) is False
    assert toggle.paused is False


def test_group_by_prototype_one_group_per_mesh_by_default():
    scene = Scene()
    first = scene.add_object(ObjectType.CUBE, position=(1.0, 0.0, 0.0))
    second = scene.add_object(ObjectType.PLANE, position=(0.0, 2.0, 0.0))
    groups = group_by_prototype(scene)
    assert list(groups) == [first.mesh, second.mesh]
    np.testing.assert_allclose(groups[first.mesh][0], first.mesh.model_matrix)
    np.testing.assert_allclose(groups[second.mesh][0], second.mesh.model_matrix)


def test_group_by_prototype_shares_prototype_in_order():
    shared = cube()
    a = SceneObject(ObjectType.CUBE, mesh=cube())
    b = SceneObject(ObjectType.CUBE, mesh=cube())
    a.mesh.set_position((1.0, 2.0, 3.0))
    b.mesh.set_position((-4.0, 0.0, 0.5))
    a.mesh.set_prototype(shared)
    b.mesh.set_prototype(shared)
    groups = group_by_prototype([a, b])
    assert list(groups) == [shared]
    assert len(groups[shared]) == 2
    np.testing.assert_allclose(groups[shared][0][:3, 3], [1.0, 2.0, 3.0])
    np.testing.assert_allclose(groups[shared][1][:3, 3], [-4.0, 0.0, 0.5])


def test_group_by_prototype_skips_objects_without_mesh():
    with_mesh = SceneObject(ObjectType.PLANE, mesh=plane())
    groups = group_by_prototype([SceneObject(ObjectType.CUBE), with_mesh])
    assert list(groups) == [with_mesh.mesh]
    assert sum(len(m) for m in groups.values()) == 1


def test_group_by_prototype_empty():
    assert group_by_prototype([]) == {}