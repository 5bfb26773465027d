import numpy as np
import pytest

from sbtrace.camera import Camera
from sbtrace.ray import RayType


def test_default_center_ray_looks_down_negative_z():
    cam = Camera()
    r = cam.ray_through(0.5, 0.5)
    assert np.allclose(r.direction, [0.0, 0.0, -1.0])
    assert np.allclose(r.position, cam.eye)
    assert r.ray_type is RayType.VISIBILITY


def test_ray_directions_are_unit_length():
    cam = Camera()
    for x, y in [(0.0, 0.0), (1.0, 0.2), (0.3, 0.9)]:
        assert np.linalg.norm(cam.ray_through(x, y).direction) == pytest.approx(1.0)


def test_ray_starts_at_eye():
    cam = Camera()
    cam.eye = np.array([1.0, 2.0, 3.0])
    assert np.allclose(cam.ray_through(0.1, 0.7).position, [1.0, 2.0, 3.0])


def test_set_look_with_default_axes_keeps_defaults():
    cam = Camera()
    cam.set_look((0.0, 0.0, -1.0), (0.0, 1.0, 0.0))
    assert np.allclose(cam.look, [0.0, 0.0, -1.0])
    assert np.allclose(cam.u, [1.0, 0.0, 0.0])
    assert np.allclose(cam.v, [0.0, 1.0, 0.0])


def test_fov_ninety_gives_unit_half_height():
    cam = Camera()
    cam.set_fov(90.0)
    assert cam.normalized_height == pytest.approx(2.0)
    assert np.linalg.norm(cam.v) == pytest.approx(cam.normalized_height)


def test_aspect_ratio_scales_u():
    cam = Camera()
    cam.set_aspect_ratio(2.0)
    assert cam.aspect_ratio == 2.0
    assert np.linalg.norm(cam.u) == pytest.approx(2.0 * np.linalg.norm(cam.v))


def test_identity_quaternion_keeps_view():
    cam = Camera()
    cam.set_look_quaternion(0.0, 0.0, 0.0, 1.0)
    assert np.allclose(cam.look, [0.0, 0.0, -1.0])
    assert np.allclose(cam.v, [0.0, 1.0, 0.0])


def test_look_simple_same_point_fails():
    cam = Camera()
    assert cam.set_look_simple((1.0, 1.0, 1.0), (1.0, 1.0, 1.0)) is False


def test_look_simple_points_at_target():
    cam = Camera()
    target = np.array([3.0, 1.0, -4.0])
    pos = np.array([0.0, 0.0, 0.0])
    assert cam.set_look_simple(target, pos) is True
    expected = (target - pos) / np.linalg.norm(target - pos)
    assert np.allclose(cam.look, expected)
    assert abs(float(cam.look @ cam.v)) < 1e-9


def test_look_simple_straight_up():
    cam = Camera()
    assert cam.set_look_simple((0.0, 5.0, 0.0), (0.0, 0.0, 0.0)) is True
    assert np.allclose(cam.look, [0.0, 1.0, 0.0])
    assert np.allclose(cam.v, [1.0, 0.0, 0.0])