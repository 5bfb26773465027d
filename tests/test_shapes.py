import numpy as np
import pytest

from sbtrace.material import Material
from sbtrace.ray import Ray
from sbtrace.scene import Scene, translation_matrix
from sbtrace.shapes import Box, Cone, Cylinder, Sphere, Square


@pytest.fixture
def scene():
    return Scene()


def make(cls, scene, *args):
    return cls(scene, Material(), *args)


# Sphere

def test_sphere_hit_lies_on_surface(scene):
    sphere = make(Sphere, scene)
    ray = Ray((0.2, 0.1, -5), (0, 0, 1))
    hit = sphere.intersect_local(ray)
    point = ray.at(hit.t)
    assert np.linalg.norm(point) == pytest.approx(1.0)
    np.testing.assert_allclose(hit.normal, point, atol=1e-9)
    assert hit.obj is sphere


def test_sphere_hit_from_inside_uses_far_root(scene):
    sphere = make(Sphere, scene)
    ray = Ray((0, 0, 0), (1, 0, 0))
    hit = sphere.intersect_local(ray)
    np.testing.assert_allclose(ray.at(hit.t), [1, 0, 0], atol=1e-9)
    np.testing.assert_allclose(hit.normal, [1, 0, 0], atol=1e-9)


def test_sphere_miss(scene):
    sphere = make(Sphere, scene)
    assert sphere.intersect_local(Ray((2, 0, -5), (0, 0, 1))) is None


def test_sphere_behind_ray(scene):
    sphere = make(Sphere, scene)
    assert sphere.intersect_local(Ray((0, 0, 5), (0, 0, 1))) is None


def test_sphere_bounds(scene):
    box = make(Sphere, scene).compute_local_bounding_box()
    np.testing.assert_allclose(box.lower, [-1, -1, -1])
    np.testing.assert_allclose(box.upper, [1, 1, 1])


def test_sphere_through_transform(scene):
    sphere = make(Sphere, scene)
    sphere.transform = scene.transform_root.create_child(translation_matrix(0, 0, -3))
    ray = Ray((0, 0, 5), (0, 0, -1))
    hit = sphere.intersect(ray)
    centre = np.array([0.0, 0.0, -3.0])
    assert np.linalg.norm(ray.at(hit.t) - centre) == pytest.approx(1.0)
    np.testing.assert_allclose(hit.normal, [0, 0, 1], atol=1e-9)


# Box

def test_box_hit_top_face(scene):
    box = make(Box, scene)
    ray = Ray((0, 0, 5), (0, 0, -1))
    hit = box.intersect_local(ray)
    assert ray.at(hit.t)[2] == pytest.approx(0.5)
    np.testing.assert_allclose(hit.normal, [0, 0, 1])
    np.testing.assert_allclose(hit.uv_coordinates, [0.5, 0.5])


def test_box_hit_negative_face(scene):
    box = make(Box, scene)
    ray = Ray((-5, 0.1, 0.2), (1, 0, 0))
    hit = box.intersect_local(ray)
    assert ray.at(hit.t)[0] == pytest.approx(-0.5)
    np.testing.assert_allclose(hit.normal, [-1, 0, 0])
    assert 0.0 <= hit.uv_coordinates[0] <= 1.0
    assert 0.0 <= hit.uv_coordinates[1] <= 1.0


def test_box_miss(scene):
    box = make(Box, scene)
    assert box.intersect_local(Ray((2, 0, 5), (0, 0, -1))) is None


def test_box_bounds(scene):
    bounds = make(Box, scene).compute_local_bounding_box()
    np.testing.assert_allclose(bounds.lower, [-0.5, -0.5, -0.5])
    np.testing.assert_allclose(bounds.upper, [0.5, 0.5, 0.5])


# Square

def test_square_hit_from_above(scene):
    square = make(Square, scene)
    ray = Ray((0.25, -0.25, 1), (0, 0, -1))
    hit = square.intersect_local(ray)
    point = ray.at(hit.t)
    assert point[2] == pytest.approx(0.0)
    np.testing.assert_allclose(hit.normal, [0, 0, 1])
    np.testing.assert_allclose(hit.uv_coordinates, point[:2] + 0.5)


def test_square_hit_from_below_normal_faces_down(scene):
    square = make(Square, scene)
    hit = square.intersect_local(Ray((0, 0, -1), (0, 0, 1)))
    np.testing.assert_allclose(hit.normal, [0, 0, -1])


@pytest.mark.parametrize(
    "origin, direction",
    [((0, 0, 1), (1, 0, 0)), ((0, 0, 1), (0, 0, 1)), ((2, 0, 1), (0, 0, -1))],
)
def test_square_misses(scene, origin, direction):
    assert make(Square, scene).intersect_local(Ray(origin, direction)) is None


# Cylinder

def test_cylinder_cap_hit(scene):
    cylinder = make(Cylinder, scene)
    ray = Ray((0, 0, -5), (0, 0, 1))
    hit = cylinder.intersect_local(ray)
    assert ray.at(hit.t)[2] == pytest.approx(0.0)
    np.testing.assert_allclose(hit.normal, [0, 0, -1])


def test_cylinder_side_hit(scene):
    cylinder = make(Cylinder, scene)
    ray = Ray((5, 0, 0.5), (-1, 0, 0))
    hit = cylinder.intersect_local(ray)
    point = ray.at(hit.t)
    assert np.hypot(point[0], point[1]) == pytest.approx(1.0)
    np.testing.assert_allclose(hit.normal, [1, 0, 0], atol=1e-9)


def test_cylinder_uncapped_has_no_caps(scene):
    cylinder = make(Cylinder, scene)
    cylinder.capped = False
    assert cylinder.intersect_caps(Ray((0, 0, -5), (0, 0, 1))) is None
    assert cylinder.intersect_local(Ray((0, 0, -5), (0, 0, 1))) is None


def test_cylinder_uncapped_inside_normal_faces_ray(scene):
    cylinder = make(Cylinder, scene)
    cylinder.capped = False
    ray = Ray((0, 0, 0.5), (1, 0, 0))
    hit = cylinder.intersect_body(ray)
    assert float(hit.normal @ ray.direction) < 0


def test_cylinder_body_parallel_to_axis_misses(scene):
    cylinder = make(Cylinder, scene)
    assert cylinder.intersect_body(Ray((0, 0, -5), (0, 0, 1))) is None


def test_cylinder_bounds(scene):
    bounds = make(Cylinder, scene).compute_local_bounding_box()
    np.testing.assert_allclose(bounds.lower, [-1, -1, 0])
    np.testing.assert_allclose(bounds.upper, [1, 1, 1])


# Cone

def test_cone_side_hit_on_surface(scene):
    cone = make(Cone, scene)
    ray = Ray((5, 0, 0.5), (-1, 0, 0))
    hit = cone.intersect_local(ray)
    point = ray.at(hit.t)
    expected_radius = cone.bottom_radius + (cone.top_radius - cone.bottom_radius) * point[2] / cone.height
    assert np.hypot(point[0], point[1]) == pytest.approx(expected_radius, abs=1e-3)
    assert point[0] > 0
    assert np.linalg.norm(hit.normal) == pytest.approx(1.0)
    assert hit.normal[0] > 0 and hit.normal[2] > 0


def test_capped_cone_hits_bottom_cap(scene):
    cone = make(Cone, scene, 1.0, 1.0, 0.0, True)
    ray = Ray((0.3, 0, -5), (0, 0, 1))
    hit = cone.intersect_local(ray)
    assert ray.at(hit.t)[2] == pytest.approx(0.0)
    np.testing.assert_allclose(hit.normal, [0, 0, -1])


def test_uncapped_cone_seen_from_inside(scene):
    cone = make(Cone, scene)
    ray = Ray((0.3, 0, -5), (0, 0, 1))
    hit = cone.intersect_local(ray)
    point = ray.at(hit.t)
    assert 0.0 < point[2] < cone.height
    assert float(hit.normal @ ray.direction) <= 0


def test_cone_miss(scene):
    cone = make(Cone, scene)
    assert cone.intersect_local(Ray((5, 0, 5), (-1, 0, 0))) is None


def test_cone_radii_are_made_positive(scene):
    cone = make(Cone, scene, 2.0, -1.5, -0.5, False)
    assert cone.bottom_radius == 1.5
    assert cone.top_radius == 0.5


def test_cone_zero_height_rejected(scene):
    with pytest.raises(ValueError):
        make(Cone, scene, 0.0, 1.0, 0.0, False)


def test_cone_bounds_with_negative_height(scene):
    bounds = make(Cone, scene, -2.0, 1.0, 0.5, False).compute_local_bounding_box()
    np.testing.assert_allclose(bounds.lower, [-1, -1, -2])
    np.testing.assert_allclose(bounds.upper, [1, 1, 0])


def test_shapes_have_bounding_boxes(scene):
    shapes = [make(cls, scene) for cls in (Box, Cone, Cylinder, Sphere, Square)]
    assert all(shape.has_bounding_box_capability() for shape in shapes)


def test_scene_finds_nearest_shape(scene):
    near = make(Sphere, scene)
    near.transform = scene.transform_root.create_child(translation_matrix(0, 0, 2))
    far = make(Box, scene)
    scene.add_object(far)
    scene.add_object(near)
    hit = scene.intersect(Ray((0, 0, 10), (0, 0, -1)))
    assert hit.obj is near