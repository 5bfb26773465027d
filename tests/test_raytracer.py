import numpy as np
import pytest

from sbtrace.exceptions import SyntaxErrorException
from sbtrace.ray import Ray
from sbtrace.raytracer import RayTracer

RED_SPHERE = """SBT-raytracer 1.0
translate(0, 0, -5, sphere { material = { emissive = (2, 0, 0); }; });
"""

MIRROR = """SBT-raytracer 1.0
translate(0, 0, -2, scale(4, square { material = { reflective = (1, 1, 1); }; }));
translate(0, 0, 3, sphere { material = { emissive = (0, 1, 0); }; });
"""


def load(tmp_path, text, **kwargs):
    path = tmp_path / "scene.ray"
    path.write_text(text)
    tracer = RayTracer(**kwargs)
    tracer.load_scene(path)
    return tracer


def test_center_hits_sphere_and_clamps(tmp_path):
    tracer = load(tmp_path, RED_SPHERE)
    assert np.allclose(tracer.trace(0.5, 0.5), [1.0, 0.0, 0.0])


def test_corner_misses(tmp_path):
    tracer = load(tmp_path, RED_SPHERE)
    assert np.allclose(tracer.trace(0.0, 0.0), [0.0, 0.0, 0.0])


def test_bsp_and_brute_force_agree(tmp_path):
    fast = load(tmp_path, RED_SPHERE, bsp_enabled=True)
    slow = load(tmp_path, RED_SPHERE, bsp_enabled=False)
    for x, y in [(0.5, 0.5), (0.45, 0.55), (0.1, 0.9)]:
        assert np.allclose(fast.trace(x, y), slow.trace(x, y))


def test_trace_ray_miss_is_black(tmp_path):
    tracer = load(tmp_path, RED_SPHERE)
    ray = Ray((0, 0, 0), (0, 0, 1))
    assert np.allclose(tracer.trace_ray(ray, np.ones(3), 0), [0, 0, 0])


def test_trace_pixel_fills_buffer(tmp_path):
    tracer = load(tmp_path, RED_SPHERE)
    tracer.trace_setup(4, 4)
    assert tracer.ready
    tracer.trace_pixel(2, 2)
    offset = (2 + 2 * 4) * 3
    assert tuple(tracer.buffer[offset : offset + 3]) == (255, 0, 0)
    assert tracer.buffer[:3] == bytearray(3)


def test_trace_pixel_without_scene_leaves_buffer():
    tracer = RayTracer()
    tracer.trace_setup(2, 2)
    tracer.trace_pixel(0, 0)
    assert tracer.buffer == bytearray(12)


def test_reflection_needs_depth(tmp_path):
    shallow = load(tmp_path, MIRROR, depth=0)
    deep = load(tmp_path, MIRROR, depth=1)
    assert np.allclose(shallow.trace(0.5, 0.5), [0, 0, 0])
    assert np.allclose(deep.trace(0.5, 0.5), [0, 1, 0])


def test_aspect_ratio(tmp_path):
    assert RayTracer().aspect_ratio() == 1.0
    tracer = load(tmp_path, "SBT-raytracer 1.0\ncamera { aspectratio = 2; }\n")
    assert tracer.aspect_ratio() == 2.0


def test_missing_file(tmp_path):
    tracer = RayTracer()
    with pytest.raises(FileNotFoundError):
        tracer.load_scene(tmp_path / "absent.ray")
    assert not tracer.scene_loaded


def test_syntax_error_leaves_no_scene(tmp_path):
    path = tmp_path / "bad.ray"
    path.write_text("SBT-raytracer 1.0\nsphere { height = 1; }\n")
    tracer = RayTracer()
    with pytest.raises(SyntaxErrorException) as info:
        tracer.load_scene(path)
    assert "sphere attributes" in info.value.formatted_message
    assert not tracer.scene_loaded