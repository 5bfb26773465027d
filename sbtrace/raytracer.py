"""The recursive ray tracer and its image buffer."""

from __future__ import annotations

import math
import os

import numpy as np

from .parser import Parser
from .ray import RAY_EPSILON, Ray, RayType
from .tokenizer import Tokenizer


def _unit(v):
    length = float(np.linalg.norm(v))
    return v / length if length > 0.0 else v


class RayTracer:
    """Traces rays through a loaded scene into an RGB byte buffer."""

    def __init__(self, depth=0, bsp_enabled=True):
        self.depth = depth
        self.bsp_enabled = bsp_enabled
        self.scene = None
        self.buffer_width = 256
        self.buffer_height = 256
        self.buffer = bytearray()
        self.ready = False

    @property
    def scene_loaded(self):
        return self.scene is not None

    def trace(self, x, y):
        """Colour seen through normalised window coordinates ``(x, y)``."""
        self.scene.intersect_cache.clear()
        ray = self.scene.camera.ray_through(x, y)
        color = self.trace_ray(ray, np.ones(3), 0)
        return np.clip(color, 0.0, 1.0)

    def trace_ray(self, ray, thresh, depth):
        """Colour carried back along ``ray``, recursing for reflection and refraction."""
        hit = self.scene.intersect(ray)
        if hit is None:
            return np.zeros(3)

        material = hit.get_material()
        color = np.array(material.shade(self.scene, ray, hit), dtype=float)
        if depth >= self.depth:
            return color

        kr = np.asarray(material.kr(hit), dtype=float)
        kt = np.asarray(material.kt(hit), dtype=float)
        d = ray.direction
        norm = np.asarray(hit.normal, dtype=float)
        if float(d @ norm) > 0.0:
            # The ray comes from inside the object.
            norm = -norm

        if np.any(kr):
            dd = -float(norm @ d) * norm + d
            reflect_dir = _unit(-d + 2.0 * dd)
            reflected = Ray(ray.at(hit.t - RAY_EPSILON), reflect_dir, RayType.REFLECTION)
            color = color + kr * self.trace_ray(reflected, thresh, depth + 1)

        if np.any(kt):
            ratio = 1.0 / material.index(hit)
            cos_i = -float(d @ norm)
            sin_t2 = ratio * ratio * (1.0 - cos_i * cos_i)
            if sin_t2 <= 1.0:
                cos_t = math.sqrt(1.0 - sin_t2)
                refract_dir = _unit(ratio * d + (cos_t - ratio * cos_i) * norm)
                refracted = Ray(ray.at(hit.t + RAY_EPSILON), refract_dir, RayType.REFRACTION)
                color = color + kt * self.trace_ray(refracted, thresh, depth + 1)

        return color

    def load_scene(self, filename):
        """Parse and prepare the scene in ``filename``; errors propagate."""
        self.scene = None
        filename = os.fspath(filename)
        cut = max(filename.rfind("/"), filename.rfind("\\"))
        base_path = "." if cut < 0 else filename[:cut]
        with open(filename, encoding="utf-8") as stream:
            scene = Parser(Tokenizer(stream, False), base_path).parse_scene()
        scene.bsp_enabled = self.bsp_enabled
        scene.init_bsp_tree()
        self.scene = scene
        return scene

    def aspect_ratio(self):
        return self.scene.camera.aspect_ratio if self.scene_loaded else 1.0

    def trace_setup(self, width, height):
        """Size and clear the image buffer."""
        self.buffer_width = width
        self.buffer_height = height
        self.buffer = bytearray(width * height * 3)
        self.ready = True

    def trace_pixel(self, i, j):
        """Trace pixel column ``i``, row ``j`` into the buffer."""
        if not self.scene_loaded:
            return
        color = self.trace(i / self.buffer_width, j / self.buffer_height)
        offset = (i + j * self.buffer_width) * 3
        self.buffer[offset : offset + 3] = bytes(int(255.0 * c) for c in color)