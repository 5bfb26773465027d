"""Light sources used by the Phong shading model."""

from __future__ import annotations

import abc
import math

import numpy as np

from .ray import Ray, RayType


def _unit(v):
    length = float(np.linalg.norm(v))
    return v / length if length > 0.0 else v


_LIT = (1.0, 1.0, 1.0)
_BLOCKED = (0.0, 0.0, 0.0)


class Light(abc.ABC):
    """A light belonging to a scene, with a colour."""

    def __init__(self, scene, color):
        self.scene = scene
        self.color = np.array(color, dtype=float).reshape(3)

    @abc.abstractmethod
    def shadow_attenuation(self, point):
        """Per-channel factor in [0, 1] for how much of the light reaches ``point``."""

    @abc.abstractmethod
    def distance_attenuation(self, point):
        """Scalar fall-off of the light's intensity at ``point``."""

    def get_color(self, point):
        """Colour of the light; it does not depend on ``point``."""
        return self.color.copy()

    @abc.abstractmethod
    def get_direction(self, point):
        """Unit direction from ``point`` towards the light."""


class DirectionalLight(Light):
    """A light infinitely far away, shining along ``orientation``."""

    def __init__(self, scene, orientation, color):
        super().__init__(scene, color)
        self.orientation = _unit(np.array(orientation, dtype=float).reshape(3))

    def distance_attenuation(self, point):
        return 1.0

    def get_direction(self, point):
        return -self.orientation

    def shadow_attenuation(self, point):
        direction = _unit(self.get_direction(point))
        shadow_ray = Ray(point, direction, RayType.SHADOW)
        if self.scene.intersect(shadow_ray) is not None:
            return np.array(_BLOCKED)
        return np.array(_LIT)


class PointLight(Light):
    """A light at a position, dimmed by ``1 / (a + b d + c d^2)``, capped at 1."""

    def __init__(self, scene, position, color, constant=0.0, linear=0.0, quadratic=1.0):
        super().__init__(scene, color)
        self.position = np.array(position, dtype=float).reshape(3)
        self.constant = float(constant)
        self.linear = float(linear)
        self.quadratic = float(quadratic)

    def set_attenuation_constants(self, constant, linear, quadratic):
        self.constant = float(constant)
        self.linear = float(linear)
        self.quadratic = float(quadratic)

    def distance_attenuation(self, point):
        d = float(np.linalg.norm(self.position - np.asarray(point, dtype=float)))
        denominator = self.constant + self.linear * d + self.quadratic * d * d
        if denominator == 0.0:
            factor = math.copysign(math.inf, denominator)
        else:
            factor = 1.0 / denominator
        if factor > 1.0:
            return 1.0
        if factor <= 0.0:
            return 0.0
        return factor

    def get_direction(self, point):
        return _unit(self.position - np.asarray(point, dtype=float))

    def shadow_attenuation(self, point):
        point = np.asarray(point, dtype=float)
        direction = _unit(self.get_direction(point))
        shadow_ray = Ray(point, direction, RayType.SHADOW)
        light_distance = float(np.linalg.norm(self.position - point))
        hit = self.scene.intersect(shadow_ray)
        if hit is None:
            return np.array(_LIT)
        # A blocker behind the light does not cast a shadow.
        if float(np.linalg.norm(shadow_ray.at(hit.t) - point)) > light_distance:
            return np.array(_LIT)
        return np.array(_BLOCKED)