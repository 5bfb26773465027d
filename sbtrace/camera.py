"""A pinhole camera that generates primary rays."""

from __future__ import annotations

import math

import numpy as np

from .ray import Ray, RayType

_PI = 3.14159265359


def _unit(v):
    length = float(np.linalg.norm(v))
    return v / length if length > 0.0 else v


class Camera:
    """Camera looking down -z with +y up until told otherwise."""

    def __init__(self):
        self._aspect_ratio = 1.0
        self._normalized_height = 1.0
        self._m = np.identity(3)
        self.eye = np.zeros(3)
        self.u = np.array([1.0, 0.0, 0.0])
        self.v = np.array([0.0, 1.0, 0.0])
        self.look = np.array([0.0, 0.0, -1.0])

    @property
    def aspect_ratio(self):
        """Ratio of image width to height."""
        return self._aspect_ratio

    @property
    def normalized_height(self):
        """Image-plane height at unit distance from the eye."""
        return self._normalized_height

    def ray_through(self, x, y):
        """Ray through normalised window point ``(x, y)``, each in [0, 1]."""
        direction = _unit(self.look + (x - 0.5) * self.u + (y - 0.5) * self.v)
        return Ray(self.eye, direction, RayType.VISIBILITY)

    def set_look_quaternion(self, r, i, j, k):
        """Orient the camera by rotating the default view by quaternion rijk."""
        self._m = np.array(
            [
                [1.0 - 2.0 * (i * i + j * j), 2.0 * (r * i - j * k), 2.0 * (j * r + i * k)],
                [2.0 * (r * i + j * k), 1.0 - 2.0 * (j * j + r * r), 2.0 * (i * j - r * k)],
                [2.0 * (j * r - i * k), 2.0 * (i * j + r * k), 1.0 - 2.0 * (i * i + r * r)],
            ]
        )
        self._update()

    def set_look(self, view_dir, up_dir):
        """Orient the camera from a view direction and an up direction."""
        z = -np.asarray(view_dir, dtype=float)
        y = np.asarray(up_dir, dtype=float)
        x = np.cross(y, z)
        self._m = np.column_stack((x, y, z))
        self._update()

    def set_fov(self, fov):
        """Set the vertical field of view, in degrees."""
        radians = fov / (180.0 / _PI)
        self._normalized_height = 2.0 * math.tan(radians / 2.0)
        self._update()

    def set_aspect_ratio(self, ratio):
        self._aspect_ratio = ratio
        self._update()

    def set_look_simple(self, target, position):
        """Look from ``position`` towards ``target``; False if they coincide."""
        view_dir = np.asarray(target, dtype=float) - np.asarray(position, dtype=float)
        if float(view_dir @ view_dir) == 0.0:
            return False
        view_dir = _unit(view_dir)
        if view_dir[0] == 0.0 and view_dir[2] == 0.0:
            self.set_look(view_dir, np.array([1.0, 0.0, 0.0]))
            return True
        out = _unit(np.cross(view_dir, np.array([0.0, 1.0, 0.0])))
        up_dir = _unit(np.cross(out, view_dir))
        self.set_look(view_dir, up_dir)
        return True

    def _update(self):
        self.u = self._m @ np.array([1.0, 0.0, 0.0]) * self._normalized_height * self._aspect_ratio
        self.v = self._m @ np.array([0.0, 1.0, 0.0]) * self._normalized_height
        self.look = self._m @ np.array([0.0, 0.0, -1.0])