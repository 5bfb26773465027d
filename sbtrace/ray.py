"""Rays and ray/surface intersection records."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

import numpy as np

RAY_EPSILON = 0.00001
NORMAL_EPSILON = 0.00001


class RayType(enum.Enum):
    """What a ray is being traced for."""

    VISIBILITY = enum.auto()
    REFLECTION = enum.auto()
    REFRACTION = enum.auto()
    SHADOW = enum.auto()


class Ray:
    """A half-line with a start position and a (normally unit) direction."""

    __slots__ = ("position", "direction", "ray_type")

    def __init__(self, position, direction, ray_type=RayType.VISIBILITY):
        self.position = np.array(position, dtype=float).reshape(3)
        self.direction = np.array(direction, dtype=float).reshape(3)
        self.ray_type = ray_type

    def at(self, t):
        """Return the point reached after travelling ``t`` along the ray."""
        return self.position + t * self.direction

    def __repr__(self):
        return (
            f"Ray(position={self.position.tolist()}, "
            f"direction={self.direction.tolist()}, ray_type={self.ray_type.name})"
        )


@dataclass
class Intersection:
    """Where a ray hit something, and what it hit."""

    obj: Any = None
    t: float = 0.0
    normal: np.ndarray = field(default_factory=lambda: np.zeros(3))
    uv_coordinates: np.ndarray = field(default_factory=lambda: np.zeros(2))
    material: Any = None

    def get_material(self):
        """The intersection's own material if it has one, else the object's."""
        if self.material is not None:
            return self.material
        return self.obj.material

    def copy(self):
        """Return an independent copy; an own material is copied as well."""
        return Intersection(
            obj=self.obj,
            t=self.t,
            normal=np.array(self.normal, dtype=float),
            uv_coordinates=np.array(self.uv_coordinates, dtype=float),
            material=None if self.material is None else self.material.copy(),
        )