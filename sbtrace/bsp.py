"""Axis-aligned bounding boxes and a BSP tree over bounded geometry."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .ray import RAY_EPSILON

_FAR = 1.0e308


def _zeros():
    return np.zeros(3)


@dataclass
class BoundingBox:
    """An axis-aligned box spanning ``lower`` to ``upper``."""

    lower: np.ndarray = field(default_factory=_zeros)
    upper: np.ndarray = field(default_factory=_zeros)

    def __post_init__(self):
        self.lower = np.array(self.lower, dtype=float).reshape(3)
        self.upper = np.array(self.upper, dtype=float).reshape(3)

    def copy(self):
        return BoundingBox(self.lower, self.upper)

    def intersects_box(self, other):
        """Whether this box overlaps ``other``, allowing a small tolerance."""
        return bool(
            np.all(other.lower - RAY_EPSILON <= self.upper)
            and np.all(other.upper + RAY_EPSILON >= self.lower)
        )

    def contains(self, point):
        """Whether ``point`` lies inside the box, allowing a small tolerance."""
        p = np.asarray(point, dtype=float)
        return bool(np.all(p + RAY_EPSILON >= self.lower) and np.all(p - RAY_EPSILON <= self.upper))

    def intersect(self, ray):
        """Entry and exit ``t`` of ``ray`` through the box, or None on a miss."""
        t_min, t_max = -_FAR, _FAR
        for origin, direction, low, high in zip(ray.position, ray.direction, self.lower, self.upper):
            if direction == 0.0:
                if origin < low or origin > high:
                    return None
                continue
            t1 = (low - origin) / direction
            t2 = (high - origin) / direction
            if t1 > t2:
                t1, t2 = t2, t1
            t_min = max(t_min, t1)
            t_max = min(t_max, t2)
            if t_min > t_max or t_max < RAY_EPSILON:
                return None
        return float(t_min), float(t_max)


class BSPNode:
    """A node of the tree: a box, the objects touching it, and two halves."""

    def __init__(self, bounds, parent_members, subdiv_axis):
        self.bounds = bounds
        self.members = [
            member
            for member in parent_members
            if member.has_bounding_box_capability() and member.bounding_box.intersects_box(bounds)
        ]
        self.subdiv_axis = subdiv_axis
        self.children = None

    def subdivide(self, depth, max_depth, max_list_length):
        """Split recursively while the node is shallow enough and too full."""
        if depth >= max_depth or len(self.members) <= max_list_length:
            return
        axis = self.subdiv_axis
        new_axis = (axis + 1) % 3
        width = self.bounds.upper[axis] - self.bounds.lower[axis]
        middle = self.bounds.lower[axis] + 0.5 * width

        near_bounds = self.bounds.copy()
        near_bounds.upper[axis] = middle
        far_bounds = self.bounds.copy()
        far_bounds.lower[axis] = middle

        children = (
            BSPNode(near_bounds, self.members, new_axis),
            BSPNode(far_bounds, self.members, new_axis),
        )
        for child in children:
            child.subdivide(depth + 1, max_depth, max_list_length)
        self.children = children

    def intersect(self, ray, t_min, t_max):
        """Nearest hit of ``ray`` in this node within ``[t_min, t_max]``, or None."""
        if self.children is None:
            best = None
            for member in self.members:
                hit = member.intersect(ray)
                if hit is not None and (best is None or hit.t < best.t):
                    best = hit
            if best is not None and best.t <= t_max + RAY_EPSILON:
                return best
            return None

        first, second = self.children
        axis = self.subdiv_axis
        plane = first.bounds.upper[axis]
        origin = ray.position[axis]
        direction = ray.direction[axis]

        if origin == plane:
            side = second if direction > 0 else first
            return side.intersect(ray, t_min, t_max)

        near, far = (first, second) if origin < plane else (second, first)
        # A ray parallel to the plane only ever reaches the near side.
        t_plane = -1.0 if direction == 0.0 else (plane - origin) / direction

        if t_plane > t_max or t_plane < 0.0:
            return near.intersect(ray, t_min, t_max)
        if t_plane < t_min:
            return far.intersect(ray, t_min, t_max)
        hit = near.intersect(ray, t_min, t_plane)
        if hit is not None:
            return hit
        return far.intersect(ray, t_plane, t_max)


class BSPTree:
    """Binary space partition over objects that have bounding boxes."""

    def __init__(self):
        self.bounds = BoundingBox()
        self.objects = []
        self.max_depth = 0
        self.max_list_length = 0
        self.root = None

    def initialize(self, objects, max_depth, max_children, scene_bounds):
        """Build the tree, starting with a split along the x axis."""
        self.objects = list(objects)
        self.max_depth = max_depth
        self.max_list_length = max_children
        self.bounds = scene_bounds
        self.root = BSPNode(self.bounds, self.objects, 0)
        self.root.subdivide(0, max_depth, max_children)

    def intersect(self, ray):
        """Nearest hit of ``ray`` among the tree's objects, or None."""
        if self.root is None:
            return None
        span = self.bounds.intersect(ray)
        if span is None:
            return None
        return self.root.intersect(ray, *span)