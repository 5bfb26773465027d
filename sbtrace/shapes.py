"""Primitive shapes defined in their own local coordinate space."""

from __future__ import annotations

import math

import numpy as np

from .bsp import BoundingBox
from .ray import RAY_EPSILON, Intersection
from .scene import MaterialSceneObject

_HUGE = 1e100


def _unit(v):
    length = float(np.linalg.norm(v))
    return v / length if length > 0.0 else v


class Box(MaterialSceneObject):
    """Axis-aligned unit cube centred on the origin."""

    def has_bounding_box_capability(self):
        return True

    def compute_local_bounding_box(self):
        return BoundingBox((-0.5, -0.5, -0.5), (0.5, 0.5, 0.5))

    def intersect_local(self, ray):
        p, d = ray.position, ray.direction
        best_t, best_index = _HUGE, -1

        for face in range(6):
            axis = face % 3
            if d[axis] == 0:
                continue
            t = ((face // 3) - 0.5 - p[axis]) / d[axis]
            if t < RAY_EPSILON or t > best_t:
                continue
            x = p[(face + 1) % 3] + t * d[(face + 1) % 3]
            y = p[(face + 2) % 3] + t * d[(face + 2) % 3]
            if -0.5 <= x <= 0.5 and -0.5 <= y <= 0.5 and best_t > t:
                best_t, best_index = t, face

        if best_index < 0:
            return None

        point = ray.at(best_t)
        i1, i2 = (best_index + 1) % 3, (best_index + 2) % 3
        lo, hi = min(i1, i2), max(i1, i2)
        if best_index < 3:
            normal = -np.eye(3)[best_index]
            uv = (0.5 - point[lo], 0.5 + point[hi])
        else:
            normal = np.eye(3)[best_index - 3]
            uv = (0.5 + point[lo], 0.5 + point[hi])
        return Intersection(
            obj=self,
            t=float(best_t),
            normal=np.array(normal, dtype=float),
            uv_coordinates=np.array(uv, dtype=float),
        )


class Cone(MaterialSceneObject):
    """A (possibly truncated) cone along +z from z = 0 to z = height."""

    def __init__(self, scene, material, height=1.0, bottom_radius=1.0, top_radius=0.0, capped=False):
        super().__init__(scene, material)
        if height == 0.0:
            raise ValueError("cone height must be non-zero")
        self.height = float(height)
        self.bottom_radius = max(abs(float(bottom_radius)), 0.0001)
        self.top_radius = max(abs(float(top_radius)), 0.0001)
        self.capped = bool(capped)

        beta = (self.top_radius - self.bottom_radius) / self.height
        if abs(beta) < 0.001:
            beta = 0.001
        gamma = self.top_radius / beta if beta < 0.0 else self.bottom_radius / beta
        if gamma < 0.0:
            gamma -= self.height
        self.beta = beta
        self.beta_squared = beta * beta
        self.gamma = gamma
        self.gamma_squared = gamma * gamma

    def has_bounding_box_capability(self):
        return True

    def compute_local_bounding_box(self):
        r = max(self.bottom_radius, self.top_radius)
        return BoundingBox(
            (-r, -r, min(self.height, 0.0)),
            (r, r, max(self.height, 0.0)),
        )

    def _is_good_root(self, point):
        return 0.0 <= point[2] <= self.height

    def _body_normal(self, point):
        return np.array(
            [point[0], point[1], -2.0 * self.beta_squared * (point[2] + self.gamma)]
        )

    def intersect_local(self, ray):
        p, d = ray.position, ray.direction
        b2, gamma = self.beta_squared, self.gamma

        a = d[0] * d[0] + d[1] * d[1] - b2 * d[2] * d[2]
        if a == 0.0:
            return None
        b = 2.0 * (p[0] * d[0] + p[1] * d[1] - b2 * ((p[2] + gamma) * d[2]))
        c = -b2 * (gamma + p[2]) ** 2 + p[0] * p[0] + p[1] * p[1]

        discriminant = b * b - 4.0 * a * c
        if discriminant <= 0.0:
            return None
        discriminant = math.sqrt(discriminant)

        near_root = (-b + discriminant) / (2.0 * a)
        far_root = (-b - discriminant) / (2.0 * a)
        the_root = RAY_EPSILON
        normal = np.zeros(3)

        near_good = self._is_good_root(ray.at(near_root))
        if near_good and near_root > the_root:
            the_root = near_root
            normal = self._body_normal(ray.at(the_root))
        far_good = self._is_good_root(ray.at(far_root))
        if far_good and ((near_good and far_root < the_root) or far_root > RAY_EPSILON):
            the_root = far_root
            normal = self._body_normal(ray.at(the_root))

        # An uncapped cone is double sided: seen from inside, the normal flips.
        if not self.capped and float(normal @ d) > 0.0:
            normal = -normal

        dz = d[2]
        if self.capped and dz != 0.0:
            t1 = -p[2] / dz
            t2 = (self.height - p[2]) / dz
            bottom = ray.at(t1)
            if bottom[0] ** 2 + bottom[1] ** 2 <= self.bottom_radius ** 2:
                if RAY_EPSILON < t1 < the_root:
                    the_root = t1
                    normal = np.array([0.0, 0.0, -1.0 if dz > 0.0 else 1.0])
            top = ray.at(t2)
            if top[0] ** 2 + top[1] ** 2 <= self.top_radius ** 2:
                if RAY_EPSILON < t2 < the_root:
                    the_root = t2
                    normal = np.array([0.0, 0.0, 1.0 if dz > 0.0 else -1.0])

        if the_root <= RAY_EPSILON:
            return None
        return Intersection(obj=self, t=float(the_root), normal=_unit(normal))


class Cylinder(MaterialSceneObject):
    """Unit-radius cylinder along +z from z = 0 to z = 1."""

    def __init__(self, scene, material):
        super().__init__(scene, material)
        self.capped = True

    def has_bounding_box_capability(self):
        return True

    def compute_local_bounding_box(self):
        return BoundingBox((-1.0, -1.0, 0.0), (1.0, 1.0, 1.0))

    def intersect_local(self, ray):
        cap_hit = self.intersect_caps(ray)
        if cap_hit is None:
            return self.intersect_body(ray)
        body_hit = self.intersect_body(ray)
        if body_hit is not None and body_hit.t < cap_hit.t:
            return body_hit
        return cap_hit

    def intersect_body(self, ray):
        """Hit with the curved side, or None."""
        x0, y0 = ray.position[0], ray.position[1]
        x1, y1 = ray.direction[0], ray.direction[1]

        a = x1 * x1 + y1 * y1
        b = 2.0 * (x0 * x1 + y0 * y1)
        c = x0 * x0 + y0 * y0 - 1.0
        if a == 0.0:
            # The ray runs parallel to the axis.
            return None

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return None
        discriminant = math.sqrt(discriminant)

        t2 = (-b + discriminant) / (2.0 * a)
        if t2 <= RAY_EPSILON:
            return None

        t1 = (-b - discriminant) / (2.0 * a)
        if t1 > RAY_EPSILON:
            point = ray.at(t1)
            if 0.0 <= point[2] <= 1.0:
                normal = _unit(np.array([point[0], point[1], 0.0]))
                return Intersection(obj=self, t=float(t1), normal=normal)

        point = ray.at(t2)
        if 0.0 <= point[2] <= 1.0:
            normal = np.array([point[0], point[1], 0.0])
            if not self.capped and float(normal @ ray.direction) > 0.0:
                normal = -normal
            return Intersection(obj=self, t=float(t2), normal=_unit(normal))
        return None

    def intersect_caps(self, ray):
        """Hit with the end discs at z = 0 and z = 1, or None."""
        if not self.capped:
            return None
        pz, dz = ray.position[2], ray.direction[2]
        if dz == 0.0:
            return None

        if dz > 0.0:
            t1, t2 = -pz / dz, (1.0 - pz) / dz
        else:
            t1, t2 = (1.0 - pz) / dz, -pz / dz

        if t2 < RAY_EPSILON:
            return None

        if t1 >= RAY_EPSILON:
            point = ray.at(t1)
            if point[0] ** 2 + point[1] ** 2 <= 1.0:
                normal = np.array([0.0, 0.0, -1.0 if dz > 0.0 else 1.0])
                return Intersection(obj=self, t=float(t1), normal=normal)

        point = ray.at(t2)
        if point[0] ** 2 + point[1] ** 2 <= 1.0:
            normal = np.array([0.0, 0.0, 1.0 if dz > 0.0 else -1.0])
            return Intersection(obj=self, t=float(t2), normal=normal)
        return None


class Sphere(MaterialSceneObject):
    """Unit sphere centred on the origin."""

    def has_bounding_box_capability(self):
        return True

    def compute_local_bounding_box(self):
        return BoundingBox((-1.0, -1.0, -1.0), (1.0, 1.0, 1.0))

    def intersect_local(self, ray):
        p, d = ray.position, ray.direction
        pd = float(p @ d)
        det = pd * pd - float(p @ p) + 1.0
        if det < 0.0:
            return None
        root = math.sqrt(det)
        t1, t2 = -pd - root, -pd + root
        if t1 > RAY_EPSILON:
            t = t1
        elif t2 > RAY_EPSILON:
            t = t2
        else:
            return None

        point = ray.at(t)
        # Reject hits that drifted off the surface.
        if float(point @ point) - 1.0 < RAY_EPSILON:
            return Intersection(obj=self, t=float(t), normal=_unit(point))
        return None


class Square(MaterialSceneObject):
    """Unit square in the z = 0 plane, centred on the origin."""

    def has_bounding_box_capability(self):
        return True

    def compute_local_bounding_box(self):
        return BoundingBox((-0.5, -0.5, -RAY_EPSILON), (0.5, 0.5, RAY_EPSILON))

    def intersect_local(self, ray):
        p, d = ray.position, ray.direction
        if d[2] == 0.0:
            return None
        t = -p[2] / d[2]
        if t <= RAY_EPSILON:
            return None
        point = ray.at(t)
        if not (-0.5 <= point[0] <= 0.5 and -0.5 <= point[1] <= 0.5):
            return None
        normal = np.array([0.0, 0.0, -1.0 if d[2] > 0.0 else 1.0])
        return Intersection(
            obj=self,
            t=float(t),
            normal=normal,
            uv_coordinates=np.array([point[0] + 0.5, point[1] + 0.5]),
        )