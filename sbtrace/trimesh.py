"""Triangle meshes whose faces are individual scene objects."""

from __future__ import annotations

import numpy as np

from .bsp import BoundingBox
from .ray import RAY_EPSILON, Intersection
from .scene import MaterialSceneObject


def _unit(v):
    length = float(np.linalg.norm(v))
    return v / length if length > 0.0 else v


class Trimesh(MaterialSceneObject):
    """A mesh of vertices, optional per-vertex normals and materials, and faces.

    Vertices, normals and materials must be added in the same order.
    The mesh itself is never hit; its faces are added to the scene instead.
    """

    def __init__(self, scene, material, transform):
        super().__init__(scene, material)
        self.transform = transform
        self.vertices = []
        self.normals = []
        self.materials = []
        self.faces = []

    def add_vertex(self, vertex):
        self.vertices.append(np.array(vertex, dtype=float).reshape(3))

    def add_material(self, material):
        self.materials.append(material)

    def add_normal(self, normal):
        self.normals.append(np.array(normal, dtype=float).reshape(3))

    def add_face(self, a, b, c):
        """Add a triangle over three vertex indices; False if any is missing."""
        count = len(self.vertices)
        if any(index < 0 or index >= count for index in (a, b, c)):
            return False
        face = TrimeshFace(self.scene, self.material.copy(), self, a, b, c)
        face.transform = self.transform
        self.faces.append(face)
        self.scene.add_object(face)
        return True

    def double_check(self):
        """An error message if per-vertex materials or normals miscount, else None."""
        if self.materials and len(self.materials) != len(self.vertices):
            return "Bad Trimesh: Wrong number of materials."
        if self.normals and len(self.normals) != len(self.vertices):
            return "Bad Trimesh: Wrong number of normals."
        return None

    def generate_normals(self):
        """Per-vertex normals averaged from the normals of adjacent faces."""
        count = len(self.vertices)
        sums = [np.array(n, dtype=float) for n in self.normals[:count]]
        sums.extend(np.zeros(3) for _ in range(count - len(sums)))
        face_counts = [0] * count

        for face in self.faces:
            a, b, c = (self.vertices[index] for index in face.ids)
            face_normal = _unit(np.cross(b - a, c - a))
            for index in face.ids:
                sums[index] = sums[index] + face_normal
                face_counts[index] += 1

        self.normals = [
            total / n if n else total for total, n in zip(sums, face_counts)
        ]


class TrimeshFace(MaterialSceneObject):
    """One triangle of a Trimesh, referring to its parent's vertices."""

    def __init__(self, scene, material, parent, a, b, c):
        super().__init__(scene, material)
        self.parent = parent
        self.ids = (a, b, c)

    def __getitem__(self, index):
        return self.ids[index]

    def has_bounding_box_capability(self):
        return True

    def _corners(self):
        return [self.parent.vertices[index] for index in self.ids]

    def compute_local_bounding_box(self):
        corners = np.array(self._corners())
        return BoundingBox(corners.min(axis=0), corners.max(axis=0))

    def intersect_local(self, ray):
        alpha, beta, gamma = self._corners()
        p, d = ray.position, ray.direction
        normal = _unit(np.cross(beta - alpha, gamma - alpha))

        denominator = float(normal @ d)
        if denominator == 0.0:
            return None
        t = (float(normal @ alpha) - float(normal @ p)) / denominator
        if t < RAY_EPSILON:
            return None

        q = ray.at(t)
        for start, end in ((alpha, beta), (beta, gamma), (gamma, alpha)):
            if float(np.cross(end - start, q - start) @ normal) < 0.0:
                return None
        return Intersection(obj=self, t=float(t), normal=normal)