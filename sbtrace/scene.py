"""The scene graph: transforms, geometry, and the scene that holds them."""

from __future__ import annotations

import abc
import itertools
import math

import numpy as np

from .bsp import BoundingBox, BSPTree
from .camera import Camera
from .material import TextureMap
from .ray import Intersection, Ray

_MISS_T = 1000.0


def translation_matrix(x, y, z):
    """4x4 matrix translating by ``(x, y, z)``."""
    m = np.identity(4)
    m[:3, 3] = (x, y, z)
    return m


def rotation_matrix(angle, x, y, z):
    """4x4 matrix rotating by ``angle`` radians about the axis ``(x, y, z)``."""
    axis = np.array([x, y, z], dtype=float)
    length = float(np.linalg.norm(axis))
    if length > 0.0:
        axis = axis / length
    ax, ay, az = axis
    c, s = math.cos(angle), math.sin(angle)
    t = 1.0 - c
    m = np.identity(4)
    m[:3, :3] = [
        [t * ax * ax + c, t * ax * ay - s * az, t * ax * az + s * ay],
        [t * ax * ay + s * az, t * ay * ay + c, t * ay * az - s * ax],
        [t * ax * az - s * ay, t * ay * az + s * ax, t * az * az + c],
    ]
    return m


def scale_matrix(x, y, z):
    """4x4 matrix scaling by ``(x, y, z)``."""
    return np.diag([float(x), float(y), float(z), 1.0])


def _transform_point(matrix, v):
    h = matrix @ np.append(np.asarray(v, dtype=float).reshape(3), 1.0)
    return h[:3] / h[3] if h[3] != 0.0 else h[:3]


class TransformNode:
    """A node in the transform hierarchy; its matrix includes its parents'."""

    def __init__(self, parent, xform):
        xform = np.array(xform, dtype=float).reshape(4, 4)
        self.parent = parent
        self.children = []
        self.xform = xform if parent is None else parent.xform @ xform
        self.inverse = np.linalg.inv(self.xform)
        self.normal_matrix = np.linalg.inv(self.xform[:3, :3]).T

    def create_child(self, xform):
        """Add and return a child node whose local transform is ``xform``."""
        child = TransformNode(self, xform)
        self.children.append(child)
        return child

    def global_to_local(self, v):
        """Map a world-space point into this node's space."""
        return _transform_point(self.inverse, v)

    def local_to_global(self, v):
        """Map a local point (3 components) or homogeneous vector (4) to world space."""
        v = np.asarray(v, dtype=float)
        if v.shape == (4,):
            return self.xform @ v
        return _transform_point(self.xform, v)

    def local_to_global_normal(self, v):
        """Map a local normal into world space and normalise it."""
        n = self.normal_matrix @ np.asarray(v, dtype=float)
        length = float(np.linalg.norm(n))
        return n / length if length > 0.0 else n


class TransformRoot(TransformNode):
    """The identity transform at the top of a hierarchy."""

    def __init__(self):
        super().__init__(None, np.identity(4))


class Geometry(abc.ABC):
    """Anything with extent; intersections are computed in local space."""

    def __init__(self, scene):
        self.scene = scene
        self.transform = TransformRoot()
        self.bounding_box = BoundingBox()

    def intersect(self, ray):
        """Hit of a world-space ray with this object, or None."""
        position = self.transform.global_to_local(ray.position)
        direction = self.transform.global_to_local(ray.position + ray.direction) - position
        length = float(np.linalg.norm(direction))
        if length == 0.0:
            return None
        hit = self.intersect_local(Ray(position, direction / length, ray.ray_type))
        if hit is None:
            return None
        hit.normal = self.transform.local_to_global_normal(hit.normal)
        hit.t /= length
        return hit

    @abc.abstractmethod
    def intersect_local(self, ray):
        """Hit of a local-space ray with this object, or None; defined by each shape."""

    def has_bounding_box_capability(self):
        return False

    def compute_bounding_box(self):
        """Set ``bounding_box`` to the world-space box around the local one."""
        local = self.compute_local_bounding_box()
        corners = np.array(list(itertools.product(*zip(local.lower, local.upper))))
        homogeneous = np.hstack([corners, np.ones((len(corners), 1))]) @ self.transform.xform.T
        points = homogeneous[:, :3]
        self.bounding_box = BoundingBox(points.min(axis=0), points.max(axis=0))
        return self.bounding_box

    def compute_local_bounding_box(self):
        return BoundingBox()


class MaterialSceneObject(Geometry):
    """Geometry bound to a single material."""

    def __init__(self, scene, material):
        super().__init__(scene)
        self.material = material


class Scene:
    """Objects, lights, camera and ambient light to render."""

    MAX_TREE_DEPTH = 13
    MAX_CHILDREN_PER_NODE = 5

    def __init__(self, bsp_enabled=True):
        self.bsp_enabled = bsp_enabled
        self.transform_root = TransformRoot()
        self.objects = []
        self.lights = []
        self.camera = Camera()
        self.ambient = np.zeros(3)
        self.bounds = BoundingBox()
        self.bounded_objects = []
        self.nonbounded_objects = []
        self.intersect_cache = []
        self._textures = {}
        self._bsp_tree = None

    def add_object(self, obj):
        obj.compute_bounding_box()
        self.objects.append(obj)
        self._bsp_tree = None

    def add_light(self, light):
        self.lights.append(light)

    def add_ambient(self, ambient):
        """Accumulate ambient light intensity."""
        self.ambient = self.ambient + np.asarray(ambient, dtype=float)

    def intersect(self, ray):
        """Nearest hit of ``ray`` with any object in the scene, or None."""
        if self._bsp_tree is None:
            self.init_bsp_tree()

        candidates = [obj.intersect(ray) for obj in self.nonbounded_objects]
        if self.bsp_enabled:
            candidates.append(self._bsp_tree.intersect(ray))
        else:
            candidates.extend(obj.intersect(ray) for obj in self.bounded_objects)

        best = min((h for h in candidates if h is not None), key=lambda h: h.t, default=None)
        self.intersect_cache.append((ray, best if best is not None else Intersection(t=_MISS_T)))
        return best

    def init_bsp_tree(self):
        """Sort objects into bounded and unbounded, and build the BSP tree."""
        self.bounded_objects = [o for o in self.objects if o.has_bounding_box_capability()]
        self.nonbounded_objects = [o for o in self.objects if not o.has_bounding_box_capability()]
        if self.bounded_objects:
            self.bounds = BoundingBox(
                np.min([o.bounding_box.lower for o in self.bounded_objects], axis=0),
                np.max([o.bounding_box.upper for o in self.bounded_objects], axis=0),
            )
        else:
            self.bounds = BoundingBox()
        tree = BSPTree()
        tree.initialize(self.bounded_objects, self.MAX_TREE_DEPTH, self.MAX_CHILDREN_PER_NODE, self.bounds)
        self._bsp_tree = tree

    def get_texture(self, name):
        """Load a texture map, reusing one already loaded under ``name``."""
        texture = self._textures.get(name)
        if texture is None:
            texture = TextureMap(name)
            self._textures[name] = texture
        return texture