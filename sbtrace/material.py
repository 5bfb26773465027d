"""Surface materials, their parameters, and texture maps."""

from __future__ import annotations

import copy as _copy
import math
import numbers

import numpy as np

from .imageio import load_image

_LUMA = np.array([0.299, 0.587, 0.114])


def _unit(v):
    length = float(np.linalg.norm(v))
    return v / length if length > 0.0 else v


class TextureMapException(Exception):
    """Raised when a texture map cannot be loaded."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class TextureMap:
    """An image sampled over the unit square [0, 1] x [0, 1]."""

    def __init__(self, filename):
        self.filename = filename
        try:
            self.data, self.width, self.height = load_image(filename)
        except (OSError, ValueError) as exc:
            self.data, self.width, self.height = None, 0, 0
            raise TextureMapException(f"Unable to load texture map '{filename}'.") from exc

    def get_mapped_value(self, coord):
        """Bilinearly interpolated colour at parametric coordinate ``coord``."""
        if self.data is None:
            return np.ones(3)
        u = min(max(float(coord[0]), 0.0), 1.0)
        v = min(max(float(coord[1]), 0.0), 1.0)
        fx = u * (self.width - 1)
        fy = v * (self.height - 1)
        x0, y0 = int(math.floor(fx)), int(math.floor(fy))
        ax, ay = fx - x0, fy - y0
        x1, y1 = min(x0 + 1, self.width - 1), min(y0 + 1, self.height - 1)
        return (
            (1 - ax) * (1 - ay) * self.get_pixel_at(x0, y0)
            + ax * (1 - ay) * self.get_pixel_at(x1, y0)
            + (1 - ax) * ay * self.get_pixel_at(x0, y1)
            + ax * ay * self.get_pixel_at(x1, y1)
        )

    def get_pixel_at(self, x, y):
        """Colour of the pixel at integer position ``(x, y)``, in [0, 1]."""
        if self.data is None:
            return np.ones(3)
        x = min(x, self.width - 1)
        y = min(y, self.height - 1)
        pos = (y * self.width + x) * 3
        return np.array(self.data[pos:pos + 3], dtype=float) / 255.0


class MaterialParameter:
    """A constant colour/scalar, or a texture map to look one up in."""

    def __init__(self, value=None):
        self._texture_map = None
        if isinstance(value, TextureMap):
            self._texture_map = value
            self._value = np.zeros(3)
        elif value is None:
            self._value = np.zeros(3)
        elif isinstance(value, numbers.Real):
            self._value = np.full(3, float(value))
        else:
            self._value = np.array(value, dtype=float).reshape(3)

    @property
    def mapped(self):
        """Whether the parameter comes from a texture map."""
        return self._texture_map is not None

    def value(self, isect):
        """The parameter's colour at an intersection."""
        if self._texture_map is not None:
            return self._texture_map.get_mapped_value(isect.uv_coordinates)
        return self._value.copy()

    def intensity_value(self, isect):
        """The parameter's luminance at an intersection."""
        return float(_LUMA @ self.value(isect))

    def set_value(self, value):
        """Replace with a constant vector or scalar, dropping any texture."""
        if isinstance(value, numbers.Real):
            self._value = np.full(3, float(value))
        else:
            self._value = np.array(value, dtype=float).reshape(3)
        self._texture_map = None

    def __imul__(self, other):
        factor = other._value if isinstance(other, MaterialParameter) else other
        self._value = self._value * np.asarray(factor, dtype=float)
        return self

    def __iadd__(self, other):
        term = other._value if isinstance(other, MaterialParameter) else other
        self._value = self._value + np.asarray(term, dtype=float)
        return self

    def __copy__(self):
        clone = MaterialParameter(self._value)
        clone._texture_map = self._texture_map
        return clone

    def __repr__(self):
        if self._texture_map is not None:
            return f"MaterialParameter(texture={self._texture_map.filename!r})"
        return f"MaterialParameter({self._value.tolist()})"


class _Parameter:
    """Attribute that always holds a MaterialParameter."""

    def __set_name__(self, owner, name):
        self._attr = "_" + name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return getattr(obj, self._attr)

    def __set__(self, obj, value):
        if not isinstance(value, MaterialParameter):
            value = MaterialParameter(value)
        setattr(obj, self._attr, value)


_PARAMETERS = (
    "emissive",
    "ambient",
    "specular",
    "diffuse",
    "reflective",
    "transmissive",
    "specular_exponent",
    "refraction_index",
)


class Material:
    """Physical surface properties used by the Phong model and recursion."""

    emissive = _Parameter()
    ambient = _Parameter()
    specular = _Parameter()
    diffuse = _Parameter()
    reflective = _Parameter()
    transmissive = _Parameter()
    specular_exponent = _Parameter()
    refraction_index = _Parameter()

    def __init__(
        self,
        emissive=(0.0, 0.0, 0.0),
        ambient=(0.0, 0.0, 0.0),
        specular=(0.0, 0.0, 0.0),
        diffuse=(0.0, 0.0, 0.0),
        reflective=(0.0, 0.0, 0.0),
        transmissive=(0.0, 0.0, 0.0),
        specular_exponent=0.0,
        refraction_index=1.0,
    ):
        self.emissive = emissive
        self.ambient = ambient
        self.specular = specular
        self.diffuse = diffuse
        self.reflective = reflective
        self.transmissive = transmissive
        self.specular_exponent = specular_exponent
        self.refraction_index = refraction_index

    def shade(self, scene, ray, isect):
        """Phong-shaded colour of the surface at ``isect`` seen along ``ray``."""
        lum = self.ke(isect) + self.ka(isect) * np.asarray(scene.ambient, dtype=float)
        view = -ray.direction
        n = _unit(np.asarray(isect.normal, dtype=float))
        point = ray.at(isect.t)
        kd, ks, exponent = self.kd(isect), self.ks(isect), self.shininess(isect)

        for light in scene.lights:
            ld = _unit(np.asarray(light.get_direction(point), dtype=float))
            color = np.asarray(light.get_color(point), dtype=float)
            atten = light.distance_attenuation(point) * np.asarray(
                light.shadow_attenuation(point), dtype=float
            )
            cos_l = float(ld @ n)
            diffuse = kd * max(cos_l, 0.0)
            reflected = 2.0 * cos_l * n - ld
            specular = ks * max(float(view @ reflected), 0.0) ** exponent
            lum = lum + atten * color * (diffuse + specular)
        return lum

    def ke(self, isect):
        return self.emissive.value(isect)

    def ka(self, isect):
        return self.ambient.value(isect)

    def ks(self, isect):
        return self.specular.value(isect)

    def kd(self, isect):
        return self.diffuse.value(isect)

    def kr(self, isect):
        return self.reflective.value(isect)

    def kt(self, isect):
        return self.transmissive.value(isect)

    def shininess(self, isect):
        """Specular exponent; a mapped one is rescaled to the range 0-128."""
        value = self.specular_exponent.intensity_value(isect)
        return 128.0 * value if self.specular_exponent.mapped else value

    def index(self, isect):
        """Index of refraction."""
        return self.refraction_index.intensity_value(isect)

    def copy(self):
        """Independent copy; texture maps are shared."""
        return Material(*(_copy.copy(getattr(self, name)) for name in _PARAMETERS))

    def __iadd__(self, other):
        for name in _PARAMETERS:
            param = getattr(self, name)
            param += getattr(other, name)
        return self

    def __rmul__(self, factor):
        scaled = self.copy()
        for name in _PARAMETERS:
            param = getattr(scaled, name)
            param *= factor
        return scaled