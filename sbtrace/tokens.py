"""Tokens of the scene description language and the reserved-word table."""

from __future__ import annotations

import enum

from .exceptions import ParserFatalException


class Symbol(enum.Enum):
    """Kinds of token that may appear in a scene file."""

    UNKNOWN = enum.auto()
    EOFSYM = enum.auto()
    SBT_RAYTRACER = enum.auto()

    IDENT = enum.auto()
    SCALAR = enum.auto()
    SYMTRUE = enum.auto()
    SYMFALSE = enum.auto()

    LPAREN = enum.auto()
    RPAREN = enum.auto()
    LBRACE = enum.auto()
    RBRACE = enum.auto()
    COMMA = enum.auto()
    EQUALS = enum.auto()
    SEMICOLON = enum.auto()

    CAMERA = enum.auto()
    POINT_LIGHT = enum.auto()
    DIRECTIONAL_LIGHT = enum.auto()
    AMBIENT_LIGHT = enum.auto()

    CONSTANT_ATTENUATION_COEFF = enum.auto()
    LINEAR_ATTENUATION_COEFF = enum.auto()
    QUADRATIC_ATTENUATION_COEFF = enum.auto()

    SPHERE = enum.auto()
    BOX = enum.auto()
    SQUARE = enum.auto()
    CYLINDER = enum.auto()
    CONE = enum.auto()
    TRIMESH = enum.auto()

    POSITION = enum.auto()
    VIEWDIR = enum.auto()
    UPDIR = enum.auto()
    ASPECTRATIO = enum.auto()
    FOV = enum.auto()
    COLOR = enum.auto()
    DIRECTION = enum.auto()
    CAPPED = enum.auto()
    HEIGHT = enum.auto()
    BOTTOM_RADIUS = enum.auto()
    TOP_RADIUS = enum.auto()
    QUATERNIAN = enum.auto()

    POLYPOINTS = enum.auto()
    NORMALS = enum.auto()
    MATERIALS = enum.auto()
    FACES = enum.auto()
    GENNORMALS = enum.auto()

    TRANSLATE = enum.auto()
    SCALE = enum.auto()
    ROTATE = enum.auto()
    TRANSFORM = enum.auto()

    MATERIAL = enum.auto()
    EMISSIVE = enum.auto()
    AMBIENT = enum.auto()
    SPECULAR = enum.auto()
    REFLECTIVE = enum.auto()
    DIFFUSE = enum.auto()
    TRANSMISSIVE = enum.auto()
    SHININESS = enum.auto()
    INDEX = enum.auto()
    NAME = enum.auto()
    MAP = enum.auto()
    LOOK_AT = enum.auto()


_TOKEN_NAMES = {
    Symbol.EOFSYM: "EOF",
    Symbol.SBT_RAYTRACER: "SBT-raytracer",
    Symbol.IDENT: "Identifier",
    Symbol.SCALAR: "Scalar",
    Symbol.SYMTRUE: "true",
    Symbol.SYMFALSE: "false",
    Symbol.LPAREN: "Left paren",
    Symbol.RPAREN: "Right paren",
    Symbol.LBRACE: "Left brace",
    Symbol.RBRACE: "Right brace",
    Symbol.COMMA: "Comma",
    Symbol.EQUALS: "Equals",
    Symbol.SEMICOLON: "Semicolon",
    Symbol.CAMERA: "camera",
    Symbol.AMBIENT_LIGHT: "ambient_light",
    Symbol.POINT_LIGHT: "point_light",
    Symbol.DIRECTIONAL_LIGHT: "directional_light",
    Symbol.CONSTANT_ATTENUATION_COEFF: "constant_attenuation_coeff",
    Symbol.LINEAR_ATTENUATION_COEFF: "linear_attenuation_coeff",
    Symbol.QUADRATIC_ATTENUATION_COEFF: "quadratic_attenuation_coeff",
    Symbol.SPHERE: "sphere",
    Symbol.BOX: "box",
    Symbol.SQUARE: "square",
    Symbol.CYLINDER: "cylinder",
    Symbol.CONE: "cone",
    Symbol.TRIMESH: "trimesh",
    Symbol.POSITION: "position",
    Symbol.VIEWDIR: "viewdir",
    Symbol.UPDIR: "updir",
    Symbol.ASPECTRATIO: "aspectratio",
    Symbol.COLOR: "color",
    Symbol.DIRECTION: "direction",
    Symbol.CAPPED: "capped",
    Symbol.HEIGHT: "height",
    Symbol.BOTTOM_RADIUS: "bottom_radius",
    Symbol.TOP_RADIUS: "top_radius",
    Symbol.QUATERNIAN: "quaternian",
    Symbol.POLYPOINTS: "points",
    Symbol.NORMALS: "normals",
    Symbol.MATERIALS: "materials",
    Symbol.FACES: "faces",
    Symbol.TRANSLATE: "translate",
    Symbol.SCALE: "scale",
    Symbol.ROTATE: "rotate",
    Symbol.TRANSFORM: "transform",
    Symbol.MATERIAL: "material",
    Symbol.EMISSIVE: "emissive",
    Symbol.AMBIENT: "ambient",
    Symbol.SPECULAR: "specular",
    Symbol.REFLECTIVE: "reflective",
    Symbol.DIFFUSE: "diffuse",
    Symbol.TRANSMISSIVE: "transmissive",
    Symbol.SHININESS: "shininess",
    Symbol.INDEX: "index",
    Symbol.NAME: "name",
    Symbol.MAP: "map",
    Symbol.LOOK_AT: "look_at",
}

_RESERVED_WORDS = {
    "ambient_light": Symbol.AMBIENT_LIGHT,
    "ambient": Symbol.AMBIENT,
    "aspectratio": Symbol.ASPECTRATIO,
    "bottom_radius": Symbol.BOTTOM_RADIUS,
    "box": Symbol.BOX,
    "camera": Symbol.CAMERA,
    "capped": Symbol.CAPPED,
    "color": Symbol.COLOR,
    "colour": Symbol.COLOR,
    "cone": Symbol.CONE,
    "constant_attenuation_coeff": Symbol.CONSTANT_ATTENUATION_COEFF,
    "cylinder": Symbol.CYLINDER,
    "diffuse": Symbol.DIFFUSE,
    "direction": Symbol.DIRECTION,
    "directional_light": Symbol.DIRECTIONAL_LIGHT,
    "emissive": Symbol.EMISSIVE,
    "faces": Symbol.FACES,
    "false": Symbol.SYMFALSE,
    "fov": Symbol.FOV,
    "gennormals": Symbol.GENNORMALS,
    "height": Symbol.HEIGHT,
    "index": Symbol.INDEX,
    "linear_attenuation_coeff": Symbol.LINEAR_ATTENUATION_COEFF,
    "material": Symbol.MATERIAL,
    "materials": Symbol.MATERIALS,
    "map": Symbol.MAP,
    "name": Symbol.NAME,
    "normals": Symbol.NORMALS,
    "point_light": Symbol.POINT_LIGHT,
    "points": Symbol.POLYPOINTS,
    "polymesh": Symbol.TRIMESH,
    "position": Symbol.POSITION,
    "quadratic_attenuation_coeff": Symbol.QUADRATIC_ATTENUATION_COEFF,
    "quaternian": Symbol.QUATERNIAN,
    "reflective": Symbol.REFLECTIVE,
    "rotate": Symbol.ROTATE,
    "SBT-raytracer": Symbol.SBT_RAYTRACER,
    "scale": Symbol.SCALE,
    "shininess": Symbol.SHININESS,
    "specular": Symbol.SPECULAR,
    "sphere": Symbol.SPHERE,
    "square": Symbol.SQUARE,
    "top_radius": Symbol.TOP_RADIUS,
    "transform": Symbol.TRANSFORM,
    "translate": Symbol.TRANSLATE,
    "transmissive": Symbol.TRANSMISSIVE,
    "trimesh": Symbol.TRIMESH,
    "true": Symbol.SYMTRUE,
    "updir": Symbol.UPDIR,
    "viewdir": Symbol.VIEWDIR,
    "look_at": Symbol.LOOK_AT,
}


def name_for_token(kind):
    """Human-readable name of a token kind."""
    return _TOKEN_NAMES.get(kind, "Unknown token type")


def lookup_reserved_word(ident):
    """The symbol of a reserved word, or ``Symbol.UNKNOWN``."""
    return _RESERVED_WORDS.get(ident, Symbol.UNKNOWN)


class Token:
    """A token of some kind, carrying no value."""

    def __init__(self, kind):
        self.kind = kind

    def ident(self):
        raise ParserFatalException("not an IdentToken")

    def value(self):
        raise ParserFatalException("not a ScalarToken")

    def __str__(self):
        return name_for_token(self.kind)

    def __repr__(self):
        return f"{type(self).__name__}({self.kind.name})"


class IdentToken(Token):
    """An identifier or quoted name."""

    def __init__(self, ident):
        super().__init__(Symbol.IDENT)
        self._ident = ident

    def ident(self):
        return self._ident

    def __str__(self):
        return f'{super().__str__()}: "{self._ident}"'


class ScalarToken(Token):
    """A numeric literal."""

    def __init__(self, value):
        super().__init__(Symbol.SCALAR)
        self._value = float(value)

    def value(self):
        return self._value

    def __str__(self):
        return f"{super().__str__()}: {self._value:g}"