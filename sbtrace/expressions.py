"""Parsing of values, expressions and materials in scene files."""

from __future__ import annotations

import copy

import numpy as np

from .exceptions import SyntaxErrorException
from .material import Material, MaterialParameter
from .tokens import Symbol


class ExpressionParser:
    """Top-down parsing of the value-level grammar of a scene file."""

    def __init__(self, tokenizer, base_path="."):
        self.tokenizer = tokenizer
        self.base_path = base_path
        self.materials = {}

    # Plain values.

    def parse_scalar(self):
        return self.tokenizer.read(Symbol.SCALAR).value()

    def parse_ident(self):
        return self.tokenizer.read(Symbol.IDENT).ident()

    def parse_scalar_list(self):
        """A parenthesised, comma separated, possibly empty list of numbers."""
        tok = self.tokenizer
        values = []
        tok.read(Symbol.LPAREN)
        if tok.peek().kind != Symbol.RPAREN:
            values.append(self.parse_scalar())
            while tok.peek().kind != Symbol.RPAREN:
                tok.read(Symbol.COMMA)
                values.append(self.parse_scalar())
        tok.read(Symbol.RPAREN)
        return values

    def _parse_vector(self, size):
        tok = self.tokenizer
        tok.read(Symbol.LPAREN)
        values = []
        for position in range(size):
            if position:
                tok.read(Symbol.COMMA)
            values.append(self.parse_scalar())
        tok.read(Symbol.RPAREN)
        return np.array(values, dtype=float)

    def parse_vec3(self):
        return self._parse_vector(3)

    def parse_vec4(self):
        return self._parse_vector(4)

    def parse_boolean(self):
        kind = self.tokenizer.peek().kind
        if kind == Symbol.SYMTRUE:
            self.tokenizer.read(Symbol.SYMTRUE)
            return True
        if kind == Symbol.SYMFALSE:
            self.tokenizer.read(Symbol.SYMFALSE)
            return False
        raise SyntaxErrorException("Expected boolean", self.tokenizer)

    # Expressions of the form ``keyword = value;`` (the semicolon is optional).

    def _expression(self, parse_value):
        self.tokenizer.get()
        self.tokenizer.read(Symbol.EQUALS)
        value = parse_value()
        self.tokenizer.cond_read(Symbol.SEMICOLON)
        return value

    def parse_scalar_expression(self):
        return self._expression(self.parse_scalar)

    def parse_vec3_expression(self):
        return self._expression(self.parse_vec3)

    def parse_vec4_expression(self):
        return self._expression(self.parse_vec4)

    def parse_boolean_expression(self):
        return self._expression(self.parse_boolean)

    def parse_ident_expression(self):
        return self._expression(self.parse_ident)

    # Materials.

    def parse_material_expression(self, scene, parent):
        """``material = <material>;``, inheriting unset values from ``parent``."""
        self.tokenizer.read(Symbol.MATERIAL)
        self.tokenizer.read(Symbol.EQUALS)
        material = self.parse_material(scene, parent)
        self.tokenizer.cond_read(Symbol.SEMICOLON)
        return material

    def parse_material(self, scene, parent):
        """A named material reference or a ``{ ... }`` block of attributes."""
        tok = self.tokenizer
        if tok.peek().kind == Symbol.IDENT:
            name = self.parse_ident()
            return self.materials.get(name, Material()).copy()

        tok.read(Symbol.LBRACE)
        material = parent.copy()
        reflective_set = False
        name = ""

        while True:
            kind = tok.peek().kind
            if kind == Symbol.EMISSIVE:
                material.emissive = self.parse_vec3_material_parameter(scene)
            elif kind == Symbol.AMBIENT:
                material.ambient = self.parse_vec3_material_parameter(scene)
            elif kind == Symbol.SPECULAR:
                specular = self.parse_vec3_material_parameter(scene)
                material.specular = specular
                if not reflective_set:
                    # Reflectivity defaults to the specular colour.
                    material.reflective = copy.copy(specular)
            elif kind == Symbol.DIFFUSE:
                material.diffuse = self.parse_vec3_material_parameter(scene)
            elif kind == Symbol.REFLECTIVE:
                material.reflective = self.parse_vec3_material_parameter(scene)
                reflective_set = True
            elif kind == Symbol.TRANSMISSIVE:
                material.transmissive = self.parse_vec3_material_parameter(scene)
            elif kind == Symbol.INDEX:
                material.refraction_index = self.parse_scalar_material_parameter(scene)
            elif kind == Symbol.SHININESS:
                material.specular_exponent = self.parse_scalar_material_parameter(scene)
            elif kind == Symbol.NAME:
                tok.read(Symbol.NAME)
                name = self.parse_ident()
                tok.read(Symbol.SEMICOLON)
            elif kind == Symbol.RBRACE:
                tok.read(Symbol.RBRACE)
                if name:
                    if name in self.materials:
                        raise SyntaxErrorException(
                            f"Redefinition of material '{name}'.", tok
                        )
                    self.materials[name] = material.copy()
                return material
            else:
                raise SyntaxErrorException("Expected: material attribute", tok)

    def parse_vec3_material_parameter(self, scene):
        """A colour, or ``map("file")`` relative to the scene's directory."""
        tok = self.tokenizer
        tok.get()
        tok.read(Symbol.EQUALS)
        if tok.cond_read(Symbol.MAP):
            tok.read(Symbol.LPAREN)
            filename = f"{self.base_path}/{self.parse_ident()}"
            tok.read(Symbol.RPAREN)
            tok.cond_read(Symbol.SEMICOLON)
            return MaterialParameter(scene.get_texture(filename))
        value = self.parse_vec3()
        tok.cond_read(Symbol.SEMICOLON)
        return MaterialParameter(value)

    def parse_scalar_material_parameter(self, scene):
        """A number, or ``map("file")`` with the file name taken as given."""
        tok = self.tokenizer
        tok.get()
        tok.read(Symbol.EQUALS)
        if tok.cond_read(Symbol.MAP):
            tok.read(Symbol.LPAREN)
            filename = self.parse_ident()
            tok.read(Symbol.RPAREN)
            tok.cond_read(Symbol.SEMICOLON)
            return MaterialParameter(scene.get_texture(filename))
        value = self.parse_scalar()
        tok.cond_read(Symbol.SEMICOLON)
        return MaterialParameter(value)