"""Reading a whole scene description into a Scene."""

from __future__ import annotations

import numpy as np

from .exceptions import ParserException, ParserFatalException, SyntaxErrorException
from .expressions import ExpressionParser
from .light import DirectionalLight, PointLight
from .material import Material
from .scene import Scene, rotation_matrix, scale_matrix, translation_matrix
from .shapes import Box, Cone, Cylinder, Sphere, Square
from .tokens import Symbol
from .trimesh import Trimesh

_MAX_VERSION = 1.1

_GEOMETRY = frozenset(
    {
        Symbol.SPHERE,
        Symbol.BOX,
        Symbol.SQUARE,
        Symbol.CYLINDER,
        Symbol.CONE,
        Symbol.TRIMESH,
        Symbol.TRANSLATE,
        Symbol.ROTATE,
        Symbol.SCALE,
        Symbol.TRANSFORM,
    }
)
_TRANSFORMABLE = _GEOMETRY | {Symbol.LBRACE}


class Parser(ExpressionParser):
    """Top-down parser with one token of look-ahead that builds a Scene."""

    def parse_scene(self):
        """Parse the whole input and return the resulting scene."""
        tok = self.tokenizer
        tok.read(Symbol.SBT_RAYTRACER)
        version = tok.read(Symbol.SCALAR).value()
        if version > _MAX_VERSION:
            raise ParserException(
                f"SBT-raytracer version number {version:g} too high; "
                "only able to parser v1.1 and below."
            )

        scene = Scene()
        material = Material()
        while True:
            kind = tok.peek().kind
            if kind in _TRANSFORMABLE:
                self._parse_transformable_element(scene, scene.transform_root, material)
            elif kind == Symbol.POINT_LIGHT:
                scene.add_light(self._parse_point_light(scene))
            elif kind == Symbol.DIRECTIONAL_LIGHT:
                scene.add_light(self._parse_directional_light(scene))
            elif kind == Symbol.AMBIENT_LIGHT:
                self._parse_ambient_light(scene)
            elif kind == Symbol.CAMERA:
                self._parse_camera(scene)
            elif kind == Symbol.MATERIAL:
                material = self.parse_material_expression(scene, material)
            elif kind == Symbol.SEMICOLON:
                tok.read(Symbol.SEMICOLON)
            elif kind == Symbol.EOFSYM:
                return scene
            else:
                raise SyntaxErrorException(
                    "Expected: geometry, camera, or light information", tok
                )

    # Camera and lights.

    def _parse_camera(self, scene):
        tok = self.tokenizer
        camera = scene.camera
        view_dir = up_dir = position = None
        has_look_at = False

        tok.read(Symbol.CAMERA)
        tok.read(Symbol.LBRACE)
        while True:
            kind = tok.peek().kind
            if kind == Symbol.POSITION:
                position = self.parse_vec3_expression()
                camera.eye = np.array(position, dtype=float)
            elif kind == Symbol.FOV:
                camera.set_fov(self.parse_scalar_expression())
            elif kind == Symbol.QUATERNIAN:
                camera.set_look_quaternion(*self.parse_vec4_expression())
            elif kind == Symbol.ASPECTRATIO:
                camera.set_aspect_ratio(self.parse_scalar_expression())
            elif kind == Symbol.VIEWDIR:
                view_dir = self.parse_vec3_expression()
                has_look_at = False
            elif kind == Symbol.LOOK_AT:
                view_dir = self.parse_vec3_expression()
                has_look_at = True
            elif kind == Symbol.UPDIR:
                up_dir = self.parse_vec3_expression()
            elif kind == Symbol.RBRACE:
                if has_look_at:
                    if position is None:
                        camera.set_look_simple(view_dir, np.array([1.0, 0.0, 0.0]))
                    else:
                        if not camera.set_look_simple(view_dir, position):
                            raise SyntaxErrorException(
                                "Expected: cannot look at position of the camera", tok
                            )
                        if up_dir is not None:
                            camera.set_look(camera.look, up_dir)
                elif view_dir is not None:
                    if up_dir is None:
                        raise SyntaxErrorException("Expected: 'updir'", tok)
                    camera.set_look(view_dir, up_dir)
                elif up_dir is not None:
                    raise SyntaxErrorException("Expected: 'viewdir'", tok)
                tok.read(Symbol.RBRACE)
                return
            else:
                raise SyntaxErrorException("Expected: camera attribute", tok)

    def _parse_ambient_light(self, scene):
        # Ambient lights are summed into the scene's ambient intensity.
        tok = self.tokenizer
        tok.read(Symbol.AMBIENT_LIGHT)
        tok.read(Symbol.LBRACE)
        if tok.peek().kind != Symbol.COLOR:
            raise SyntaxErrorException("Expected color attribute", tok)
        scene.add_ambient(self.parse_vec3_expression())
        tok.read(Symbol.RBRACE)

    def _parse_point_light(self, scene):
        tok = self.tokenizer
        position = color = None
        constant, linear, quadratic = 0.0, 0.0, 1.0

        tok.read(Symbol.POINT_LIGHT)
        tok.read(Symbol.LBRACE)
        while True:
            kind = tok.peek().kind
            if kind == Symbol.POSITION:
                if position is not None:
                    raise SyntaxErrorException("Repeated 'position' attribute", tok)
                position = self.parse_vec3_expression()
            elif kind == Symbol.COLOR:
                if color is not None:
                    raise SyntaxErrorException("Repeated 'color' attribute", tok)
                color = self.parse_vec3_expression()
            elif kind == Symbol.CONSTANT_ATTENUATION_COEFF:
                constant = self.parse_scalar_expression()
            elif kind == Symbol.LINEAR_ATTENUATION_COEFF:
                linear = self.parse_scalar_expression()
            elif kind == Symbol.QUADRATIC_ATTENUATION_COEFF:
                quadratic = self.parse_scalar_expression()
            elif kind == Symbol.RBRACE:
                if color is None:
                    raise SyntaxErrorException("Expected: 'color'", tok)
                if position is None:
                    raise SyntaxErrorException("Expected: 'position'", tok)
                tok.read(Symbol.RBRACE)
                return PointLight(scene, position, color, constant, linear, quadratic)
            else:
                raise SyntaxErrorException(
                    "expecting 'position' or 'color' attribute, or "
                    "'constant_attenuation_coeff', 'linear_attenuation_coeff', "
                    "or 'quadratic_attenuation_coeff'",
                    tok,
                )

    def _parse_directional_light(self, scene):
        tok = self.tokenizer
        direction = color = None

        tok.read(Symbol.DIRECTIONAL_LIGHT)
        tok.read(Symbol.LBRACE)
        while True:
            kind = tok.peek().kind
            if kind == Symbol.DIRECTION:
                if direction is not None:
                    raise SyntaxErrorException("Repeated 'direction' attribute", tok)
                direction = self.parse_vec3_expression()
            elif kind == Symbol.COLOR:
                if color is not None:
                    raise SyntaxErrorException("Repeated 'color' attribute", tok)
                color = self.parse_vec3_expression()
            elif kind == Symbol.RBRACE:
                if color is None:
                    raise SyntaxErrorException("Expected: 'color'", tok)
                if direction is None:
                    raise SyntaxErrorException("Expected: 'position'", tok)
                tok.read(Symbol.RBRACE)
                return DirectionalLight(scene, direction, color)
            else:
                raise SyntaxErrorException("expecting 'position' or 'color' attribute", tok)

    # Geometry and groups.

    def _parse_transformable_element(self, scene, transform, material):
        kind = self.tokenizer.peek().kind
        if kind in _GEOMETRY:
            self._parse_geometry(scene, transform, material)
        elif kind == Symbol.LBRACE:
            self._parse_group(scene, transform, material)
        else:
            raise SyntaxErrorException("Expected: transformable element", self.tokenizer)

    def _parse_group(self, scene, transform, material):
        tok = self.tokenizer
        tok.read(Symbol.LBRACE)
        while True:
            kind = tok.peek().kind
            if kind in _TRANSFORMABLE:
                self._parse_transformable_element(scene, transform, material)
            elif kind == Symbol.RBRACE:
                tok.read(Symbol.RBRACE)
                return
            else:
                if kind == Symbol.MATERIAL:
                    self.parse_material_expression(scene, material)
                raise SyntaxErrorException("Expected: '}' or geometry", tok)

    def _parse_geometry(self, scene, transform, material):
        handlers = {
            Symbol.SPHERE: self._parse_sphere,
            Symbol.BOX: self._parse_box,
            Symbol.SQUARE: self._parse_square,
            Symbol.CYLINDER: self._parse_cylinder,
            Symbol.CONE: self._parse_cone,
            Symbol.TRIMESH: self._parse_trimesh,
            Symbol.TRANSLATE: self._parse_translate,
            Symbol.ROTATE: self._parse_rotate,
            Symbol.SCALE: self._parse_scale,
            Symbol.TRANSFORM: self._parse_transform,
        }
        handler = handlers.get(self.tokenizer.peek().kind)
        if handler is None:
            raise ParserFatalException("Unrecognized geometry type.")
        handler(scene, transform, material)

    def _finish_transform(self):
        self.tokenizer.read(Symbol.RPAREN)
        self.tokenizer.cond_read(Symbol.SEMICOLON)

    def _scalars_then_commas(self, count):
        values = []
        for _ in range(count):
            values.append(self.parse_scalar())
            self.tokenizer.read(Symbol.COMMA)
        return values

    def _parse_translate(self, scene, transform, material):
        self.tokenizer.read(Symbol.TRANSLATE)
        self.tokenizer.read(Symbol.LPAREN)
        x, y, z = self._scalars_then_commas(3)
        child = transform.create_child(translation_matrix(x, y, z))
        self._parse_transformable_element(scene, child, material)
        self._finish_transform()

    def _parse_rotate(self, scene, transform, material):
        self.tokenizer.read(Symbol.ROTATE)
        self.tokenizer.read(Symbol.LPAREN)
        x, y, z, angle = self._scalars_then_commas(4)
        child = transform.create_child(rotation_matrix(angle, x, y, z))
        self._parse_transformable_element(scene, child, material)
        self._finish_transform()

    def _parse_scale(self, scene, transform, material):
        tok = self.tokenizer
        tok.read(Symbol.SCALE)
        tok.read(Symbol.LPAREN)
        (x,) = self._scalars_then_commas(1)
        if tok.peek().kind == Symbol.SCALAR:
            y, z = self._scalars_then_commas(2)
        else:
            y = z = x
        child = transform.create_child(scale_matrix(x, y, z))
        self._parse_transformable_element(scene, child, material)
        self._finish_transform()

    def _parse_transform(self, scene, transform, material):
        tok = self.tokenizer
        tok.read(Symbol.TRANSFORM)
        tok.read(Symbol.LPAREN)
        rows = []
        for _ in range(4):
            rows.append(self.parse_vec4())
            tok.read(Symbol.COMMA)
        child = transform.create_child(np.array(rows, dtype=float))
        self._parse_transformable_element(scene, child, material)
        self._finish_transform()

    def _parse_simple_shape(self, scene, transform, material, keyword, factory, what):
        tok = self.tokenizer
        tok.read(keyword)
        tok.read(Symbol.LBRACE)
        own_material = None
        while True:
            kind = tok.peek().kind
            if kind == Symbol.MATERIAL:
                own_material = self.parse_material_expression(scene, material)
            elif kind == Symbol.NAME:
                self.parse_ident_expression()
            elif kind == Symbol.RBRACE:
                tok.read(Symbol.RBRACE)
                shape = factory(scene, own_material if own_material is not None else material.copy())
                shape.transform = transform
                scene.add_object(shape)
                return shape
            else:
                raise SyntaxErrorException(f"Expected: {what} attributes", tok)

    def _parse_sphere(self, scene, transform, material):
        self._parse_simple_shape(scene, transform, material, Symbol.SPHERE, Sphere, "sphere")

    def _parse_box(self, scene, transform, material):
        self._parse_simple_shape(scene, transform, material, Symbol.BOX, Box, "box")

    def _parse_square(self, scene, transform, material):
        self._parse_simple_shape(scene, transform, material, Symbol.SQUARE, Square, "square")

    def _parse_cylinder(self, scene, transform, material):
        self._parse_simple_shape(
            scene, transform, material, Symbol.CYLINDER, Cylinder, "cylinder"
        )

    def _parse_cone(self, scene, transform, material):
        tok = self.tokenizer
        tok.read(Symbol.CONE)
        tok.read(Symbol.LBRACE)
        own_material = None
        bottom_radius, top_radius, height = 1.0, 0.0, 1.0
        capped = True
        while True:
            kind = tok.peek().kind
            if kind == Symbol.MATERIAL:
                own_material = self.parse_material_expression(scene, material)
            elif kind == Symbol.NAME:
                self.parse_ident_expression()
            elif kind == Symbol.CAPPED:
                capped = self.parse_boolean_expression()
            elif kind == Symbol.BOTTOM_RADIUS:
                bottom_radius = self.parse_scalar_expression()
            elif kind == Symbol.TOP_RADIUS:
                top_radius = self.parse_scalar_expression()
            elif kind == Symbol.HEIGHT:
                height = self.parse_scalar_expression()
            elif kind == Symbol.RBRACE:
                tok.read(Symbol.RBRACE)
                cone = Cone(
                    scene,
                    own_material if own_material is not None else material.copy(),
                    height,
                    bottom_radius,
                    top_radius,
                    capped,
                )
                cone.transform = transform
                scene.add_object(cone)
                return
            else:
                raise SyntaxErrorException("Expected: cone attributes", tok)

    def _parse_list(self, parse_item):
        tok = self.tokenizer
        tok.get()
        tok.read(Symbol.EQUALS)
        tok.read(Symbol.LPAREN)
        if tok.peek().kind != Symbol.RPAREN:
            parse_item()
            while tok.peek().kind != Symbol.RPAREN:
                tok.read(Symbol.COMMA)
                parse_item()
        tok.read(Symbol.RPAREN)
        tok.read(Symbol.SEMICOLON)

    def _parse_trimesh(self, scene, transform, material):
        tok = self.tokenizer
        mesh = Trimesh(scene, material.copy(), transform)
        tok.read(Symbol.TRIMESH)
        tok.read(Symbol.LBRACE)
        generate_normals = False
        faces = []

        while True:
            kind = tok.peek().kind
            if kind == Symbol.GENNORMALS:
                tok.read(Symbol.GENNORMALS)
                tok.read(Symbol.SEMICOLON)
                generate_normals = True
            elif kind == Symbol.MATERIAL:
                mesh.material = self.parse_material_expression(scene, material)
            elif kind == Symbol.NAME:
                self.parse_ident_expression()
            elif kind == Symbol.MATERIALS:
                self._parse_list(
                    lambda: mesh.add_material(self.parse_material(scene, mesh.material))
                )
            elif kind == Symbol.NORMALS:
                self._parse_list(lambda: mesh.add_normal(self.parse_vec3()))
            elif kind == Symbol.FACES:
                self._parse_list(lambda: faces.extend(self._parse_faces()))
            elif kind == Symbol.POLYPOINTS:
                self._parse_list(lambda: mesh.add_vertex(self.parse_vec3()))
            elif kind == Symbol.RBRACE:
                tok.read(Symbol.RBRACE)
                for a, b, c in faces:
                    if not mesh.add_face(int(a), int(b), int(c)):
                        raise ParserException(f"Bad face in trimesh: ({a:g}, {b:g}, {c:g})")
                if generate_normals:
                    mesh.generate_normals()
                error = mesh.double_check()
                if error:
                    raise ParserException(error)
                scene.add_object(mesh)
                return
            else:
                raise SyntaxErrorException("Expected: trimesh attributes", tok)

    def _parse_faces(self):
        """One polygon, split into a fan of triangles."""
        points = self.parse_scalar_list()
        if len(points) < 3:
            raise SyntaxErrorException("Faces must have at least 3 vertices.", self.tokenizer)
        first = points[0]
        return [(first, b, c) for b, c in zip(points[1:], points[2:])]