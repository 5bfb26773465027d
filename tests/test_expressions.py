import io

import numpy as np
import pytest

from sbtrace.exceptions import SyntaxErrorException
from sbtrace.expressions import ExpressionParser
from sbtrace.imageio import save_image
from sbtrace.material import Material, TextureMap
from sbtrace.ray import Intersection
from sbtrace.tokens import Symbol
from sbtrace.tokenizer import Tokenizer


def make(text, base_path="base"):
    return ExpressionParser(Tokenizer(io.StringIO(text)), base_path)


class RecordingScene:
    def __init__(self):
        self.names = []

    def get_texture(self, name):
        self.names.append(name)
        return TextureMap(name)


@pytest.fixture
def red_png(tmp_path):
    path = tmp_path / "tex.png"
    save_image(str(path), bytes([255, 0, 0] * 4), 2, 2, ".png")
    return path


def test_parse_scalar():
    assert make("3.5").parse_scalar() == 3.5


def test_parse_scalar_list():
    assert make("(1, 2, 3)").parse_scalar_list() == [1.0, 2.0, 3.0]
    assert make("()").parse_scalar_list() == []


def test_parse_vectors():
    assert np.allclose(make("(1, 2, 3)").parse_vec3(), [1, 2, 3])
    assert np.allclose(make("(1, 2, 3, 4)").parse_vec4(), [1, 2, 3, 4])


def test_parse_vec3_wrong_arity_raises():
    with pytest.raises(SyntaxErrorException):
        make("(1, 2)").parse_vec3()


def test_parse_boolean():
    assert make("true").parse_boolean() is True
    assert make("false").parse_boolean() is False
    with pytest.raises(SyntaxErrorException):
        make("5").parse_boolean()


def test_scalar_expression_consumes_semicolon():
    parser = make("fov = 30;")
    assert parser.parse_scalar_expression() == 30.0
    assert parser.tokenizer.peek().kind == Symbol.EOFSYM


def test_semicolon_is_optional():
    parser = make("fov = 30 height = 2")
    assert parser.parse_scalar_expression() == 30.0
    assert parser.parse_scalar_expression() == 2.0


def test_other_expressions():
    assert np.allclose(make("color = (1, 0, 0);").parse_vec3_expression(), [1, 0, 0])
    assert np.allclose(
        make("quaternian = (0, 0, 0, 1);").parse_vec4_expression(), [0, 0, 0, 1]
    )
    assert make("capped = false;").parse_boolean_expression() is False
    assert make('name = "foo";').parse_ident_expression() == "foo"


def test_expression_needs_equals():
    with pytest.raises(SyntaxErrorException):
        make("fov 30").parse_scalar_expression()


def test_material_block_sets_diffuse():
    material = make("{ diffuse = (0.5, 0.5, 0.5); }").parse_material(None, Material())
    assert np.allclose(material.kd(Intersection()), [0.5, 0.5, 0.5])


def test_specular_defaults_reflective():
    material = make("{ specular = (0.2, 0.3, 0.4); }").parse_material(None, Material())
    isect = Intersection()
    assert np.allclose(material.kr(isect), material.ks(isect))


def test_explicit_reflective_is_kept():
    text = "{ reflective = (0.1, 0.1, 0.1); specular = (0.2, 0.3, 0.4); }"
    material = make(text).parse_material(None, Material())
    assert np.allclose(material.kr(Intersection()), [0.1, 0.1, 0.1])


def test_scalar_attributes():
    material = make("{ shininess = 25; index = 1.5; }").parse_material(None, Material())
    isect = Intersection()
    assert material.shininess(isect) == pytest.approx(25.0)
    assert material.index(isect) == pytest.approx(1.5)


def test_material_inherits_from_parent_without_changing_it():
    parent = Material(emissive=(0.3, 0.3, 0.3))
    material = make("{ emissive = (1, 1, 1); ambient = (0.2, 0.2, 0.2); }").parse_material(
        None, parent
    )
    isect = Intersection()
    assert np.allclose(material.ke(isect), [1, 1, 1])
    assert np.allclose(parent.ke(isect), [0.3, 0.3, 0.3])
    inherited = make("{ }").parse_material(None, parent)
    assert np.allclose(inherited.ke(isect), [0.3, 0.3, 0.3])


def test_named_material_can_be_referenced():
    text = 'material = { name "shiny"; diffuse = (1, 0, 0); }; material = "shiny";'
    parser = make(text)
    first = parser.parse_material_expression(None, Material())
    second = parser.parse_material_expression(None, Material())
    assert second is not first
    assert np.allclose(second.kd(Intersection()), [1, 0, 0])
    assert parser.tokenizer.peek().kind == Symbol.EOFSYM


def test_material_redefinition_raises():
    text = '{ name "m"; } { name "m"; }'
    parser = make(text)
    parser.parse_material(None, Material())
    with pytest.raises(SyntaxErrorException):
        parser.parse_material(None, Material())


def test_unknown_material_attribute_raises():
    with pytest.raises(SyntaxErrorException):
        make("{ sphere }").parse_material(None, Material())


def test_vec3_map_is_relative_to_base_path(red_png):
    scene = RecordingScene()
    parser = make('diffuse = map("tex.png");', base_path=red_png.parent.as_posix())
    param = parser.parse_vec3_material_parameter(scene)
    assert scene.names == [f"{red_png.parent.as_posix()}/tex.png"]
    assert param.mapped
    assert np.allclose(param.value(Intersection()), [1, 0, 0])


def test_scalar_map_uses_name_as_given(red_png):
    scene = RecordingScene()
    parser = make(f'shininess = map("{red_png.as_posix()}");')
    param = parser.parse_scalar_material_parameter(scene)
    assert scene.names == [red_png.as_posix()]
    assert param.mapped


def test_plain_material_parameters():
    vec = make("diffuse = (0.1, 0.2, 0.3);").parse_vec3_material_parameter(None)
    scalar = make("index = 2;").parse_scalar_material_parameter(None)
    assert not vec.mapped
    assert np.allclose(vec.value(Intersection()), [0.1, 0.2, 0.3])
    assert np.allclose(scalar.value(Intersection()), [2.0, 2.0, 2.0])