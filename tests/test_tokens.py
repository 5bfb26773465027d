import pytest

from sbtrace.exceptions import ParserFatalException
from sbtrace.tokens import (
    IdentToken,
    ScalarToken,
    Symbol,
    Token,
    lookup_reserved_word,
    name_for_token,
)


@pytest.mark.parametrize(
    "word",
    ["sphere", "box", "camera", "point_light", "material", "look_at", "SBT-raytracer", "true"],
)
def test_reserved_word_names_round_trip(word):
    assert name_for_token(lookup_reserved_word(word)) == word


def test_aliases():
    assert lookup_reserved_word("colour") is Symbol.COLOR
    assert lookup_reserved_word("color") is Symbol.COLOR
    assert lookup_reserved_word("polymesh") is Symbol.TRIMESH
    assert lookup_reserved_word("points") is Symbol.POLYPOINTS


def test_unknown_word_and_unnamed_symbols():
    assert lookup_reserved_word("teapot") is Symbol.UNKNOWN
    assert lookup_reserved_word("Sphere") is Symbol.UNKNOWN
    assert name_for_token(Symbol.UNKNOWN) == "Unknown token type"
    assert name_for_token(Symbol.FOV) == "Unknown token type"


def test_plain_token_has_no_value():
    tok = Token(Symbol.LBRACE)
    assert str(tok) == "Left brace"
    with pytest.raises(ParserFatalException):
        tok.ident()
    with pytest.raises(ParserFatalException):
        tok.value()


def test_ident_token():
    tok = IdentToken("mirror")
    assert tok.kind is Symbol.IDENT
    assert tok.ident() == "mirror"
    assert str(tok) == 'Identifier: "mirror"'
    with pytest.raises(ParserFatalException):
        tok.value()


def test_scalar_token():
    tok = ScalarToken(1.5)
    assert tok.kind is Symbol.SCALAR
    assert tok.value() == 1.5
    assert str(tok) == "Scalar: 1.5"
    with pytest.raises(ParserFatalException):
        tok.ident()