"""Tests for the type classifier."""

from decimal import Decimal

import pytest

from CalcCore import tokens as H
from CalcCore.terms import TokenType, terms
from CalcCore.tokenizer import Token
from CalcCore.ExpressionRenderer import RenderTerm
from CalcCore.MathEngine import MathResult


def test_get_type_accepts_three_shapes():
    """Type tag, registry identifier, token-like object."""
    assert H.get_type("digit") == TokenType.DIGIT
    assert H.get_type("NUM1") == TokenType.DIGIT
    assert H.get_type(terms["COS"]) == TokenType.FUNCTION
    assert H.get_type(Token("LPAR", "(")) == TokenType.AGGREGATOR
    assert H.get_type(Token("term", "foo")) == TokenType.TERM


def test_get_type_of_render_term():
    """A RenderTerm resolves through its type, or its token."""
    assert H.get_type(RenderTerm("operator", "NEG", "-")) == TokenType.OPERATOR
    assert H.get_type(RenderTerm("NUM1", "NUM1", "1")) == TokenType.DIGIT
    assert H.get_type(RenderTerm(None, "PI", "PI")) == TokenType.CONSTANT


@pytest.mark.parametrize("value", [None, "", "FOO", 42, Token("syntaxError", "$"), object()])
def test_get_type_of_unknown_input(value):
    """Nothing known gives None, never raises."""
    assert H.get_type(value) is None


def test_get_term_and_get_token():
    """Registry lookups from any shape."""
    token = Token("SIN", "sin")
    assert H.get_term(token) is terms["SIN"]
    assert H.get_term("SIN") is terms["SIN"]
    assert H.get_term(terms["SIN"]) is terms["SIN"]
    assert H.get_term(Token("term", "x")) is None
    assert H.get_term(None) is None

    assert H.get_token(token) == "SIN"
    assert H.get_token(terms["ADD"]) == "ADD"
    assert H.get_token("MUL") == "MUL"
    assert H.get_token(RenderTerm("operator", "NEG", "-")) == "NEG"
    assert H.get_token(None) is None


def test_get_exponent():
    """Exponent side from the registry."""
    assert H.get_exponent("POW") == "right"
    assert H.get_exponent(Token("NTHRT", "@nthrt")) == "left"
    assert H.get_exponent("ADD") is False
    assert H.get_exponent(Token("term", "x")) is False


@pytest.mark.parametrize(
    "predicate, true_for, false_for",
    [
        (H.is_digit, ["NUM0", "DOT", "EXP10"], ["PI", "ADD", "LPAR"]),
        (H.is_operator, ["ADD", "MUL", "FAC", "PERCENT"], ["NUM1", "LPAR", "SIN"]),
        (H.is_binary_operator, ["ADD", "POW", "ASSIGN"], ["FAC", "NUM1"]),
        (H.is_unary_operator, ["FAC", "PERCENT"], ["SUB", "NUM1"]),
        (H.is_operand, ["NUM1", "PI", "VAR_ANS", "SIN", "NAN"], ["ADD", "FAC", "LPAR", "COMMA"]),
        (H.is_value, ["NUM1", "PI", "VAR_ANS", "NAN", "term"], ["SIN", "ADD", "RPAR"]),
        (H.is_aggregator, ["LPAR", "RPAR"], ["COMMA", "NUM1"]),
        (H.is_error, ["NAN", "INFINITY", "ERROR"], ["NUM1"]),
        (H.is_constant, ["PI", "E", "TEN"], ["VAR_ANS"]),
        (H.is_variable, ["VAR_ANS", "VAR_MEM", "term"], ["PI"]),
        (H.is_function, ["SIN", "NTHRT", "RAND"], ["PI", "FAC"]),
        (H.is_identifier, ["PI", "VAR_ANS", "SIN", "NAN", "term"], ["NUM1", "ADD", "LPAR"]),
        (H.is_separator, ["ADD", "FAC", "LPAR", "COMMA"], ["NUM1", "SIN", "PI"]),
        (H.is_modifier, ["ADD", "MUL", "SIN"], ["FAC", "NUM1", "LPAR"]),
        (H.is_sign_operator, ["SUB", "NEG", "ADD", "POS"], ["MUL", "NUM1"]),
    ],
)
def test_predicates(predicate, true_for, false_for):
    """Each predicate against some identifiers."""
    for name in true_for:
        assert predicate(name), name
    for name in false_for:
        assert not predicate(name), name


def test_predicates_accept_none():
    """None is never classified."""
    assert not H.is_digit(None)
    assert not H.is_operator(None)
    assert not H.is_function(None)
    assert not H.is_function_operator(None)


def test_is_function_operator():
    """Prefixed values and the NTHRT identifier."""
    assert H.is_function_operator(Token("NTHRT", "@nthrt"))
    assert H.is_function_operator(Token("prefixed", "@foo"))
    assert H.is_function_operator(terms["NTHRT"])
    assert H.is_function_operator("@sqrt")
    assert not H.is_function_operator(Token("SQRT", "sqrt"))
    assert not H.is_function_operator(terms["SQRT"].copy())


@pytest.mark.parametrize(
    "value, expected",
    [
        ("3+4", "3+4"),
        (None, ""),
        (42, "42"),
        (Decimal("0.5"), "0.5"),
        (MathResult("1/2", {}, Decimal("0.5"), 0.5), "0.5"),
        (Token("NUM1", "1"), "1"),
    ],
)
def test_string_value(value, expected):
    """Text of strings, results and tokens."""
    assert H.string_value(value) == expected
