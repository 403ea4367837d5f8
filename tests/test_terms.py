"""Tests for the term registry."""

import pytest

from CalcCore import terms as T
from CalcCore.terms import Term, TokenType, terms


def test_registry_entries_are_consistent():
    """Every entry is keyed by its own identifier and has a known type."""
    for name, term in terms.items():
        assert term.token == name
        assert term.type in TokenType.ALL
        assert term.exponent in (False, "left", "right")
        assert isinstance(term.value, str) and term.value


@pytest.mark.parametrize(
    "name, value, token_type",
    [
        ("NUM0", "0", TokenType.DIGIT),
        ("DOT", ".", TokenType.DIGIT),
        ("EXP10", "e", TokenType.DIGIT),
        ("LPAR", "(", TokenType.AGGREGATOR),
        ("COMMA", ",", TokenType.SEPARATOR),
        ("SUB", "-", TokenType.OPERATOR),
        ("FAC", "!", TokenType.UNARY),
        ("PERCENT", "#", TokenType.UNARY),
        ("VAR_ANS", "ans", TokenType.VARIABLE),
        ("PI", "PI", TokenType.CONSTANT),
        ("NAN", "NaN", TokenType.ERROR),
        ("NTHRT", "nthrt", TokenType.FUNCTION),
    ],
)
def test_registry_values(name, value, token_type):
    """Spot check literal values and types."""
    assert terms[name].value == value
    assert terms[name].type == token_type


def test_exponent_sides():
    """POW, EXP10 and EXP open an exponent on the right, NTHRT on the left."""
    assert terms["POW"].exponent == "right"
    assert terms["EXP10"].exponent == "right"
    assert terms["EXP"].exponent == "right"
    assert terms["NTHRT"].exponent == "left"
    assert terms["SIN"].exponent is False


def test_label_helpers():
    """Labels use sup/sub markup."""
    assert T.exponent("2") == "<sup>2</sup>"
    assert T.subscript("10") == "<sub>10</sub>"
    assert T.exponent_right("sin", "-1") == "sin<sup>-1</sup>"
    assert T.exponent_left("r", "3") == "<sup>3</sup>r"
    assert terms["LOG10"].label == "log<sub>10</sub>"


def test_term_copy_leaves_registry_untouched():
    """copy() returns a changed clone."""
    prefixed = terms["NTHRT"].copy(value="@nthrt")
    assert prefixed.value == "@nthrt"
    assert prefixed.token == "NTHRT"
    assert terms["NTHRT"].value == "nthrt"
    assert prefixed != terms["NTHRT"]
    assert terms["NTHRT"].copy() == terms["NTHRT"]


@pytest.mark.parametrize(
    "name, expected",
    [("@NTHRT", True), ("@nthrt", True), ("NTHRT", False), ("@", False), ("@1x", False), (None, False)],
)
def test_is_prefixed_term(name, expected):
    """'@' followed by a keyword."""
    assert T.is_prefixed_term(name) is expected


@pytest.mark.parametrize(
    "name, expected",
    [("@nthrt", True), ("NTHRT", True), ("SQRT", False), ("nthrt", False), ("", False), (42, False)],
)
def test_is_function_operator(name, expected):
    """Prefixed keywords and left exponent functions."""
    assert T.is_function_operator(name) is expected


def test_keywords_and_symbols_split_the_registry():
    """Each term is either a keyword or a symbol literal."""
    keywords = T.keywords()
    symbols = T.symbol_literals()

    assert keywords["SIN"] == "sin"
    assert keywords["EXP10"] == "e"
    assert symbols["LPAR"] == "("
    assert "SIN" not in symbols
    assert set(keywords) | set(symbols) == set(terms)
    assert not set(keywords) & set(symbols)


def test_digit_literals():
    """Digits, dot, exponent marker and signs."""
    digits = T.digit_literals()
    assert digits["NUM7"] == "7"
    assert digits["DOT"] == "."
    assert digits["EXP10"] == "e"
    assert digits["SUB"] == "-"
    assert digits["POS"] == "+"
    assert "MUL" not in digits


def test_term_is_hashable():
    """Terms can be used in sets."""
    assert len({terms["NUM1"], terms["NUM1"].copy(), terms["NUM2"]}) == 2
    assert isinstance(terms["NUM1"], Term)
