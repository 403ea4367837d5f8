"""Tests for the expression renderer and the result helpers."""

from decimal import Decimal

import pytest

from CalcCore import ExpressionRenderer as R
from CalcCore.MathEngine import MathEvaluator
from CalcCore.terms import TokenType
from CalcCore.tokenizer import Token, tokenize

evaluate = MathEvaluator()


def _shape(rendered):
    """Values of the rendered terms, exponent groups as nested lists."""
    return [_shape(term.value) if term.type == TokenType.EXPONENT else term.value for term in rendered]


def _nested(expression, variables=None):
    return _shape(R.nest_exponents(R.render(expression, variables)))


# -----------------------------
# Result helpers
# -----------------------------

@pytest.mark.parametrize(
    "expression, expected",
    [
        ("3*4", False),
        ("NaN", True),
        ("Infinity", True),
        ("+Infinity", True),
        ("-Infinity", True),
        ("2*NaN", True),
        ("4-Infinity", True),
        (Decimal("NaN"), True),
        (Decimal("-Infinity"), True),
        (10, False),
        (None, False),
    ],
)
def test_contains_error(expression, expected):
    """NaN and Infinity are errors."""
    assert R.contains_error(expression) is expected


def test_contains_error_in_result():
    """Results are checked through their value."""
    assert R.contains_error(evaluate("1/0"))
    assert not R.contains_error(evaluate("1/4"))


@pytest.mark.parametrize(
    "expression, value, expected",
    [
        ("3*4", None, "3*4"),
        (42, None, "42"),
        (None, None, ""),
        ("ans", "42", "42"),
        ("3*ans+1", "42", "3*42+1"),
        ("3*ans+1/ans+ans", "5", "3*5+1/5+5"),
        ("3*ans+1", Decimal("NaN"), "3*NaN+1"),
        ("answer+ans", "7", "answer+7"),
        ("ans", None, "0"),
    ],
)
def test_replace_last_result(expression, value, expected):
    """Each 'ans' is replaced by the value, 0 by default."""
    assert R.replace_last_result(expression, value) == expected


def test_replace_last_result_with_a_result():
    """A result is replaced by its value."""
    assert R.replace_last_result("ans*2", evaluate("40+2")) == "42*2"


@pytest.mark.parametrize(
    "variable, decimals, expected",
    [
        (None, 5, ""),
        (5, 8, "5"),
        ("3.14159265358979323846264", 8, "3.14159265358979323846264"),
        (evaluate("3*4"), 5, "12"),
        (evaluate("PI"), 5, "3.14159~"),
        (evaluate("PI"), 3, "3.142~"),
        (evaluate("PI"), 10, "3.1415926536~"),
        (evaluate("1/3"), 5, "0.33333~"),
        (evaluate("2/3"), 5, "0.66667~"),
        (evaluate("1/4"), 5, "0.25"),
        (evaluate("PI*10^50"), 5, "3.14159e+50~"),
    ],
)
def test_round_variable(variable, decimals, expected):
    """Rounded display value, '~' when the rounding shortened it."""
    assert R.round_variable(variable, decimals) == expected


def test_round_variable_keeps_short_exponential_values():
    """An exponential value is kept when its rounded form is not shorter."""
    result = evaluate("123e50")
    assert R.round_variable(result) == str(result.result)


def test_round_variable_default_decimals():
    """Five decimals by default."""
    assert R.round_variable(evaluate("PI")) == "3.14159~"


def test_round_all_variables():
    """Every variable is rounded into a new dict."""
    variables = {"ans": evaluate("PI"), "foo": evaluate("1/3"), "bar": 5}

    assert R.round_all_variables(variables, 3) == {"ans": "3.142~", "foo": "0.333~", "bar": "5"}
    assert R.round_all_variables(variables, 10) == {
        "ans": "3.1415926536~", "foo": "0.3333333333~", "bar": "5",
    }
    assert variables["bar"] == 5
    assert R.round_all_variables(None) == {}
    assert R.round_all_variables({}) == {}


def test_round_last_result_variable():
    """Only the last result is rounded, in place."""
    foo = evaluate("1/3")
    variables = {"ans": evaluate("2/3"), "foo": foo}

    assert R.round_last_result_variable(variables) is variables
    assert variables["ans"] == "0.66667~"
    assert variables["foo"] is foo
    assert R.round_last_result_variable(None) is None


@pytest.mark.parametrize(
    "expression, expected",
    [(None, ""), ("", ""), ("42", "42"), ("-42", "-42"), ("+42", "+42"), ("3-4+2", "3-4+2")],
)
def test_render_sign(expression, expected):
    """Signs are displayed with their label."""
    assert R.render_sign(expression) == expected


def test_build_keeps_offsets():
    """Tokens are joined, gaps are filled with spaces."""
    assert R.build(tokenize("3 *  cos PI")) == "3 *  cos PI"
    assert R.build([Token("NUM1", "1", "1", 0), Token("RPAR", ")", ")", 3)]) == "1  )"
    assert R.build([]) == ""


# -----------------------------
# Rendering
# -----------------------------

@pytest.mark.parametrize("expression", [None, "", []])
def test_render_nothing(expression):
    """Empty inputs give an empty list."""
    assert R.render(expression) == []


def test_render_merges_the_registry():
    """Registry labels and types are used."""
    rendered = R.render("3*PI")

    assert [term.token for term in rendered] == ["NUM3", "MUL", "PI"]
    assert [term.type for term in rendered] == [TokenType.DIGIT, TokenType.OPERATOR, TokenType.CONSTANT]
    assert rendered[1].label == "×"
    assert rendered[2].label == "π"


@pytest.mark.parametrize(
    "expression, tokens",
    [
        ("-42", ["NEG", "NUM4", "NUM2"]),
        ("+42", ["POS", "NUM4", "NUM2"]),
        ("40+2", ["NUM4", "NUM0", "ADD", "NUM2"]),
        ("-(4+2)", ["NEG", "LPAR", "NUM4", "ADD", "NUM2", "RPAR"]),
        ("3*-2", ["NUM3", "MUL", "NEG", "NUM2"]),
        ("cos -2", ["COS", "NEG", "NUM2"]),
        ("(-2)", ["LPAR", "NEG", "NUM2", "RPAR"]),
        ("5e-10", ["NUM5", "EXP10", "NEG", "NUM1", "NUM0"]),
        ("3!-2", ["NUM3", "FAC", "SUB", "NUM2"]),
    ],
)
def test_render_signs(expression, tokens):
    """A minus or a plus where a sign is expected is displayed as a sign."""
    assert [term.token for term in R.render(expression)] == tokens


def test_render_variables():
    """Bound identifiers are variables, the other ones are unknown."""
    rendered = R.render("40+2-x*ans*y", {"ans": "5", "x": "0"})

    assert rendered[5].type == TokenType.VARIABLE
    assert rendered[9].type == TokenType.UNKNOWN
    assert [term.value for term in rendered[7].label] == ["5"]


def test_render_last_result_label():
    """'ans' is displayed through the rendering of its value."""
    rendered = R.render("ans", {"ans": "-42"})

    assert len(rendered) == 1
    assert [term.token for term in rendered[0].label] == ["NEG", "NUM4", "NUM2"]
    assert R.render("ans")[0].label == "Ans"


def test_render_prefixed_function():
    """An '@' function keeps track of its prefix."""
    rendered = R.render("4 @nthrt 16")
    assert rendered[1].prefixed
    assert rendered[1].value == "nthrt"
    assert not rendered[0].prefixed


def test_render_tokens():
    """A token list is rendered as is."""
    tokens = tokenize("5+10 @nthrt (4+2^3)^(ans*3^2)+5")
    assert _shape(R.nest_exponents(R.render(tokens, {"ans": "5"}))) == \
        _nested("5+10 @nthrt (4+2^3)^(ans*3^2)+5", {"ans": "5"})


def test_power_chain_is_nested_and_elided():
    """2^3^4: both powers hidden, each exponent nested in the previous one."""
    rendered = R.render("2^3^4")

    assert rendered[1].elide and rendered[3].elide
    assert rendered[2].start_exponent == 1
    assert rendered[4].start_exponent == 3
    assert rendered[4].end_exponent == [1, 3]
    assert _nested("2^3^4") == ["2", ["3", ["4"]]]


def test_left_exponent_group():
    """4 @nthrt 16: 4 is the exponent of the root."""
    rendered = R.render("4 @nthrt 16")

    assert rendered[0].start_exponent == 1
    assert rendered[0].end_exponent == [1]
    assert not rendered[1].elide
    assert _nested("4 @nthrt 16") == [["4"], "nthrt", "1", "6"]


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("3*(4-5)", ["3", "*", "(", "4", "-", "5", ")"]),
        ("2^3+5", ["2", ["3"], "+", "5"]),
        ("4-2^3^5^7+3", ["4", "-", "2", ["3", ["5", ["7"]]], "+", "3"]),
        (
            "4-7 @nthrt 5 @nthrt 3 @nthrt 2+3",
            ["4", "-", ["7"], "nthrt", ["5"], "nthrt", ["3"], "nthrt", "2", "+", "3"],
        ),
        (
            "(3*4^(8-2)) @nthrt 4 + exp(2^(3+5)+4) + PI",
            [
                ["(", "3", "*", "4", ["(", "8", "-", "2", ")"], ")"],
                "nthrt", "4", "+", "exp",
                ["(", "2", ["(", "3", "+", "5", ")"], "+", "4", ")"],
                "+", "PI",
            ],
        ),
    ],
)
def test_nest_exponents(expression, expected):
    """Exponent groups are collapsed into nested terms."""
    assert _nested(expression) == expected


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("^", ["^"]),
        ("2^", ["2", "^"]),
        ("2^4", ["2", ["4"]]),
        ("2^4^-2", ["2", ["4", ["-", "2"]]]),
        ("(2^4)", ["(", "2", ["4"], ")"]),
        ("2^PI", ["2", ["PI"]]),
        ("(2^2)^2", ["(", "2", ["2"], ")", ["2"]]),
        ("2^(2^2)", ["2", ["(", "2", ["2"], ")"]]),
        ("2^cos PI", ["2", ["cos", "PI"]]),
        ("2^ceil cos(PI * 2)", ["2", ["ceil", "cos", "(", "PI", "*", "2", ")"]]),
        ("5^-1", ["5", ["-", "1"]]),
        ("42^123", ["4", "2", ["1", "2", "3"]]),
        ("2^3!", ["2", ["3", "!"]]),
        ("5e10", ["5", "e", ["1", "0"]]),
        ("5e-10", ["5", "e", ["-", "1", "0"]]),
        ("exp 2", ["exp", ["2"]]),
    ],
)
def test_right_exponents(expression, expected):
    """Operands on the right of a power, a scientific exponent or exp."""
    assert _nested(expression) == expected


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("@nthrt", ["nthrt"]),
        ("@nthrt 16", ["nthrt", "1", "6"]),
        ("-4 @nthrt 16", ["-", ["4"], "nthrt", "1", "6"]),
        ("(5+4) @nthrt 16", [["(", "5", "+", "4", ")"], "nthrt", "1", "6"]),
        ("cos (PI) @nthrt 4", [["cos", "(", "PI", ")"], "nthrt", "4"]),
        ("cos PI @nthrt 4", ["cos", ["PI"], "nthrt", "4"]),
        ("(PI @nthrt PI) @nthrt 4", [["(", ["PI"], "nthrt", "PI", ")"], "nthrt", "4"]),
        ("114 @nthrt (ans*3)", [["1", "1", "4"], "nthrt", "(", "ans", "*", "3", ")"]),
    ],
)
def test_left_exponents(expression, expected):
    """Operands on the left of a function operator."""
    assert _nested(expression, {"ans": "5"}) == expected
