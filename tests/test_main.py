"""Tests for the interactive shell."""

import pytest

import main
from CalcCore import ExpressionRenderer
from CalcCore.CalculatorEngine import CalculatorEngine


@pytest.fixture
def engine():
    return CalculatorEngine()


def _display(engine):
    return main.display(ExpressionRenderer.nest_exponents(engine.render()))


@pytest.mark.parametrize("line", ["", "   ", ":"])
def test_empty_lines_are_ignored(engine, line):
    assert main.handle_line(engine, line) is True
    assert engine.get_expression() == ""


@pytest.mark.parametrize("line", [":quit", ":q", ":exit", "  :quit  "])
def test_quit(engine, line):
    assert main.handle_line(engine, line) is False


def test_lines_are_typed(engine):
    assert main.handle_line(engine, "3+4")
    assert main.handle_line(engine, "*2")

    assert engine.get_expression() == "3+4*2"
    assert engine.get_position() == 5


def test_commands_are_invoked(engine):
    assert main.handle_line(engine, ":term NUM1 ADD NUM2")
    assert engine.get_expression() == "1+2"

    results = []
    engine.on("result", results.append)
    main.handle_line(engine, ":execute")

    assert str(results[0]) == "3"


def test_unknown_command(engine):
    errors = []
    engine.on("error", errors.append)

    assert main.handle_line(engine, ":foo") is True
    assert errors[0].code == "6003"


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("3*4", "3×4"),
        ("2^3+1", "2^(3)+1"),
        ("2^3^4", "2^(3^(4))"),
        ("-3+-2", "-3+-2"),
    ],
)
def test_display(engine, expression, expected):
    engine.set_expression(expression)
    assert _display(engine) == expected


def test_display_the_last_result(engine):
    engine.set_expression("40+2")
    engine.evaluate()
    engine.set_expression("ans-2")

    assert _display(engine) == "42\u22122"
