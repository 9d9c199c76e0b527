import math

import pytest

from wireframe_scene.errors import ExpressionError
from wireframe_scene.expression import ExpressionEvaluator, tokenize


@pytest.fixture
def ev():
    return ExpressionEvaluator()


@pytest.mark.parametrize("source,expected", [
    ("1 + 2 * 3", 7.0),
    ("(1 + 2) * 3", 9.0),
    ("2 ** 3 ** 2", 512.0),
    ("-2 ** 2", -4.0),
    ("7 % 3", 1.0),
    ("10 / 4 - 1", 1.5),
    ("1.5e2", 150.0),
    (".5 + .5", 1.0),
    ("max(1, 5, 3)", 5.0),
    ("clamp(12, 0, 10)", 10.0),
    ("floor(2.7) + ceil(0.2)", 3.0),
])
def test_arithmetic(ev, source, expected):
    assert ev.evaluate(source) == pytest.approx(expected)


def test_math_prefix_and_constants(ev):
    assert ev("Math.sin(0)") == 0.0
    assert ev("Math.PI") == pytest.approx(math.pi)
    assert ev("cos(PI)") == pytest.approx(-1.0)


def test_time_variable(ev):
    assert ev("t") == 0.0
    assert ev("t * 2", t=3) == 6.0
    assert ExpressionEvaluator({'speed': 4})("speed * t", t=0.5) == 2.0


def test_colors(ev):
    assert ev("red") == (255, 0, 0)
    assert ev("#00ff00") == (0, 255, 0)
    assert ev("#fff") == (255, 255, 255)
    assert ev("rgb(1, 0.5, 0)") == (255, 128, 0)
    assert ev("gray(0)") == (0, 0, 0)


def test_color_accepts_grey_level(ev):
    assert ev.color("0.5 + 0.5") == (255, 255, 255)
    assert ev.color("0") == (0, 0, 0)
    assert ev.color("navy") == (0, 0, 128)


@pytest.mark.parametrize("source", [
    "", "   ", "1 +", "foo", "nope(1)", "sin(1, 2)", "1 / 0", "red + 1",
    "(1", "1 2", "sqrt(-1)", "exp(1000)", "(-8) ** 0.5", "__import__('os')", "2 > 1",
    "min(5)", "max(1)",
])
def test_rejected(ev, source):
    with pytest.raises(ExpressionError):
        ev.evaluate(source)


def test_number_rejects_colors(ev):
    with pytest.raises(ExpressionError):
        ev.number("red")
    assert ev.number("3") == 3.0


def test_non_string_input(ev):
    with pytest.raises(ExpressionError):
        ev.evaluate(['1', '2'])


def test_tokenize():
    kinds = [tok.type for tok in tokenize("Math.sin(t) ** 2")]
    assert kinds == ['NAME', 'LPAREN', 'NAME', 'RPAREN', 'POW', 'NUMBER', 'EOF']


@pytest.mark.parametrize("source", ["-" * 3000 + "1", "(" * 500 + "1" + ")" * 500])
def test_deep_nesting_is_an_expression_error(ev, source):
    with pytest.raises(ExpressionError):
        ev.evaluate(source)


def test_check_accepts_domain_errors_that_depend_on_time(ev):
    assert math.isnan(ev.check("1 / t"))
    assert math.isnan(ev.check("sqrt(t - 1)"))
    assert ev.check("2 * t + 1") == 1.0


@pytest.mark.parametrize("source", ["1 / 0", "1 / t +", "nope(t)", "red * t", "min(t)"])
def test_check_still_rejects_malformed_values(ev, source):
    with pytest.raises(ExpressionError):
        ev.check(source)
