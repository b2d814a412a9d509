from decimal import Decimal

import pytest

from deskcalc.evaluator import ANS, PI, EvaluationError, Evaluator


def test_basic_arithmetic_and_ans():
    ev = Evaluator()
    assert ev.evaluate("1+1") == Decimal(2)
    assert ev.evaluate("2^10") == Decimal(1024)
    assert ev.evaluate("ans*2") == Decimal(2048)
    assert ev.evaluate("7 % 4") == Decimal(3)


def test_decimal_arithmetic_is_exact():
    assert Evaluator().evaluate("0.1+0.2") == Decimal("0.3")


@pytest.mark.parametrize(
    "expression, message",
    [
        ("1/0", "division by zero"),
        ("sqrt(-1)", "domain error in sqrt"),
        ("ln(0)", "domain error in ln"),
        ("nope+1", "unknown variable nope"),
        ("foo(1)", "unknown function foo"),
        ("2*", "syntax error"),
        ("'a'", "syntax error"),
        ("pi = 3", "cannot assign to pi"),
        ("sqrt = 3", "cannot assign to sqrt"),
        ("import os", "syntax error"),
    ],
)
def test_errors_carry_user_message(expression, message):
    with pytest.raises(EvaluationError) as excinfo:
        Evaluator().evaluate(expression)
    assert str(excinfo.value) == message


def test_assignment_creates_variable():
    ev = Evaluator()
    assert ev.evaluate("k = 5") == Decimal(5)
    assert ev.evaluate("k*2") == Decimal(10)
    bindings = {b.name: b.value for b in ev.current_bindings()}
    assert bindings["k"] == Decimal(5)
    assert bindings[ANS] == Decimal(10)


def test_assign_rejects_reserved_invalid_and_nan():
    ev = Evaluator()
    for name in ("pi", "phi", "1x", "", "sin"):
        assert not ev.is_assignable(name)
        with pytest.raises(ValueError):
            ev.assign(name, Decimal(1))
    with pytest.raises(ValueError):
        ev.assign("x", "not a number")


def test_clear_all_variables_keeps_constants():
    ev = Evaluator()
    ev.evaluate("a = 1")
    ev.clear_all_variables()
    assert ev.current_bindings() == []
    assert dict(ev.constants())["pi"] == PI
    assert ev.evaluate("pi") == PI


def test_angle_mode_affects_trigonometry():
    ev = Evaluator(angle_mode="d")
    assert abs(ev.evaluate("sin(30)") - Decimal("0.5")) < Decimal("1e-12")
    assert abs(ev.evaluate("atan(1)") - Decimal(45)) < Decimal("1e-12")

    ev.set_angle_mode("r")
    assert abs(ev.evaluate("sin(30)") - Decimal("-0.988031624092862")) < Decimal("1e-12")


def test_comma_radix_input():
    ev = Evaluator(radix_char=",")
    assert ev.evaluate("1,5+1") == Decimal("2.5")

    ev.set_radix_char(".")
    assert ev.evaluate("1.5+1") == Decimal("2.5")


def test_function_names_are_sorted():
    names = Evaluator().function_names()
    assert names == sorted(names)
    assert "sqrt" in names
