"""Safe expression evaluator over :class:`decimal.Decimal`.

Expressions are parsed with :mod:`ast` and walked node by node; nothing is ever
passed to ``eval``. Only numeric literals, the four arithmetic operators,
``%``, ``^``/``**``, unary signs, variables, a fixed set of functions and a
single ``name = expression`` assignment are accepted.
"""

from __future__ import annotations

import ast
import logging
import math
import re
from decimal import (
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_UP,
    Decimal,
    DivisionByZero,
    DivisionUndefined,
    InvalidOperation,
    Overflow,
)
from typing import Callable, Dict, List, Tuple

from . import numeric
from .numeric import CONTEXT
from .session.model import RESERVED_NAMES, VariableBinding

logger = logging.getLogger(__name__)

ANS = "ans"

PI = CONTEXT.create_decimal(
    "3.14159265358979323846264338327950288419716939937510582097494459230781640628620899863"
)
PHI = CONTEXT.divide(CONTEXT.add(Decimal(1), CONTEXT.sqrt(Decimal(5))), Decimal(2))

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z_0-9]*$")
_DIGIT_COMMA_RE = re.compile(r"(?<=\d),(?=\d)")


class EvaluationError(Exception):
    """Expression could not be evaluated; ``str(exc)`` is shown to the user."""


class Evaluator:
    _BINOPS = {
        ast.Add: CONTEXT.add,
        ast.Sub: CONTEXT.subtract,
        ast.Mult: CONTEXT.multiply,
        ast.Div: CONTEXT.divide,
        ast.Mod: CONTEXT.remainder,
        ast.Pow: CONTEXT.power,
    }

    def __init__(self, angle_mode: str = "r", radix_char: str = ".") -> None:
        self.angle_mode = angle_mode
        self.radix_char = radix_char
        self._variables: Dict[str, Decimal] = {"pi": PI, "phi": PHI}
        self._functions: Dict[str, Callable[..., Decimal]] = {
            "abs": CONTEXT.abs,
            "sqrt": CONTEXT.sqrt,
            "exp": CONTEXT.exp,
            "ln": CONTEXT.ln,
            "log": CONTEXT.log10,
            "int": lambda x: x.to_integral_value(rounding=ROUND_DOWN),
            "frac": lambda x: CONTEXT.subtract(x, x.to_integral_value(rounding=ROUND_DOWN)),
            "round": lambda x: x.to_integral_value(rounding=ROUND_HALF_UP),
            "floor": lambda x: x.to_integral_value(rounding=ROUND_FLOOR),
            "ceil": lambda x: x.to_integral_value(rounding=ROUND_CEILING),
            "sin": lambda x: self._from_float(math.sin(self._to_radians(x))),
            "cos": lambda x: self._from_float(math.cos(self._to_radians(x))),
            "tan": lambda x: self._from_float(math.tan(self._to_radians(x))),
            "asin": lambda x: self._from_radians(math.asin(float(x))),
            "acos": lambda x: self._from_radians(math.acos(float(x))),
            "atan": lambda x: self._from_radians(math.atan(float(x))),
        }

    # ------------------------------------------------------------------
    # Settings hooks (change notifications)
    # ------------------------------------------------------------------

    def set_angle_mode(self, mode: str) -> None:
        self.angle_mode = mode

    def set_radix_char(self, radix_char: str) -> None:
        self.radix_char = radix_char

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def is_assignable(self, name: str) -> bool:
        return bool(_NAME_RE.match(name or "")) and name not in RESERVED_NAMES and name not in self._functions

    def assign(self, name: str, value) -> None:
        if not self.is_assignable(name):
            raise ValueError(f"cannot assign to {name!r}")
        number = numeric.parse(value)
        if numeric.is_nan(number):
            raise ValueError(f"{name!r} cannot hold a non-numeric value")
        self._variables[name] = number

    def clear_all_variables(self) -> None:
        self._variables = {name: self._variables[name] for name in RESERVED_NAMES}

    def current_bindings(self) -> List[VariableBinding]:
        return [VariableBinding(n, v) for n, v in self._variables.items() if n not in RESERVED_NAMES]

    def constants(self) -> List[Tuple[str, Decimal]]:
        return [(name, self._variables[name]) for name in RESERVED_NAMES]

    def function_names(self) -> List[str]:
        return sorted(self._functions)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, expression: str) -> Decimal:
        """Evaluate *expression*, store the result in ``ans`` and return it."""
        source = self._normalize(expression)
        if not source:
            raise EvaluationError("empty expression")
        try:
            tree = ast.parse(source, mode="exec")
        except SyntaxError:
            raise EvaluationError("syntax error") from None
        if len(tree.body) != 1:
            raise EvaluationError("syntax error")

        stmt = tree.body[0]
        target = None
        if isinstance(stmt, ast.Assign) and len(stmt.targets) == 1 and isinstance(stmt.targets[0], ast.Name):
            target = stmt.targets[0].id
            if not self.is_assignable(target):
                raise EvaluationError(f"cannot assign to {target}")
            node = stmt.value
        elif isinstance(stmt, ast.Expr):
            node = stmt.value
        else:
            raise EvaluationError("syntax error")

        value = self._eval(node)
        if not value.is_finite():
            raise EvaluationError("overflow")
        if target:
            self._variables[target] = value
        self._variables[ANS] = value
        return value

    def _normalize(self, expression: str) -> str:
        s = (expression or "").strip()
        if numeric.radix_symbol(self.radix_char) == ",":
            s = _DIGIT_COMMA_RE.sub(".", s).replace(";", ",")
        return s.replace("^", "**")

    def _eval(self, node: ast.AST) -> Decimal:
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
                raise EvaluationError("syntax error")
            value = CONTEXT.create_decimal(node.value if isinstance(node.value, int) else repr(node.value))
            if not value.is_finite():
                raise EvaluationError("overflow")
            return value

        if isinstance(node, ast.UnaryOp) and isinstance(node.op, (ast.UAdd, ast.USub)):
            operand = self._eval(node.operand)
            return CONTEXT.minus(operand) if isinstance(node.op, ast.USub) else CONTEXT.plus(operand)

        if isinstance(node, ast.BinOp) and type(node.op) in self._BINOPS:
            left, right = self._eval(node.left), self._eval(node.right)
            return self._checked("operator", self._BINOPS[type(node.op)], left, right)

        if isinstance(node, ast.Name):
            if node.id in self._variables:
                return self._variables[node.id]
            if node.id in self._functions:
                raise EvaluationError(f"{node.id} is a function")
            raise EvaluationError(f"unknown variable {node.id}")

        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name) or node.keywords:
                raise EvaluationError("syntax error")
            name = node.func.id
            func = self._functions.get(name)
            if func is None:
                raise EvaluationError(f"unknown function {name}")
            args = [self._eval(a) for a in node.args]
            if len(args) != 1:
                raise EvaluationError(f"{name} takes exactly one argument")
            result = self._checked(name, func, *args)
            if not result.is_finite():
                raise EvaluationError(f"domain error in {name}")
            return result

        raise EvaluationError("syntax error")

    @staticmethod
    def _checked(name: str, func: Callable[..., Decimal], *args: Decimal) -> Decimal:
        try:
            return func(*args)
        except (DivisionByZero, DivisionUndefined):
            raise EvaluationError("division by zero") from None
        except Overflow:
            raise EvaluationError("overflow") from None
        except (InvalidOperation, ValueError):
            if name == "operator":
                raise EvaluationError("invalid operation") from None
            raise EvaluationError(f"domain error in {name}") from None

    def _to_radians(self, x: Decimal) -> float:
        v = float(x)
        return math.radians(v) if self.angle_mode == "d" else v

    def _from_radians(self, v: float) -> Decimal:
        return self._from_float(math.degrees(v) if self.angle_mode == "d" else v)

    @staticmethod
    def _from_float(v: float) -> Decimal:
        if not math.isfinite(v):
            raise ValueError("result is not finite")
        return CONTEXT.create_decimal(repr(v))


__all__ = ["ANS", "PHI", "PI", "EvaluationError", "Evaluator"]
