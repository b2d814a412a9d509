"""Decimal number helpers (parsing and formatting).

Every value handled by the calculator is a :class:`decimal.Decimal` computed in
:data:`CONTEXT`, a private context with :data:`DECPRECISION` significant
digits. ``NaN`` is the single "not a number" marker; infinities are folded
into it because the calculator never displays them.

Two renderings exist:

* :func:`format_full` is the lossless, locale independent form used for
  anything written to disk (session files, persisted variables, history).
* :func:`format_display` honours the user's format code, precision and radix
  character and is only ever shown on screen.
"""

from __future__ import annotations

import locale
from decimal import ROUND_HALF_EVEN, Context, Decimal, DecimalException
from typing import Any

DECPRECISION = 78
AUTO_DIGITS = 15

CONTEXT = Context(prec=DECPRECISION, rounding=ROUND_HALF_EVEN)
NAN = Decimal("NaN")

# format code -> (prefix, format spec) for integer bases
_BASES = {
    "h": ("0x", "X"),
    "o": ("0o", "o"),
    "b": ("0b", "b"),
}


def parse(text: Any) -> Decimal:
    """Parse *text* into a finite Decimal, or return :data:`NAN`."""
    if isinstance(text, Decimal):
        return text if text.is_finite() else NAN
    s = str(text if text is not None else "").strip()
    if not s:
        return NAN
    try:
        value = CONTEXT.create_decimal(s)
    except (DecimalException, ValueError):
        return NAN
    if not value.is_finite():
        return NAN
    return value


def is_nan(value: Any) -> bool:
    return not isinstance(value, Decimal) or not value.is_finite()


def format_full(value: Decimal) -> str:
    """Render *value* with every significant digit, using ``.`` as radix."""
    if is_nan(value):
        return "NaN"
    if value.is_zero():
        return "0"
    v = value.normalize(CONTEXT)
    if -DECPRECISION < v.adjusted() < DECPRECISION:
        return format(v, "f")
    return format(v, "e")


def radix_symbol(radix_char: str) -> str:
    """Resolve a radix setting (``C``, ``.`` or ``,``) to the actual character."""
    if radix_char in (".", ","):
        return radix_char
    try:
        point = locale.localeconv().get("decimal_point") or "."
    except Exception:
        point = "."
    return point if point in (".", ",") else "."


def format_display(value: Decimal, format_code: str = "g", precision: int = -1, radix_char: str = ".") -> str:
    """Render *value* for the screen.

    ``precision`` is the number of decimals for fixed/scientific/engineering
    output and the number of significant digits for general output; ``-1``
    selects automatic precision.
    """
    if is_nan(value):
        return "NaN"
    if format_code in _BASES:
        text = _format_integer_base(value, format_code)
    elif format_code == "f":
        text = _format_fixed(value, precision)
    elif format_code == "e":
        text = _format_exponent(value, precision, engineering=False)
    elif format_code == "n":
        text = _format_exponent(value, precision, engineering=True)
    else:
        text = _format_general(value, precision)
    return text.replace(".", radix_symbol(radix_char))


def _round_significant(value: Decimal, digits: int) -> Decimal:
    return Context(prec=max(1, digits), rounding=ROUND_HALF_EVEN).plus(value).normalize(CONTEXT)


def _format_integer_base(value: Decimal, code: str) -> str:
    prefix, spec = _BASES[code]
    n = int(value)
    sign = "-" if n < 0 else ""
    return f"{sign}{prefix}{format(abs(n), spec)}"


def _format_fixed(value: Decimal, precision: int) -> str:
    if precision < 0:
        if value.is_zero():
            return "0"
        return format(_round_significant(value, AUTO_DIGITS), "f")
    return format(value, f".{precision}f")


def _format_exponent(value: Decimal, precision: int, *, engineering: bool) -> str:
    if value.is_zero():
        mantissa, exponent = Decimal(0), 0
    else:
        if precision < 0:
            value = _round_significant(value, AUTO_DIGITS)
        exponent = value.adjusted()
        if engineering:
            exponent -= exponent % 3
        mantissa = value.scaleb(-exponent, CONTEXT)

    if precision < 0:
        text = format(mantissa.normalize(CONTEXT), "f") if not mantissa.is_zero() else "0"
    else:
        text = format(mantissa, f".{precision}f")
        # rounding may carry the mantissa into the next decade
        limit = 1000 if engineering else 10
        if abs(Decimal(text)) >= limit:
            step = 3 if engineering else 1
            exponent += step
            text = format(mantissa.scaleb(-step, CONTEXT), f".{precision}f")
    return f"{text}e{exponent:+d}"


def _format_general(value: Decimal, precision: int) -> str:
    digits = precision if precision > 0 else AUTO_DIGITS
    if value.is_zero():
        return "0"
    rounded = _round_significant(value, digits)
    exponent = rounded.adjusted()
    if -5 <= exponent < digits:
        return format(rounded, "f")
    return format(rounded, "e")


__all__ = [
    "AUTO_DIGITS",
    "CONTEXT",
    "DECPRECISION",
    "NAN",
    "format_display",
    "format_full",
    "is_nan",
    "parse",
    "radix_symbol",
]
