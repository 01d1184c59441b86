"""Utility functions for the arbitrage calculator.

This module provides helpers for coercing user input into ``Decimal`` values,
clamping them to the ranges the engine works with, matching enumerated
choices case-insensitively and parsing dates for one-time investments.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation, getcontext
from typing import Iterable, Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

ZERO = Decimal("0")

Number = Union[Decimal, int, float, str]


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and surrounding whitespace. It raises
    ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def to_decimal(value: Number) -> Decimal:
    """Return ``value`` as a ``Decimal``.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return decimal_from_str(repr(value))
    return decimal_from_str(str(value))


def whole_number(value: Number, label: str) -> int:
    """Return ``value`` as an ``int``, rejecting fractional values.

    ``3``, ``3.0`` and ``"3"`` are accepted; ``1.5`` and ``True`` are not.
    """
    try:
        number = to_decimal(value)
    except ValueError as exc:
        raise ValueError(f"Invalid {label}: {value}") from exc
    if number != number.to_integral_value():
        raise ValueError(f"Invalid {label}: {value}; expected a whole number")
    return int(number)


_TRUE = {"true", "yes", "1"}
_FALSE = {"false", "no", "0"}


def parse_flag(value: Union[bool, str], label: str) -> bool:
    """Interpret a JSON boolean or a ``true``/``false`` string.

    Raises
    ------
    ValueError
        For any other value, including numbers.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        wanted = value.strip().lower()
        if wanted in _TRUE:
            return True
        if wanted in _FALSE:
            return False
    raise ValueError(f"Invalid {label}: {value!r}; expected true or false")


def non_negative(value: Decimal) -> Decimal:
    """Clamp negative amounts and rates to zero."""
    return value if value > ZERO else ZERO


def total(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def parse_choice(value: str, choices: Iterable[str], label: str) -> str:
    """Match ``value`` against ``choices`` ignoring case.

    Returns the canonical spelling from ``choices``.

    Raises
    ------
    ValueError
        If ``value`` does not name one of the choices.
    """
    wanted = value.strip().lower()
    for choice in choices:
        if choice.lower() == wanted:
            return choice
    raise ValueError(f"Invalid {label}: {value}; expected one of {', '.join(choices)}")


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM`` or ``YYYY-MM-DD`` string into a ``date``.

    A missing day component is normalized to the first day of the month.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    try:
        parts = value.strip().split("-")
        if len(parts) < 2:
            raise ValueError
        year = int(parts[0])
        month = int(parts[1])
        day = int(parts[2]) if len(parts) > 2 else 1
        return date(year, month, day)
    except ValueError as exc:
        raise ValueError(f"Invalid date string: {value}") from exc
