"""Numeric normalization for vendor-supplied figures.

Vendors hand over the same metric as floats, integers beyond float
precision, Decimals, or suffixed strings such as ``"26.79M"``. The helpers
here turn all of them into one finite float in base units, or ``None`` when
that cannot be done safely. Nothing in this module raises on bad input.
"""

from __future__ import annotations

import logging
import math
import numbers
import re
from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

# Largest integer a float holds exactly.
MAX_SAFE_INTEGER = 2**53 - 1

_SUFFIX_MULTIPLIERS = {
    "": Decimal(1),
    "K": Decimal(1_000),
    "M": Decimal(1_000_000),
    "B": Decimal(1_000_000_000),
}

_SUFFIXED_NUMBER = re.compile(r"^([+-]?(?:\d+(?:\.\d*)?|\.\d+))([KMB]?)$")
_INTEGER_TEXT = re.compile(r"^[+-]?\d+$")


def normalize_to_base_units(value: Any) -> float | None:
    """Convert a number, Decimal, int or K/M/B-suffixed string to a float.

    Returns None if the value is missing, unparsable, non-finite, or larger
    in magnitude than ``MAX_SAFE_INTEGER``. Overflow is logged as a warning.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, numbers.Integral):
        exact = int(value)
        if abs(exact) > MAX_SAFE_INTEGER:
            _warn_overflow(value)
            return None
        return float(exact)

    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        number = float(value)
    elif isinstance(value, numbers.Real):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        parsed = _parse_suffixed(value)
        if parsed is None:
            return None
        number = parsed
    else:
        return None

    if not math.isfinite(number):
        return None
    if abs(number) > MAX_SAFE_INTEGER:
        _warn_overflow(value)
        return None
    return number


def normalize_large_magnitude(
    value: int | float | None,
    threshold: float = 1e13,
    divisor: float = 1e6,
) -> int | float | None:
    """Undo the micro-unit revenue defect seen in some upstream feeds.

    A single quarter's revenue of $10T or more does not exist, so values at or
    above ``threshold`` are taken to be in millionths and divided by
    ``divisor``. Smaller values are returned unchanged.
    """
    if value is None:
        return None
    if abs(value) >= threshold:
        return value / divisor
    return value


def to_float(value: Any) -> float | None:
    """Finite float for any numeric-looking value, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    elif isinstance(value, Decimal):
        if not value.is_finite():
            return None
        number = float(value)
    elif isinstance(value, numbers.Real):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def to_int_or_none(value: Any) -> int | None:
    """Round a numeric value to an int, rounding halves upward.

    Integers and integer strings are kept exact regardless of size.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, str) and _INTEGER_TEXT.match(value.strip()):
        # Python caps digit count for str -> int conversion.
        try:
            return int(value.strip())
        except ValueError:
            return None
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return int((value + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))
    number = to_float(value)
    if number is None:
        return None
    return math.floor(number + 0.5)


def to_scaled_int(value: Any, scale: int) -> int | None:
    """Scale a decimal figure to an int, e.g. EPS in thousandths."""
    number = to_float(value)
    if number is None:
        return None
    return math.floor(number * scale + 0.5)


def jsonable(obj: Any) -> Any:
    """Recursively make figures safe for JSON consumers.

    Integers beyond ``MAX_SAFE_INTEGER`` and Decimals become floats; the
    precision loss is accepted because the output is for display only.
    """
    if isinstance(obj, bool) or obj is None:
        return obj
    if isinstance(obj, numbers.Integral):
        exact = int(obj)
        return float(exact) if abs(exact) > MAX_SAFE_INTEGER else exact
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, dict):
        return {key: jsonable(val) for key, val in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [jsonable(item) for item in obj]
    return obj


def _parse_suffixed(text: str) -> float | None:
    match = _SUFFIXED_NUMBER.match(text.strip().upper())
    if not match:
        return None
    digits, suffix = match.groups()
    try:
        return float(Decimal(digits) * _SUFFIX_MULTIPLIERS[suffix])
    except (InvalidOperation, OverflowError):
        return None


def _warn_overflow(value: Any) -> None:
    logger.warning("Value too large for safe conversion: %s", value)
