"""Actual/estimate sanitizing.

Calendar feeds often fill the "actual" slot with a copy of the estimate
before results are out. An actual that equals its estimate is treated as a
placeholder and dropped; a real result essentially never lands on the
estimate to full precision.
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import replace
from typing import Any

from earningsdata.config import DEFAULT_CONFIG, DuplicatePolicy, EarningsDataConfig
from earningsdata.models.earnings import EarningsRecord
from earningsdata.numeric import (
    MAX_SAFE_INTEGER,
    normalize_large_magnitude,
    normalize_to_base_units,
)

logger = logging.getLogger(__name__)

EPS_ABS_TOLERANCE = 1e-6
REVENUE_ABS_TOLERANCE = 1e-2
RELATIVE_TOLERANCE = 1e-4

# Vendors mix full units with thousands/millions/billions for revenue.
UNIT_SCALES = (1, 1e3, 1e6, 1e9)


def sanitize_figure(
    actual: Any,
    estimate: Any,
    policy: DuplicatePolicy = DuplicatePolicy.EXACT,
    *,
    revenue: bool = False,
) -> Any:
    """Return ``actual``, or None when it is missing or duplicates ``estimate``.

    Args:
        actual: Reported value.
        estimate: Consensus value for the same metric.
        policy: EXACT compares with ``==`` (exact across int and float);
            TOLERANT applies absolute/relative tolerances.
        revenue: Use revenue tolerances and unit guessing under TOLERANT.
    """
    if actual is None:
        return None
    if estimate is None:
        return actual
    if is_duplicate(actual, estimate, policy, revenue=revenue):
        return None
    return actual


def is_duplicate(
    actual: Any,
    estimate: Any,
    policy: DuplicatePolicy = DuplicatePolicy.EXACT,
    *,
    revenue: bool = False,
) -> bool:
    if policy is DuplicatePolicy.EXACT:
        return actual == estimate

    a = normalize_to_base_units(actual)
    b = normalize_to_base_units(estimate)
    if a is None or b is None:
        return False
    if revenue:
        return nearly_equal(a, b, REVENUE_ABS_TOLERANCE) or equal_with_unit_guess(a, b)
    return nearly_equal(a, b)


def nearly_equal(
    a: float,
    b: float,
    abs_tol: float = EPS_ABS_TOLERANCE,
    rel_tol: float = RELATIVE_TOLERANCE,
) -> bool:
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


def equal_with_unit_guess(a: float, b: float) -> bool:
    """True when ``a`` and ``b`` agree after rescaling either by a unit step."""
    for scale_a in UNIT_SCALES:
        for scale_b in UNIT_SCALES:
            if nearly_equal(a * scale_a, b * scale_b, REVENUE_ABS_TOLERANCE):
                return True
    return False


def sanitize_earnings(
    record: EarningsRecord,
    config: EarningsDataConfig = DEFAULT_CONFIG,
) -> EarningsRecord:
    """Sanitize the EPS and revenue pairs of a record independently."""
    sanitized, _ = sanitize_earnings_with_flags(record, config)
    return sanitized


def sanitize_earnings_with_flags(
    record: EarningsRecord,
    config: EarningsDataConfig = DEFAULT_CONFIG,
) -> tuple[EarningsRecord, tuple[str, ...]]:
    """Like :func:`sanitize_earnings`, also naming each correction made.

    Flags are ``<field>_duplicate`` and ``<field>_invalid``, plus
    ``revenue_<side>_micro_units`` for integer revenue too large for a float
    that was divided down from micro-units before normalization.
    """
    flags: list[str] = []
    eps_actual, eps_estimate = _sanitize_pair(
        record, "eps", record.eps_actual, record.eps_estimate, config, flags,
    )
    revenue_actual, revenue_estimate = _sanitize_pair(
        record,
        "revenue",
        record.revenue_actual,
        record.revenue_estimate,
        config,
        flags,
    )
    sanitized = replace(
        record,
        eps_actual=eps_actual,
        eps_estimate=eps_estimate,
        revenue_actual=revenue_actual,
        revenue_estimate=revenue_estimate,
    )
    return sanitized, tuple(flags)


def is_actual_pending(record: EarningsRecord) -> bool:
    """True when an estimate exists but its actual has not been reported."""
    return (record.eps_estimate is not None and record.eps_actual is None) or (
        record.revenue_estimate is not None and record.revenue_actual is None
    )


def cap_revenue(
    value: float | None,
    ceiling: float = DEFAULT_CONFIG.revenue_ceiling,
    symbol: str = "",
) -> float | None:
    """Drop revenue figures above ``ceiling``; no quarter is that large."""
    if value is None:
        return None
    if value > ceiling:
        logger.warning("Revenue too high for %s: %s, dropping", symbol or "?", value)
        return None
    return value


def _sanitize_pair(
    record: EarningsRecord,
    name: str,
    actual: Any,
    estimate: Any,
    config: EarningsDataConfig,
    flags: list[str],
) -> tuple[float | None, float | None]:
    is_revenue = name == "revenue"
    repaired_actual = _repair_oversized(actual, config) if is_revenue else actual
    repaired_estimate = _repair_oversized(estimate, config) if is_revenue else estimate
    norm_actual = normalize_to_base_units(repaired_actual)
    norm_estimate = normalize_to_base_units(repaired_estimate)
    if repaired_estimate is not estimate:
        _note_micro_units(record, "estimate", estimate, norm_estimate, flags)

    # Two integers are compared as given, before any float conversion.
    if _is_integer(actual) and _is_integer(estimate):
        compare_actual, compare_estimate = actual, estimate
    else:
        compare_actual, compare_estimate = norm_actual, norm_estimate

    if (
        compare_actual is not None
        and compare_estimate is not None
        and sanitize_figure(
            compare_actual, compare_estimate, config.duplicate_policy, revenue=is_revenue
        )
        is None
    ):
        flags.append(f"{name}_actual_duplicate")
        logger.debug(
            "%s: %s actual %s duplicates estimate %s, dropping",
            record.symbol, name, actual, estimate,
        )
        return None, norm_estimate

    if actual is not None and norm_actual is None:
        flags.append(f"{name}_actual_invalid")
        logger.debug("%s: %s actual %r is not a usable number", record.symbol, name, actual)
        return None, norm_estimate

    if repaired_actual is not actual:
        _note_micro_units(record, "actual", actual, norm_actual, flags)
    return norm_actual, norm_estimate


def _repair_oversized(value: Any, config: EarningsDataConfig) -> Any:
    """Divide down micro-unit integers too large to survive float conversion.

    Smaller micro-unit values are repaired later by the pipeline; only
    integers past ``MAX_SAFE_INTEGER`` need fixing before normalization.
    """
    if not (
        config.repair_micro_units
        and _is_integer(value)
        and abs(value) > MAX_SAFE_INTEGER
        and abs(value) >= config.micro_unit_threshold
    ):
        return value
    try:
        return normalize_large_magnitude(
            value, config.micro_unit_threshold, config.micro_unit_divisor
        )
    except OverflowError:
        return value


def _note_micro_units(
    record: EarningsRecord,
    side: str,
    raw: Any,
    repaired: float | None,
    flags: list[str],
) -> None:
    if repaired is None:
        return
    flags.append(f"revenue_{side}_micro_units")
    logger.info(
        "%s: revenue %s %s repaired from micro-units to %s",
        record.symbol, side, raw, repaired,
    )


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)
