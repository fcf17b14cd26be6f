"""Data quality validation for earnings rows and price snapshots."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from earningsdata.change import compute_price_change_percent
from earningsdata.config import DEFAULT_CONFIG, EarningsDataConfig
from earningsdata.models.earnings import EarningsRecord
from earningsdata.models.market import MarketSnapshot
from earningsdata.numeric import MAX_SAFE_INTEGER, normalize_to_base_units, to_float
from earningsdata.sanitize import sanitize_earnings_with_flags

# Actual and estimate this many times apart are almost surely in different units.
UNIT_MISMATCH_RATIO = 1000


@dataclass
class ValidationCheck:
    """Outcome of one named check on an earnings row or price snapshot.

    Attributes:
        name: Check identifier, e.g. ``"no_placeholders"``.
        passed: Whether the row passed.
        message: What was wrong, empty when the check passed.
    """

    name: str
    passed: bool
    message: str = ""


@dataclass
class ValidationResult:
    """All checks run on one row, in the order they ran."""

    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def failed_checks(self) -> list[ValidationCheck]:
        return [c for c in self.checks if not c.passed]


def validate_earnings(
    record: EarningsRecord,
    config: EarningsDataConfig = DEFAULT_CONFIG,
) -> ValidationResult:
    """Run all quality checks on a raw earnings row.

    Checks:
        1. Finite values (no NaN/Inf, parsable revenue)
        2. No placeholder actuals (actual == estimate)
        3. No micro-unit revenue (>= micro-unit threshold)
        4. Revenue below the ceiling
        5. Revenue actual and estimate in the same unit
        6. Non-negative revenue
    """
    result = ValidationResult()
    revenue_actual = normalize_to_base_units(record.revenue_actual)
    revenue_estimate = normalize_to_base_units(record.revenue_estimate)

    # 1. Finite values
    bad = 0
    for val in (record.eps_actual, record.eps_estimate):
        if isinstance(val, float) and not math.isfinite(val):
            bad += 1
    for raw, norm in (
        (record.revenue_actual, revenue_actual),
        (record.revenue_estimate, revenue_estimate),
    ):
        if raw is not None and norm is None and not _oversized_micro_units(raw, config):
            bad += 1
    if bad:
        result.checks.append(ValidationCheck("finite_values", False, f"{bad} unusable values"))
    else:
        result.checks.append(ValidationCheck("finite_values", True))

    # 2. Placeholder actuals
    _, flags = sanitize_earnings_with_flags(record, config)
    duplicated = [flag.split("_")[0] for flag in flags if flag.endswith("_duplicate")]
    if duplicated:
        result.checks.append(
            ValidationCheck(
                "no_placeholders", False, f"actual equals estimate for {', '.join(duplicated)}"
            )
        )
    else:
        result.checks.append(ValidationCheck("no_placeholders", True))

    revenues = [v for v in (revenue_actual, revenue_estimate) if v is not None]

    # 3. Micro-unit revenue
    micro = sum(1 for v in revenues if abs(v) >= config.micro_unit_threshold) + sum(
        1
        for raw in (record.revenue_actual, record.revenue_estimate)
        if _oversized_micro_units(raw, config)
    )
    if micro:
        result.checks.append(
            ValidationCheck("micro_units", False, f"{micro} revenue values look like micro-units")
        )
    else:
        result.checks.append(ValidationCheck("micro_units", True))

    # 4. Ceiling (micro-unit values are reported by the previous check)
    too_high = sum(
        1 for v in revenues if config.revenue_ceiling < abs(v) < config.micro_unit_threshold
    )
    if too_high:
        result.checks.append(
            ValidationCheck(
                "revenue_ceiling", False, f"{too_high} revenue values above {config.revenue_ceiling:g}"
            )
        )
    else:
        result.checks.append(ValidationCheck("revenue_ceiling", True))

    # 5. Unit mismatch
    mismatch = False
    if revenue_actual and revenue_estimate:
        ratio = abs(revenue_actual / revenue_estimate)
        mismatch = ratio >= UNIT_MISMATCH_RATIO or ratio <= 1 / UNIT_MISMATCH_RATIO
    if mismatch:
        result.checks.append(
            ValidationCheck(
                "unit_consistency",
                False,
                f"revenue actual {revenue_actual:g} vs estimate {revenue_estimate:g}",
            )
        )
    else:
        result.checks.append(ValidationCheck("unit_consistency", True))

    # 6. Negative revenue
    negative = sum(1 for v in revenues if v < 0)
    if negative:
        result.checks.append(
            ValidationCheck("revenue_sign", False, f"{negative} negative revenue values")
        )
    else:
        result.checks.append(ValidationCheck("revenue_sign", True))

    return result


def validate_snapshot(
    snapshot: MarketSnapshot,
    config: EarningsDataConfig = DEFAULT_CONFIG,
) -> ValidationResult:
    """Run all quality checks on a price snapshot.

    Checks:
        1. Prices present
        2. Price sanity (positive, below the price cap)
        3. Shares sanity (positive, below the share cap)
        4. Price change within the daily limit
    """
    result = ValidationResult()
    price = to_float(snapshot.current_price)
    previous = to_float(snapshot.previous_close)

    # 1. Presence
    if price is None or previous is None:
        result.checks.append(
            ValidationCheck("prices_present", False, "current price or previous close missing")
        )
        return result
    result.checks.append(ValidationCheck("prices_present", True))

    # 2. Price sanity
    bad_prices = sum(1 for p in (price, previous) if p <= 0 or p > config.max_price)
    if bad_prices:
        result.checks.append(
            ValidationCheck("price_sanity", False, f"{bad_prices} prices out of range")
        )
    else:
        result.checks.append(ValidationCheck("price_sanity", True))

    # 3. Shares sanity
    shares = to_float(snapshot.shares_outstanding)
    if snapshot.shares_outstanding is not None and (
        shares is None or shares <= 0 or shares > config.max_shares
    ):
        result.checks.append(
            ValidationCheck(
                "shares_sanity", False, f"shares outstanding {snapshot.shares_outstanding}"
            )
        )
    else:
        result.checks.append(ValidationCheck("shares_sanity", True))

    # 4. Daily change limit
    change = compute_price_change_percent(price, previous)
    if change is not None and abs(change) > config.max_price_change_pct:
        result.checks.append(
            ValidationCheck("price_change", False, f"{change:.2f}% move")
        )
    else:
        result.checks.append(ValidationCheck("price_change", True))

    return result


def _oversized_micro_units(value: object, config: EarningsDataConfig) -> bool:
    # Micro-unit integers past float precision fail normalization outright.
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and abs(value) > MAX_SAFE_INTEGER
        and abs(value) >= config.micro_unit_threshold
    )
