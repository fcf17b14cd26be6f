"""earningsdata: Earnings figure sanitizing and surprise math for US equities.

Drops placeholder actuals, normalizes vendor units, computes surprises
against consensus, estimate or prior guidance, and derives price change,
market cap and size class from a price snapshot.

Quick start::

    from earningsdata import build_earnings_view, load_config_from_env
    view = build_earnings_view(record, snapshot, config=load_config_from_env())
    view.eps_surprise.value
"""

from __future__ import annotations

import os

from earningsdata.change import (
    calculate_price_metrics,
    compute_change,
    compute_change_with_confidence,
    compute_market_cap,
    compute_market_cap_change,
    compute_price_change_percent,
    is_change_meaningful,
)
from earningsdata.config import (
    DEFAULT_CONFIG,
    DEFAULT_SIZE_THRESHOLDS,
    DuplicatePolicy,
    EarningsDataConfig,
    SizeThresholds,
)
from earningsdata.errors import EarningsDataError, EarningsDataErrorCode
from earningsdata.formatting import (
    SurpriseDisplay,
    change_direction,
    format_change_percentage,
    format_compact,
    format_market_cap_diff,
    format_revenue,
    format_surprise,
)
from earningsdata.guidance import (
    clamp_percent,
    compute_guidance_surprises,
    compute_surprise,
    detect_guidance_period,
    is_extreme,
    methods_compatible,
    midpoint,
    normalize_period,
    percent_diff,
    periods_match,
)
from earningsdata.models import (
    AccountingMethod,
    ChangeConfidence,
    ChangeResult,
    EarningsFigure,
    EarningsRecord,
    EarningsSummary,
    EarningsView,
    FiscalPeriod,
    FiscalPeriodTag,
    GuidancePeriod,
    GuidanceRecord,
    GuidanceSurprises,
    MarketSnapshot,
    PeriodDetection,
    PriceMetrics,
    SizeClass,
    SurpriseBasis,
    SurpriseResult,
)
from earningsdata.numeric import (
    MAX_SAFE_INTEGER,
    normalize_large_magnitude,
    normalize_to_base_units,
)
from earningsdata.pipeline import build_earnings_view, summarize_views
from earningsdata.sanitize import (
    is_actual_pending,
    sanitize_earnings,
    sanitize_earnings_with_flags,
    sanitize_figure,
)
from earningsdata.size import classify_market_cap_size

__version__ = "0.1.0"

__all__ = [
    # Config
    "EarningsDataConfig",
    "DuplicatePolicy",
    "SizeThresholds",
    "DEFAULT_CONFIG",
    "DEFAULT_SIZE_THRESHOLDS",
    "load_config_from_env",
    # Errors
    "EarningsDataError",
    "EarningsDataErrorCode",
    # Models
    "EarningsFigure",
    "EarningsRecord",
    "GuidanceRecord",
    "FiscalPeriod",
    "FiscalPeriodTag",
    "AccountingMethod",
    "SurpriseBasis",
    "SurpriseResult",
    "GuidancePeriod",
    "GuidanceSurprises",
    "PeriodDetection",
    "MarketSnapshot",
    "PriceMetrics",
    "ChangeConfidence",
    "ChangeResult",
    "SizeClass",
    "EarningsView",
    "EarningsSummary",
    # Numeric
    "MAX_SAFE_INTEGER",
    "normalize_to_base_units",
    "normalize_large_magnitude",
    # Sanitizing
    "sanitize_figure",
    "sanitize_earnings",
    "sanitize_earnings_with_flags",
    "is_actual_pending",
    # Surprises and guidance
    "compute_surprise",
    "compute_guidance_surprises",
    "detect_guidance_period",
    "percent_diff",
    "midpoint",
    "is_extreme",
    "clamp_percent",
    "normalize_period",
    "periods_match",
    "methods_compatible",
    # Change and size
    "compute_change",
    "compute_price_change_percent",
    "compute_market_cap_change",
    "compute_change_with_confidence",
    "is_change_meaningful",
    "compute_market_cap",
    "calculate_price_metrics",
    "classify_market_cap_size",
    # Formatting
    "SurpriseDisplay",
    "format_change_percentage",
    "change_direction",
    "format_compact",
    "format_revenue",
    "format_market_cap_diff",
    "format_surprise",
    # Pipeline
    "build_earnings_view",
    "summarize_views",
]

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def load_config_from_env() -> EarningsDataConfig:
    """Zero-config factory that reads thresholds and switches from env vars.

    Unset variables keep their defaults.

    Environment variables:
        EARNINGS_EXTREME_THRESHOLD: Extreme surprise threshold in percent (default: 300).
        EARNINGS_DUPLICATE_POLICY: "exact" or "tolerant" (default: "exact").
        EARNINGS_REPAIR_MICRO_UNITS: Repair micro-unit revenue (default: true).
        EARNINGS_MICRO_UNIT_THRESHOLD: Micro-unit revenue magnitude (default: 1e13).
        EARNINGS_REVENUE_CEILING: Largest plausible revenue (default: 1e12).
        EARNINGS_ADJUST_GUIDANCE_PERIOD: Rescale quarterly/yearly guidance (default: false).

    Raises:
        EarningsDataError: With code ``CONFIG_INVALID`` if a value cannot be parsed.
    """
    defaults = DEFAULT_CONFIG
    policy_str = os.getenv("EARNINGS_DUPLICATE_POLICY", defaults.duplicate_policy.value)
    try:
        policy = DuplicatePolicy(policy_str.strip().lower())
    except ValueError:
        raise EarningsDataError(
            f"EARNINGS_DUPLICATE_POLICY must be 'exact' or 'tolerant', got {policy_str!r}",
            EarningsDataErrorCode.CONFIG_INVALID,
        ) from None

    return EarningsDataConfig(
        extreme_threshold=_env_float("EARNINGS_EXTREME_THRESHOLD", defaults.extreme_threshold),
        duplicate_policy=policy,
        repair_micro_units=_env_bool("EARNINGS_REPAIR_MICRO_UNITS", defaults.repair_micro_units),
        micro_unit_threshold=_env_float(
            "EARNINGS_MICRO_UNIT_THRESHOLD", defaults.micro_unit_threshold
        ),
        revenue_ceiling=_env_float("EARNINGS_REVENUE_CEILING", defaults.revenue_ceiling),
        adjust_guidance_period=_env_bool(
            "EARNINGS_ADJUST_GUIDANCE_PERIOD", defaults.adjust_guidance_period
        ),
    )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise EarningsDataError(
            f"{name} must be a number, got {raw!r}",
            EarningsDataErrorCode.CONFIG_INVALID,
        ) from None
    if not value > 0 or value == float("inf"):
        raise EarningsDataError(
            f"{name} must be a positive finite number, got {raw!r}",
            EarningsDataErrorCode.CONFIG_INVALID,
        )
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise EarningsDataError(
        f"{name} must be a boolean (true/false), got {raw!r}",
        EarningsDataErrorCode.CONFIG_INVALID,
    )
