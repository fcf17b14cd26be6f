"""Surprise and guidance comparison.

A surprise is the percentage deviation of one figure from a baseline. The
baseline is chosen in priority order: a vendor consensus percentage, the
analyst estimate for the same period and accounting basis, then the midpoint
of the company's previous guidance range. Incomparable inputs produce an
empty result rather than an error.
"""

from __future__ import annotations

import math
from typing import Any

from earningsdata.config import DEFAULT_CONFIG, EarningsDataConfig
from earningsdata.models.earnings import EarningsRecord, GuidanceRecord
from earningsdata.models.fiscal import (
    GAAP_METHODS,
    NON_GAAP_METHODS,
    AccountingMethod,
    FiscalPeriod,
    FiscalPeriodTag,
)
from earningsdata.models.surprise import (
    GuidancePeriod,
    GuidanceSurprises,
    PeriodDetection,
    SurpriseBasis,
    SurpriseResult,
)
from earningsdata.numeric import normalize_to_base_units, to_float

LOW_CONFIDENCE = 70


def normalize_period(value: FiscalPeriod | str | None) -> FiscalPeriod | None:
    return FiscalPeriod.parse(value)


def periods_match(a: FiscalPeriodTag | None, b: FiscalPeriodTag | None) -> bool:
    if a is None:
        return False
    return a.matches(b)


def classify_method(value: str | None) -> AccountingMethod:
    if not value:
        return AccountingMethod.UNKNOWN
    method = value.strip().lower()
    if method in GAAP_METHODS:
        return AccountingMethod.GAAP
    if method in NON_GAAP_METHODS:
        return AccountingMethod.NON_GAAP
    return AccountingMethod.UNKNOWN


def methods_compatible(a: str | None, b: str | None) -> bool:
    """Whether figures reported under methods ``a`` and ``b`` can be compared.

    Missing or unrecognised methods are assumed compatible.
    """
    if not a or not b:
        return True
    if a.strip().lower() == b.strip().lower():
        return True
    group_a = classify_method(a)
    group_b = classify_method(b)
    if AccountingMethod.UNKNOWN in (group_a, group_b):
        return True
    return group_a is group_b


def percent_diff(a: Any, b: Any, epsilon: float = DEFAULT_CONFIG.denominator_epsilon) -> float | None:
    """``(a - b) / |b|`` in percent; None for missing, non-finite or ~zero ``b``."""
    x = to_float(a)
    y = to_float(b)
    if x is None or y is None or abs(y) < epsilon:
        return None
    return ((x - y) / abs(y)) * 100


def midpoint(low: Any, high: Any) -> float | None:
    x = to_float(low)
    y = to_float(high)
    if x is None or y is None:
        return None
    return (x + y) / 2


def is_extreme(value: float | None, threshold: float = DEFAULT_CONFIG.extreme_threshold) -> bool:
    return value is not None and abs(value) > threshold


def clamp_percent(value: float, threshold: float = DEFAULT_CONFIG.extreme_threshold) -> float:
    return max(-threshold, min(threshold, value))


def compute_surprise(
    *,
    guide: Any = None,
    estimate: Any = None,
    consensus_pct: Any = None,
    prev_min: Any = None,
    prev_max: Any = None,
    guide_fiscal: FiscalPeriodTag | None = None,
    estimate_fiscal: FiscalPeriodTag | None = None,
    guide_method: str | None = None,
    estimate_method: str | None = None,
    config: EarningsDataConfig = DEFAULT_CONFIG,
) -> SurpriseResult:
    """Pick the first usable baseline and compute the surprise against it.

    1. ``consensus_pct`` when present and finite.
    2. ``guide`` vs ``estimate`` when fiscal tags match and methods are
       compatible.
    3. ``guide`` vs the midpoint of ``prev_min``/``prev_max``.
    """
    threshold = config.extreme_threshold

    consensus = to_float(consensus_pct)
    if consensus is not None:
        return _result(consensus, SurpriseBasis.CONSENSUS, threshold)

    if (
        guide is not None
        and estimate is not None
        and periods_match(guide_fiscal, estimate_fiscal)
        and methods_compatible(guide_method, estimate_method)
    ):
        value = percent_diff(guide, estimate, config.denominator_epsilon)
        if value is not None:
            return _result(value, SurpriseBasis.ESTIMATE, threshold)

    mid = midpoint(prev_min, prev_max)
    if guide is not None and mid is not None:
        value = percent_diff(guide, mid, config.denominator_epsilon)
        if value is not None:
            return _result(value, SurpriseBasis.PREVIOUS_MID, threshold)

    return SurpriseResult.empty()


def detect_guidance_period(actual: Any, guidance: Any) -> PeriodDetection:
    """Guess whether guidance covers a different period than the actual.

    A ratio near 4 means quarterly guidance against a yearly actual, near
    0.25 the reverse; the guidance is rescaled to the actual's period.
    """
    actual_num = to_float(actual)
    guidance_num = to_float(guidance)
    if not actual_num or not guidance_num:
        return PeriodDetection(guidance, GuidancePeriod.UNKNOWN, 0)

    ratio = actual_num / guidance_num
    # Integer revenue stays integer when rescaled.
    exact = isinstance(guidance, int) and not isinstance(guidance, bool)
    if 3.5 <= ratio <= 4.5:
        adjusted = guidance * 4 if exact else guidance_num * 4
        return PeriodDetection(adjusted, GuidancePeriod.QUARTERLY, 85)
    if 0.2 <= ratio <= 0.3:
        adjusted = guidance // 4 if exact else guidance_num / 4
        return PeriodDetection(adjusted, GuidancePeriod.YEARLY, 85)
    if 0.8 <= ratio <= 1.2:
        return PeriodDetection(guidance, GuidancePeriod.UNKNOWN, 90)
    return PeriodDetection(guidance, GuidancePeriod.UNKNOWN, 50)


def compute_guidance_surprises(
    guidance: GuidanceRecord,
    earnings: EarningsRecord,
    config: EarningsDataConfig = DEFAULT_CONFIG,
) -> GuidanceSurprises:
    """EPS and revenue guidance surprises for one symbol.

    Estimates come from ``earnings``; their fiscal period defaults to the
    earnings record's period when the guidance row does not name one.
    """
    warnings: list[str] = []
    estimate_fiscal = guidance.estimate_fiscal or earnings.fiscal

    eps_guide = _point_guidance(
        guidance.eps_guidance, guidance.eps_guidance_min, guidance.eps_guidance_max,
    )
    revenue_guide = _point_guidance(
        normalize_to_base_units(guidance.revenue_guidance),
        normalize_to_base_units(guidance.revenue_guidance_min),
        normalize_to_base_units(guidance.revenue_guidance_max),
    )
    revenue_actual = normalize_to_base_units(earnings.revenue_actual)

    if config.adjust_guidance_period:
        eps_guide = _adjust(earnings.eps_actual, eps_guide, "EPS", warnings)
        revenue_guide = _adjust(revenue_actual, revenue_guide, "Revenue", warnings)

    eps = compute_surprise(
        guide=eps_guide,
        estimate=earnings.eps_estimate,
        consensus_pct=guidance.eps_consensus_pct,
        prev_min=guidance.previous_eps_min,
        prev_max=guidance.previous_eps_max,
        guide_fiscal=guidance.fiscal,
        estimate_fiscal=estimate_fiscal,
        guide_method=guidance.eps_method,
        estimate_method=guidance.estimate_eps_method,
        config=config,
    )
    revenue = compute_surprise(
        guide=revenue_guide,
        estimate=normalize_to_base_units(earnings.revenue_estimate),
        consensus_pct=guidance.revenue_consensus_pct,
        prev_min=normalize_to_base_units(guidance.previous_revenue_min),
        prev_max=normalize_to_base_units(guidance.previous_revenue_max),
        guide_fiscal=guidance.fiscal,
        estimate_fiscal=estimate_fiscal,
        guide_method=guidance.revenue_method,
        estimate_method=guidance.estimate_revenue_method,
        config=config,
    )
    return GuidanceSurprises(eps=eps, revenue=revenue, warnings=tuple(warnings))


def _result(value: float, basis: SurpriseBasis, threshold: float) -> SurpriseResult:
    return SurpriseResult(value=value, basis=basis, extreme=is_extreme(value, threshold))


def _point_guidance(point: Any, low: Any, high: Any) -> Any:
    if point is not None and not _is_nan(point):
        return point
    return midpoint(low, high)


def _adjust(actual: Any, guide: Any, label: str, warnings: list[str]) -> Any:
    if actual is None or guide is None:
        return guide
    detection = detect_guidance_period(actual, guide)
    if detection.confidence < LOW_CONFIDENCE:
        warnings.append(
            f"Low confidence in {label} guidance period detection ({detection.confidence}%)"
        )
    if detection.period is not GuidancePeriod.UNKNOWN:
        warnings.append(
            f"{label} guidance adjusted from {detection.period.value} to match actual period"
        )
    return detection.adjusted_guidance


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)
