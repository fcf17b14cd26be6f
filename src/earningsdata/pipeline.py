"""Per-row pipeline from raw vendor records to a display-ready view."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable

from earningsdata.change import calculate_price_metrics
from earningsdata.config import DEFAULT_CONFIG, EarningsDataConfig
from earningsdata.errors import EarningsDataError, EarningsDataErrorCode
from earningsdata.guidance import compute_guidance_surprises, is_extreme, percent_diff
from earningsdata.models.earnings import EarningsRecord, GuidanceRecord
from earningsdata.models.market import MarketSnapshot, SizeClass
from earningsdata.models.surprise import SurpriseBasis, SurpriseResult
from earningsdata.models.view import EarningsSummary, EarningsView
from earningsdata.numeric import normalize_large_magnitude, to_float
from earningsdata.sanitize import cap_revenue, sanitize_earnings_with_flags

logger = logging.getLogger(__name__)

TOP_MOVERS = 3


def build_earnings_view(
    record: EarningsRecord,
    snapshot: MarketSnapshot | None = None,
    guidance: GuidanceRecord | None = None,
    config: EarningsDataConfig | None = None,
) -> EarningsView:
    """Sanitize a row and compute everything shown for it.

    Steps:
        1. Drop placeholder and unusable actuals.
        2. Repair micro-unit revenue and drop revenue above the ceiling.
        3. EPS and revenue surprise of actual against estimate.
        4. Guidance surprises, when guidance is given.
        5. Price metrics and size class, when a snapshot is given.

    Raises:
        EarningsDataError: If ``snapshot`` or ``guidance`` belongs to a
            different symbol than ``record``.
    """
    config = config or DEFAULT_CONFIG
    for other in (snapshot, guidance):
        if other is not None and other.symbol != record.symbol:
            raise EarningsDataError(
                f"{type(other).__name__} for {other.symbol} passed with record for {record.symbol}",
                EarningsDataErrorCode.INVALID_INPUT,
            )

    sanitized, sanitize_flags = sanitize_earnings_with_flags(record, config)
    flags = list(sanitize_flags)
    sanitized = replace(
        sanitized,
        revenue_actual=_repair_revenue(sanitized, "actual", sanitized.revenue_actual, config, flags),
        revenue_estimate=_repair_revenue(
            sanitized, "estimate", sanitized.revenue_estimate, config, flags
        ),
    )

    guidance_surprises = (
        compute_guidance_surprises(guidance, sanitized, config) if guidance is not None else None
    )
    price = calculate_price_metrics(snapshot, config) if snapshot is not None else None

    return EarningsView(
        record=sanitized,
        eps_surprise=_actual_surprise(sanitized.eps_actual, sanitized.eps_estimate, config),
        revenue_surprise=_actual_surprise(
            sanitized.revenue_actual, sanitized.revenue_estimate, config
        ),
        guidance=guidance_surprises,
        price=price,
        size=price.size if price is not None and price.size is not None else SizeClass.SMALL,
        flags=tuple(flags),
    )


def summarize_views(views: Iterable[EarningsView], top: int = TOP_MOVERS) -> EarningsSummary:
    """Aggregate counts, size buckets, movers and beats/misses."""
    views = list(views)
    size_distribution = {size: 0 for size in SizeClass}
    market_cap_by_size = {size: 0 for size in SizeClass}
    for view in views:
        size_distribution[view.size] += 1
        if view.price is not None and view.price.market_cap is not None:
            market_cap_by_size[view.size] += view.price.market_cap

    movers = [v for v in views if v.price is not None and v.price.price_change_pct is not None]
    gainers = sorted(movers, key=lambda v: v.price.price_change_pct, reverse=True)
    losers = sorted(movers, key=lambda v: v.price.price_change_pct)

    eps_beats, eps_misses = _beats_and_misses(
        (v.record.eps_actual, v.record.eps_estimate) for v in views
    )
    revenue_beats, revenue_misses = _beats_and_misses(
        (v.record.revenue_actual, v.record.revenue_estimate) for v in views
    )
    return EarningsSummary(
        total=len(views),
        with_eps=sum(1 for v in views if v.record.eps_actual is not None),
        with_revenue=sum(1 for v in views if v.record.revenue_actual is not None),
        size_distribution=size_distribution,
        market_cap_by_size=market_cap_by_size,
        top_gainers=tuple(gainers[:top]),
        top_losers=tuple(losers[:top]),
        eps_beats=eps_beats,
        eps_misses=eps_misses,
        revenue_beats=revenue_beats,
        revenue_misses=revenue_misses,
    )


def _actual_surprise(actual: Any, estimate: Any, config: EarningsDataConfig) -> SurpriseResult:
    value = percent_diff(actual, estimate, config.denominator_epsilon)
    if value is None:
        return SurpriseResult.empty()
    return SurpriseResult(
        value=value,
        basis=SurpriseBasis.ESTIMATE,
        extreme=is_extreme(value, config.extreme_threshold),
    )


def _repair_revenue(
    record: EarningsRecord,
    side: str,
    value: float | None,
    config: EarningsDataConfig,
    flags: list[str],
) -> float | None:
    if value is None:
        return None
    if config.repair_micro_units:
        repaired = normalize_large_magnitude(
            value, config.micro_unit_threshold, config.micro_unit_divisor
        )
        if repaired != value:
            if f"revenue_{side}_micro_units" not in flags:
                flags.append(f"revenue_{side}_micro_units")
            logger.info(
                "%s: revenue %s %s repaired from micro-units to %s",
                record.symbol, side, value, repaired,
            )
            value = repaired
    capped = cap_revenue(value, config.revenue_ceiling, record.symbol)
    if capped is None:
        flags.append(f"revenue_{side}_above_ceiling")
    return capped


def _beats_and_misses(pairs: Iterable[tuple[Any, Any]]) -> tuple[int, int]:
    beats = misses = 0
    for actual, estimate in pairs:
        a = to_float(actual)
        e = to_float(estimate)
        if a is None or e is None:
            continue
        if a > e:
            beats += 1
        elif a < e:
            misses += 1
    return beats, misses
