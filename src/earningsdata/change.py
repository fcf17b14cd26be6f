"""Price and market-cap change calculations.

A missing or invalid input yields ``None``, never ``0``: a flat day and an
unknown day must stay distinguishable all the way to the display.
"""

from __future__ import annotations

import math
from typing import Any

from earningsdata.config import DEFAULT_CONFIG, EarningsDataConfig
from earningsdata.models.market import (
    ChangeConfidence,
    ChangeResult,
    MarketSnapshot,
    PriceMetrics,
)
from earningsdata.numeric import to_float, to_int_or_none
from earningsdata.size import classify_market_cap_size

MEANINGFUL_CHANGE = 0.01


def compute_change(current: Any, previous: Any) -> float | None:
    """Percent change from ``previous`` to ``current``.

    Returns None if either value is missing or non-finite, or if
    ``previous`` is zero or negative.
    """
    cur = to_float(current)
    prev = to_float(previous)
    if cur is None or prev is None or prev <= 0:
        return None
    change = ((cur - prev) / prev) * 100
    return change if math.isfinite(change) else None


def compute_price_change_percent(current: Any, previous: Any) -> float | None:
    return compute_change(current, previous)


def compute_market_cap_change(current: Any, previous: Any) -> float | None:
    return compute_change(current, previous)


def compute_change_with_confidence(current: Any, previous: Any) -> ChangeResult:
    if to_float(current) is None or to_float(previous) is None:
        return ChangeResult(None, ChangeConfidence.NONE, "Missing current or previous value")
    if to_float(previous) <= 0:
        return ChangeResult(
            None, ChangeConfidence.NONE, "Invalid previous value (zero or negative)"
        )

    change = compute_change(current, previous)
    if change is None:
        return ChangeResult(
            None, ChangeConfidence.NONE, "Calculation resulted in invalid value"
        )

    magnitude = abs(change)
    if magnitude < MEANINGFUL_CHANGE:
        return ChangeResult(
            change, ChangeConfidence.LOW, "Very small change, may be due to rounding"
        )
    if magnitude < 1:
        return ChangeResult(change, ChangeConfidence.MEDIUM, "Small change")
    return ChangeResult(change, ChangeConfidence.HIGH, "Significant change")


def is_change_meaningful(change: float | None, threshold: float = MEANINGFUL_CHANGE) -> bool:
    if change is None:
        return False
    return abs(change) >= threshold


def compute_market_cap(price: Any, shares: Any) -> int | None:
    """Market cap in whole dollars."""
    if price is None or shares is None:
        return None
    if isinstance(shares, int) and not isinstance(shares, bool):
        price_num = to_float(price)
        if price_num is None:
            return None
        return to_int_or_none(price_num * shares)
    price_num = to_float(price)
    shares_num = to_float(shares)
    if price_num is None or shares_num is None:
        return None
    return to_int_or_none(price_num * shares_num)


def calculate_price_metrics(
    snapshot: MarketSnapshot,
    config: EarningsDataConfig = DEFAULT_CONFIG,
) -> PriceMetrics:
    """Validate a snapshot and derive change, market cap and size.

    Failed validation never raises; the result carries ``is_valid=False``
    and the messages. The size falls back to the vendor market cap.
    """
    symbol = snapshot.symbol
    errors = _validate_snapshot_inputs(snapshot, config)
    fallback_size = classify_market_cap_size(snapshot.market_cap, config.size_thresholds)
    if errors:
        return PriceMetrics(size=fallback_size, is_valid=False, validation_errors=tuple(errors))

    price = to_float(snapshot.current_price)
    previous = to_float(snapshot.previous_close)
    price_change = compute_price_change_percent(price, previous)
    if price_change is None or abs(price_change) > config.max_price_change_pct:
        message = (
            f"Extreme price change for {symbol}: {price_change:.2f}%"
            if price_change is not None
            else f"Price change not computable for {symbol}"
        )
        return PriceMetrics(size=fallback_size, is_valid=False, validation_errors=(message,))

    shares = snapshot.shares_outstanding
    if shares is not None:
        market_cap = compute_market_cap(price, shares)
        previous_cap = compute_market_cap(previous, shares)
    else:
        market_cap = to_int_or_none(snapshot.market_cap)
        previous_cap = None

    size = classify_market_cap_size(market_cap, config.size_thresholds)
    cap_change = compute_market_cap_change(market_cap, previous_cap)
    if cap_change is not None and abs(cap_change) > config.max_market_cap_change_pct:
        return PriceMetrics(
            price_change_pct=price_change,
            market_cap=market_cap,
            size=size,
            is_valid=False,
            validation_errors=(f"Extreme market cap change for {symbol}: {cap_change:.2f}%",),
        )

    diff_billions = (
        (market_cap - previous_cap) / 1e9
        if market_cap is not None and previous_cap is not None
        else None
    )
    return PriceMetrics(
        price_change_pct=price_change,
        market_cap=market_cap,
        market_cap_change_pct=cap_change,
        market_cap_diff_billions=diff_billions,
        size=size,
    )


def _validate_snapshot_inputs(snapshot: MarketSnapshot, config: EarningsDataConfig) -> list[str]:
    symbol = snapshot.symbol
    price = to_float(snapshot.current_price)
    previous = to_float(snapshot.previous_close)
    shares = to_float(snapshot.shares_outstanding)

    errors: list[str] = []
    if price is None:
        errors.append(f"Missing current price for {symbol}")
    if previous is None:
        errors.append(f"Missing previous close for {symbol}")
    if snapshot.shares_outstanding is not None and shares is None:
        errors.append(f"Invalid shares outstanding for {symbol}: {snapshot.shares_outstanding}")
    if errors:
        return errors

    if price <= 0:
        errors.append(f"Invalid current price for {symbol}: {price}")
    if previous <= 0:
        errors.append(f"Invalid previous close for {symbol}: {previous}")
    if shares is not None and shares <= 0:
        errors.append(f"Invalid shares outstanding for {symbol}: {snapshot.shares_outstanding}")

    if price > config.max_price:
        errors.append(f"Suspicious current price for {symbol}: ${price}")
    if previous > config.max_price:
        errors.append(f"Suspicious previous close for {symbol}: ${previous}")
    if shares is not None and shares > config.max_shares:
        errors.append(f"Suspicious shares outstanding for {symbol}: {snapshot.shares_outstanding}")
    return errors
