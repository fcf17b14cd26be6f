"""Market-capitalization size classification."""

from __future__ import annotations

from typing import Any

from earningsdata.config import DEFAULT_SIZE_THRESHOLDS, SizeThresholds
from earningsdata.models.market import SizeClass
from earningsdata.numeric import to_float


def classify_market_cap_size(
    market_cap: Any,
    thresholds: SizeThresholds = DEFAULT_SIZE_THRESHOLDS,
) -> SizeClass:
    """Bucket a market cap; first matching threshold wins.

    Missing, unparsable and non-positive values classify as SMALL.
    Integers are compared exactly.
    """
    if isinstance(market_cap, int) and not isinstance(market_cap, bool):
        value: int | float | None = market_cap
    else:
        value = to_float(market_cap)

    if value is None or value <= 0:
        return SizeClass.SMALL
    if value >= thresholds.mega:
        return SizeClass.MEGA
    if value >= thresholds.large:
        return SizeClass.LARGE
    if value >= thresholds.mid:
        return SizeClass.MID
    return SizeClass.SMALL
