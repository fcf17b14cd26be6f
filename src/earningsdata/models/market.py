"""Price snapshot, price-derived metrics and size classes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SizeClass(Enum):
    """Market-capitalization bucket."""

    MEGA = "MEGA"
    LARGE = "LARGE"
    MID = "MID"
    SMALL = "SMALL"


class ChangeConfidence(Enum):
    """How much a computed change can be trusted for display."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


@dataclass(frozen=True)
class ChangeResult:
    """Percent change with a data-quality annotation."""

    change: float | None
    confidence: ChangeConfidence
    reason: str = ""


@dataclass(frozen=True)
class MarketSnapshot:
    """Point-in-time price context for a symbol.

    Attributes:
        symbol: Ticker symbol.
        current_price: Latest trade or close.
        previous_close: Previous trading day's close.
        shares_outstanding: Total shares outstanding.
        market_cap: Vendor-reported market cap, used when shares are unknown.
    """

    symbol: str
    current_price: float | None = None
    previous_close: float | None = None
    shares_outstanding: int | float | None = None
    market_cap: int | float | None = None


@dataclass(frozen=True)
class PriceMetrics:
    """Values derived from a snapshot.

    Attributes:
        price_change_pct: Percent change from previous close.
        market_cap: Current market cap, USD.
        market_cap_change_pct: Percent change of market cap.
        market_cap_diff_billions: Absolute market cap change in billions.
        size: Market-cap bucket.
        is_valid: False when any validation rule failed.
        validation_errors: Messages for the failed rules.
    """

    price_change_pct: float | None = None
    market_cap: int | None = None
    market_cap_change_pct: float | None = None
    market_cap_diff_billions: float | None = None
    size: SizeClass | None = None
    is_valid: bool = True
    validation_errors: tuple[str, ...] = ()
