"""Earnings data configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DuplicatePolicy(Enum):
    """How an actual figure is judged to duplicate its estimate."""

    EXACT = "exact"
    TOLERANT = "tolerant"


@dataclass(frozen=True)
class SizeThresholds:
    """Market-cap bucket lower bounds in USD, evaluated top-down."""

    mega: int = 200_000_000_000
    large: int = 10_000_000_000
    mid: int = 2_000_000_000


DEFAULT_SIZE_THRESHOLDS = SizeThresholds()


@dataclass(frozen=True)
class EarningsDataConfig:
    """Thresholds and switches for the sanitize/surprise pipeline.

    Attributes:
        extreme_threshold: Absolute surprise percentage above which a result
            is flagged extreme and clamped for display.
        denominator_epsilon: Denominators smaller than this in magnitude make
            a percentage difference undefined.
        duplicate_policy: Equality rule for actual vs estimate duplicates.
        repair_micro_units: Divide revenue figures at or above
            ``micro_unit_threshold`` by ``micro_unit_divisor``.
        micro_unit_threshold: Magnitude that marks a micro-unit revenue.
        micro_unit_divisor: Correction factor for micro-unit revenue.
        revenue_ceiling: Revenue above this is treated as corrupt.
        max_price: Prices above this fail price validation.
        max_shares: Share counts above this fail price validation.
        max_price_change_pct: Absolute daily price change limit.
        max_market_cap_change_pct: Absolute daily market cap change limit.
        adjust_guidance_period: Rescale quarterly/yearly guidance to the
            actual's period before comparing.
        size_thresholds: Market-cap bucket table.
    """

    extreme_threshold: float = 300.0
    denominator_epsilon: float = 1e-6
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.EXACT
    repair_micro_units: bool = True
    micro_unit_threshold: float = 1e13
    micro_unit_divisor: float = 1e6
    revenue_ceiling: float = 1e12
    max_price: float = 10_000.0
    max_shares: float = 100_000_000_000
    max_price_change_pct: float = 50.0
    max_market_cap_change_pct: float = 100.0
    adjust_guidance_period: bool = False
    size_thresholds: SizeThresholds = field(default_factory=SizeThresholds)


DEFAULT_CONFIG = EarningsDataConfig()
