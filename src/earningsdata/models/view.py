"""Pipeline output model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from earningsdata.models.earnings import EarningsRecord
from earningsdata.models.market import PriceMetrics, SizeClass
from earningsdata.models.surprise import GuidanceSurprises, SurpriseResult


@dataclass(frozen=True)
class EarningsView:
    """Sanitized earnings row with everything a dashboard displays.

    Attributes:
        record: Earnings record after sanitizing and revenue repair.
        eps_surprise: Actual vs estimate EPS surprise.
        revenue_surprise: Actual vs estimate revenue surprise.
        guidance: Guidance surprises, when guidance was supplied.
        price: Price-derived metrics, when a snapshot was supplied.
        size: Market-cap bucket.
        flags: Names of the corrections applied to the raw row.
    """

    record: EarningsRecord
    eps_surprise: SurpriseResult = field(default_factory=SurpriseResult.empty)
    revenue_surprise: SurpriseResult = field(default_factory=SurpriseResult.empty)
    guidance: GuidanceSurprises | None = None
    price: PriceMetrics | None = None
    size: SizeClass = SizeClass.SMALL
    flags: tuple[str, ...] = ()

    @property
    def symbol(self) -> str:
        return self.record.symbol

    def to_dict(self) -> dict[str, Any]:
        rec = self.record
        data: dict[str, Any] = {
            "symbol": rec.symbol,
            "report_date": rec.report_date.isoformat() if rec.report_date else None,
            "report_time": rec.report_time,
            "eps_actual": rec.eps_actual,
            "eps_estimate": rec.eps_estimate,
            "revenue_actual": rec.revenue_actual,
            "revenue_estimate": rec.revenue_estimate,
            "eps_surprise": self.eps_surprise.to_dict(),
            "revenue_surprise": self.revenue_surprise.to_dict(),
            "size": self.size.value,
            "flags": list(self.flags),
        }
        if self.guidance is not None:
            data["eps_guide_surprise"] = self.guidance.eps.to_dict()
            data["revenue_guide_surprise"] = self.guidance.revenue.to_dict()
            data["guidance_warnings"] = list(self.guidance.warnings)
        if self.price is not None:
            data["price_change_pct"] = self.price.price_change_pct
            data["market_cap"] = self.price.market_cap
            data["market_cap_diff_billions"] = self.price.market_cap_diff_billions
        return data


@dataclass(frozen=True)
class EarningsSummary:
    """Batch statistics over a list of views.

    Attributes:
        total: Number of views.
        with_eps: Views with a reported EPS actual.
        with_revenue: Views with a reported revenue actual.
        size_distribution: View count per size class.
        market_cap_by_size: Summed market cap per size class.
        top_gainers: Largest price gains, best first.
        top_losers: Largest price drops, worst first.
        eps_beats: EPS actual above estimate.
        eps_misses: EPS actual below estimate.
        revenue_beats: Revenue actual above estimate.
        revenue_misses: Revenue actual below estimate.
    """

    total: int = 0
    with_eps: int = 0
    with_revenue: int = 0
    size_distribution: dict[SizeClass, int] = field(default_factory=dict)
    market_cap_by_size: dict[SizeClass, int] = field(default_factory=dict)
    top_gainers: tuple[EarningsView, ...] = ()
    top_losers: tuple[EarningsView, ...] = ()
    eps_beats: int = 0
    eps_misses: int = 0
    revenue_beats: int = 0
    revenue_misses: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "with_eps": self.with_eps,
            "with_revenue": self.with_revenue,
            "size_distribution": {k.value: v for k, v in self.size_distribution.items()},
            "market_cap_by_size": {k.value: v for k, v in self.market_cap_by_size.items()},
            "top_gainers": [v.symbol for v in self.top_gainers],
            "top_losers": [v.symbol for v in self.top_losers],
            "eps_beats": self.eps_beats,
            "eps_misses": self.eps_misses,
            "revenue_beats": self.revenue_beats,
            "revenue_misses": self.revenue_misses,
        }
