"""Earnings and guidance record models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from earningsdata.models.fiscal import FiscalPeriodTag

# int doubles as the arbitrary-precision representation of large revenues.
Number = int | float
NumberLike = int | float | Decimal | str


@dataclass(frozen=True)
class EarningsFigure:
    """A single reported metric: actual against analyst estimate."""

    actual: Number | None = None
    estimate: Number | None = None


@dataclass(frozen=True)
class EarningsRecord:
    """One earnings-calendar row.

    Attributes:
        symbol: Ticker symbol.
        report_date: Date of the earnings report.
        report_time: When the report lands (BMO, AMC, DMH).
        fiscal: Fiscal period the actuals and estimates describe.
        eps_actual: Reported EPS.
        eps_estimate: Consensus EPS estimate.
        revenue_actual: Reported revenue, USD. May be a suffixed string
            ("26.79M") before sanitizing.
        revenue_estimate: Consensus revenue estimate, USD.
    """

    symbol: str
    report_date: date | None = None
    report_time: str | None = None
    fiscal: FiscalPeriodTag | None = None
    eps_actual: Number | None = None
    eps_estimate: Number | None = None
    revenue_actual: NumberLike | None = None
    revenue_estimate: NumberLike | None = None

    @property
    def eps(self) -> EarningsFigure:
        return EarningsFigure(self.eps_actual, self.eps_estimate)

    @property
    def revenue(self) -> EarningsFigure:
        return EarningsFigure(self.revenue_actual, self.revenue_estimate)


@dataclass(frozen=True)
class GuidanceRecord:
    """Company-issued guidance for a future period.

    Attributes:
        symbol: Ticker symbol.
        fiscal: Period the guidance covers.
        eps_guidance: Point EPS guidance.
        eps_guidance_min: Low end of the EPS guidance range.
        eps_guidance_max: High end of the EPS guidance range.
        eps_method: Accounting basis of the EPS guidance.
        revenue_guidance: Point revenue guidance.
        revenue_guidance_min: Low end of the revenue guidance range.
        revenue_guidance_max: High end of the revenue guidance range.
        revenue_method: Accounting basis of the revenue guidance.
        previous_eps_min: Low end of the prior EPS guidance range.
        previous_eps_max: High end of the prior EPS guidance range.
        previous_revenue_min: Low end of the prior revenue guidance range.
        previous_revenue_max: High end of the prior revenue guidance range.
        eps_consensus_pct: Vendor-computed EPS guidance surprise, percent.
        revenue_consensus_pct: Vendor-computed revenue guidance surprise.
        estimate_fiscal: Period of the estimates compared against. Falls
            back to the earnings record's period when absent.
        estimate_eps_method: Accounting basis of the EPS estimate.
        estimate_revenue_method: Accounting basis of the revenue estimate.
    """

    symbol: str
    fiscal: FiscalPeriodTag | None = None
    eps_guidance: Number | None = None
    eps_guidance_min: Number | None = None
    eps_guidance_max: Number | None = None
    eps_method: str | None = None
    revenue_guidance: NumberLike | None = None
    revenue_guidance_min: NumberLike | None = None
    revenue_guidance_max: NumberLike | None = None
    revenue_method: str | None = None
    previous_eps_min: Number | None = None
    previous_eps_max: Number | None = None
    previous_revenue_min: NumberLike | None = None
    previous_revenue_max: NumberLike | None = None
    eps_consensus_pct: float | None = None
    revenue_consensus_pct: float | None = None
    estimate_fiscal: FiscalPeriodTag | None = None
    estimate_eps_method: str | None = None
    estimate_revenue_method: str | None = None
