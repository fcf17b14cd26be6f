"""Earnings data models."""

from earningsdata.models.earnings import EarningsFigure, EarningsRecord, GuidanceRecord
from earningsdata.models.fiscal import AccountingMethod, FiscalPeriod, FiscalPeriodTag
from earningsdata.models.market import (
    ChangeConfidence,
    ChangeResult,
    MarketSnapshot,
    PriceMetrics,
    SizeClass,
)
from earningsdata.models.surprise import (
    GuidancePeriod,
    GuidanceSurprises,
    PeriodDetection,
    SurpriseBasis,
    SurpriseResult,
)
from earningsdata.models.view import EarningsSummary, EarningsView

__all__ = [
    "EarningsFigure",
    "EarningsRecord",
    "GuidanceRecord",
    "AccountingMethod",
    "FiscalPeriod",
    "FiscalPeriodTag",
    "ChangeConfidence",
    "ChangeResult",
    "MarketSnapshot",
    "PriceMetrics",
    "SizeClass",
    "GuidancePeriod",
    "GuidanceSurprises",
    "PeriodDetection",
    "SurpriseBasis",
    "SurpriseResult",
    "EarningsView",
    "EarningsSummary",
]
