"""Shared fixtures for earningsdata tests."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from earningsdata.models.earnings import EarningsRecord, GuidanceRecord
from earningsdata.models.fiscal import FiscalPeriodTag
from earningsdata.models.market import MarketSnapshot


@pytest.fixture
def q1_2025() -> FiscalPeriodTag:
    return FiscalPeriodTag("Q1", 2025)


@pytest.fixture
def sample_record(q1_2025) -> EarningsRecord:
    """Reported quarter: EPS and revenue both beat."""
    return EarningsRecord(
        symbol="AAPL",
        report_date=date(2025, 5, 1),
        report_time="AMC",
        fiscal=q1_2025,
        eps_actual=1.65,
        eps_estimate=1.5,
        revenue_actual=95_000_000_000,
        revenue_estimate=94_000_000_000,
    )


@pytest.fixture
def placeholder_record(q1_2025) -> EarningsRecord:
    """Pre-report row where the feed copied estimates into the actual slots."""
    return EarningsRecord(
        symbol="MSFT",
        report_date=date(2025, 5, 1),
        report_time="AMC",
        fiscal=q1_2025,
        eps_actual=-0.33,
        eps_estimate=-0.33,
        revenue_actual=61_000_000_000,
        revenue_estimate=61_000_000_000,
    )


@pytest.fixture
def sample_snapshot() -> MarketSnapshot:
    return MarketSnapshot(
        symbol="AAPL",
        current_price=110.0,
        previous_close=100.0,
        shares_outstanding=15_000_000_000,
    )


@pytest.fixture
def sample_guidance(q1_2025) -> GuidanceRecord:
    return GuidanceRecord(
        symbol="AAPL",
        fiscal=q1_2025,
        eps_guidance=1.95,
        eps_method="adjusted",
        revenue_guidance=100_000_000_000,
        previous_eps_min=1.4,
        previous_eps_max=1.6,
        previous_revenue_min=90_000_000_000,
        previous_revenue_max=110_000_000_000,
    )
