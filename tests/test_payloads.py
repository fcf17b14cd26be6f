"""Tests for vendor payload mapping."""

from datetime import date

import pytest

from earningsdata.errors import EarningsDataError, EarningsDataErrorCode
from earningsdata.models.fiscal import FiscalPeriod, FiscalPeriodTag
from earningsdata.payloads import (
    earnings_record_from_finnhub,
    guidance_record_from_benzinga,
    snapshot_from_polygon,
)

FINNHUB_ITEM = {
    "symbol": "AAPL",
    "date": "2024-05-02",
    "hour": "amc",
    "quarter": 2,
    "year": 2024,
    "epsActual": 1.53,
    "epsEstimate": 1.5,
    "revenueActual": 90_753_000_000,
    "revenueEstimate": 90_010_000_000,
}


class TestFinnhub:
    def test_full_item(self):
        record = earnings_record_from_finnhub(FINNHUB_ITEM)
        assert record.symbol == "AAPL"
        assert record.report_date == date(2024, 5, 2)
        assert record.report_time == "AMC"
        assert record.fiscal.normalized_period is FiscalPeriod.Q2
        assert record.fiscal.year == 2024
        assert record.eps_actual == 1.53
        assert record.revenue_actual == 90_753_000_000
        assert isinstance(record.revenue_actual, int)

    def test_pending_item(self):
        item = dict(FINNHUB_ITEM, epsActual=None, revenueActual=None, hour="")
        record = earnings_record_from_finnhub(item)
        assert record.eps_actual is None
        assert record.revenue_actual is None
        assert record.report_time is None

    def test_malformed_numbers_degrade(self):
        item = dict(FINNHUB_ITEM, epsActual="n/a", revenueActual="26.79M", date="not-a-date")
        record = earnings_record_from_finnhub(item)
        assert record.eps_actual is None
        assert record.revenue_actual == 26_790_000.0
        assert record.report_date is None

    def test_missing_symbol(self):
        with pytest.raises(EarningsDataError) as exc_info:
            earnings_record_from_finnhub({"date": "2024-05-02"})
        assert exc_info.value.code is EarningsDataErrorCode.INVALID_PAYLOAD


class TestPolygon:
    def test_day_close_preferred(self):
        payload = {
            "ticker": {
                "ticker": "AAPL",
                "day": {"c": 189.5},
                "lastTrade": {"p": 189.7},
                "prevDay": {"c": 185.0},
                "marketCap": 2_900_000_000_000,
            }
        }
        snapshot = snapshot_from_polygon(payload)
        assert snapshot.symbol == "AAPL"
        assert snapshot.current_price == 189.5
        assert snapshot.previous_close == 185.0
        assert snapshot.market_cap == 2_900_000_000_000

    def test_premarket_zero_day_close_falls_back(self):
        payload = {
            "ticker": {
                "ticker": "AAPL",
                "day": {"c": 0},
                "lastTrade": {"p": 189.7},
                "prevDay": {"c": 185.0},
            }
        }
        assert snapshot_from_polygon(payload).current_price == 189.7

    def test_todays_change_fallback(self):
        payload = {"results": {"ticker": "MSFT", "prevDay": {"c": 100.0}, "todaysChange": 2.5}}
        snapshot = snapshot_from_polygon(payload)
        assert snapshot.current_price == pytest.approx(102.5)

    def test_inner_object_and_shares(self):
        payload = {"ticker": "NVDA", "min": {"c": 120.0}, "prevDay": {"c": 118.0}}
        snapshot = snapshot_from_polygon(payload, shares_outstanding=24_000_000_000)
        assert snapshot.current_price == 120.0
        assert snapshot.shares_outstanding == 24_000_000_000

    def test_share_class_shares(self):
        payload = {
            "ticker": {
                "ticker": "AAPL",
                "day": {"c": 189.5},
                "shareClass": {"sharesOutstanding": 15_400_000_000},
            }
        }
        assert snapshot_from_polygon(payload).shares_outstanding == 15_400_000_000

    def test_no_prices(self):
        snapshot = snapshot_from_polygon({"ticker": {"ticker": "XYZ"}})
        assert snapshot.current_price is None
        assert snapshot.previous_close is None

    def test_missing_ticker(self):
        with pytest.raises(EarningsDataError) as exc_info:
            snapshot_from_polygon({"ticker": {"day": {"c": 1.0}}})
        assert exc_info.value.code is EarningsDataErrorCode.INVALID_PAYLOAD


class TestBenzinga:
    def test_full_item(self):
        item = {
            "ticker": "aapl",
            "fiscal_period": "Q2",
            "fiscal_year": 2025,
            "estimated_eps_guidance": 1.6,
            "min_eps_guidance": 1.55,
            "max_eps_guidance": 1.65,
            "eps_method": "adj",
            "estimated_revenue_guidance": 95_000_000_000,
            "min_revenue_guidance": None,
            "max_revenue_guidance": None,
            "revenue_method": "gaap",
            "previous_min_eps_guidance": 1.4,
            "previous_max_eps_guidance": 1.5,
            "previous_min_revenue_guidance": 90_000_000_000,
            "previous_max_revenue_guidance": 92_000_000_000,
        }
        guidance = guidance_record_from_benzinga(item)
        assert guidance.symbol == "AAPL"
        assert guidance.fiscal.matches(FiscalPeriodTag("Q2", 2025))
        assert guidance.eps_guidance == 1.6
        assert guidance.eps_method == "adj"
        assert guidance.revenue_guidance == 95_000_000_000
        assert guidance.revenue_guidance_min is None
        assert guidance.previous_revenue_max == 92_000_000_000

    def test_empty_method_is_none(self):
        guidance = guidance_record_from_benzinga({"ticker": "AAPL", "eps_method": ""})
        assert guidance.eps_method is None
        assert guidance.fiscal.normalized_period is None

    def test_missing_ticker(self):
        with pytest.raises(EarningsDataError):
            guidance_record_from_benzinga({"fiscal_year": 2025})
