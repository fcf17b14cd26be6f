"""Tests for actual/estimate sanitizing."""

import logging
from dataclasses import replace

import pytest

from earningsdata.config import DuplicatePolicy, EarningsDataConfig
from earningsdata.sanitize import (
    cap_revenue,
    equal_with_unit_guess,
    is_actual_pending,
    is_duplicate,
    nearly_equal,
    sanitize_earnings,
    sanitize_earnings_with_flags,
    sanitize_figure,
)


class TestSanitizeFigure:
    def test_exact_duplicate_eps(self):
        assert sanitize_figure(-0.33, -0.33) is None

    def test_small_difference_preserved(self):
        assert sanitize_figure(-0.31, -0.33) == -0.31

    @pytest.mark.parametrize("value", [0, 1, -0.33, 1.5e9, 10**20, 0.1 + 0.2])
    def test_equal_values_nulled(self, value):
        assert sanitize_figure(value, value) is None

    @pytest.mark.parametrize(
        "actual,estimate",
        [(1, 2), (-0.3300001, -0.33), (2**60 + 1, 2**60), (0.3, 0.1 + 0.2)],
    )
    def test_distinct_values_pass_through(self, actual, estimate):
        assert sanitize_figure(actual, estimate) == actual

    def test_int_and_float_compared_exactly(self):
        assert sanitize_figure(5, 5.0) is None
        assert sanitize_figure(2**53 + 1, float(2**53)) == 2**53 + 1

    def test_missing_estimate(self):
        assert sanitize_figure(1.25, None) == 1.25

    def test_missing_actual(self):
        assert sanitize_figure(None, 1.25) is None
        assert sanitize_figure(None, None) is None


class TestTolerantPolicy:
    def test_eps_within_tolerance(self):
        assert sanitize_figure(1.0000001, 1.0, DuplicatePolicy.TOLERANT) is None
        assert sanitize_figure(1.0000001, 1.0) == 1.0000001

    def test_eps_outside_tolerance(self):
        assert sanitize_figure(1.01, 1.0, DuplicatePolicy.TOLERANT) == 1.01

    def test_revenue_unit_guess(self):
        assert is_duplicate(26_790_000, 26.79, DuplicatePolicy.TOLERANT, revenue=True)
        assert not is_duplicate(26_790_000, 26.79, DuplicatePolicy.EXACT, revenue=True)

    def test_unparsable_never_duplicate(self):
        assert not is_duplicate("abc", "abc", DuplicatePolicy.TOLERANT)

    def test_helpers(self):
        assert nearly_equal(100.0, 100.005)
        assert not nearly_equal(100.0, 101.0)
        assert equal_with_unit_guess(94_000.0, 94_000_000.0)
        assert not equal_with_unit_guess(94_000.0, 95_000_000.0)


class TestSanitizeEarnings:
    def test_placeholder_row(self, placeholder_record):
        result = sanitize_earnings(placeholder_record)
        assert result.eps_actual is None
        assert result.revenue_actual is None
        assert result.eps_estimate == -0.33
        assert result.revenue_estimate == 61_000_000_000.0

    def test_real_row_untouched(self, sample_record):
        result = sanitize_earnings(sample_record)
        assert result.eps_actual == 1.65
        assert result.revenue_actual == 95_000_000_000.0
        assert result.symbol == "AAPL"

    def test_fields_independent(self, sample_record):
        record = replace(sample_record, eps_actual=1.5)
        result = sanitize_earnings(record)
        assert result.eps_actual is None
        assert result.revenue_actual == 95_000_000_000.0

    def test_suffixed_revenue_normalized(self, sample_record):
        record = replace(sample_record, revenue_actual="26.79M", revenue_estimate="25M")
        result = sanitize_earnings(record)
        assert result.revenue_actual == 26_790_000.0
        assert result.revenue_estimate == 25_000_000.0

    def test_suffixed_duplicate(self, sample_record):
        record = replace(sample_record, revenue_actual="26.79M", revenue_estimate="26.79m")
        assert sanitize_earnings(record).revenue_actual is None

    def test_flags(self, placeholder_record):
        _, flags = sanitize_earnings_with_flags(placeholder_record)
        assert flags == ("eps_actual_duplicate", "revenue_actual_duplicate")

    def test_invalid_revenue_flagged(self, sample_record):
        record = replace(sample_record, revenue_actual="abc")
        result, flags = sanitize_earnings_with_flags(record)
        assert result.revenue_actual is None
        assert "revenue_actual_invalid" in flags

    def test_oversized_micro_unit_revenue_repaired(self, sample_record):
        record = replace(sample_record, revenue_actual=95_000_000_000 * 10**6)
        result, flags = sanitize_earnings_with_flags(record)
        assert result.revenue_actual == pytest.approx(95_000_000_000)
        assert flags == ("revenue_actual_micro_units",)

    def test_oversized_duplicate_compared_before_repair(self, sample_record):
        raw = 61_000_000_000 * 10**6
        record = replace(sample_record, revenue_actual=raw, revenue_estimate=raw)
        result, flags = sanitize_earnings_with_flags(record)
        assert result.revenue_actual is None
        assert result.revenue_estimate == pytest.approx(61_000_000_000)
        assert "revenue_actual_duplicate" in flags
        assert "revenue_actual_micro_units" not in flags

    def test_tolerant_config(self, sample_record):
        record = replace(sample_record, eps_actual=1.5000001)
        config = EarningsDataConfig(duplicate_policy=DuplicatePolicy.TOLERANT)
        assert sanitize_earnings(record, config).eps_actual is None
        assert sanitize_earnings(record).eps_actual == 1.5000001

    def test_duplicate_logged_at_debug(self, placeholder_record, caplog):
        with caplog.at_level(logging.DEBUG, logger="earningsdata.sanitize"):
            sanitize_earnings(placeholder_record)
        assert "duplicates estimate" in caplog.text

    def test_input_not_mutated(self, placeholder_record):
        sanitize_earnings(placeholder_record)
        assert placeholder_record.eps_actual == -0.33


class TestHelpers:
    def test_actual_pending(self, sample_record):
        assert not is_actual_pending(sample_record)
        assert is_actual_pending(replace(sample_record, eps_actual=None))
        assert is_actual_pending(replace(sample_record, revenue_actual=None))

    def test_no_estimates_not_pending(self, sample_record):
        record = replace(
            sample_record, eps_actual=None, eps_estimate=None,
            revenue_actual=None, revenue_estimate=None,
        )
        assert not is_actual_pending(record)

    def test_cap_revenue(self, caplog):
        assert cap_revenue(5e11) == 5e11
        assert cap_revenue(None) is None
        with caplog.at_level(logging.WARNING, logger="earningsdata.sanitize"):
            assert cap_revenue(2e12, symbol="XYZ") is None
        assert "XYZ" in caplog.text
