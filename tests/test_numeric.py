"""Tests for numeric normalization."""

import logging
from decimal import Decimal

import pytest

from earningsdata.numeric import (
    MAX_SAFE_INTEGER,
    jsonable,
    normalize_large_magnitude,
    normalize_to_base_units,
    to_float,
    to_int_or_none,
    to_scaled_int,
)


class TestNormalizeToBaseUnits:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("26.79M", 26_790_000.0),
            ("1.5k", 1_500.0),
            (" 2B ", 2_000_000_000.0),
            (".5K", 500.0),
            ("-1.5M", -1_500_000.0),
            ("42", 42.0),
            (12, 12.0),
            (-0.33, -0.33),
            (Decimal("12.5"), 12.5),
        ],
    )
    def test_accepted_inputs(self, raw, expected):
        assert normalize_to_base_units(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", "abc", "1.5X", "1e5", "1.5MM", True, float("nan"), float("inf"), Decimal("NaN")],
    )
    def test_rejected_inputs(self, raw):
        assert normalize_to_base_units(raw) is None

    def test_max_safe_integer_boundary(self):
        assert normalize_to_base_units(MAX_SAFE_INTEGER) == float(MAX_SAFE_INTEGER)

    def test_overflow_returns_none_and_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="earningsdata.numeric"):
            assert normalize_to_base_units(2**53) is None
        assert "Value too large for safe conversion" in caplog.text

    def test_negative_overflow(self):
        assert normalize_to_base_units(-(2**60)) is None
        assert normalize_to_base_units(-1e16) is None

    def test_suffixed_overflow(self):
        assert normalize_to_base_units("10000000B") is None

    def test_idempotent(self):
        assert normalize_to_base_units("26.79M") == normalize_to_base_units("26.79M")


class TestNormalizeLargeMagnitude:
    def test_micro_units_divided(self):
        assert normalize_large_magnitude(2.5e16) == pytest.approx(2.5e10)

    def test_threshold_inclusive(self):
        assert normalize_large_magnitude(1e13) == pytest.approx(1e7)

    def test_plausible_values_unchanged(self):
        assert normalize_large_magnitude(5e12) == 5e12
        assert normalize_large_magnitude(94_000_000_000) == 94_000_000_000

    def test_none_passes_through(self):
        assert normalize_large_magnitude(None) is None

    def test_custom_threshold(self):
        assert normalize_large_magnitude(2e6, threshold=1e6, divisor=1e3) == pytest.approx(2e3)


class TestConversions:
    def test_to_float(self):
        assert to_float("1.25") == 1.25
        assert to_float(" 3 ") == 3.0
        assert to_float("n/a") is None
        assert to_float(float("inf")) is None
        assert to_float(False) is None

    @pytest.mark.parametrize(
        "raw,expected",
        [(2.5, 3), (-2.5, -2), (2.4, 2), ("12", 12), ("12.6", 13), (Decimal("2.5"), 3)],
    )
    def test_to_int_or_none_rounds_half_up(self, raw, expected):
        assert to_int_or_none(raw) == expected

    def test_to_int_or_none_keeps_big_integers_exact(self):
        assert to_int_or_none(10**20 + 1) == 10**20 + 1
        assert to_int_or_none(str(10**20 + 1)) == 10**20 + 1

    def test_to_int_or_none_invalid(self):
        assert to_int_or_none("abc") is None
        assert to_int_or_none(None) is None
        assert to_int_or_none(True) is None

    def test_to_float_signaling_nan(self):
        assert to_float(Decimal("sNaN")) is None
        assert to_float(Decimal("NaN")) is None
        assert to_float(Decimal("2.5")) == 2.5

    def test_to_int_or_none_digit_limit(self):
        assert to_int_or_none("9" * 5000) is None
        assert to_int_or_none(Decimal("sNaN")) is None

    def test_to_scaled_int(self):
        assert to_scaled_int(1.5, 1000) == 1500
        assert to_scaled_int(None, 1000) is None

    def test_jsonable(self):
        data = {"cap": 2**60, "small": 7, "values": [Decimal("1.5"), None, True]}
        assert jsonable(data) == {"cap": float(2**60), "small": 7, "values": [1.5, None, True]}
        assert isinstance(jsonable(7), int)
