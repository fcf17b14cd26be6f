"""Tests for configuration and errors."""

import pytest

from earningsdata import load_config_from_env
from earningsdata.config import DEFAULT_CONFIG, DuplicatePolicy, EarningsDataConfig
from earningsdata.errors import EarningsDataError, EarningsDataErrorCode

ENV_VARS = (
    "EARNINGS_EXTREME_THRESHOLD",
    "EARNINGS_DUPLICATE_POLICY",
    "EARNINGS_REPAIR_MICRO_UNITS",
    "EARNINGS_MICRO_UNIT_THRESHOLD",
    "EARNINGS_REVENUE_CEILING",
    "EARNINGS_ADJUST_GUIDANCE_PERIOD",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_defaults(self):
        assert DEFAULT_CONFIG.extreme_threshold == 300.0
        assert DEFAULT_CONFIG.duplicate_policy is DuplicatePolicy.EXACT
        assert DEFAULT_CONFIG.repair_micro_units is True
        assert DEFAULT_CONFIG.size_thresholds.mega == 200_000_000_000

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.extreme_threshold = 1.0  # type: ignore[misc]


class TestLoadConfigFromEnv:
    def test_unset_env_gives_defaults(self):
        assert load_config_from_env() == EarningsDataConfig()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("EARNINGS_EXTREME_THRESHOLD", "250")
        monkeypatch.setenv("EARNINGS_DUPLICATE_POLICY", "TOLERANT")
        monkeypatch.setenv("EARNINGS_REPAIR_MICRO_UNITS", "off")
        monkeypatch.setenv("EARNINGS_MICRO_UNIT_THRESHOLD", "1e14")
        monkeypatch.setenv("EARNINGS_REVENUE_CEILING", "2e12")
        monkeypatch.setenv("EARNINGS_ADJUST_GUIDANCE_PERIOD", "1")
        config = load_config_from_env()
        assert config.extreme_threshold == 250.0
        assert config.duplicate_policy is DuplicatePolicy.TOLERANT
        assert config.repair_micro_units is False
        assert config.micro_unit_threshold == 1e14
        assert config.revenue_ceiling == 2e12
        assert config.adjust_guidance_period is True

    @pytest.mark.parametrize(
        "name,value",
        [
            ("EARNINGS_DUPLICATE_POLICY", "fuzzy"),
            ("EARNINGS_EXTREME_THRESHOLD", "abc"),
            ("EARNINGS_EXTREME_THRESHOLD", "-5"),
            ("EARNINGS_REVENUE_CEILING", "inf"),
            ("EARNINGS_REPAIR_MICRO_UNITS", "maybe"),
        ],
    )
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(EarningsDataError) as exc_info:
            load_config_from_env()
        assert exc_info.value.code is EarningsDataErrorCode.CONFIG_INVALID
        assert name in str(exc_info.value)


class TestErrors:
    def test_default_code(self):
        err = EarningsDataError("bad")
        assert err.code is EarningsDataErrorCode.INVALID_INPUT
        assert str(err) == "bad"
