"""Fiscal period and accounting method tags."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from earningsdata.numeric import to_int_or_none

_PERIOD_ALIASES = {
    "1H": "H1",
    "2H": "H2",
    "1Q": "Q1",
    "2Q": "Q2",
    "3Q": "Q3",
    "4Q": "Q4",
    "FULL YEAR": "FY",
}


class FiscalPeriod(Enum):
    """Reporting window of a figure."""

    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"
    H1 = "H1"
    H2 = "H2"
    FY = "FY"

    @classmethod
    def parse(cls, value: FiscalPeriod | str | None) -> FiscalPeriod | None:
        """Parse vendor spellings ("q2", "3Q", "1H", "Full Year").

        Returns None for empty or unrecognised values.
        """
        if value is None:
            return None
        if isinstance(value, FiscalPeriod):
            return value
        text = str(value).strip().upper()
        if not text:
            return None
        text = _PERIOD_ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            return None


@dataclass(frozen=True)
class FiscalPeriodTag:
    """Period and fiscal year a figure describes.

    Attributes:
        period: Quarter, half or full year. Raw vendor strings are accepted
            and parsed on comparison.
        year: Fiscal year.
    """

    period: FiscalPeriod | str | None = None
    year: int | None = None

    @property
    def normalized_period(self) -> FiscalPeriod | None:
        return FiscalPeriod.parse(self.period)

    def matches(self, other: FiscalPeriodTag | None) -> bool:
        """True when both periods and both years are known and equal."""
        if other is None:
            return False
        mine = self.normalized_period
        theirs = other.normalized_period
        if mine is None or theirs is None:
            return False
        my_year = to_int_or_none(self.year)
        their_year = to_int_or_none(other.year)
        if my_year is None or their_year is None:
            return False
        return mine is theirs and my_year == their_year


class AccountingMethod(Enum):
    """Accounting basis group of a figure."""

    GAAP = "gaap"
    NON_GAAP = "non_gaap"
    UNKNOWN = "unknown"


GAAP_METHODS = frozenset({"gaap", "reported", "reported_gaap"})
NON_GAAP_METHODS = frozenset(
    {"non-gaap", "non_gaap", "adj", "adjusted", "operating", "pro_forma", "pro-forma"}
)
