"""DataFrame helpers for batch callers.

Revenue columns use ``object`` dtype so integer revenues keep full
precision; a float64 column would round them. NaN cells are read as missing.
"""

from __future__ import annotations

import numbers
from datetime import date, datetime
from typing import Any, Iterable

import pandas as pd

from earningsdata.config import DEFAULT_CONFIG, EarningsDataConfig
from earningsdata.models.earnings import EarningsRecord
from earningsdata.models.fiscal import FiscalPeriod, FiscalPeriodTag
from earningsdata.models.market import MarketSnapshot
from earningsdata.models.view import EarningsView
from earningsdata.numeric import to_int_or_none
from earningsdata.pipeline import build_earnings_view

RECORD_COLUMNS = [
    "symbol",
    "report_date",
    "report_time",
    "fiscal_period",
    "fiscal_year",
    "eps_actual",
    "eps_estimate",
    "revenue_actual",
    "revenue_estimate",
]

PRICE_COLUMNS = ("current_price", "previous_close")

_OBJECT_COLUMNS = {
    "symbol", "report_date", "report_time", "fiscal_period", "fiscal_year",
    "revenue_actual", "revenue_estimate",
}
_WIDE_INT_COLUMNS = {"revenue_actual", "revenue_estimate", "market_cap"}


def records_to_frame(records: Iterable[EarningsRecord]) -> pd.DataFrame:
    rows = [
        {
            "symbol": r.symbol,
            "report_date": r.report_date,
            "report_time": r.report_time,
            "fiscal_period": _period_text(r.fiscal),
            "fiscal_year": r.fiscal.year if r.fiscal else None,
            "eps_actual": r.eps_actual,
            "eps_estimate": r.eps_estimate,
            "revenue_actual": r.revenue_actual,
            "revenue_estimate": r.revenue_estimate,
        }
        for r in records
    ]
    return pd.DataFrame(
        {
            col: pd.Series(
                [row[col] for row in rows],
                dtype=object if col in _OBJECT_COLUMNS else float,
            )
            for col in RECORD_COLUMNS
        }
    )


def frame_to_records(df: pd.DataFrame) -> list[EarningsRecord]:
    return [_row_to_record(row) for _, row in df.iterrows()]


def sanitize_frame(
    df: pd.DataFrame,
    config: EarningsDataConfig = DEFAULT_CONFIG,
) -> pd.DataFrame:
    """Return a copy with sanitized actual/estimate columns and a ``flags`` column.

    When the frame carries ``current_price`` and ``previous_close`` (and
    optionally ``shares_outstanding``/``market_cap``), ``price_change_pct``,
    ``market_cap`` and ``size`` columns are added as well.
    """
    has_prices = all(col in df.columns for col in PRICE_COLUMNS)
    views = []
    for _, row in df.iterrows():
        record = _row_to_record(row)
        snapshot = _row_to_snapshot(row, record.symbol) if has_prices else None
        views.append(build_earnings_view(record, snapshot=snapshot, config=config))

    out = df.copy()
    out["eps_actual"] = pd.Series([v.record.eps_actual for v in views], index=out.index, dtype=float)
    out["eps_estimate"] = pd.Series(
        [v.record.eps_estimate for v in views], index=out.index, dtype=float
    )
    out["revenue_actual"] = pd.Series(
        [v.record.revenue_actual for v in views], index=out.index, dtype=object
    )
    out["revenue_estimate"] = pd.Series(
        [v.record.revenue_estimate for v in views], index=out.index, dtype=object
    )
    out["flags"] = pd.Series([list(v.flags) for v in views], index=out.index, dtype=object)
    if has_prices:
        out["price_change_pct"] = pd.Series(
            [v.price.price_change_pct if v.price else None for v in views],
            index=out.index,
            dtype=float,
        )
        out["market_cap"] = pd.Series(
            [v.price.market_cap if v.price else None for v in views],
            index=out.index,
            dtype=object,
        )
        out["size"] = pd.Series([v.size.value for v in views], index=out.index, dtype=object)
    return out


def views_to_frame(views: Iterable[EarningsView]) -> pd.DataFrame:
    rows = []
    for v in views:
        row = {
            "symbol": v.symbol,
            "report_date": v.record.report_date,
            "eps_actual": v.record.eps_actual,
            "eps_estimate": v.record.eps_estimate,
            "eps_surprise_pct": v.eps_surprise.value,
            "eps_surprise_extreme": v.eps_surprise.extreme,
            "revenue_actual": v.record.revenue_actual,
            "revenue_estimate": v.record.revenue_estimate,
            "revenue_surprise_pct": v.revenue_surprise.value,
            "revenue_surprise_extreme": v.revenue_surprise.extreme,
            "eps_guide_surprise_pct": v.guidance.eps.value if v.guidance else None,
            "eps_guide_basis": _basis(v.guidance.eps) if v.guidance else None,
            "revenue_guide_surprise_pct": v.guidance.revenue.value if v.guidance else None,
            "revenue_guide_basis": _basis(v.guidance.revenue) if v.guidance else None,
            "price_change_pct": v.price.price_change_pct if v.price else None,
            "market_cap": v.price.market_cap if v.price else None,
            "market_cap_diff_billions": v.price.market_cap_diff_billions if v.price else None,
            "size": v.size.value,
            "flags": list(v.flags),
        }
        rows.append(row)
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(
        {
            col: pd.Series(
                [row[col] for row in rows],
                dtype=object if col in _WIDE_INT_COLUMNS else None,
            )
            for col in rows[0]
        }
    )


def _row_to_record(row: pd.Series) -> EarningsRecord:
    period = _cell(row.get("fiscal_period"))
    year = _cell(row.get("fiscal_year"))
    fiscal = (
        FiscalPeriodTag(period=period, year=to_int_or_none(year))
        if period is not None or year is not None
        else None
    )
    return EarningsRecord(
        symbol=str(row["symbol"]),
        report_date=_date_cell(row.get("report_date")),
        report_time=_cell(row.get("report_time")),
        fiscal=fiscal,
        eps_actual=_cell(row.get("eps_actual")),
        eps_estimate=_cell(row.get("eps_estimate")),
        revenue_actual=_cell(row.get("revenue_actual")),
        revenue_estimate=_cell(row.get("revenue_estimate")),
    )


def _row_to_snapshot(row: pd.Series, symbol: str) -> MarketSnapshot:
    return MarketSnapshot(
        symbol=symbol,
        current_price=_cell(row.get("current_price")),
        previous_close=_cell(row.get("previous_close")),
        shares_outstanding=_cell(row.get("shares_outstanding")),
        market_cap=_cell(row.get("market_cap")),
    )


def _cell(value: Any) -> Any:
    """Plain Python value for a cell; NaN/None/NaT become None."""
    if value is None or isinstance(value, (list, tuple, dict)):
        return value
    if pd.isna(value):
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    return value


def _date_cell(value: Any) -> date | None:
    value = _cell(value)
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def _period_text(fiscal: FiscalPeriodTag | None) -> str | None:
    if fiscal is None or fiscal.period is None:
        return None
    if isinstance(fiscal.period, FiscalPeriod):
        return fiscal.period.value
    return str(fiscal.period)


def _basis(result) -> str | None:
    return result.basis.value if result.basis else None
