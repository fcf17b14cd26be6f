"""Map already-fetched vendor JSON into records.

These functions never perform I/O. They accept the decoded JSON of one item
and coerce every numeric field, so a malformed number degrades to ``None``.
A payload without a symbol cannot be attributed to anything and raises.
"""

from __future__ import annotations

import logging
import numbers
from datetime import date
from typing import Any

from earningsdata.errors import EarningsDataError, EarningsDataErrorCode
from earningsdata.models.earnings import EarningsRecord, GuidanceRecord
from earningsdata.models.fiscal import FiscalPeriodTag
from earningsdata.models.market import MarketSnapshot
from earningsdata.numeric import normalize_to_base_units, to_float, to_int_or_none

logger = logging.getLogger(__name__)


def earnings_record_from_finnhub(item: dict) -> EarningsRecord:
    """Build a record from one Finnhub ``earningsCalendar`` item.

    Example item::

        {"symbol": "AAPL", "date": "2024-05-02", "hour": "amc",
         "quarter": 2, "year": 2024, "epsActual": 1.53, "epsEstimate": 1.5,
         "revenueActual": 90753000000, "revenueEstimate": 90010000000}
    """
    symbol = _require_symbol(item, "symbol")
    quarter = to_int_or_none(item.get("quarter"))
    fiscal = FiscalPeriodTag(
        period=f"Q{quarter}" if quarter else None,
        year=to_int_or_none(item.get("year")),
    )
    hour = item.get("hour")
    return EarningsRecord(
        symbol=symbol,
        report_date=_parse_date(item.get("date")),
        report_time=hour.strip().upper() if isinstance(hour, str) and hour.strip() else None,
        fiscal=fiscal,
        eps_actual=to_float(item.get("epsActual")),
        eps_estimate=to_float(item.get("epsEstimate")),
        revenue_actual=_revenue(item.get("revenueActual")),
        revenue_estimate=_revenue(item.get("revenueEstimate")),
    )


def snapshot_from_polygon(
    payload: dict,
    shares_outstanding: int | float | None = None,
) -> MarketSnapshot:
    """Build a snapshot from a Polygon single-ticker snapshot response.

    Accepts the full response (``{"ticker": {...}}`` or ``{"results": {...}}``)
    or the inner ticker object. The current price is the day close, then the
    last trade, then the last minute bar, then previous close plus today's
    change.
    """
    data = payload
    for key in ("ticker", "results"):
        inner = payload.get(key) if isinstance(payload, dict) else None
        if isinstance(inner, dict):
            data = inner
            break
    symbol = _require_symbol(data, "ticker")

    day = data.get("day") or {}
    last_trade = data.get("lastTrade") or {}
    minute = data.get("min") or {}
    prev_day = data.get("prevDay") or {}

    previous_close = _positive(prev_day.get("c"))
    current_price = (
        _positive(day.get("c"))
        or _positive(last_trade.get("p"))
        or _positive(minute.get("c"))
    )
    if current_price is None and previous_close is not None:
        todays_change = to_float(data.get("todaysChange"))
        if todays_change:
            current_price = previous_close + todays_change

    if shares_outstanding is None:
        share_class = data.get("shareClass") or {}
        shares_outstanding = to_int_or_none(share_class.get("sharesOutstanding"))

    return MarketSnapshot(
        symbol=symbol,
        current_price=current_price,
        previous_close=previous_close,
        shares_outstanding=shares_outstanding,
        market_cap=to_int_or_none(data.get("marketCap")),
    )


def guidance_record_from_benzinga(item: dict) -> GuidanceRecord:
    """Build a guidance record from one Benzinga guidance result."""
    symbol = _require_symbol(item, "ticker")
    return GuidanceRecord(
        symbol=symbol,
        fiscal=FiscalPeriodTag(
            period=item.get("fiscal_period") or None,
            year=to_int_or_none(item.get("fiscal_year")),
        ),
        eps_guidance=to_float(item.get("estimated_eps_guidance")),
        eps_guidance_min=to_float(item.get("min_eps_guidance")),
        eps_guidance_max=to_float(item.get("max_eps_guidance")),
        eps_method=item.get("eps_method") or None,
        revenue_guidance=_revenue(item.get("estimated_revenue_guidance")),
        revenue_guidance_min=_revenue(item.get("min_revenue_guidance")),
        revenue_guidance_max=_revenue(item.get("max_revenue_guidance")),
        revenue_method=item.get("revenue_method") or None,
        previous_eps_min=to_float(item.get("previous_min_eps_guidance")),
        previous_eps_max=to_float(item.get("previous_max_eps_guidance")),
        previous_revenue_min=_revenue(item.get("previous_min_revenue_guidance")),
        previous_revenue_max=_revenue(item.get("previous_max_revenue_guidance")),
    )


def _require_symbol(item: Any, key: str) -> str:
    value = item.get(key) if isinstance(item, dict) else None
    if not isinstance(value, str) or not value.strip():
        raise EarningsDataError(
            f"Payload is missing '{key}'",
            EarningsDataErrorCode.INVALID_PAYLOAD,
        )
    return value.strip().upper()


def _revenue(value: Any) -> int | float | None:
    # Integers are kept as-is so duplicate detection stays exact.
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        return int(value)
    return normalize_to_base_units(value)


def _positive(value: Any) -> float | None:
    number = to_float(value)
    if number is None or number <= 0:
        return None
    return number


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.debug("Unparsable report date: %r", value)
        return None
