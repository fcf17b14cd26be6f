"""Display formatting for computed figures.

Formatting is kept out of the numeric core: every function here takes an
already computed value and only decides how it reads on screen.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from earningsdata.config import DEFAULT_CONFIG, EarningsDataConfig
from earningsdata.guidance import clamp_percent, is_extreme
from earningsdata.models.surprise import SurpriseBasis, SurpriseResult
from earningsdata.numeric import normalize_large_magnitude, to_float

MISSING = "-"
NOT_AVAILABLE = "N/A"

_BASIS_TEXT = {
    SurpriseBasis.CONSENSUS: "Based on consensus",
    SurpriseBasis.ESTIMATE: "Based on estimate",
    SurpriseBasis.PREVIOUS_MID: "Based on previous guidance midpoint",
}

_COMPACT_STEPS = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)


@dataclass(frozen=True)
class SurpriseDisplay:
    """Rendered surprise cell.

    Attributes:
        display: Clamped percentage text, e.g. ``"+300.00% !"``.
        tone: ``"positive"``, ``"negative"`` or ``"neutral"``.
        tooltip: Basis, raw value and any warnings.
    """

    display: str
    tone: str
    tooltip: str


def format_change_percentage(change: float | None, decimals: int = 2) -> str:
    if change is None:
        return NOT_AVAILABLE
    sign = "+" if change >= 0 else ""
    return f"{sign}{change:.{decimals}f}%"


def change_direction(change: float | None) -> str | None:
    """"up", "down" or "flat"; None when the change is unknown."""
    if change is None:
        return None
    if change > 0:
        return "up"
    if change < 0:
        return "down"
    return "flat"


def format_compact(value: Any) -> str:
    """Short form with a T/B/M/K suffix, e.g. ``15.5B``.

    Missing and non-positive values render as ``"-"``.
    """
    number = to_float(value)
    if number is None or number <= 0:
        return MISSING
    for step, suffix in _COMPACT_STEPS:
        if number >= step:
            return f"{number / step:.1f}{suffix}"
    return f"{number:g}"


def format_revenue(value: Any, config: EarningsDataConfig = DEFAULT_CONFIG) -> str:
    """Revenue as ``"$1.23 B"``.

    Micro-unit values are repaired first when the config enables it.
    """
    number = to_float(value)
    if number is None:
        return MISSING
    if config.repair_micro_units:
        number = normalize_large_magnitude(
            number, config.micro_unit_threshold, config.micro_unit_divisor
        )

    magnitude = abs(number)
    for step, suffix in _COMPACT_STEPS:
        if magnitude >= step:
            return f"${number / step:.2f} {suffix}"
    return f"${number:.2f}"


def format_market_cap_diff(diff_billions: float | None) -> str:
    if diff_billions is None:
        return MISSING
    magnitude = abs(diff_billions)
    sign = "+" if diff_billions >= 0 else "-"
    if magnitude >= 1000:
        return f"{sign}{magnitude / 1000:.1f}T"
    if magnitude >= 1:
        return f"{sign}{magnitude:.1f}B"
    return f"{sign}{magnitude * 1000:.0f}M"


def format_surprise(
    result: SurpriseResult,
    warnings: Iterable[str] = (),
    threshold: float = DEFAULT_CONFIG.extreme_threshold,
) -> SurpriseDisplay:
    """Render a surprise with the displayed value clamped to +/-``threshold``.

    The tooltip keeps the unclamped value so an extreme surprise is never
    silently hidden.
    """
    value = result.value
    if value is None:
        return SurpriseDisplay(display=MISSING, tone="neutral", tooltip="No data")

    clamped = clamp_percent(value, threshold)
    sign = "+" if clamped >= 0 else ""
    marker = " !" if is_extreme(value, threshold) else ""
    display = f"{sign}{clamped:.2f}%{marker}"

    if value > 0:
        tone = "positive"
    elif value < 0:
        tone = "negative"
    else:
        tone = "neutral"

    parts = []
    if result.basis is not None:
        parts.append(_BASIS_TEXT[result.basis])
    parts.append(f"Raw: {value:.2f}%")
    if marker:
        parts.append(f"Extreme value beyond {threshold:g}%")
    parts.extend(warnings)
    return SurpriseDisplay(display=display, tone=tone, tooltip=" | ".join(parts))
