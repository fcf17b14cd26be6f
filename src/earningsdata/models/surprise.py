"""Surprise and guidance comparison results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SurpriseBasis(Enum):
    """Which baseline a surprise percentage was computed against."""

    CONSENSUS = "consensus"
    ESTIMATE = "estimate"
    PREVIOUS_MID = "previous_mid"


@dataclass(frozen=True)
class SurpriseResult:
    """Percentage surprise with its basis.

    Attributes:
        value: Surprise in percent, unclamped. None when no basis applied.
        basis: Baseline used, or None.
        extreme: True when ``abs(value)`` exceeds the extreme threshold.
    """

    value: float | None = None
    basis: SurpriseBasis | None = None
    extreme: bool = False

    @classmethod
    def empty(cls) -> SurpriseResult:
        return cls(value=None, basis=None, extreme=False)

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "basis": self.basis.value if self.basis else None,
            "extreme": self.extreme,
        }


class GuidancePeriod(Enum):
    """Detected period of a guidance figure relative to the actual."""

    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PeriodDetection:
    """Outcome of ratio-based guidance period detection.

    Attributes:
        adjusted_guidance: Guidance rescaled to the actual's period.
        period: Detected period of the original guidance.
        confidence: Detection confidence, 0-100.
    """

    adjusted_guidance: int | float | None
    period: GuidancePeriod = GuidancePeriod.UNKNOWN
    confidence: int = 0


@dataclass(frozen=True)
class GuidanceSurprises:
    """EPS and revenue guidance surprises for one symbol."""

    eps: SurpriseResult = field(default_factory=SurpriseResult.empty)
    revenue: SurpriseResult = field(default_factory=SurpriseResult.empty)
    warnings: tuple[str, ...] = ()
