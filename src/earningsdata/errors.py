"""Earnings data error types."""

from __future__ import annotations

from enum import Enum


class EarningsDataErrorCode(Enum):
    """Error classification codes."""

    CONFIG_INVALID = "config_invalid"
    INVALID_PAYLOAD = "invalid_payload"
    INVALID_INPUT = "invalid_input"


class EarningsDataError(Exception):
    """Earnings data exception with an error code.

    The computation functions never raise this; they degrade to ``None``.
    It is reserved for configuration and payload-shape problems that a
    caller has to fix.

    Attributes:
        message: Human-readable error description.
        code: Structured error code for programmatic handling.
    """

    def __init__(
        self,
        message: str,
        code: EarningsDataErrorCode = EarningsDataErrorCode.INVALID_INPUT,
    ) -> None:
        super().__init__(message)
        self.code = code
