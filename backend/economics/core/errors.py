"""Error codes raised by the economics calculators."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Economics error codes."""

    INVALID_RATE_SCHEME = "INVALID_RATE_SCHEME"
    RATE_OUT_OF_RANGE = "RATE_OUT_OF_RANGE"
    FIGURE_UNAVAILABLE = "FIGURE_UNAVAILABLE"


@dataclass(frozen=True)
class EconomicsError(Exception):
    """Base error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidRateSchemeError(EconomicsError):
    """Raised when a commission or referral carries an unknown rate type."""

    def __init__(self, scheme_type: object) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RATE_SCHEME,
            message=f"Unknown rate scheme '{scheme_type}', expected 'fixed' or 'percentage'",
        )
        object.__setattr__(self, "scheme_type", scheme_type)


class MissingFigureError(EconomicsError):
    """Raised when an input needed for a figure is absent."""

    def __init__(self, figure: str, reason: str) -> None:
        super().__init__(
            code=ErrorCode.FIGURE_UNAVAILABLE,
            message=f"Unable to compute {figure}: {reason}",
        )
        object.__setattr__(self, "figure", figure)


class RateOutOfRangeError(EconomicsError):
    """Raised when a percentage rate lies outside 0-100."""

    def __init__(self, scheme_type: object, value: object) -> None:
        super().__init__(
            code=ErrorCode.RATE_OUT_OF_RANGE,
            message=f"Rate {value} is out of range for '{scheme_type}', expected 0-100",
        )
        object.__setattr__(self, "scheme_type", scheme_type)
