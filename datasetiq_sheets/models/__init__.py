"""Request and result models."""

from .series import (
    ErrorCode,
    Mode,
    Observation,
    ProviderError,
    RetryState,
    SeriesRequest,
    SeriesResult,
    StatusHint,
)

__all__ = [
    "ErrorCode",
    "Mode",
    "Observation",
    "ProviderError",
    "RetryState",
    "SeriesRequest",
    "SeriesResult",
    "StatusHint",
]
