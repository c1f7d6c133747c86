"""Data models for series requests and results."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from datasetiq_sheets.exceptions import MetadataFieldNotFound, MissingDate, MissingSeriesId


class Mode(Enum):
    """What a single fetch is asked to produce."""
    TABLE = "table"
    LATEST = "latest"
    VALUE = "value"  # value on or before an as-of date
    YOY = "yoy"
    META = "meta"


class StatusHint(Enum):
    """Advisory dataset state reported alongside a successful response."""
    OK = "ok"
    METADATA_ONLY = "metadata_only"
    INGESTION_PENDING = "ingestion_pending"

    @classmethod
    def from_payload(cls, raw: Any) -> "StatusHint":
        for hint in cls:
            if raw == hint.value:
                return hint
        return cls.OK


class ErrorCode(Enum):
    """Error codes the provider places in ``error.code``."""
    NO_KEY = "NO_KEY"
    INVALID_KEY = "INVALID_KEY"
    REVOKED_KEY = "REVOKED_KEY"
    FREE_LIMIT = "FREE_LIMIT"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    PLAN_REQUIRED = "PLAN_REQUIRED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: Any) -> "ErrorCode | None":
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class SeriesRequest:
    """Normalized arguments for one fetch."""

    series_id: str
    mode: Mode = Mode.TABLE
    frequency: str | None = None
    start_date: str | None = None
    as_of_date: str | None = None

    def __post_init__(self) -> None:
        series_id = self.series_id.strip() if isinstance(self.series_id, str) else ""
        if not series_id:
            raise MissingSeriesId()
        object.__setattr__(self, "series_id", series_id)
        if self.mode is Mode.VALUE and not self.as_of_date:
            raise MissingDate()
        if self.mode is not Mode.VALUE:
            object.__setattr__(self, "as_of_date", None)


@dataclass(frozen=True)
class Observation:
    """Single dated value of a series."""

    date: str
    value: float


@dataclass(frozen=True)
class SeriesResult:
    """Shape-agnostic result of one successful fetch."""

    observations: tuple[Observation, ...] = ()
    scalar: float | None = None
    metadata: Mapping[str, Any] | None = None
    status_hint: StatusHint = StatusHint.OK
    message: str | None = None
    series_id: str | None = None

    def metadata_field(self, name: str) -> Any:
        """Look up one metadata field, raising when the dataset lacks it."""
        if self.metadata is None or name not in self.metadata:
            raise MetadataFieldNotFound(name)
        return self.metadata[name]


@dataclass(frozen=True)
class ProviderError:
    """Failure reported by the provider for one attempt."""

    http_status: int
    code: ErrorCode | None = None
    message: str | None = None

    @property
    def is_transient(self) -> bool:
        return self.http_status == 429 or self.http_status >= 500


@dataclass
class RetryState:
    """Attempt bookkeeping for a single logical fetch."""

    attempt: int = 0
    delay_ms: float = 0.0

    MAX_ATTEMPTS = 2

    @property
    def can_retry(self) -> bool:
        return self.attempt + 1 < self.MAX_ATTEMPTS
