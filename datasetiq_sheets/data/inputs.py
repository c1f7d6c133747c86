"""Normalization of raw formula arguments."""

from datetime import date, datetime, timezone
from typing import Any

import pandas as pd

from datasetiq_sheets.exceptions import InvalidDate, InvalidDateInput, MissingField, MissingSeriesId


def normalize_optional_string(value: Any) -> str | None:
    """Return a trimmed string, or None for null/blank input.

    Non-string values are coerced with ``str()`` untouched.
    """
    if value is None:
        return None
    if isinstance(value, str):
        trimmed = value.strip()
        return trimmed or None
    return str(value)


def normalize_series_id(value: Any) -> str:
    normalized = normalize_optional_string(value)
    if not normalized:
        raise MissingSeriesId()
    return normalized


def normalize_field(value: Any) -> str:
    normalized = normalize_optional_string(value)
    if not normalized:
        raise MissingField()
    return normalized


def normalize_date_input(value: Any) -> str | None:
    """
    Canonicalize a date argument.

    Native dates are rendered as ``yyyy-MM-dd`` in UTC. Strings are passed
    through unmodified, the server validates them.

    Raises:
        InvalidDate: a native date value that does not hold a real instant
        InvalidDateInput: any other argument type
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    # NaT is a datetime subclass, check it before formatting
    if value is pd.NaT:
        raise InvalidDate()
    if isinstance(value, pd.Timestamp):
        if value.tzinfo is not None:
            value = value.tz_convert("UTC")
        return value.strftime("%Y-%m-%d")
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    raise InvalidDateInput()
