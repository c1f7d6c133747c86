"""Reshape provider payloads into a single SeriesResult.

Two upstream schemas are in circulation:

    legacy:  {"meta": {...},    "data": [["2024-01-01", 1.0], ...], "scalar": ...}
    current: {"dataset": {...}, "data": [{"date": "2024-01-01", "value": 1.0}, ...], "scalar": ...}

The shape is detected once in ``detect_shape``; everything after that works on
(date, value) pairs and never looks at the schema again.
"""

import logging
import math
from enum import Enum
from typing import Any

import httpx

from datasetiq_sheets.models import (
    ErrorCode,
    Mode,
    Observation,
    ProviderError,
    SeriesResult,
    StatusHint,
)


logger = logging.getLogger(__name__)


class PayloadShape(Enum):
    """Upstream schema a response body follows."""
    LEGACY = "legacy"
    CURRENT = "current"


def parse_body(response: httpx.Response) -> dict:
    """Decode a JSON body, degrading anything unusable to an empty mapping."""
    try:
        body = response.json()
    except ValueError:
        logger.warning("Malformed JSON body, treating it as empty")
        return {}
    return body if isinstance(body, dict) else {}


def detect_shape(body: dict) -> PayloadShape:
    data = body.get("data")
    if isinstance(data, list):
        for entry in data:
            if isinstance(entry, (list, tuple)):
                return PayloadShape.LEGACY
            if isinstance(entry, dict):
                return PayloadShape.CURRENT
    if "meta" in body and "dataset" not in body:
        return PayloadShape.LEGACY
    return PayloadShape.CURRENT


def _pairs(body: dict, shape: PayloadShape) -> list[tuple[Any, Any]]:
    data = body.get("data")
    if not isinstance(data, list):
        return []
    if shape is PayloadShape.LEGACY:
        return [
            (entry[0], entry[1])
            for entry in data
            if isinstance(entry, (list, tuple)) and len(entry) >= 2
        ]
    return [
        (entry.get("date"), entry.get("value"))
        for entry in data
        if isinstance(entry, dict)
    ]


def _metadata(body: dict, shape: PayloadShape) -> dict | None:
    container = body.get("meta" if shape is PayloadShape.LEGACY else "dataset")
    return dict(container) if isinstance(container, dict) else None


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    # "NaN" and "Infinity" parse but are not observations
    if not math.isfinite(number):
        return None
    return value if isinstance(value, (int, float)) else number


def has_error(body: dict) -> bool:
    """True when the body carries an error object, even an empty one."""
    error = body.get("error")
    return isinstance(error, (dict, list)) or bool(error)


def to_observations(pairs: list[tuple[Any, Any]]) -> tuple[Observation, ...]:
    observations = []
    dropped = 0
    for obs_date, raw_value in pairs:
        value = _number(raw_value)
        if not isinstance(obs_date, str) or not obs_date or value is None:
            dropped += 1
            continue
        observations.append(Observation(date=obs_date, value=value))

    if dropped:
        logger.warning(f"Dropped {dropped} malformed observations")
    return tuple(observations)


def _scalar(mode: Mode, observations: tuple[Observation, ...], provider_scalar: float | None) -> float | None:
    # Provider returns ascending order for latest and the as-of match first for value
    if observations and mode is Mode.LATEST:
        return observations[-1].value
    if observations and mode is Mode.VALUE:
        return observations[0].value
    return provider_scalar


def normalize_response(body: dict, mode: Mode) -> SeriesResult:
    """
    Build a SeriesResult from a successful response body.

    Args:
        body: Decoded JSON body without an ``error`` object
        mode: Mode of the originating request

    Returns:
        SeriesResult with the scalar derived for scalar modes
    """
    shape = detect_shape(body)
    observations = to_observations(_pairs(body, shape))
    message = body.get("message")
    series_id = body.get("seriesId")

    return SeriesResult(
        observations=observations,
        scalar=_scalar(mode, observations, _number(body.get("scalar"))),
        metadata=_metadata(body, shape),
        status_hint=StatusHint.from_payload(body.get("status")),
        message=message if isinstance(message, str) else None,
        series_id=series_id if isinstance(series_id, str) else None,
    )


def provider_error(body: dict, http_status: int) -> ProviderError:
    """Extract the provider's error code and message, if any."""
    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return ProviderError(
            http_status=http_status,
            code=ErrorCode.parse(error.get("code")),
            message=message if isinstance(message, str) and message else None,
        )
    if isinstance(error, str) and error:
        return ProviderError(http_status=http_status, message=error)
    return ProviderError(http_status=http_status)
