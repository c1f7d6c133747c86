"""DataSetIQ series fetcher with a single retry on transient failures."""

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Mapping

import httpx

from datasetiq_sheets.config import Settings
from datasetiq_sheets.data.error_translator import CONNECTIVITY_MESSAGE, translate
from datasetiq_sheets.data.preferences import UserPreferences
from datasetiq_sheets.data.request_builder import build_series_request
from datasetiq_sheets.data.response_normalizer import (
    has_error,
    normalize_response,
    parse_body,
    provider_error,
)
from datasetiq_sheets.data.store import PropertyStore
from datasetiq_sheets.exceptions import SeriesFetchError
from datasetiq_sheets.models import RetryState, SeriesRequest, SeriesResult


logger = logging.getLogger(__name__)

BASE_BACKOFF_MS = 500


@dataclass(frozen=True)
class FetchOutcome:
    """Either a result or a user-facing error message, never both."""

    result: SeriesResult | None = None
    error_message: str | None = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.error_message is None):
            raise ValueError("FetchOutcome needs exactly one of result or error_message")

    @property
    def ok(self) -> bool:
        return self.result is not None

    def unwrap(self) -> SeriesResult:
        """Return the result or raise the translated failure."""
        if self.result is None:
            raise SeriesFetchError(self.error_message)
        return self.result


def compute_retry_delay(
    headers: Mapping[str, str], attempt: int, now: datetime | None = None
) -> float:
    """
    Milliseconds to wait before retrying.

    Args:
        headers: Response headers of the failed attempt
        attempt: Zero-based index of the failed attempt
        now: Current instant, used when ``retry-after`` is an HTTP date

    Returns:
        ``retry-after`` seconds as milliseconds, the time until its HTTP date,
        or ``500ms * 2**attempt`` when neither yields a positive delay
    """
    fallback = BASE_BACKOFF_MS * 2 ** attempt
    normalized = {key.lower(): value for key, value in headers.items()}
    retry_after = str(normalized.get("retry-after") or "").strip()
    if not retry_after:
        return fallback

    try:
        seconds = float(retry_after)
    except ValueError:
        seconds = math.nan
    if math.isfinite(seconds):
        return max(seconds, 0.0) * 1000

    try:
        retry_at = parsedate_to_datetime(retry_after)
    except (TypeError, ValueError):
        return fallback
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    diff_ms = (retry_at - now).total_seconds() * 1000
    return diff_ms if diff_ms > 0 else fallback


class SeriesFetcher:
    """Fetches series from the DataSetIQ public API."""

    def __init__(
        self,
        settings: Settings | None = None,
        store: PropertyStore | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        sleeper: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.settings = settings or Settings()
        self.settings.validate()
        self.preferences = UserPreferences(store) if store is not None else None
        self.sleeper = sleeper
        self.clock = clock
        self.transport = transport
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.settings.timeout,
                follow_redirects=True,
                transport=self.transport,
            )
        return self._client

    def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "SeriesFetcher":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def credential(self) -> str | None:
        """Stored API key, falling back to the environment; None when anonymous."""
        if self.preferences is not None:
            stored = self.preferences.get_api_key()
            if stored:
                return stored
        return self.settings.api_key or None

    def fetch_series(self, request: SeriesRequest) -> FetchOutcome:
        """
        Fetch one series, retrying once on 429 or 5xx.

        Args:
            request: Normalized series request

        Returns:
            FetchOutcome holding a SeriesResult or a translated error message
        """
        built = build_series_request(request, self.credential(), self.settings)
        state = RetryState()
        logger.info(f"Fetching {request.series_id} ({request.mode.value})...")

        while state.attempt < RetryState.MAX_ATTEMPTS:
            try:
                response = self.client.get(built.url, headers=built.headers)
            except httpx.TransportError as e:
                logger.error(f"Network error fetching {request.series_id}: {e}")
                return FetchOutcome(error_message=CONNECTIVITY_MESSAGE)

            status = response.status_code
            body = parse_body(response)

            if 200 <= status < 300 and not has_error(body):
                result = normalize_response(body, request.mode)
                logger.info(f"  Received {len(result.observations)} observations")
                return FetchOutcome(result=result)

            error = provider_error(body, status)
            if error.is_transient and state.can_retry:
                state.delay_ms = compute_retry_delay(response.headers, state.attempt, self.clock())
                logger.warning(
                    f"  HTTP {status} for {request.series_id}, retrying in {state.delay_ms:.0f}ms"
                )
                self.sleeper(state.delay_ms / 1000)
                state.attempt += 1
                continue

            message = translate(error)
            logger.error(f"HTTP error fetching {request.series_id}: {status} ({message})")
            return FetchOutcome(error_message=message)

        return FetchOutcome(error_message=CONNECTIVITY_MESSAGE)
