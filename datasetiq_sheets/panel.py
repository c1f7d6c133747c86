"""Backend services for the companion panel.

Rendering is left to the host; these return plain data for it to display.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from datasetiq_sheets.config import SOURCES
from datasetiq_sheets.data.inputs import normalize_optional_string
from datasetiq_sheets.data.preferences import UserPreferences
from datasetiq_sheets.data.request_builder import auth_headers, ingestion_url, search_url
from datasetiq_sheets.data.response_normalizer import parse_body
from datasetiq_sheets.data.series_fetcher import SeriesFetcher
from datasetiq_sheets.formulas import formula_for
from datasetiq_sheets.models import Mode, SeriesRequest, StatusHint


logger = logging.getLogger(__name__)

BROWSE_LIMIT = 50
PREMIUM_LOCKED_MESSAGE = (
    "Premium features require an API key. "
    "Visit datasetiq.com/dashboard/api-keys to get started."
)


@dataclass
class SearchResult:
    """One hit from the search endpoint."""

    id: str
    title: str | None = None
    frequency: str | None = None
    units: str | None = None
    source: str | None = None


@dataclass
class PanelStatus:
    """Connection state shown at the top of the panel."""

    connected: bool
    is_paid: bool
    status: str | None = None
    error: str | None = None


@dataclass
class SeriesPreview:
    """Latest value and metadata for a series picked in the panel."""

    latest: float | None = None
    meta: dict | None = None
    is_metadata_only: bool = False
    is_pending: bool = False
    status_message: str | None = None
    error: str | None = None


class CompanionPanel:
    """Discovery, favorites and formula insertion for one user."""

    def __init__(self, fetcher: SeriesFetcher, preferences: UserPreferences) -> None:
        self.fetcher = fetcher
        self.preferences = preferences

    @property
    def _base_url(self) -> str:
        return self.fetcher.settings.base_url

    def _headers(self) -> dict[str, str]:
        return auth_headers(self.fetcher.credential())

    def _search(self, url: str) -> list[SearchResult]:
        response = self.fetcher.client.get(url, headers=self._headers())
        if response.status_code >= 300:
            logger.warning(f"Search returned HTTP {response.status_code}")
            return []

        results = parse_body(response).get("results")
        if not isinstance(results, list):
            return []
        return [
            SearchResult(
                id=item.get("id"),
                title=item.get("title"),
                frequency=item.get("frequency"),
                units=item.get("units"),
                source=item.get("source"),
            )
            for item in results
            if isinstance(item, dict)
        ]

    def status(self) -> PanelStatus:
        """Verify the stored API key with a minimal search request."""
        key = self.fetcher.credential()
        if not key:
            return PanelStatus(connected=False, is_paid=False)

        url = search_url(self._base_url, query="test", limit=1)
        try:
            response = self.fetcher.client.get(url, headers=auth_headers(key))
        except httpx.HTTPError as e:
            logger.warning(f"Could not verify API key: {e}")
            return PanelStatus(connected=False, is_paid=False, error=str(e) or "Unexpected error")

        if response.status_code in (401, 403):
            return PanelStatus(
                connected=False, is_paid=False, error="Invalid API key. Please reconnect."
            )
        if 200 <= response.status_code < 300:
            return PanelStatus(
                connected=True, is_paid=True, status="Connected - Premium features unlocked"
            )
        return PanelStatus(connected=False, is_paid=False, error="Unable to verify API key")

    def check_premium_access(self) -> tuple[bool, str | None]:
        if self.fetcher.credential():
            return True, None
        return False, PREMIUM_LOCKED_MESSAGE

    def search_series(self, query: Any) -> list[SearchResult]:
        q = normalize_optional_string(query)
        if not q:
            return []
        return self._search(search_url(self._base_url, query=q))

    def browse_by_source(self, source: Any) -> list[SearchResult]:
        source_id = normalize_optional_string(source)
        if not source_id:
            return []
        return self._search(search_url(self._base_url, source=source_id, limit=BROWSE_LIMIT))

    def sources(self) -> list[dict[str, str]]:
        return [{"id": source_id, "name": name} for source_id, name in SOURCES.items()]

    def preview(self, series_id: str) -> SeriesPreview:
        """Latest value plus metadata; the first failure wins."""
        latest = self.fetcher.fetch_series(SeriesRequest(series_id, Mode.LATEST))
        meta = self.fetcher.fetch_series(SeriesRequest(series_id, Mode.META))
        if not latest.ok or not meta.ok:
            return SeriesPreview(error=latest.error_message or meta.error_message)

        return SeriesPreview(
            latest=latest.result.scalar,
            meta=dict(meta.result.metadata) if meta.result.metadata is not None else None,
            is_metadata_only=latest.result.status_hint is StatusHint.METADATA_ONLY,
            is_pending=latest.result.status_hint is StatusHint.INGESTION_PENDING,
            status_message=latest.result.message,
        )

    def request_full_ingestion(self, series_id: str) -> dict[str, Any]:
        """Ask the provider to ingest a metadata-only dataset."""
        url = ingestion_url(self._base_url, series_id)
        try:
            response = self.fetcher.client.post(url, headers=self._headers(), json={})
        except httpx.HTTPError as e:
            logger.error(f"Ingestion request for {series_id} failed: {e}")
            return {"error": str(e) or "Network error"}

        status = response.status_code
        data = parse_body(response)

        if status == 401 or data.get("requiresAuth"):
            return {"requires_auth": True, "error": "Authentication required"}
        if status == 429 or data.get("upgradeToPro"):
            return {
                "upgrade_to_pro": True,
                "limit": data.get("limit") or 100,
                "remaining": data.get("remaining") or 0,
                "reset_at": data.get("resetAt"),
            }
        if 200 <= status < 300 and data.get("success"):
            logger.info(f"Ingestion started for {series_id}")
            return {"success": True, "message": "Dataset ingestion started"}
        return {"error": data.get("error") or data.get("message") or "Failed to request ingestion"}

    def insert_formula(self, series_id: str, function_name: str) -> str:
        """Formula text for the active cell; records the series as recent."""
        formula = formula_for(function_name, series_id)
        self.preferences.add_to_recent(series_id)
        return formula

    def insert_multiple(self, series_ids: list[str], function_name: str) -> list[str]:
        """One formula per series, top to bottom."""
        formulas = []
        for series_id in series_ids:
            formulas.append(f'={function_name}("{series_id}")')
            self.preferences.add_to_recent(series_id)
        return formulas
