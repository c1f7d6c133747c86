"""Build provider URLs and headers for a series request."""

from dataclasses import dataclass, field
from urllib.parse import quote, urlencode

from datasetiq_sheets.config import Settings
from datasetiq_sheets.models import Mode, SeriesRequest


SERIES_PATH = "/api/public/series/"
SERIES_DATA_PATH = "/data"
SEARCH_PATH = "/api/public/search"
INGESTION_PATH = "/api/datasets/{series_id}/fetch"


@dataclass(frozen=True)
class BuiltRequest:
    """Fully-qualified GET target for one fetch."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)


def auth_headers(credential: str | None) -> dict[str, str]:
    if credential:
        return {"Authorization": f"Bearer {credential}"}
    return {}


def series_url(base_url: str, series_id: str) -> str:
    return f"{base_url}{SERIES_PATH}{quote(series_id, safe='')}"


def build_series_request(
    request: SeriesRequest, credential: str | None, settings: Settings
) -> BuiltRequest:
    """
    Turn a normalized request into a URL and headers.

    Metadata requests target the series description; every other mode targets
    its observations. The ``limit`` parameter is capped lower for anonymous
    callers, the server still enforces its own entitlement.
    """
    url = series_url(settings.base_url, request.series_id)

    if request.mode is not Mode.META:
        url += SERIES_DATA_PATH
        params: list[tuple[str, str]] = []
        if request.start_date:
            params.append(("start", request.start_date))
        if request.frequency:
            params.append(("freq", request.frequency))
        if request.as_of_date:
            params.append(("end", request.as_of_date))
        params.append(("limit", str(settings.limit_for(bool(credential)))))
        url += "?" + urlencode(params, quote_via=quote)

    return BuiltRequest(url=url, headers=auth_headers(credential))


def search_url(base_url: str, *, query: str | None = None, source: str | None = None,
               limit: int | None = None) -> str:
    params: list[tuple[str, str]] = []
    if query:
        params.append(("q", query))
    if source:
        params.append(("source", source))
    if limit is not None:
        params.append(("limit", str(limit)))
    return f"{base_url}{SEARCH_PATH}?{urlencode(params, quote_via=quote)}"


def ingestion_url(base_url: str, series_id: str) -> str:
    return base_url + INGESTION_PATH.format(series_id=quote(series_id, safe=""))
