"""Tests for provider URL and header construction."""

import httpx

from datasetiq_sheets.data.request_builder import (
    build_series_request,
    ingestion_url,
    search_url,
)
from datasetiq_sheets.models import Mode, SeriesRequest


def test_metadata_mode_targets_description_endpoint(settings):
    built = build_series_request(SeriesRequest("CPIAUCSL", Mode.META), None, settings)
    assert built.url == "https://datasetiq.test/api/public/series/CPIAUCSL"
    assert built.headers == {}


def test_data_modes_target_observations_with_anonymous_limit(settings):
    built = build_series_request(SeriesRequest("CPIAUCSL", Mode.LATEST), None, settings)
    url = httpx.URL(built.url)
    assert url.path == "/api/public/series/CPIAUCSL/data"
    assert dict(url.params) == {"limit": "100"}


def test_credential_raises_limit_and_adds_bearer_header(settings):
    built = build_series_request(SeriesRequest("CPIAUCSL", Mode.TABLE), "sk-test", settings)
    assert httpx.URL(built.url).params["limit"] == "1000"
    assert built.headers == {"Authorization": "Bearer sk-test"}


def test_optional_params_only_when_present(settings):
    request = SeriesRequest(
        "CPIAUCSL", Mode.TABLE, frequency="monthly", start_date="2020-01-01"
    )
    params = httpx.URL(build_series_request(request, None, settings).url).params
    assert params["start"] == "2020-01-01"
    assert params["freq"] == "monthly"
    assert "end" not in params


def test_value_mode_sends_as_of_date_as_end(settings):
    request = SeriesRequest("CPIAUCSL", Mode.VALUE, as_of_date="2023-06-01")
    params = httpx.URL(build_series_request(request, None, settings).url).params
    assert params["end"] == "2023-06-01"


def test_series_id_is_encoded_as_one_path_segment(settings):
    built = build_series_request(SeriesRequest("BLS/CU UR", Mode.META), None, settings)
    assert built.url == "https://datasetiq.test/api/public/series/BLS%2FCU%20UR"


def test_query_values_are_percent_encoded(settings):
    request = SeriesRequest("X", Mode.TABLE, start_date="2020-01-01&limit=5")
    built = build_series_request(request, None, settings)
    assert "start=2020-01-01%26limit%3D5" in built.url
    assert httpx.URL(built.url).params["limit"] == "100"


def test_search_and_ingestion_urls(settings):
    assert search_url(settings.base_url, query="consumer prices") == (
        "https://datasetiq.test/api/public/search?q=consumer%20prices"
    )
    assert search_url(settings.base_url, source="FRED", limit=50) == (
        "https://datasetiq.test/api/public/search?source=FRED&limit=50"
    )
    assert ingestion_url(settings.base_url, "a/b") == (
        "https://datasetiq.test/api/datasets/a%2Fb/fetch"
    )
