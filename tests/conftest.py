"""Shared fixtures: fake transports, stores and a recording sleeper."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest

from datasetiq_sheets.config import Settings
from datasetiq_sheets.data import InMemoryPropertyStore, SeriesFetcher
from datasetiq_sheets.data.preferences import API_KEY_PROP


FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def json_response(
    body: Any = None,
    *,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        headers={"content-type": "application/json", **(headers or {})},
        content=json.dumps(body if body is not None else {}).encode("utf-8"),
    )


class ScriptedTransport:
    """Replays canned responses in order and records every request."""

    def __init__(self, *responses: httpx.Response | Callable[[httpx.Request], httpx.Response]) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        response = self.responses.pop(0)
        if callable(response):
            return response(request)
        return response

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(base_url="https://datasetiq.test", api_key="", data_dir=tmp_path)


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def store() -> InMemoryPropertyStore:
    return InMemoryPropertyStore()


@pytest.fixture
def keyed_store() -> InMemoryPropertyStore:
    return InMemoryPropertyStore({API_KEY_PROP: "sk-test"})


@pytest.fixture
def make_fetcher(settings, sleeps, store):
    """Build a fetcher wired to a scripted transport."""
    created: list[SeriesFetcher] = []

    def _make(transport: ScriptedTransport, *, property_store=None) -> SeriesFetcher:
        fetcher = SeriesFetcher(
            settings,
            property_store if property_store is not None else store,
            transport=transport.transport(),
            sleeper=sleeps.append,
            clock=lambda: FIXED_NOW,
        )
        created.append(fetcher)
        return fetcher

    yield _make

    for fetcher in created:
        fetcher.close()
