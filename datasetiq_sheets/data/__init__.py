"""Request building, fetching and per-user storage."""

from .series_fetcher import FetchOutcome, SeriesFetcher
from .store import InMemoryPropertyStore, PropertyStore, SqlitePropertyStore
from .preferences import UserPreferences

__all__ = [
    "FetchOutcome",
    "SeriesFetcher",
    "InMemoryPropertyStore",
    "PropertyStore",
    "SqlitePropertyStore",
    "UserPreferences",
]
