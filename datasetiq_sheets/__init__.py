"""DataSetIQ economic series for spreadsheet formulas."""

from datasetiq_sheets.config import Settings
from datasetiq_sheets.data import (
    InMemoryPropertyStore,
    SeriesFetcher,
    SqlitePropertyStore,
    UserPreferences,
)
from datasetiq_sheets.exceptions import DataSetIQError, SeriesFetchError
from datasetiq_sheets.formulas import SeriesFormulas
from datasetiq_sheets.panel import CompanionPanel

__version__ = "0.1.0"

__all__ = [
    "CompanionPanel",
    "DataSetIQError",
    "InMemoryPropertyStore",
    "SeriesFetchError",
    "SeriesFetcher",
    "SeriesFormulas",
    "Settings",
    "SqlitePropertyStore",
    "UserPreferences",
]
