"""Spreadsheet formula entry points and formula text helpers.

Each entry point either returns a cell value (or spill grid) or raises a
DataSetIQError whose message the host shows in the cell.
"""

from typing import Any

from datasetiq_sheets.config import free_tier_notice
from datasetiq_sheets.data.inputs import (
    normalize_date_input,
    normalize_field,
    normalize_optional_string,
    normalize_series_id,
)
from datasetiq_sheets.data.series_fetcher import SeriesFetcher
from datasetiq_sheets.data.table import build_table
from datasetiq_sheets.exceptions import MissingDate, ValueNotAvailable
from datasetiq_sheets.models import Mode, SeriesRequest, SeriesResult


FUNCTION_NAMES = ("DSIQ", "DSIQ_LATEST", "DSIQ_VALUE", "DSIQ_YOY", "DSIQ_META")

# Extra arguments used when a formula is inserted from the panel
INSERT_ARGUMENTS: dict[str, str] = {
    "DSIQ_VALUE": ", TODAY()",
    "DSIQ_META": ', "title"',
}


class SeriesFormulas:
    """The five user-visible formulas, bound to one fetcher."""

    def __init__(self, fetcher: SeriesFetcher) -> None:
        self.fetcher = fetcher

    def _fetch(self, request: SeriesRequest) -> SeriesResult:
        return self.fetcher.fetch_series(request).unwrap()

    def _scalar(self, request: SeriesRequest) -> float:
        result = self._fetch(request)
        if result.scalar is None:
            raise ValueNotAvailable()
        return result.scalar

    def dsiq(self, series_id: Any, frequency: Any = None, start_date: Any = None) -> list[list[Any]]:
        """Full table for a series, newest first, with a header row."""
        request = SeriesRequest(
            series_id=normalize_series_id(series_id),
            mode=Mode.TABLE,
            frequency=normalize_optional_string(frequency),
            start_date=normalize_date_input(start_date),
        )
        result = self._fetch(request)
        grid = build_table(list(result.observations))

        anonymous_limit = self.fetcher.settings.anonymous_limit
        if not self.fetcher.credential() and len(result.observations) >= anonymous_limit:
            grid.extend(free_tier_notice(anonymous_limit))
        return grid

    def dsiq_latest(self, series_id: Any) -> float:
        """Latest value."""
        return self._scalar(SeriesRequest(normalize_series_id(series_id), Mode.LATEST))

    def dsiq_value(self, series_id: Any, as_of: Any) -> float:
        """Value on or before the given date."""
        as_of_date = normalize_date_input(as_of)
        if not as_of_date:
            raise MissingDate()
        return self._scalar(
            SeriesRequest(normalize_series_id(series_id), Mode.VALUE, as_of_date=as_of_date)
        )

    def dsiq_yoy(self, series_id: Any) -> float:
        """Year-over-year change as computed by the provider."""
        return self._scalar(SeriesRequest(normalize_series_id(series_id), Mode.YOY))

    def dsiq_meta(self, series_id: Any, field_name: Any) -> Any:
        """Single metadata field of a series."""
        series = normalize_series_id(series_id)
        name = normalize_field(field_name)
        result = self._fetch(SeriesRequest(series, Mode.META))
        return result.metadata_field(name)


def formula_for(function_name: str, series_id: str) -> str:
    """Formula text inserted when a series is picked in the panel."""
    if function_name not in FUNCTION_NAMES:
        function_name = "DSIQ"
    return f'={function_name}("{series_id}"{INSERT_ARGUMENTS.get(function_name, "")})'


def build_formula(
    function_name: str,
    series_id: str,
    freq: str | None = None,
    start_date: str | None = None,
) -> str:
    """Formula wizard output; frequency and start date only apply to DSIQ and DSIQ_VALUE."""
    formula = f'={function_name}("{series_id}"'
    if function_name in ("DSIQ", "DSIQ_VALUE"):
        if freq:
            formula += f', "{freq}"'
        if start_date:
            formula += f', "{start_date}"'
    return formula + ")"


def column_letter(index: int) -> str:
    """1-based column index to A1 letters."""
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def scan_formulas(grid: list[list[Any]]) -> list[dict[str, str]]:
    """Find DSIQ formulas in a grid of cell formulas, keyed by A1 reference."""
    found = []
    for row_index, row in enumerate(grid, start=1):
        for col_index, formula in enumerate(row, start=1):
            if isinstance(formula, str) and "DSIQ" in formula:
                found.append({"cell": f"{column_letter(col_index)}{row_index}", "formula": formula})
    return found
