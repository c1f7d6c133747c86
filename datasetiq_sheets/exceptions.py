"""Exceptions raised to the spreadsheet host.

Every exception carries a message meant for display in a cell, never an
internal code or traceback.
"""


class DataSetIQError(Exception):
    """Base class for all user-facing failures."""

    default_message = "Unable to fetch data."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InputError(DataSetIQError):
    """Raised before any network call when an argument is unusable."""


class MissingSeriesId(InputError):
    default_message = "series_id is required."


class InvalidDate(InputError):
    default_message = "Invalid date."


class InvalidDateInput(InputError):
    default_message = "Invalid date input."


class MissingField(InputError):
    default_message = "Field is required for DSIQ_META."


class MissingDate(InputError):
    default_message = "Date is required for DSIQ_VALUE."


class MissingApiKey(InputError):
    default_message = "API key is required."


class MetadataFieldNotFound(DataSetIQError):
    """Raised when a metadata lookup names a field the dataset lacks."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f'Metadata "{field_name}" not found.')


class ValueNotAvailable(DataSetIQError):
    default_message = "Value not available."


class SeriesFetchError(DataSetIQError):
    """Raised when the provider call ends in a translated failure."""
