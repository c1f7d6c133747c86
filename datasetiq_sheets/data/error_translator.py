"""Translate provider failures into cell-friendly messages."""

from datasetiq_sheets.models import ErrorCode, ProviderError


CONNECTIVITY_MESSAGE = "Unable to reach DataSetIQ. Please try again."

# Checked in order, first match wins
CODE_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.NO_KEY: "Please open DataSetIQ sidebar to connect.",
    ErrorCode.INVALID_KEY: "Invalid API Key. Reconnect at datasetiq.com/dashboard/api-keys",
    ErrorCode.REVOKED_KEY: "API Key revoked. Get a new key at datasetiq.com/dashboard/api-keys",
    ErrorCode.FREE_LIMIT: "Free plan limit reached. Upgrade at datasetiq.com/pricing",
    ErrorCode.QUOTA_EXCEEDED: "Daily Quota Exceeded. Upgrade at datasetiq.com/pricing",
    ErrorCode.PLAN_REQUIRED: "Upgrade required. Visit datasetiq.com/pricing",
}

RATE_LIMITED_MESSAGE = "Rate limited. Please retry shortly."
SERVER_UNAVAILABLE_MESSAGE = "Server unavailable. Please retry."
GENERIC_MESSAGE = "Unable to fetch data."


def map_error(code: ErrorCode | str | None, http_status: int, fallback: str | None = None) -> str:
    """Map an error code and status to one fixed user-facing message."""
    if isinstance(code, str):
        code = ErrorCode.parse(code)
    if code in CODE_MESSAGES:
        return CODE_MESSAGES[code]
    if http_status == 429:
        return RATE_LIMITED_MESSAGE
    if http_status >= 500:
        return SERVER_UNAVAILABLE_MESSAGE
    return fallback or GENERIC_MESSAGE


def translate(error: ProviderError) -> str:
    return map_error(error.code, error.http_status, error.message)
