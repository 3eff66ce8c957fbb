"""Client-side error types and user-facing messages."""

import httpx

UNAUTHORIZED_MESSAGE = "Unauthorized - please log in"
SERVER_ERROR_MESSAGE = "Server error - please try again later"
UNKNOWN_ERROR_MESSAGE = "Unknown error"
NETWORK_ERROR_MESSAGE = "Wystąpił błąd połączenia. Spróbuj ponownie."

DAY_NOT_FOUND_MESSAGE = "Nie znaleziono danych dla tego dnia"
MEAL_NOT_FOUND_MESSAGE = "Posiłek nie istnieje"
PROFILE_NOT_FOUND_MESSAGE = "Profile not found"

AI_GENERATION_ERROR_MESSAGE = (
    "Wystąpił błąd podczas generowania. Spróbuj ponownie."
)
DEFAULT_RETRY_AFTER_SECONDS = 60


class ApiError(Exception):
    """Request failed with a message that can be shown to the user."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        details: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details or {}


class RateLimitError(ApiError):
    """Server rejected the request because the caller is rate limited."""

    def __init__(self, retry_after: int = DEFAULT_RETRY_AFTER_SECONDS) -> None:
        super().__init__(
            f"Zbyt wiele żądań. Spróbuj ponownie za {retry_after}s", status=429
        )
        self.retry_after = retry_after


class ValidationFailed(ApiError):
    """Input was rejected locally before any request was sent."""


def describe_status(
    status: int,
    reason: str,
    fallback: str,
    not_found: str | None = None,
) -> str:
    """Map an HTTP status to the message shown for a failed request.

    ``fallback`` is a prefix such as ``"Failed to fetch meals"``; the raw
    reason phrase is appended for statuses without a fixed message.
    """
    if status == httpx.codes.NOT_FOUND and not_found is not None:
        return not_found
    if status == httpx.codes.UNAUTHORIZED:
        return UNAUTHORIZED_MESSAGE
    if status == httpx.codes.INTERNAL_SERVER_ERROR:
        return SERVER_ERROR_MESSAGE
    return f"{fallback}: {reason}"


def error_message(exc: BaseException) -> str:
    """Return the user-facing message for an exception."""
    if isinstance(exc, ApiError):
        return exc.message
    return UNKNOWN_ERROR_MESSAGE
