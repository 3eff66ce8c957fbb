"""Errors raised by services and rendered by the API layer."""


class ServiceError(Exception):
    """Base class for errors with an HTTP status and error code."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = 404
    code = "NOT_FOUND"


class InvalidRequestError(ServiceError):
    status_code = 400
    code = "VALIDATION_ERROR"


class ConflictError(ServiceError):
    status_code = 409
    code = "CONFLICT"


class UnavailableError(ServiceError):
    """An upstream dependency failed; the request may be retried later."""


class AuthenticationError(ServiceError):
    status_code = 401
    code = "UNAUTHORIZED"
