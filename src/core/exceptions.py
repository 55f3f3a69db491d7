"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Identity provider errors
    UPSTREAM_AUTH_ERROR = "UPSTREAM_AUTH_ERROR"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """A required field is missing or the payload has the wrong shape."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, key: str, lookup: str = "id") -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {key}",
            status_code=404,
            details={lookup: key},
        )


class StoreUnavailableError(AppException):
    """Document store timed out or failed. Safe for the caller to retry."""

    def __init__(self, message: str = "Document store unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.STORE_UNAVAILABLE,
            message=message,
            status_code=500,
        )


class UpstreamAuthError(AppException):
    """The identity provider rejected a credential operation."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(
            error_code=ErrorCode.UPSTREAM_AUTH_ERROR,
            message=message,
            status_code=status_code,
        )
