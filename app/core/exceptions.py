"""Custom exceptions and error handling for the Presence Dashboard API."""

from fastapi import HTTPException, status


class PresenceDashboardException(HTTPException):
    """Base exception for the Presence Dashboard API."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code


# Validation Errors (400)
class ValidationError(PresenceDashboardException):
    """Raised when input validation fails."""

    def __init__(self, detail: str = "Invalid input"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="VALIDATION_ERROR",
        )


# Rate Limiting (429)
class RateLimitExceededError(PresenceDashboardException):
    """Raised when rate limit is exceeded."""

    def __init__(self, detail: str = "Rate limit exceeded. Please try again later."):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail,
            error_code="RATE_LIMIT_EXCEEDED",
        )


# Server Errors (500)
class InternalServerError(PresenceDashboardException):
    """Raised for unexpected server errors."""

    def __init__(self, detail: str = "An unexpected error occurred"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code="INTERNAL_ERROR",
        )
