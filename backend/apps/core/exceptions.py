"""
Application exceptions.

Every service raises one of these. They are translated to HTTP responses
in a single place (``config.api``), always with the body
``{"success": false, "message": ...}``.
"""

from enum import StrEnum


class ApiError(Exception):
    """Base exception for errors that map to an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(ApiError):
    """Client sent a malformed or incomplete request."""

    status_code = 400
    default_message = "Invalid request"


class AlreadyExistsError(InvalidInputError):
    """A record with the same natural key already exists."""

    default_message = "User with this phone number already exists"


class RateLimitedError(ApiError):
    """Too many attempts for the same identifier."""

    status_code = 429
    default_message = "Too many requests. Please try again later."

    def __init__(self, message: str | None = None, *, retry_after: int) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class AuthFailure(StrEnum):
    """Why a request could not be authenticated."""

    MISSING = "missing"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    INVALID = "invalid"


AUTH_FAILURE_MESSAGES: dict[AuthFailure, str] = {
    AuthFailure.MISSING: "Authorization token is required",
    AuthFailure.MALFORMED: "Invalid authorization header format. Use: Bearer <token>",
    AuthFailure.EXPIRED: "Token has expired. Please login again.",
    AuthFailure.INVALID: "Invalid token",
}


class AuthenticationError(ApiError):
    """Missing, malformed, expired or invalid credentials."""

    status_code = 401
    default_message = "Authentication failed"

    def __init__(self, reason: AuthFailure, message: str | None = None) -> None:
        super().__init__(message or AUTH_FAILURE_MESSAGES[reason])
        self.reason = reason


class NotFoundError(ApiError):
    """Requested record does not exist."""

    status_code = 404
    default_message = "User not found"


class UpstreamError(ApiError):
    """The verification provider rejected the request."""

    status_code = 400
    default_message = "Failed to verify OTP"

    def __init__(self, message: str | None = None, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class ConfigurationError(ApiError):
    """A required service is not configured on this server."""

    status_code = 500
    default_message = "Service not configured"
