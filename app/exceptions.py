from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Application error"
    default_code = "APPLICATION_ERROR"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"
    default_code = "SERVICE_VALIDATION_ERROR"


class UnauthorizedError(AppError):
    """Raised when authentication fails or no credentials were sent."""

    http_status = 401
    default_message = "Authentication required"
    default_code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    """Raised when the caller is authenticated but may not touch the resource."""

    http_status = 403
    default_message = "Access denied"
    default_code = "FORBIDDEN"


class NotFoundError(AppError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class ConflictError(AppError):
    """Raised when a resource conflict occurs (e.g., duplicate recipe title)."""

    http_status = 409
    default_message = "Conflict"
    default_code = "CONFLICT"


class RateLimitError(AppError):
    """Raised when a client exceeded its request budget for the current window.

    ``retry_after`` is the number of seconds until the oldest request leaves the window.
    """

    http_status = 429
    default_message = "Too many requests, please try again later."
    default_code = "RATE_LIMITED"

    def __init__(self, message: Optional[str] = None, retry_after: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class UpstreamServiceError(AppError):
    """Raised when an external collaborator (OpenRouter, n8n, Supabase) fails."""

    http_status = 502
    default_message = "Upstream service error"
    default_code = "UPSTREAM_ERROR"


class ServiceUnavailableError(AppError):
    """Raised when a dependency never became ready (e.g. OAuth session polling)."""

    http_status = 503
    default_message = "Service temporarily unavailable"
    default_code = "SERVICE_UNAVAILABLE"
