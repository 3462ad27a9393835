"""
Exception hierarchy for the worklog API.

Every error raised by the request pipeline derives from ``WorklogAPIError``
and carries the HTTP status and machine readable ``error_code`` used by
``BaseAPIView`` to render the JSON error envelope.
"""

from typing import Any, Optional


class WorklogAPIError(Exception):
    """Base class for errors rendered as JSON API responses."""

    status_code = 400
    error_code = "BAD_REQUEST"
    default_message = "Bad request"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        errors: Optional[dict[str, Any]] = None,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_message
        self.errors = errors or {}
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": "error",
            "message": self.message,
            "error_code": self.error_code,
        }
        if self.errors:
            payload["errors"] = self.errors
        return payload


class FilterValidationError(WorklogAPIError):
    """Raised when client supplied filters fail validation.

    ``errors`` maps each offending field to a single message.
    """

    status_code = 422
    error_code = "INVALID_FILTERS"
    default_message = "Invalid filter parameters"


class RequestValidationError(WorklogAPIError):
    """Raised when a write payload fails validation."""

    status_code = 422
    error_code = "VALIDATION_FAILED"
    default_message = "Validation failed"


class ResourceNotFoundError(WorklogAPIError):
    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"
    default_message = "Resource not found"

    def __init__(self, kind: str, identifier: Any):
        super().__init__(
            f"{kind} with ID {identifier} not found",
            error_code=f"{kind.upper()}_NOT_FOUND",
        )
        self.kind = kind
        self.identifier = identifier


class AccessDeniedError(WorklogAPIError):
    status_code = 403
    error_code = "ACCESS_DENIED"
    default_message = "You do not have permission to access this resource"


class AuthenticationRequired(WorklogAPIError):
    status_code = 401
    error_code = "UNAUTHENTICATED"
    default_message = "Authentication required"


class MethodNotAllowedError(WorklogAPIError):
    status_code = 405
    error_code = "METHOD_NOT_ALLOWED"
    default_message = "Method not allowed"
