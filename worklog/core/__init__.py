"""Core building blocks shared by the worklog API."""

from .exceptions import (
    AccessDeniedError,
    AuthenticationRequired,
    FilterValidationError,
    RequestValidationError,
    ResourceNotFoundError,
    WorklogAPIError,
)
from .settings import ApiCacheSettings, FilteringSettings, PaginationSettings

__all__ = [
    "AccessDeniedError",
    "ApiCacheSettings",
    "AuthenticationRequired",
    "FilterValidationError",
    "FilteringSettings",
    "PaginationSettings",
    "RequestValidationError",
    "ResourceNotFoundError",
    "WorklogAPIError",
]
