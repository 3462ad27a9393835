"""
HTTP response cache for the worklog API.
"""

from .fingerprint import build_fingerprint, request_fingerprint
from .registry import CacheKeyRegistry
from .response_cache import ResponseCache, get_response_cache

__all__ = [
    "CacheKeyRegistry",
    "ResponseCache",
    "build_fingerprint",
    "get_response_cache",
    "request_fingerprint",
]
