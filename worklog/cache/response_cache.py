"""
HTTP response cache with a tracked-key index.

``ResponseCache`` stores successful GET responses in the configured Django
cache backend and records every key it writes in ``CacheKeyRegistry``. Keys
can then be invalidated individually, by route substring, by age, or all at
once.
"""

from __future__ import annotations

import logging
import threading
from datetime import timedelta
from typing import Optional

from django.core.cache import caches
from django.http import HttpResponse
from django.utils import timezone

from ..core.settings import ApiCacheSettings
from .fingerprint import request_fingerprint
from .registry import CacheKeyRegistry

logger = logging.getLogger(__name__)

# Store and index updates are serialized within a process.
_index_lock = threading.RLock()


def request_route(request) -> str:
    return request.path.lstrip("/")


class ResponseCache:
    """
    Store, serve and invalidate cached API responses.

    Example:
        cache = ResponseCache()
        response = cache.lookup(request)
        if response is None:
            response = view(request)
            cache.store(request, response)
    """

    def __init__(
        self,
        settings: Optional[ApiCacheSettings] = None,
        registry: Optional[CacheKeyRegistry] = None,
    ):
        self.settings = settings or ApiCacheSettings.from_settings()
        self.registry = registry or CacheKeyRegistry()

    @property
    def backend(self):
        return caches[self.settings.cache_alias]

    # ------------------------------------------------------------------ #
    # Read path
    # ------------------------------------------------------------------ #
    def is_cacheable_request(self, request) -> bool:
        if not self.settings.enabled:
            return False
        if not self.settings.is_cacheable_method(request.method):
            return False
        return not self.settings.is_excluded(request_route(request))

    def key_for(self, request, method: Optional[str] = None) -> str:
        return request_fingerprint(request, prefix=self.settings.key_prefix, method=method)

    def lookup(self, request) -> Optional[HttpResponse]:
        key = self.key_for(request)
        entry = self.backend.get(key)
        if not entry:
            return None

        logger.info("Cache hit: key=%s path=%s", key, request_route(request))
        response = HttpResponse(entry["content"], status=entry.get("status", 200))
        for header, value in entry.get("headers", {}).items():
            response[header] = value
        return response

    def store(self, request, response) -> bool:
        """Cache ``response`` when it is a plain 200 answer to a GET."""
        if request.method != "GET" or response.status_code != 200:
            return False
        if getattr(response, "streaming", False):
            return False

        key = self.key_for(request)
        route = request_route(request)
        minutes = self.settings.duration_for(route)
        now = timezone.now()
        entry = {
            "content": response.content,
            "headers": dict(response.items()),
            "status": response.status_code,
            "path": route,
            "created_at": now.isoformat(),
        }

        # Index first: every stored entry has an index row.
        with _index_lock:
            self.registry.track(key, route, now, now + timedelta(minutes=minutes))
            try:
                self.backend.set(key, entry, timeout=minutes * 60)
            except Exception:
                self.backend.delete(key)
                self.registry.forget([key])
                raise

        logger.info(
            "Cached response: key=%s path=%s duration=%smin", key, route, minutes
        )
        return True

    # ------------------------------------------------------------------ #
    # Invalidation
    # ------------------------------------------------------------------ #
    def _forget(self, keys: list[str]) -> int:
        if not keys:
            return 0
        with _index_lock:
            self.backend.delete_many(keys)
            self.registry.forget(keys)
        return len(keys)

    def invalidate_request(self, request) -> bool:
        """Drop the entry the equivalent GET of ``request`` would have used."""
        if not self.settings.enabled:
            return False
        key = self.key_for(request, method="GET")
        self._forget([key])
        logger.info("Cleared cache: key=%s path=%s", key, request_route(request))
        return True

    def clear_route(self, pattern: str) -> int:
        """Drop every tracked entry whose path contains ``pattern``."""
        pattern = pattern.lstrip("/")
        with _index_lock:
            count = self._forget(self.registry.keys_for_route(pattern))
        logger.info("Cleared %s cache entries for route pattern %r", count, pattern)
        return count

    def clear_all(self) -> int:
        with _index_lock:
            keys = self.registry.all_keys()
            self.backend.delete_many(keys)
            self.registry.clear()
        logger.info("Cleared all API cache: count=%s", len(keys))
        return len(keys)

    def sweep(self, max_age_days: Optional[int] = None) -> int:
        """Drop entries created ``max_age_days`` or more days ago."""
        if max_age_days is None:
            max_age_days = self.settings.max_age_days
        cutoff = timezone.now() - timedelta(days=max_age_days)
        with _index_lock:
            count = self._forget(self.registry.keys_created_before(cutoff))
        logger.info(
            "Cleared old API cache entries: count=%s max_age_days=%s", count, max_age_days
        )
        return count


def get_response_cache() -> ResponseCache:
    return ResponseCache()
