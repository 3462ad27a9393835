"""
Tracked-key index for the response cache.

Each cache entry written by ``ResponseCache`` gets one ``TrackedCacheKey``
row holding its request path and creation time, so entries can be swept by
route or by age without enumerating the cache backend.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from ..models import TrackedCacheKey

logger = logging.getLogger(__name__)


class CacheKeyRegistry:
    def track(
        self,
        key: str,
        path: str,
        created_at: datetime,
        expires_at: Optional[datetime] = None,
    ) -> None:
        TrackedCacheKey.objects.update_or_create(
            key=key,
            defaults={"path": path, "created_at": created_at, "expires_at": expires_at},
        )

    def forget(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        if not keys:
            return 0
        deleted, _ = TrackedCacheKey.objects.filter(key__in=keys).delete()
        return deleted

    def is_tracked(self, key: str) -> bool:
        return TrackedCacheKey.objects.filter(key=key).exists()

    def all_keys(self) -> list[str]:
        return list(TrackedCacheKey.objects.values_list("key", flat=True))

    def keys_for_route(self, pattern: str) -> list[str]:
        """Keys whose request path contains ``pattern``."""
        return list(
            TrackedCacheKey.objects.filter(path__contains=pattern).values_list("key", flat=True)
        )

    def keys_created_before(self, cutoff: datetime) -> list[str]:
        return list(
            TrackedCacheKey.objects.filter(created_at__lte=cutoff).values_list("key", flat=True)
        )

    def clear(self) -> int:
        deleted, _ = TrackedCacheKey.objects.all().delete()
        return deleted
