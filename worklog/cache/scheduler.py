"""
Background age sweep for the API response cache.
"""

import logging
import threading
from typing import Optional

from ..core.observability import report_exception
from ..core.settings import ApiCacheSettings
from .response_cache import ResponseCache

logger = logging.getLogger(__name__)

_sweeper: Optional["CacheSweeper"] = None
_sweeper_lock = threading.Lock()


class CacheSweeper:
    """Run ``ResponseCache.sweep`` every ``interval`` seconds on a daemon thread."""

    def __init__(self, interval: int, cache: Optional[ResponseCache] = None):
        self.interval = interval
        self.cache = cache
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        cache = self.cache or ResponseCache()
        return cache.sweep()

    def _loop(self):
        while not self._stop.wait(self.interval):
            try:
                count = self.run_once()
                logger.info("Scheduled cache sweep removed %s entries", count)
            except Exception as e:
                logger.error("Scheduled cache sweep failed: %s", e, exc_info=True)
                report_exception(e, component="response_cache", stage="sweep")

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, daemon=True, name="ApiCacheSweeper"
        )
        self._thread.start()
        logger.info("API cache sweeper started (interval=%ss)", self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
        self._thread = None


def start_sweeper(settings: Optional[ApiCacheSettings] = None) -> Optional[CacheSweeper]:
    """Start the process-wide sweeper when ``schedule_sweep`` is enabled."""
    global _sweeper
    settings = settings or ApiCacheSettings.from_settings()
    if not (settings.enabled and settings.schedule_sweep):
        return None
    with _sweeper_lock:
        if _sweeper is None:
            _sweeper = CacheSweeper(settings.sweep_interval_seconds)
        _sweeper.start()
        return _sweeper


def stop_sweeper() -> None:
    global _sweeper
    with _sweeper_lock:
        if _sweeper is not None:
            _sweeper.stop(timeout=5)
            _sweeper = None
