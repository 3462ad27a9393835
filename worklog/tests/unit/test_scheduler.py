"""
Unit tests for the background cache sweeper.
"""

from unittest.mock import MagicMock

import pytest

from worklog.cache.scheduler import CacheSweeper, start_sweeper
from worklog.core.settings import ApiCacheSettings

pytestmark = pytest.mark.unit


def test_sweeper_is_not_started_unless_scheduled():
    assert start_sweeper(ApiCacheSettings(schedule_sweep=False)) is None
    assert start_sweeper(ApiCacheSettings(enabled=False, schedule_sweep=True)) is None


def test_run_once_delegates_to_cache():
    cache = MagicMock()
    cache.sweep.return_value = 4

    assert CacheSweeper(interval=60, cache=cache).run_once() == 4
    cache.sweep.assert_called_once_with()


def test_start_and_stop():
    sweeper = CacheSweeper(interval=3600, cache=MagicMock())
    sweeper.start()
    assert sweeper.running

    sweeper.stop(timeout=2)
    assert not sweeper.running
