"""
Django app configuration for the worklog API.
"""

import logging

from django.apps import AppConfig as BaseAppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class AppConfig(BaseAppConfig):
    """Django app configuration for the worklog API."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "worklog"
    verbose_name = "Worklog API"
    label = "worklog"

    def ready(self):
        """Initialize the application after Django has loaded."""
        try:
            self._start_cache_sweeper()
        except Exception as e:
            logger.error("Error initializing worklog: %s", e)
            if getattr(settings, "DEBUG", False):
                raise

    def _start_cache_sweeper(self):
        from .cache.scheduler import start_sweeper

        sweeper = start_sweeper()
        if sweeper is not None:
            logger.debug("Scheduled API cache sweep enabled")
