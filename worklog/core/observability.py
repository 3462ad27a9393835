"""
Error reporting hooks (Sentry).

``report_exception`` is safe to call whether or not the SDK was initialised;
without a configured DSN the capture is a no-op.
"""

from __future__ import annotations

import logging
from typing import Any

import sentry_sdk

logger = logging.getLogger(__name__)


def report_exception(error: BaseException, **tags: Any) -> None:
    """Send ``error`` to Sentry with the given tags attached."""
    try:
        with sentry_sdk.new_scope() as scope:
            for key, value in tags.items():
                scope.set_tag(f"worklog.{key}", value)
            sentry_sdk.capture_exception(error)
    except Exception as exc:
        logger.debug("Sentry capture failed: %s", exc)
