"""
Default configuration for the worklog application.

Every setting the application consumes has its default declared here. Each
section mirrors one of the dataclasses defined in ``worklog.core.settings``
and can be overridden through the matching ``WORKLOG_*`` Django setting.
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"
LIBRARY_NAME = "worklog"


# --------------------------------------------------------------------------- #
# Library-wide defaults (grouped by feature area)
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    "api_cache": {
        "enabled": True,
        # Durations are expressed in minutes.
        "default_duration": 15,
        "long_cache_routes": {
            "api/attributes": 60,
        },
        "short_cache_routes": {
            "api/timesheets": 5,
        },
        "excluded_routes": [
            "api/auth",
            "api/login",
            "api/register",
            "api/logout",
            "api/password",
            "api/cache",
        ],
        "cacheable_methods": ["GET"],
        "key_prefix": "api",
        "cache_alias": "default",
        "max_age_days": 3,
        "schedule_sweep": False,
        "sweep_interval_seconds": 86400,
        "cache_header": "X-Cache",
    },
    "filtering": {
        "soft_fail_invalid_values": True,
        "max_text_length": 255,
        "date_fields": ["start_date", "end_date", "date", "created_at", "updated_at"],
        "text_fields": ["name", "description", "status", "task_name"],
        "numeric_fields": ["hours"],
        "attribute_fields": ["name", "type"],
    },
    "pagination": {
        "default_per_page": 10,
        "max_per_page": 100,
    },
    "auth": {
        "revocation_cache_prefix": "worklog:jwt:revoked",
    },
}


def get_section(section: str) -> dict[str, Any]:
    """Return a shallow copy of a defaults section."""
    return dict(LIBRARY_DEFAULTS.get(section, {}))
