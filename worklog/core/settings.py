"""
Typed settings for the worklog application.

Each dataclass merges ``LIBRARY_DEFAULTS`` with the matching ``WORKLOG_*``
Django setting. Unknown keys are ignored.
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings as django_settings

from ..defaults import get_section


def _merge_settings_dicts(*dicts: dict[str, Any]) -> dict[str, Any]:
    """Merge multiple settings dictionaries with later ones taking precedence."""
    result = {}
    for d in dicts:
        if d: result.update(d)
    return result


def _load_section(section: str, setting_name: str) -> dict[str, Any]:
    overrides = getattr(django_settings, setting_name, None) or {}
    return _merge_settings_dicts(get_section(section), overrides)


@dataclass
class ApiCacheSettings:
    """Settings for the HTTP response cache."""
    enabled: bool = True
    default_duration: int = 15
    long_cache_routes: dict[str, int] = field(default_factory=dict)
    short_cache_routes: dict[str, int] = field(default_factory=dict)
    excluded_routes: list[str] = field(default_factory=list)
    cacheable_methods: list[str] = field(default_factory=lambda: ["GET"])
    key_prefix: str = "api"
    cache_alias: str = "default"
    max_age_days: int = 3
    schedule_sweep: bool = False
    sweep_interval_seconds: int = 86400
    cache_header: str = "X-Cache"

    @classmethod
    def from_settings(cls) -> "ApiCacheSettings":
        merged = _load_section("api_cache", "WORKLOG_API_CACHE")
        valid_fields = set(cls.__dataclass_fields__.keys())
        return cls(**{k: v for k, v in merged.items() if k in valid_fields})

    def duration_for(self, path: str) -> int:
        """Resolve the TTL in minutes for a request path."""
        route = path.lstrip("/")
        for prefix, minutes in self.long_cache_routes.items():
            if route.startswith(prefix.lstrip("/")):
                return int(minutes)
        for prefix, minutes in self.short_cache_routes.items():
            if route.startswith(prefix.lstrip("/")):
                return int(minutes)
        return int(self.default_duration)

    def is_excluded(self, path: str) -> bool:
        route = path.lstrip("/")
        return any(route.startswith(prefix.lstrip("/")) for prefix in self.excluded_routes)

    def is_cacheable_method(self, method: str) -> bool:
        return method.upper() in {m.upper() for m in self.cacheable_methods}


@dataclass
class FilteringSettings:
    """Settings for request-driven query filters."""
    soft_fail_invalid_values: bool = True
    max_text_length: int = 255
    date_fields: list[str] = field(default_factory=list)
    text_fields: list[str] = field(default_factory=list)
    numeric_fields: list[str] = field(default_factory=list)
    attribute_fields: list[str] = field(default_factory=list)

    @classmethod
    def from_settings(cls) -> "FilteringSettings":
        merged = _load_section("filtering", "WORKLOG_FILTERING")
        valid_fields = set(cls.__dataclass_fields__.keys())
        return cls(**{k: v for k, v in merged.items() if k in valid_fields})


@dataclass
class PaginationSettings:
    default_per_page: int = 10
    max_per_page: int = 100

    @classmethod
    def from_settings(cls) -> "PaginationSettings":
        merged = _load_section("pagination", "WORKLOG_PAGINATION")
        valid_fields = set(cls.__dataclass_fields__.keys())
        return cls(**{k: v for k, v in merged.items() if k in valid_fields})
