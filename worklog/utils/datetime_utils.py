"""
Date utilities for the worklog application.

Filter values and attribute values arrive as free-form strings; these helpers
turn them into calendar dates the ORM can compare against.
"""

import re
from datetime import date, datetime
from typing import Any, Optional

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")

_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%Y%m%d",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
)


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a date from various input formats.

    Args:
        value: Value to parse as date.

    Returns:
        Parsed date or None if parsing fails.

    Examples:
        >>> parse_date("2024-01-15")
        datetime.date(2024, 1, 15)
        >>> parse_date("2024-03")
        datetime.date(2024, 3, 1)
        >>> parse_date("not a date")
        None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass

    parsed = parse_iso_datetime(text)
    if parsed is not None:
        return parsed.date()

    match = _YEAR_MONTH_RE.match(text)
    if match:
        try:
            return date(int(match.group(1)), int(match.group(2)), 1)
        except ValueError:
            return None

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 datetime string, accepting a trailing ``Z``."""
    if not value:
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def format_date(value: Any) -> Optional[str]:
    """Return ``YYYY-MM-DD`` for any parseable value, ``None`` otherwise."""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None
