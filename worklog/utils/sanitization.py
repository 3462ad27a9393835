"""
Sanitization utilities for the worklog application.

Free text submitted through the write endpoints is stripped of markup before
it is persisted.
"""

from typing import Any

import bleach


def sanitize_text(value: Any) -> Any:
    """
    Strip HTML tags from a string value, leaving other types untouched.

    Examples:
        >>> sanitize_text("<b>Website</b> redesign ")
        "Website redesign"
    """
    if not isinstance(value, str):
        return value
    return bleach.clean(value, tags=[], attributes={}, strip=True).strip()


def sanitize_payload(data: dict[str, Any], fields: list[str]) -> dict[str, Any]:
    """Return a copy of ``data`` with the named text fields sanitized."""
    cleaned = dict(data)
    for name in fields:
        if name in cleaned:
            cleaned[name] = sanitize_text(cleaned[name])
    return cleaned
