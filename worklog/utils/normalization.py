"""
Normalization utilities for the worklog application.

Small helpers for turning request values into the shapes used by the
filter and cache layers.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def normalize_list(values: Iterable[Any]) -> List[str]:
    """
    Normalize an iterable to a list of lowercase strings.

    Examples:
        >>> normalize_list(["High", "MEDIUM", None])
        ["high", "medium"]
    """
    if not values:
        return []
    return [str(v).lower() for v in values if v is not None]


def to_snake_case(value: str) -> str:
    """
    Convert a camelCase or kebab-case field name to snake_case.

    Examples:
        >>> to_snake_case("taskName")
        "task_name"
        >>> to_snake_case("created_at")
        "created_at"
    """
    if not value:
        return value
    value = value.strip().replace("-", "_")
    return _CAMEL_BOUNDARY_RE.sub("_", value).lower()


def is_numeric(value: Any) -> bool:
    """
    Return True when ``value`` is a number or a numeric string.

    Leading whitespace is tolerated, as are signs, decimals and exponents.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return True
    if not isinstance(value, str):
        return False
    return bool(_NUMERIC_RE.match(value.lstrip()))


def to_decimal(value: Any) -> Optional[Decimal]:
    if not is_numeric(value):
        return None
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        return None
