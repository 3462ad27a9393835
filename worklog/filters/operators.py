"""
Operator parsing and lookup translation for request filters.

Filter values optionally carry an operator prefix such as ``">:8"`` or
``"LIKE:design"``. Parsed operators are translated into Django field lookups
so every value reaches the database as a bound parameter.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from django.db.models import Q

logger = logging.getLogger(__name__)

# Order matters: the first matching prefix wins.
OPERATORS: tuple[str, ...] = ("=", ">", "<", "LIKE", "ILIKE")
PATTERN_OPERATORS = frozenset({"LIKE", "ILIKE"})
COMPARISON_OPERATORS: tuple[str, ...] = ("=", ">", "<", ">=", "<=")

_COMPARISON_LOOKUPS = {
    "=": "exact",
    ">": "gt",
    "<": "lt",
    ">=": "gte",
    "<=": "lte",
}

WILDCARD = "%"


@dataclass(frozen=True)
class ParsedFilter:
    """A single filter expression after operator parsing."""

    field: str
    operator: str
    value: Any
    attribute: Optional[Any] = None

    @property
    def is_null(self) -> bool:
        return self.value is None


def parse_operator(raw: Any) -> tuple[str, Any]:
    """
    Split ``raw`` into ``(operator, value)``.

    Examples:
        >>> parse_operator(">:8")
        (">", "8")
        >>> parse_operator("LIKE:design")
        ("LIKE", "%design%")
        >>> parse_operator("active")
        ("=", "active")
    """
    if not isinstance(raw, str):
        return "=", raw

    operator, value = "=", raw
    for candidate in OPERATORS:
        prefix = f"{candidate}:"
        if raw.startswith(prefix):
            operator = candidate
            value = raw[len(prefix):].strip()
            break

    if operator == "LIKE" and WILDCARD not in value:
        value = wrap_wildcards(value)
    return operator, value


def split_operator_prefix(raw: Any) -> tuple[Optional[str], Any]:
    """
    Return the text before the first colon and the remainder.

    Used by validation, which treats any colon as an operator delimiter.
    """
    if isinstance(raw, str) and ":" in raw:
        prefix, remainder = raw.split(":", 1)
        return prefix, remainder
    return None, raw


def wrap_wildcards(value: str) -> str:
    if WILDCARD in value:
        return value
    return f"{WILDCARD}{value}{WILDCARD}"


def strip_wildcards(value: str) -> str:
    return value.replace(WILDCARD, "")


def pattern_q(field: str, pattern: str, *, case_insensitive: bool = True) -> Q:
    """
    Translate a SQL ``LIKE`` pattern into an equivalent Django lookup.

    Only ``%`` is treated as a wildcard; every other character matches
    literally.
    """
    prefix = "i" if case_insensitive else ""
    pieces = pattern.split(WILDCARD)

    if len(pieces) == 1:
        return Q(**{f"{field}__{prefix}exact": pattern})

    leading_open = pieces[0] == ""
    trailing_open = pieces[-1] == ""
    if len(pieces) == 2:
        if leading_open:
            return Q(**{f"{field}__{prefix}endswith": pieces[1]})
        if trailing_open:
            return Q(**{f"{field}__{prefix}startswith": pieces[0]})
    if len(pieces) == 3 and leading_open and trailing_open:
        return Q(**{f"{field}__{prefix}contains": pieces[1]})

    regex = "^" + ".*".join(re.escape(piece) for piece in pieces) + "$"
    return Q(**{f"{field}__{prefix}regex": regex})


def comparison_lookup(operator: str) -> str:
    """Return the Django lookup name for a comparison operator."""
    return _COMPARISON_LOOKUPS.get(operator, "exact")


def build_condition(field: str, operator: str, value: Any) -> Q:
    """Build the ``Q`` object applying ``operator`` to ``field``."""
    if operator in PATTERN_OPERATORS:
        return pattern_q(field, str(value), case_insensitive=operator == "ILIKE")
    return Q(**{f"{field}__{comparison_lookup(operator)}": value})
