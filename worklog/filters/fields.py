"""
django-filter ``Filter`` classes that understand operator-prefixed values.

Each filter receives the raw request value (``"LIKE:design"``, ``">:8"``,
``"2024-01-31"``...), parses it and applies the matching lookup to its
``field_name``.
"""

from __future__ import annotations

import logging
from typing import Any

import django_filters
from django_filters.constants import EMPTY_VALUES
from django.db import models

from ..core.exceptions import FilterValidationError
from ..utils.datetime_utils import parse_date
from ..utils.normalization import to_decimal
from .operators import (
    COMPARISON_OPERATORS,
    PATTERN_OPERATORS,
    build_condition,
    comparison_lookup,
    parse_operator,
    strip_wildcards,
    wrap_wildcards,
)

logger = logging.getLogger(__name__)


class OperatorFilter(django_filters.CharFilter):
    """Base class for filters driven by ``OP:value`` strings."""

    def filter(self, qs, value):
        if value in EMPTY_VALUES:
            return qs
        operator, parsed = parse_operator(value)
        return self.apply(qs, operator, parsed)

    def apply(self, qs, operator: str, value: Any):
        raise NotImplementedError

    def reject(self, qs, value: Any, message: str):
        """Drop an unusable value, or raise when soft failure is disabled."""
        soft_fail = getattr(self.parent, "soft_fail", True)
        if not soft_fail:
            raise FilterValidationError(errors={self.field_name: message})
        logger.warning(
            "Ignoring %s filter on %s: %r (%s)",
            type(self).__name__,
            self.field_name,
            value,
            message,
        )
        return qs


class TextOperatorFilter(OperatorFilter):
    """
    Case-insensitive substring matching for free text columns.

    ``=`` and ``LIKE`` become ``ILIKE``; wildcards are added when the value
    carries none. ``>`` and ``<`` compare lexicographically.
    """

    def apply(self, qs, operator, value):
        if operator in ("=", "LIKE"):
            operator = "ILIKE"
        if operator == "ILIKE":
            value = wrap_wildcards(value)
        logger.debug("Applying %s filter: %s %r", self.field_name, operator, value)
        return qs.filter(build_condition(self.field_name, operator, value))


class ExactTextOperatorFilter(OperatorFilter):
    """Exact matching by default; pattern operators match case-insensitively."""

    def apply(self, qs, operator, value):
        if operator in PATTERN_OPERATORS:
            operator = "ILIKE"
            value = wrap_wildcards(value)
        logger.debug("Applying %s filter: %s %r", self.field_name, operator, value)
        return qs.filter(build_condition(self.field_name, operator, value))


class NumberOperatorFilter(OperatorFilter):
    def apply(self, qs, operator, value):
        number = to_decimal(value.strip() if isinstance(value, str) else value)
        if number is None:
            return self.reject(qs, value, "Value must be numeric")
        if operator in PATTERN_OPERATORS:
            operator = "="
        logger.debug("Applying %s filter: %s %s", self.field_name, operator, number)
        return qs.filter(**{f"{self.field_name}__{comparison_lookup(operator)}": number})


class DateOperatorFilter(OperatorFilter):
    """
    Calendar date comparison.

    Datetime columns are compared on their date part. Operators other than
    ``=``, ``>``, ``<``, ``>=`` and ``<=`` fall back to ``=``.
    """

    def apply(self, qs, operator, value):
        if isinstance(value, str):
            value = strip_wildcards(value).strip()
        if not value:
            return qs
        parsed = parse_date(value)
        if parsed is None:
            return self.reject(qs, value, "Invalid date format")
        if operator not in COMPARISON_OPERATORS:
            operator = "="

        path = self.field_name
        model_field = qs.model._meta.get_field(self.field_name)
        if isinstance(model_field, models.DateTimeField):
            path = f"{path}__date"

        logger.info(
            "Date filter applied: field=%s operator=%s value=%s",
            self.field_name,
            operator,
            parsed.isoformat(),
        )
        return qs.filter(**{f"{path}__{comparison_lookup(operator)}": parsed})
