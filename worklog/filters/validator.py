"""
Validation of client supplied filter maps.

Every filter is checked before any query is composed. Errors for all fields
are collected and raised together as a ``FilterValidationError``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..core.exceptions import FilterValidationError
from ..core.settings import FilteringSettings
from ..models import Attribute, AttributeType
from ..utils.datetime_utils import parse_date
from ..utils.normalization import is_numeric, normalize_list, to_snake_case
from .operators import OPERATORS, split_operator_prefix
from .registry import AttributeRegistry

logger = logging.getLogger(__name__)


class InvalidFilterValue(ValueError):
    """Raised for a single offending filter field."""


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


class FilterValidator:
    """
    Validate a filter map against static field groups and attribute
    definitions.

    Static groups come from ``FilteringSettings``; anything outside them must
    name an existing attribute (case-insensitive).
    """

    allowed_operators = OPERATORS

    def __init__(
        self,
        registry: Optional[AttributeRegistry] = None,
        settings: Optional[FilteringSettings] = None,
    ):
        self.registry = registry or AttributeRegistry()
        self.settings = settings or FilteringSettings.from_settings()
        self.numeric_fields = set(self.settings.numeric_fields)
        self.date_fields = set(self.settings.date_fields)
        self.text_fields = set(self.settings.text_fields) | set(self.settings.attribute_fields)

    def validate(self, filters: Mapping[str, Any]) -> None:
        errors: dict[str, str] = {}
        for field, value in filters.items():
            try:
                self.validate_field(field, value)
            except InvalidFilterValue as exc:
                errors[field] = str(exc)

        if errors:
            logger.info("Rejected filters: %s", errors)
            raise FilterValidationError(errors=errors)

    def validate_field(self, field: str, value: Any) -> None:
        operator, _ = split_operator_prefix(value)
        if operator is not None and operator not in self.allowed_operators:
            raise InvalidFilterValue(f"Invalid operator: {operator}")

        key = to_snake_case(field)
        if key in self.numeric_fields:
            self._validate_numeric(value)
            return
        if key in self.date_fields:
            self._validate_date(value)
            return
        if key in self.text_fields:
            self._validate_text(value)
            return

        attribute = self.registry.resolve(field)
        if attribute is not None:
            self._validate_attribute(attribute, value)
            return

        raise InvalidFilterValue(f"Unknown filter field: {field}")

    def _validate_numeric(self, value: Any) -> None:
        if _is_empty(value):
            return
        _, value = split_operator_prefix(value)
        if isinstance(value, str):
            value = value.strip()
        if not is_numeric(value):
            raise InvalidFilterValue("Value must be numeric")

    def _validate_date(self, value: Any) -> None:
        if _is_empty(value):
            return
        _, value = split_operator_prefix(value)
        if parse_date(value) is None:
            raise InvalidFilterValue("Invalid date format")

    def _validate_text(self, value: Any) -> None:
        if _is_empty(value):
            return
        if not isinstance(value, str):
            raise InvalidFilterValue("Value must be a string")
        limit = self.settings.max_text_length
        if len(value) > limit:
            raise InvalidFilterValue(f"Value must not be greater than {limit} characters")

    def _validate_attribute(self, attribute: Attribute, value: Any) -> None:
        if value is None or value == "":
            return
        _, value = split_operator_prefix(value)

        if attribute.type == AttributeType.DATE:
            if parse_date(value) is None:
                raise InvalidFilterValue("Invalid date format")
        elif attribute.type == AttributeType.NUMBER:
            if not is_numeric(value.strip() if isinstance(value, str) else value):
                raise InvalidFilterValue("Value must be numeric")
        elif attribute.type == AttributeType.SELECT:
            options = normalize_list(attribute.options or [])
            if str(value).strip().lower() not in options:
                raise InvalidFilterValue("Invalid option value")
        else:
            self._validate_text(value)
