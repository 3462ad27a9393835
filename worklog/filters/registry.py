"""
Lookup of dynamic attribute definitions by name.
"""

import logging
from typing import Optional

from ..models import Attribute

logger = logging.getLogger(__name__)


class AttributeRegistry:
    """
    Case-insensitive resolver for attribute definitions.

    Instances memoize lookups, so one registry should live for a single
    request; definitions edited afterwards are picked up by the next one.
    """

    def __init__(self):
        self._resolved: dict[str, Optional[Attribute]] = {}

    def resolve(self, name: str) -> Optional[Attribute]:
        if not isinstance(name, str) or not name.strip():
            return None
        key = name.strip().lower()
        if key not in self._resolved:
            attribute = Attribute.objects.filter(name__iexact=name.strip()).first()
            if attribute is None and "_" in key:
                # start_date -> "Start Date"
                attribute = Attribute.objects.filter(
                    name__iexact=key.replace("_", " ")
                ).first()
            if attribute is None:
                logger.debug("No attribute definition named %r", name)
            self._resolved[key] = attribute
        return self._resolved[key]
