from ..models import Attribute
from .base import QueryFilterSet
from .fields import ExactTextOperatorFilter, TextOperatorFilter


class AttributeFilterSet(QueryFilterSet):
    name = TextOperatorFilter()
    # Exact by default so "text" does not also match "select" style names.
    type = ExactTextOperatorFilter()

    class Meta:
        model = Attribute
        fields = []
