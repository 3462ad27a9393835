"""
Attribute definition endpoints.
"""

import logging

from ...filters import AttributeFilterSet
from ...models import Attribute
from ..forms import AttributeForm
from ..resources import attribute_resource
from .base import BaseAPIView

logger = logging.getLogger(__name__)

# Attribute definitions appear in project and user representations.
ATTRIBUTE_ROUTES = ("api/attributes", "api/projects", "api/user")


class AttributeListView(BaseAPIView):
    """Attribute lists are not paginated."""

    def get(self, request):
        filterset = AttributeFilterSet.from_request(request, queryset=Attribute.objects.all())
        attributes = [attribute_resource(a) for a in filterset.qs]
        logger.info("Filtered attributes: count=%s", len(attributes))
        return self.json_response(attributes)

    def post(self, request):
        form = AttributeForm(self.parse_json_body(request))
        data = self.validate(form)
        attribute = Attribute.objects.create(**data)

        logger.info("Attribute created: attribute_id=%s name=%s", attribute.pk, attribute.name)
        self.invalidate(request, *ATTRIBUTE_ROUTES)
        return self.json_response(attribute_resource(attribute), status=201)


class AttributeDetailView(BaseAPIView):
    def get(self, request, pk: int):
        attribute = self.get_object_or_raise("Attribute", Attribute, pk)
        return self.json_response(attribute_resource(attribute))

    def put(self, request, pk: int):
        attribute = self.get_object_or_raise("Attribute", Attribute, pk)
        form = AttributeForm(self.parse_json_body(request), instance=attribute, partial=True)
        data = self.validate(form)
        for field, value in data.items():
            setattr(attribute, field, value)
        attribute.save()

        logger.info("Attribute updated: attribute_id=%s fields=%s", attribute.pk, sorted(data))
        self.invalidate(request, *ATTRIBUTE_ROUTES)
        return self.json_response(attribute_resource(attribute))

    patch = put

    def delete(self, request, pk: int):
        attribute = self.get_object_or_raise("Attribute", Attribute, pk)
        attribute.delete()

        logger.info("Attribute deleted: attribute_id=%s", pk)
        self.invalidate(request, *ATTRIBUTE_ROUTES)
        return self.no_content()
