"""
User management endpoints.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from ...core.exceptions import AccessDeniedError
from ...services.attribute_values import OwnerRef, delete_for_owner
from ..forms import UserForm
from ..resources import user_resource
from .base import BaseAPIView

logger = logging.getLogger(__name__)

# Matches both the api/users resources and api/user.
USER_ROUTES = ("api/user",)


def create_user(data: dict):
    """Create a user whose username is its email address."""
    return get_user_model().objects.create_user(
        username=data["email"],
        email=data["email"],
        password=data["password"],
        first_name=data["first_name"],
        last_name=data["last_name"],
    )


def _serialize_page(users):
    return [user_resource(u) for u in users]


class UserListView(BaseAPIView):
    def get(self, request):
        queryset = get_user_model().objects.order_by("-date_joined", "-id")
        return self.json_response(self.paginate(request, queryset, _serialize_page))

    def post(self, request):
        form = UserForm(self.parse_json_body(request))
        user = create_user(self.validate(form))

        logger.info("User created: user_id=%s email=%s", user.pk, user.email)
        self.invalidate(request, *USER_ROUTES)
        return self.json_response(user_resource(user), status=201)


class UserDetailView(BaseAPIView):
    def get_user(self, pk: int):
        return self.get_object_or_raise("User", get_user_model(), pk)

    def check_can_modify(self, request, user) -> None:
        if user.pk != request.user.pk and not request.user.is_staff:
            raise AccessDeniedError("You can only modify your own account")

    def get(self, request, pk: int):
        return self.json_response(user_resource(self.get_user(pk)))

    def put(self, request, pk: int):
        user = self.get_user(pk)
        self.check_can_modify(request, user)
        form = UserForm(self.parse_json_body(request), instance=user, partial=True)
        data = self.validate(form)

        password = data.pop("password", None)
        for field, value in data.items():
            setattr(user, field, value)
        if "email" in data:
            user.username = data["email"]
        if password:
            user.set_password(password)
        user.save()

        logger.info("User updated: user_id=%s fields=%s", user.pk, sorted(data))
        self.invalidate(request, *USER_ROUTES)
        return self.json_response(user_resource(user))

    patch = put

    def delete(self, request, pk: int):
        user = self.get_user(pk)
        self.check_can_modify(request, user)
        with transaction.atomic():
            delete_for_owner(OwnerRef.for_user(user))
            user.delete()

        logger.info("User deleted: user_id=%s", pk)
        self.invalidate(request, *USER_ROUTES, "api/timesheets")
        return self.no_content()
