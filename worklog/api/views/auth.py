"""
Registration, login and logout endpoints.
"""

import logging

from django.contrib.auth import get_user_model

from ...auth.jwt import JWTManager
from ...core.exceptions import RequestValidationError
from ..forms import LoginForm, UserForm
from ..resources import user_resource
from .base import BaseAPIView
from .users import create_user

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "The provided credentials are incorrect."


class RegisterView(BaseAPIView):
    auth_required = False

    def post(self, request):
        form = UserForm(self.parse_json_body(request))
        user = create_user(self.validate(form))
        token = JWTManager.generate_token(user)

        logger.info("User registered: user_id=%s email=%s", user.pk, user.email)
        return self.json_response(
            {
                "user": user_resource(user),
                "token": {
                    "access_token": token["token"],
                    "token_type": token["token_type"],
                },
                "message": "Registration successful.",
            },
            status=201,
        )


class LoginView(BaseAPIView):
    auth_required = False

    def post(self, request):
        form = LoginForm(self.parse_json_body(request))
        if not form.is_valid():
            raise RequestValidationError(
                errors={name: [str(m) for m in msgs] for name, msgs in form.errors.items()}
            )

        email = form.cleaned_data["email"]
        user = get_user_model().objects.filter(email__iexact=email, is_active=True).first()
        if user is None or not user.check_password(form.cleaned_data["password"]):
            logger.warning("Failed login attempt for %s", email)
            raise RequestValidationError(
                INVALID_CREDENTIALS, errors={"email": [INVALID_CREDENTIALS]}
            )

        token = JWTManager.generate_token(user)
        logger.info("User logged in: user_id=%s", user.pk)
        return self.json_response(
            {
                "user": user_resource(user),
                "access_token": token["token"],
                "token_type": token["token_type"],
            }
        )


class LogoutView(BaseAPIView):
    def post(self, request):
        payload = getattr(request, "jwt_payload", None)
        if payload:
            JWTManager.revoke_token(payload)
        logger.info("User logged out: user_id=%s", request.user.pk)
        return self.json_response({"message": "Successfully logged out"})


class CurrentUserView(BaseAPIView):
    def get(self, request):
        return self.json_response(user_resource(request.user))
