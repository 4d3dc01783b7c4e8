"""
École API — Authentication Gateway
===================================

What:  Login, student self-registration and password reset, delegated to
       the provider's auth API (GoTrue).
Why:   Credentials never touch this process beyond the forwarding call; the
       provider owns password hashing, sessions and reset emails.

Error Mapping:
    login           provider error → 401 with the provider's message
    register/eleve  provider error → 400 with the provider's message
    reset-password  provider error → 400 with the provider's message

    The provider message is surfaced on purpose here ("Invalid login
    credentials", "User already registered") because the frontend shows it
    verbatim next to the form.
"""

import logging
from typing import Any

from supabase import AuthError

from ecole_api.exceptions import UnauthorizedError, ValidationError
from ecole_api.models.identity import Role
from ecole_api.schemas.auth import (
    LoggedInUser,
    LoginRequest,
    LoginResponse,
    RegisterEleveRequest,
    RegisterResponse,
    ResetPasswordRequest,
)
from ecole_api.services.provider import to_plain

logger = logging.getLogger(__name__)


class AuthService:

    async def login(self, client: Any, payload: LoginRequest) -> LoginResponse:
        """
        Exchange email/password for a provider session.

        Returns the provider's access token (later presented as the bearer
        token on every protected route) and a user summary whose role and
        names come from the auth user (role from `app_metadata`, names from
        `user_metadata`).
        """
        try:
            result = await client.auth.sign_in_with_password(
                {"email": payload.email, "password": payload.password}
            )
        except AuthError as e:
            logger.info("Login refused for %s: %s", payload.email, e.message)
            raise UnauthorizedError(message=e.message, context={"email": payload.email})

        user = result.user
        session = result.session
        if user is None or session is None:
            raise UnauthorizedError(message="Identifiants invalides")

        metadata = getattr(user, "user_metadata", None) or {}
        grants = getattr(user, "app_metadata", None) or {}
        logger.info("User %s logged in", user.id)
        return LoginResponse(
            access_token=session.access_token,
            user=LoggedInUser(
                id=str(user.id),
                email=user.email,
                role=grants.get("role"),
                nom=metadata.get("nom"),
                prenom=metadata.get("prenom"),
            ),
        )

    async def register_eleve(
        self, client: Any, payload: RegisterEleveRequest
    ) -> RegisterResponse:
        """Create an inactive student account awaiting teacher validation."""
        try:
            result = await client.auth.sign_up(
                {
                    "email": payload.email,
                    "password": payload.password,
                    "options": {
                        # user_metadata: a display hint only, never read for access
                        "data": {
                            "role": Role.ELEVE.value,
                            "nom": payload.nom,
                            "prenom": payload.prenom,
                            "classe": payload.classe,
                            "active": False,
                        }
                    },
                }
            )
        except AuthError as e:
            logger.info("Registration refused for %s: %s", payload.email, e.message)
            raise ValidationError(message=e.message, field="email")

        logger.info("Student account created for %s (pending validation)", payload.email)
        return RegisterResponse(user=to_plain(result.user) or None)

    async def reset_password(self, client: Any, payload: ResetPasswordRequest) -> str:
        try:
            await client.auth.reset_password_for_email(payload.email)
        except AuthError as e:
            logger.info("Password reset refused for %s: %s", payload.email, e.message)
            raise ValidationError(message=e.message, field="email")

        return "Email de réinitialisation envoyé"


auth_service = AuthService()
