"""
École API — Identity Claims
============================

What:  The closed role enumeration and the claim set extracted from a token.
Why:   Role checks are set-membership tests against `Role`, never open-ended
       string comparisons scattered through route handlers.
Who:   Built by the Token Verifier (security.py); read by the Role Gate and
       by services that need the caller's id (ownership scope, audit actor).

Claim Sources (Supabase access tokens):
    id    → `sub` (fallback: `id`)
    email → `email`
    role  → `app_metadata.role` only

    `app_metadata` can only be written with the service-role key (admin
    user management); `user_metadata` is writable by the user themselves
    through the public auth API, so a role found there is ignored. The
    top-level `role` claim is the Postgres role ("authenticated"), not ours.
    A self-registered student therefore has no role until an admin assigns one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


class Role(str, Enum):
    ADMIN = "admin"
    ENSEIGNANT = "enseignant"  # teacher
    ELEVE = "eleve"            # student

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """Map a raw claim value to a Role, or None when it is not one of ours."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Identity:
    """
    Authenticated caller, attached to `request.state.identity`.

    `role` is None when the token carries no application role; such a caller
    is authenticated but fails every Role Gate.
    """

    id: str
    email: Optional[str] = None
    role: Optional[Role] = None

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Identity":
        app_metadata = claims.get("app_metadata") or {}

        return cls(
            id=str(claims.get("sub") or claims.get("id") or ""),
            email=claims.get("email"),
            role=Role.parse(app_metadata.get("role")),
        )
