"""
École API — Authentication Schemas
===================================

What:  Request/response contracts for `/api/auth/*`.
Who:   The frontend login, student self-registration and password-reset forms.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoggedInUser(BaseModel):
    """User summary returned next to the access token."""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None
    nom: Optional[str] = None
    prenom: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    user: LoggedInUser


class RegisterEleveRequest(BaseModel):
    """
    Student self-registration.

    The account is created inactive (`active: false` in metadata) and must
    be validated by a teacher before the student is treated as enrolled.
    """

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    nom: str = Field(min_length=1)
    prenom: str = Field(min_length=1)
    classe: Optional[str] = Field(default=None, description="Class the student asks to join")


class RegisterResponse(BaseModel):
    message: str = "Compte créé, en attente de validation"
    user: Optional[Dict[str, Any]] = None


class ResetPasswordRequest(BaseModel):
    email: str = Field(min_length=1)
