"""
École API — Authentication Routes
==================================

What:  POST /api/auth/login, /api/auth/register/eleve, /api/auth/reset-password
Why:   The only unauthenticated data routes: they are how a caller obtains
       (or recovers) the bearer token every other route requires.
"""

import logging

from fastapi import APIRouter, Depends

from ecole_api.database import get_supabase
from ecole_api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterEleveRequest,
    RegisterResponse,
    ResetPasswordRequest,
)
from ecole_api.schemas.common import ErrorResponse, MessageResponse
from ecole_api.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid credentials (provider message)", "model": ErrorResponse},
    },
    summary="Log in with email and password",
)
async def login(payload: LoginRequest, client=Depends(get_supabase)) -> LoginResponse:
    return await auth_service.login(client, payload)


@router.post(
    "/register/eleve",
    status_code=201,
    response_model=RegisterResponse,
    responses={400: {"description": "Registration refused", "model": ErrorResponse}},
    summary="Student self-registration (account starts inactive)",
)
async def register_eleve(
    payload: RegisterEleveRequest, client=Depends(get_supabase)
) -> RegisterResponse:
    return await auth_service.register_eleve(client, payload)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={400: {"description": "Reset refused", "model": ErrorResponse}},
    summary="Send a password reset email",
)
async def reset_password(
    payload: ResetPasswordRequest, client=Depends(get_supabase)
) -> MessageResponse:
    message = await auth_service.reset_password(client, payload)
    return MessageResponse(message=message)
