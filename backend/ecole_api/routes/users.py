"""
École API — User Management Routes (admin only)
================================================

What:  GET/POST /api/users, PUT/DELETE /api/users/{id}
Why:   Admins manage every identity; each mutation leaves an audit record.

The Role Gate runs before the body is validated, so a non-admin receives
403 whatever the payload looks like.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from ecole_api.database import get_supabase
from ecole_api.models.identity import Identity, Role
from ecole_api.schemas.common import ErrorResponse
from ecole_api.schemas.user import UserCreate, UserRow, UserUpdate
from ecole_api.security import require_roles
from ecole_api.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

admin_only = require_roles(Role.ADMIN)

GATE_RESPONSES = {
    401: {"description": "Missing bearer token", "model": ErrorResponse},
    403: {"description": "Invalid token or not an admin", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    responses=GATE_RESPONSES,
    summary="Create a user (auth account + metadata) and audit it",
)
async def create_user(
    payload: UserCreate,
    actor: Identity = Depends(admin_only),
    client=Depends(get_supabase),
) -> dict:
    return await user_service.create_user(client, payload, actor)


@router.get(
    "",
    response_model=List[UserRow],
    responses=GATE_RESPONSES,
    summary="List users with their class",
)
async def list_users(
    actor: Identity = Depends(admin_only),
    client=Depends(get_supabase),
) -> List[dict]:
    return await user_service.list_users(client)


@router.put(
    "/{user_id}",
    responses={**GATE_RESPONSES, 404: {"description": "Unknown user", "model": ErrorResponse}},
    summary="Update a user's profile and audit the change",
)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    actor: Identity = Depends(admin_only),
    client=Depends(get_supabase),
) -> dict:
    return await user_service.update_user(client, user_id, payload.changes(), actor)


@router.delete(
    "/{user_id}",
    status_code=204,
    responses={**GATE_RESPONSES, 404: {"description": "Unknown user", "model": ErrorResponse}},
    summary="Disable a user (never a hard delete)",
)
async def disable_user(
    user_id: str,
    actor: Identity = Depends(admin_only),
    client=Depends(get_supabase),
) -> Response:
    await user_service.disable_user(client, user_id, actor)
    return Response(status_code=204)
