"""
École API — Course Routes (teacher only)
=========================================

What:  GET/POST /api/cours, PUT/DELETE /api/cours/{id}
Why:   Teachers manage their own course material; every call is scoped to
       the caller's id by CoursService.

Note: updating or deleting another teacher's course answers 404, never 200.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from ecole_api.database import get_supabase
from ecole_api.models.identity import Identity, Role
from ecole_api.schemas.common import ErrorResponse
from ecole_api.schemas.cours import CoursCreate, CoursResponse, CoursUpdate
from ecole_api.security import require_roles
from ecole_api.services.cours_service import cours_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cours", tags=["Cours"])

enseignant_only = require_roles(Role.ENSEIGNANT)

NOT_FOUND = {404: {"description": "Cours non trouvé (or not yours)", "model": ErrorResponse}}


@router.get("", response_model=List[CoursResponse], summary="List my courses")
async def list_cours(
    actor: Identity = Depends(enseignant_only),
    client=Depends(get_supabase),
) -> List[dict]:
    return await cours_service.list_cours(client, actor)


@router.post("", status_code=201, response_model=CoursResponse, summary="Create a course")
async def create_cours(
    payload: CoursCreate,
    actor: Identity = Depends(enseignant_only),
    client=Depends(get_supabase),
) -> dict:
    return await cours_service.create_cours(client, payload, actor)


@router.put(
    "/{cours_id}",
    response_model=CoursResponse,
    responses=NOT_FOUND,
    summary="Update one of my courses",
)
async def update_cours(
    cours_id: str,
    payload: CoursUpdate,
    actor: Identity = Depends(enseignant_only),
    client=Depends(get_supabase),
) -> dict:
    return await cours_service.update_cours(client, cours_id, payload.changes(), actor)


@router.delete(
    "/{cours_id}",
    status_code=204,
    responses=NOT_FOUND,
    summary="Delete one of my courses",
)
async def delete_cours(
    cours_id: str,
    actor: Identity = Depends(enseignant_only),
    client=Depends(get_supabase),
) -> Response:
    await cours_service.delete_cours(client, cours_id, actor)
    return Response(status_code=204)
