"""
École API — Class Routes
=========================

What:  POST/GET /api/classes, GET /api/classes/enseignant/{id},
       GET /api/classes/{id}/eleves
Why:   Any authenticated user may browse classes; only admins and teachers
       may create them.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from ecole_api.database import get_supabase
from ecole_api.models.identity import Identity, Role
from ecole_api.schemas.classe import ClasseCreate, ClasseResponse, EleveResponse
from ecole_api.security import get_current_identity, require_roles
from ecole_api.services.classe_service import classe_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/classes", tags=["Classes"])


@router.post(
    "",
    status_code=201,
    response_model=ClasseResponse,
    summary="Create a class (admin, enseignant)",
)
async def create_classe(
    payload: ClasseCreate,
    actor: Identity = Depends(require_roles(Role.ADMIN, Role.ENSEIGNANT)),
    client=Depends(get_supabase),
) -> dict:
    return await classe_service.create_classe(client, payload, actor)


@router.get("", response_model=List[ClasseResponse], summary="List all classes")
async def list_classes(
    actor: Identity = Depends(get_current_identity),
    client=Depends(get_supabase),
) -> List[dict]:
    return await classe_service.list_classes(client)


@router.get(
    "/enseignant/{enseignant_id}",
    response_model=List[ClasseResponse],
    summary="List the classes owned by one teacher",
)
async def list_classes_for_enseignant(
    enseignant_id: str,
    actor: Identity = Depends(get_current_identity),
    client=Depends(get_supabase),
) -> List[dict]:
    return await classe_service.list_for_enseignant(client, enseignant_id)


@router.get(
    "/{classe_id}/eleves",
    response_model=List[EleveResponse],
    summary="List the students of a class",
)
async def list_eleves(
    classe_id: str,
    actor: Identity = Depends(get_current_identity),
    client=Depends(get_supabase),
) -> List[dict]:
    return await classe_service.list_eleves(client, classe_id)
