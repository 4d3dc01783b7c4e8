"""
École API — Class Gateway
==========================

What:  Create and list classes; list a class's students.
Who:   Called by `/api/classes` route handlers.

Ownership:
    A teacher who creates a class owns it (`enseignant_id` = caller); an
    admin may assign any teacher. Teacher-specific listings are scoped by an
    `eq("enseignant_id", ...)` filter sent to the provider.
"""

import logging
from typing import Any, List

from ecole_api.models.identity import Identity, Role
from ecole_api.schemas.classe import ClasseCreate
from ecole_api.services.provider import Row, execute

logger = logging.getLogger(__name__)

CLASSES_TABLE = "classes"


class ClasseService:

    async def create_classe(self, client: Any, payload: ClasseCreate, actor: Identity) -> Row:
        row = {"nom": payload.nom, "niveau": payload.niveau}

        if actor.role is Role.ENSEIGNANT:
            row["enseignant_id"] = actor.id
        elif payload.enseignant_id:
            row["enseignant_id"] = payload.enseignant_id

        rows = await execute(
            client.table(CLASSES_TABLE).insert([row]),
            "classes.insert",
        )
        logger.info("Class '%s' created by %s", payload.nom, actor.id)
        return rows[0] if rows else row

    async def list_classes(self, client: Any) -> List[Row]:
        return await execute(client.table(CLASSES_TABLE).select("*"), "classes.list")

    async def list_for_enseignant(self, client: Any, enseignant_id: str) -> List[Row]:
        return await execute(
            client.table(CLASSES_TABLE).select("*").eq("enseignant_id", enseignant_id),
            "classes.list_for_enseignant",
        )

    async def list_eleves(self, client: Any, classe_id: str) -> List[Row]:
        return await execute(
            client.table("users")
            .select("id, nom, prenom, email")
            .eq("classe_id", classe_id)
            .eq("role", Role.ELEVE.value),
            "classes.list_eleves",
        )


classe_service = ClasseService()
