"""
École API — Course Gateway
===========================

What:  Teacher-scoped CRUD on the provider's `cours` table.
Who:   Called by `/api/cours` route handlers (Role Gate: enseignant).

Ownership Model:
    Every operation is scoped to the calling teacher:
    - list:    eq("enseignant_id", caller)
    - create:  enseignant_id is set to the caller, never taken from the body
    - update:  eq("id", cours_id).eq("enseignant_id", caller)
    - delete:  eq("id", cours_id).eq("enseignant_id", caller)

    A course owned by another teacher never matches the filter chain, so the
    provider affects zero rows and the caller receives 404 "Cours non
    trouvé", exactly as if the id did not exist.

Reshaping:
    The list query joins `classes (nom)`; the nested object is flattened
    into a top-level `classe_nom` for the frontend table.
"""

import logging
from typing import Any, Dict, List

from ecole_api.exceptions import ValidationError
from ecole_api.models.identity import Identity
from ecole_api.schemas.cours import CoursCreate
from ecole_api.services.provider import Row, execute
from ecole_api.services.scoped import OwnerScope, scoped_delete, scoped_update

logger = logging.getLogger(__name__)

COURS_TABLE = "cours"
NOT_FOUND_MESSAGE = "Cours non trouvé"

COURS_LIST_COLUMNS = (
    "id, titre, description, fichier_url, created_at, classe_id, enseignant_id, "
    "classes (nom)"
)


def owner_scope(actor: Identity) -> OwnerScope:
    return OwnerScope("enseignant_id", actor.id)


def flatten_classe(row: Row) -> Row:
    """Replace the joined `classes` object with a flat `classe_nom`."""
    flat = dict(row)
    joined = flat.pop("classes", None)
    if isinstance(joined, list):
        joined = joined[0] if joined else None
    flat["classe_nom"] = joined.get("nom") if isinstance(joined, dict) else None
    return flat


class CoursService:

    async def list_cours(self, client: Any, actor: Identity) -> List[Row]:
        query = owner_scope(actor).apply(client.table(COURS_TABLE).select(COURS_LIST_COLUMNS))
        rows = await execute(query, "cours.list")
        return [flatten_classe(row) for row in rows]

    async def create_cours(self, client: Any, payload: CoursCreate, actor: Identity) -> Row:
        row = payload.model_dump(mode="json")
        row["enseignant_id"] = actor.id

        rows = await execute(client.table(COURS_TABLE).insert([row]), "cours.insert")
        logger.info("Course '%s' created by %s", payload.titre, actor.id)
        return rows[0] if rows else row

    async def update_cours(
        self,
        client: Any,
        cours_id: str,
        changes: Dict[str, Any],
        actor: Identity,
    ) -> Row:
        if not changes:
            raise ValidationError(message="Aucune modification fournie")

        row = await scoped_update(
            client,
            COURS_TABLE,
            cours_id,
            changes,
            owner_scope(actor),
            "cours",
            not_found_message=NOT_FOUND_MESSAGE,
        )
        logger.info("Course %s updated by %s", cours_id, actor.id)
        return row

    async def delete_cours(self, client: Any, cours_id: str, actor: Identity) -> None:
        await scoped_delete(
            client,
            COURS_TABLE,
            cours_id,
            owner_scope(actor),
            "cours",
            not_found_message=NOT_FOUND_MESSAGE,
        )
        logger.info("Course %s deleted by %s", cours_id, actor.id)


cours_service = CoursService()
