"""
École API — Scoped Mutations
=============================

What:  Update/delete helpers that take an explicit owner scope.
Why:   Ownership is enforced by the filter chain sent to the provider
       (`eq("id", row_id).eq("enseignant_id", caller)`), never by reading
       the row first and comparing in Python. A row owned by someone else
       simply does not match, the provider returns zero rows, and we turn
       that into NotFoundError: a foreign row is indistinguishable from a
       missing one, and the mutation never reports success.

Usage:
    scope = OwnerScope("enseignant_id", actor.id)
    row = await scoped_update(client, "cours", cours_id, changes, scope, "cours")

    Admin-only mutations pass `scope=None` explicitly (unscoped).
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ecole_api.exceptions import NotFoundError
from ecole_api.services.provider import Row, execute


@dataclass(frozen=True)
class OwnerScope:
    column: str
    owner_id: str

    def apply(self, query: Any) -> Any:
        return query.eq(self.column, self.owner_id)


def _scoped(query: Any, row_id: Any, scope: Optional[OwnerScope]) -> Any:
    query = query.eq("id", row_id)
    if scope is not None:
        query = scope.apply(query)
    return query


async def scoped_update(
    client: Any,
    table: str,
    row_id: Any,
    changes: Dict[str, Any],
    scope: Optional[OwnerScope],
    resource: str,
    not_found_message: Optional[str] = None,
) -> Row:
    """
    Update one row matched by id (and owner scope); return the updated row.

    Raises:
        NotFoundError when zero rows were affected.
        ProviderError when the provider reports an error.
    """
    query = _scoped(client.table(table).update(changes), row_id, scope)
    rows = await execute(query, f"{table}.update")
    if not rows:
        raise NotFoundError(
            resource=resource, resource_id=str(row_id), message=not_found_message
        )
    return rows[0]


async def scoped_delete(
    client: Any,
    table: str,
    row_id: Any,
    scope: Optional[OwnerScope],
    resource: str,
    not_found_message: Optional[str] = None,
) -> Row:
    """
    Delete one row matched by id (and owner scope); return the deleted row.

    PostgREST returns the deleted representation by default, so an empty
    result means nothing matched.
    """
    query = _scoped(client.table(table).delete(), row_id, scope)
    rows = await execute(query, f"{table}.delete")
    if not rows:
        raise NotFoundError(
            resource=resource, resource_id=str(row_id), message=not_found_message
        )
    return rows[0]
