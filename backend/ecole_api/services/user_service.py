"""
École API — User Management Gateway
====================================

What:  Admin-only create/list/update/disable of identities.
Who:   Called by the `/api/users` route handlers (Role Gate: admin).

Each mutation touches two provider surfaces, then the audit trail:

    create   auth.admin.create_user                         → audit "create"
    update   read users row → users row update (eq id)
             → auth.admin.update_user_by_id                 → audit "update"
    disable  read users row → auth.admin.update_user_by_id
             (active = false)                                → audit "disable"

The role lives in `app_metadata`, which only a service-role key can write.
`user_metadata` carries the profile (nom, prenom, matieres, classe_id) and
is editable by the user themselves, so nothing there is trusted for access.

An update that matches no row stops before the auth user is touched. Once
the row has changed, the audit record is written even if the auth update
then fails; the failure is raised after the record.

Identities are never hard-deleted: "DELETE /api/users/{id}" disables.
Auth-admin failures and PostgREST failures both surface as ProviderError
(500); a user id without a `users` row is NotFoundError (404).
"""

import logging
from typing import Any, Dict, List

from supabase import AuthError

from ecole_api.exceptions import NotFoundError, ValidationError
from ecole_api.models.audit import AuditAction
from ecole_api.models.identity import Identity
from ecole_api.schemas.user import UserCreate
from ecole_api.services.audit_service import audit_recorder
from ecole_api.services.provider import Row, auth_failure, execute, to_plain
from ecole_api.services.scoped import scoped_update

logger = logging.getLogger(__name__)

USERS_TABLE = "users"

USER_LIST_COLUMNS = (
    "id, email, role, nom, prenom, matieres, created_at, classe_id, "
    "classes (nom, niveau)"
)

# Self-editable profile keys mirrored into `user_metadata`
PROFILE_FIELDS = ("nom", "prenom", "matieres", "classe_id")
# Access-bearing keys, written to `app_metadata` only
GRANT_FIELDS = ("role", "active")


def auth_attributes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Split a profile change set into the auth-admin attribute payload."""
    attributes: Dict[str, Any] = {}
    user_metadata = {k: changes[k] for k in PROFILE_FIELDS if k in changes}
    app_metadata = {k: changes[k] for k in GRANT_FIELDS if k in changes}
    if user_metadata:
        attributes["user_metadata"] = user_metadata
    if app_metadata:
        attributes["app_metadata"] = app_metadata
    if changes.get("email"):
        attributes["email"] = changes["email"]
    return attributes


class UserService:

    async def create_user(self, client: Any, payload: UserCreate, actor: Identity) -> Row:
        profile = payload.profile()
        metadata = {key: profile.get(key) for key in PROFILE_FIELDS}

        try:
            result = await client.auth.admin.create_user(
                {
                    "email": payload.email,
                    "password": payload.password,
                    "email_confirm": True,
                    "user_metadata": metadata,
                    "app_metadata": {"role": profile["role"]},
                }
            )
        except AuthError as e:
            raise auth_failure("users.create", e)

        user = to_plain(result.user)
        user_id = str(user.get("id", ""))
        logger.info("User %s created by %s (role=%s)", user_id, actor.id, profile["role"])

        await audit_recorder.record(
            client,
            user_id=user_id,
            action=AuditAction.CREATE,
            new_data=profile,
            changed_by=actor.id,
        )
        return user

    async def list_users(self, client: Any) -> List[Row]:
        return await execute(
            client.table(USERS_TABLE).select(USER_LIST_COLUMNS),
            "users.list",
        )

    async def get_user_row(self, client: Any, user_id: str) -> Row:
        rows = await execute(
            client.table(USERS_TABLE).select("*").eq("id", user_id).limit(1),
            "users.get",
        )
        if not rows:
            raise NotFoundError(
                resource="user",
                resource_id=user_id,
                message="Utilisateur non trouvé",
            )
        return rows[0]

    async def update_user(
        self,
        client: Any,
        user_id: str,
        changes: Dict[str, Any],
        actor: Identity,
    ) -> Row:
        """
        Apply a partial profile update to both the auth user and the users row.

        Raises:
            ValidationError: empty update body
            NotFoundError:   no users row for this id
            ProviderError:   any provider failure
        """
        if not changes:
            raise ValidationError(message="Aucune modification fournie")

        old_row = await self.get_user_row(client, user_id)

        row = await scoped_update(
            client,
            USERS_TABLE,
            user_id,
            changes,
            None,  # admin-only route: unscoped on purpose
            "user",
            not_found_message="Utilisateur non trouvé",
        )

        auth_error = None
        attributes = auth_attributes(changes)
        if attributes:
            try:
                await client.auth.admin.update_user_by_id(user_id, attributes)
            except AuthError as e:
                auth_error = e

        await audit_recorder.record(
            client,
            user_id=user_id,
            action=AuditAction.UPDATE,
            old_data=old_row,
            new_data=changes,
            changed_by=actor.id,
        )
        if auth_error is not None:
            raise auth_failure("users.update", auth_error)
        logger.info("User %s updated by %s: %s", user_id, actor.id, sorted(changes))
        return row

    async def disable_user(self, client: Any, user_id: str, actor: Identity) -> None:
        """Set `active: false` on the auth user (no hard delete)."""
        old_row = await self.get_user_row(client, user_id)

        metadata = dict(old_row.get("user_metadata") or {
            key: old_row[key] for key in PROFILE_FIELDS if key in old_row
        })
        metadata["active"] = False

        try:
            await client.auth.admin.update_user_by_id(
                user_id,
                {"user_metadata": metadata, "app_metadata": {"active": False}},
            )
        except AuthError as e:
            raise auth_failure("users.disable", e)

        await audit_recorder.record(
            client,
            user_id=user_id,
            action=AuditAction.DISABLE,
            old_data=old_row,
            new_data={"active": False},
            changed_by=actor.id,
        )
        logger.info("User %s disabled by %s", user_id, actor.id)


user_service = UserService()
