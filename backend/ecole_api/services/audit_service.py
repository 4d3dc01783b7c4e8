"""
École API — Audit Recorder
===========================

What:  Appends one `user_audit` record per identity create/update/disable.
Who:   Called by UserService right after each successful mutation.
When:  Synchronously, inside the same request, after the mutation returned.

Consistency:
    No transaction spans the mutation and the audit insert: they are two
    separate provider calls. What happens when the audit insert fails is
    configured by `settings.audit_mode`:

    best_effort (default)  → log at ERROR with the full record, return None;
                             the caller's response is unaffected
    strict                 → raise ProviderError so the request fails (500);
                             the mutation itself is NOT rolled back

    Either way the gap is visible in the logs with the record that was lost.
"""

import logging
from typing import Any, Dict, Optional

from ecole_api.config import AuditMode, settings
from ecole_api.exceptions import ProviderError
from ecole_api.models.audit import AuditAction, AuditRecord
from ecole_api.services.provider import Row, execute

logger = logging.getLogger(__name__)

AUDIT_TABLE = "user_audit"


class AuditRecorder:

    def __init__(self, mode: Optional[AuditMode] = None):
        self._mode = mode

    @property
    def mode(self) -> AuditMode:
        # Read lazily so a settings override in tests applies to the singleton
        return AuditMode(self._mode or settings.audit_mode)

    async def record(
        self,
        client: Any,
        *,
        user_id: str,
        action: AuditAction,
        changed_by: str,
        old_data: Optional[Dict[str, Any]] = None,
        new_data: Optional[Dict[str, Any]] = None,
    ) -> Optional[Row]:
        """
        Insert one audit record.

        Returns:
            The inserted row, or None when the write failed in best-effort mode.

        Raises:
            ProviderError when the write failed in strict mode.
        """
        record = AuditRecord(
            user_id=str(user_id),
            action=action,
            old_data=old_data,
            new_data=new_data,
            changed_by=changed_by,
        )

        try:
            rows = await execute(
                client.table(AUDIT_TABLE).insert(record.to_row()),
                f"{AUDIT_TABLE}.insert",
            )
        except ProviderError as e:
            if self.mode is AuditMode.STRICT:
                raise
            logger.error(
                "Audit record lost for user %s (%s by %s): %s",
                record.user_id,
                record.action.value,
                record.changed_by,
                e.context.get("provider_message"),
            )
            return None

        logger.info(
            "Audit: %s user %s by %s",
            record.action.value,
            record.user_id,
            record.changed_by,
        )
        return rows[0] if rows else record.to_row()


audit_recorder = AuditRecorder()
