"""
École API — Audit Record
=========================

What:  Shape of one row in the provider's `user_audit` table.
Why:   Every identity mutation (create, update, disable) appends exactly one
       record with before/after snapshots and the acting identity's id.
How:   Built in memory by AuditRecorder and inserted as a single row; the
       table is append-only, this system never updates or deletes records.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DISABLE = "disable"


class AuditRecord(BaseModel):
    user_id: str
    action: AuditAction
    old_data: Optional[Dict[str, Any]] = None
    new_data: Optional[Dict[str, Any]] = None
    changed_by: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_row(self) -> Dict[str, Any]:
        """Serialize for a PostgREST insert (enums as values, datetime as ISO 8601)."""
        return self.model_dump(mode="json")
