"""
École API — Audit Recorder Unit Tests
=======================================

What we test:
    ✅ One insert into user_audit with action, actor and timestamp
    ✅ best_effort: a failed insert is logged and swallowed (returns None)
    ✅ strict: a failed insert raises ProviderError
"""

import logging
from unittest.mock import MagicMock

import pytest
from supabase import PostgrestAPIError

from conftest import make_query
from ecole_api.config import AuditMode
from ecole_api.exceptions import ProviderError
from ecole_api.models.audit import AuditAction
from ecole_api.services.audit_service import AUDIT_TABLE, AuditRecorder


def client_with(query):
    client = MagicMock()
    client.table.return_value = query
    return client


def failing_insert():
    return make_query(PostgrestAPIError({"message": "permission denied", "code": "42501"}))


class TestAuditRecorder:

    @pytest.mark.asyncio
    async def test_record_inserts_one_row(self):
        query = make_query([{"id": 1}])
        client = client_with(query)

        row = await AuditRecorder(mode=AuditMode.STRICT).record(
            client,
            user_id="u-1",
            action=AuditAction.UPDATE,
            old_data={"nom": "A"},
            new_data={"nom": "B"},
            changed_by="admin-1",
        )

        assert row == {"id": 1}
        client.table.assert_called_once_with(AUDIT_TABLE)
        inserted = query.insert.call_args.args[0]
        assert inserted["action"] == "update"
        assert inserted["changed_by"] == "admin-1"
        assert inserted["old_data"] == {"nom": "A"}
        assert inserted["timestamp"]

    @pytest.mark.asyncio
    async def test_best_effort_swallows_failure(self, caplog):
        recorder = AuditRecorder(mode=AuditMode.BEST_EFFORT)

        with caplog.at_level(logging.ERROR, logger="ecole_api.services.audit_service"):
            row = await recorder.record(
                client_with(failing_insert()),
                user_id="u-1",
                action=AuditAction.DISABLE,
                new_data={"active": False},
                changed_by="admin-1",
            )

        assert row is None
        assert "Audit record lost" in caplog.text

    @pytest.mark.asyncio
    async def test_strict_propagates_failure(self):
        recorder = AuditRecorder(mode=AuditMode.STRICT)

        with pytest.raises(ProviderError):
            await recorder.record(
                client_with(failing_insert()),
                user_id="u-1",
                action=AuditAction.CREATE,
                new_data={"nom": "A"},
                changed_by="admin-1",
            )

    def test_mode_defaults_to_settings(self):
        assert AuditRecorder().mode is AuditMode.BEST_EFFORT
