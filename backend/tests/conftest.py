"""
École API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests never reach Supabase or Google: the provider client is a
       MagicMock whose query builder chains back to itself, and Drive is a
       DriveService wrapping a mocked Drive resource.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    ├── make_token / auth_headers: signed bearer tokens per role
    ├── mock_supabase: fake async Supabase client (auth + tables)
    ├── mock_drive_client / ready_drive / disabled_drive: file gateway doubles
    └── test_client: HTTPX AsyncClient with provider dependencies overridden
"""

import os
import time

# Override settings for testing BEFORE any app imports
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["JWT_AUDIENCE"] = "authenticated"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""
os.environ["GOOGLE_CLIENT_ID"] = ""
os.environ["GOOGLE_CLIENT_SECRET"] = ""
os.environ["GOOGLE_REFRESH_TOKEN"] = ""
os.environ["GOOGLE_DRIVE_FOLDER_ID"] = "folder-test"
os.environ["AUDIT_MODE"] = "best_effort"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt

from ecole_api.database import get_supabase
from ecole_api.services.drive_service import DriveService, get_drive_service

TEST_SECRET = "test-secret-not-real"

ADMIN_ID = "00000000-0000-0000-0000-00000000a001"
ENSEIGNANT_ID = "00000000-0000-0000-0000-00000000e001"
OTHER_ENSEIGNANT_ID = "00000000-0000-0000-0000-00000000e002"
ELEVE_ID = "00000000-0000-0000-0000-00000000c001"

IDS_BY_ROLE = {"admin": ADMIN_ID, "enseignant": ENSEIGNANT_ID, "eleve": ELEVE_ID}

# Every PostgREST builder method returns the builder itself
CHAIN_METHODS = ("select", "insert", "update", "delete", "eq", "limit", "order", "single")


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

def build_token(
    sub: str,
    role: Optional[str] = None,
    email: Optional[str] = None,
    expires_in: int = 3600,
    secret: str = TEST_SECRET,
    **extra: Any,
) -> str:
    """Mint a Supabase-shaped access token (app role in app_metadata)."""
    now = int(time.time())
    claims: Dict[str, Any] = {
        "sub": sub,
        "email": email or f"{sub[-4:]}@ecole.test",
        "aud": "authenticated",
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
        "app_metadata": {"role": role} if role else {},
        "user_metadata": {},
    }
    claims.update(extra)
    return jwt.encode(claims, secret, algorithm="HS256")


def make_query(*results):
    """
    Fake PostgREST query builder.

    Each positional result answers one `execute()` call, in order: a list
    becomes `response.data`, an exception instance is raised. Without
    results every execute() answers an empty list.
    """
    query = MagicMock()
    for method in CHAIN_METHODS:
        getattr(query, method).return_value = query

    if results:
        outcomes = [
            r if isinstance(r, Exception) else MagicMock(data=r)
            for r in results
        ]
        query.execute = AsyncMock(side_effect=outcomes)
    else:
        query.execute = AsyncMock(return_value=MagicMock(data=[]))
    return query


def eq_filters(query) -> Dict[str, Any]:
    """Collect the eq(column, value) filters applied to a fake query."""
    return {c.args[0]: c.args[1] for c in query.eq.call_args_list}


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_token():
    return build_token


@pytest.fixture
def auth_headers():
    """
    Usage:
        headers = auth_headers("admin")
        headers = auth_headers("enseignant", sub=OTHER_ENSEIGNANT_ID)
    """

    def _headers(role: str, sub: Optional[str] = None) -> Dict[str, str]:
        token = build_token(sub or IDS_BY_ROLE.get(role, ELEVE_ID), role=role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def mock_supabase():
    """
    A MagicMock standing in for `supabase.AsyncClient`.

    Tables are configured per test:
        mock_supabase.tables["cours"] = make_query([{"id": 1}])
    Unconfigured tables answer empty lists.
    """
    client = MagicMock()
    client.tables = {}
    client.table.side_effect = lambda name: client.tables.setdefault(name, make_query())

    client.auth.sign_in_with_password = AsyncMock()
    client.auth.sign_up = AsyncMock()
    client.auth.reset_password_for_email = AsyncMock()
    client.auth.admin.create_user = AsyncMock()
    client.auth.admin.update_user_by_id = AsyncMock()
    return client


@pytest.fixture
def mock_drive_client():
    """Mocked Drive v3 resource: files().create/delete and permissions().create."""
    drive = MagicMock()
    drive.files.return_value.create.return_value.execute.return_value = {
        "id": "drive-file-123",
        "name": "chapitre1.pdf",
    }
    drive.files.return_value.delete.return_value.execute.return_value = None
    drive.permissions.return_value.create.return_value.execute.return_value = {"id": "anyone"}
    return drive


@pytest.fixture
def ready_drive(mock_drive_client):
    return DriveService(folder_id="folder-test", client=mock_drive_client)


@pytest.fixture
def disabled_drive():
    service = DriveService(folder_id="folder-test")
    service._disable("missing credentials: GOOGLE_CLIENT_ID")
    return service


@pytest_asyncio.fixture
async def test_client(mock_supabase, ready_drive):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    The lifespan does not run, so no provider is contacted; the provider
    client and the Drive gateway are injected through dependency overrides.
    Tests that need another Drive double override `get_drive_service` again.
    """
    from ecole_api.main import app

    app.dependency_overrides[get_supabase] = lambda: mock_supabase
    app.dependency_overrides[get_drive_service] = lambda: ready_drive

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
