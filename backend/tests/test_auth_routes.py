"""
École API — Authentication Route Tests
========================================

What:  /api/auth/login, /register/eleve and /reset-password against a mocked
       provider auth API.

What we test:
    ✅ Login returns the provider access token and the metadata-derived user
    ✅ Login reports the role from app_metadata, never from user_metadata
    ✅ Provider refusal → 401 carrying the provider's message
    ✅ Missing fields → 400 (not FastAPI's 422)
    ✅ Student registration forwards role=eleve, active=false
    ✅ Registration / reset refusals → 400 with the provider's message
    ✅ No provider client configured → 503
"""

from types import SimpleNamespace

import pytest
from supabase import AuthError

from ecole_api.database import get_supabase
from ecole_api.exceptions import ServiceUnavailableError


def provider_session(user_id="u-1", email="prof@ecole.test", role=None, **metadata):
    user = SimpleNamespace(
        id=user_id,
        email=email,
        user_metadata=metadata,
        app_metadata={"role": role} if role else {},
    )
    session = SimpleNamespace(access_token="provider-access-token")
    return SimpleNamespace(user=user, session=session)


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, test_client, mock_supabase):
        mock_supabase.auth.sign_in_with_password.return_value = provider_session(
            role="enseignant", nom="Curie", prenom="Marie"
        )

        response = await test_client.post(
            "/api/auth/login",
            json={"email": "prof@ecole.test", "password": "secret123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["access_token"] == "provider-access-token"
        assert data["user"] == {
            "id": "u-1",
            "email": "prof@ecole.test",
            "role": "enseignant",
            "nom": "Curie",
            "prenom": "Marie",
        }
        mock_supabase.auth.sign_in_with_password.assert_awaited_once_with(
            {"email": "prof@ecole.test", "password": "secret123"}
        )

    @pytest.mark.asyncio
    async def test_login_role_comes_from_app_metadata(self, test_client, mock_supabase):
        session = provider_session(role="eleve", nom="Dupont")
        session.user.user_metadata["role"] = "admin"
        mock_supabase.auth.sign_in_with_password.return_value = session

        response = await test_client.post(
            "/api/auth/login",
            json={"email": "eleve@ecole.test", "password": "secret123"},
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "eleve"

    @pytest.mark.asyncio
    async def test_login_refused_surfaces_provider_message(self, test_client, mock_supabase):
        mock_supabase.auth.sign_in_with_password.side_effect = AuthError(
            "Invalid login credentials", "invalid_credentials"
        )

        response = await test_client.post(
            "/api/auth/login",
            json={"email": "prof@ecole.test", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid login credentials"

    @pytest.mark.asyncio
    async def test_login_without_session_is_401(self, test_client, mock_supabase):
        mock_supabase.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=None, session=None
        )

        response = await test_client.post(
            "/api/auth/login",
            json={"email": "prof@ecole.test", "password": "secret123"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Identifiants invalides"

    @pytest.mark.asyncio
    async def test_login_missing_password_is_400(self, test_client, mock_supabase):
        response = await test_client.post("/api/auth/login", json={"email": "x@ecole.test"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert "password" in response.json()["message"]
        mock_supabase.auth.sign_in_with_password.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_login_without_provider_is_503(self, test_client):
        from ecole_api.main import app

        async def unavailable():
            raise ServiceUnavailableError(message="Base de données non configurée")

        app.dependency_overrides[get_supabase] = unavailable

        response = await test_client.post(
            "/api/auth/login",
            json={"email": "prof@ecole.test", "password": "secret123"},
        )

        assert response.status_code == 503
        assert response.json()["error"] == "service_unavailable"


class TestRegisterEleve:

    @pytest.mark.asyncio
    async def test_register_creates_inactive_student(self, test_client, mock_supabase):
        mock_supabase.auth.sign_up.return_value = SimpleNamespace(
            user={"id": "new-eleve", "email": "eleve@ecole.test"}
        )

        response = await test_client.post(
            "/api/auth/register/eleve",
            json={
                "email": "eleve@ecole.test",
                "password": "secret123",
                "nom": "Dupont",
                "prenom": "Léa",
                "classe": "6A",
            },
        )

        assert response.status_code == 201
        assert response.json()["user"]["id"] == "new-eleve"

        sent = mock_supabase.auth.sign_up.await_args.args[0]
        assert sent["email"] == "eleve@ecole.test"
        assert sent["options"]["data"] == {
            "role": "eleve",
            "nom": "Dupont",
            "prenom": "Léa",
            "classe": "6A",
            "active": False,
        }

    @pytest.mark.asyncio
    async def test_register_refused_is_400(self, test_client, mock_supabase):
        mock_supabase.auth.sign_up.side_effect = AuthError(
            "User already registered", "user_already_exists"
        )

        response = await test_client.post(
            "/api/auth/register/eleve",
            json={
                "email": "eleve@ecole.test",
                "password": "secret123",
                "nom": "Dupont",
                "prenom": "Léa",
            },
        )

        assert response.status_code == 400
        assert response.json()["message"] == "User already registered"
        assert response.json()["details"] == {"field": "email"}


class TestResetPassword:

    @pytest.mark.asyncio
    async def test_reset_sends_email(self, test_client, mock_supabase):
        response = await test_client.post(
            "/api/auth/reset-password", json={"email": "prof@ecole.test"}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Email de réinitialisation envoyé"
        mock_supabase.auth.reset_password_for_email.assert_awaited_once_with("prof@ecole.test")

    @pytest.mark.asyncio
    async def test_reset_refused_is_400(self, test_client, mock_supabase):
        mock_supabase.auth.reset_password_for_email.side_effect = AuthError(
            "Email rate limit exceeded", "over_email_send_rate_limit"
        )

        response = await test_client.post(
            "/api/auth/reset-password", json={"email": "prof@ecole.test"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Email rate limit exceeded"
