"""
École API — Class Route Tests
===============================

What we test:
    ✅ A teacher owns the class they create, whatever the body says
    ✅ An admin may assign any teacher
    ✅ Students cannot create classes
    ✅ Listings: all classes, by teacher, students of a class
"""

import pytest

from conftest import ENSEIGNANT_ID, OTHER_ENSEIGNANT_ID, eq_filters, make_query


class TestCreateClasse:

    @pytest.mark.asyncio
    async def test_teacher_owns_created_class(self, test_client, mock_supabase, auth_headers):
        mock_supabase.tables["classes"] = make_query(
            [{"id": 3, "nom": "6A", "niveau": 6, "enseignant_id": ENSEIGNANT_ID}]
        )

        response = await test_client.post(
            "/api/classes",
            headers=auth_headers("enseignant"),
            json={"nom": "6A", "niveau": 6, "enseignant_id": OTHER_ENSEIGNANT_ID},
        )

        assert response.status_code == 201
        inserted = mock_supabase.tables["classes"].insert.call_args.args[0][0]
        assert inserted == {"nom": "6A", "niveau": 6, "enseignant_id": ENSEIGNANT_ID}

    @pytest.mark.asyncio
    async def test_admin_assigns_teacher(self, test_client, mock_supabase, auth_headers):
        mock_supabase.tables["classes"] = make_query(
            [{"id": 4, "nom": "5B", "niveau": "5e", "enseignant_id": OTHER_ENSEIGNANT_ID}]
        )

        response = await test_client.post(
            "/api/classes",
            headers=auth_headers("admin"),
            json={"nom": "5B", "niveau": "5e", "enseignant_id": OTHER_ENSEIGNANT_ID},
        )

        assert response.status_code == 201
        assert response.json()["enseignant_id"] == OTHER_ENSEIGNANT_ID

    @pytest.mark.asyncio
    async def test_student_refused(self, test_client, mock_supabase, auth_headers):
        response = await test_client.post(
            "/api/classes", headers=auth_headers("eleve"), json={"nom": "6A"}
        )

        assert response.status_code == 403
        assert "classes" not in mock_supabase.tables


class TestListClasses:

    @pytest.mark.asyncio
    async def test_any_authenticated_user_lists(self, test_client, mock_supabase, auth_headers):
        mock_supabase.tables["classes"] = make_query([{"id": 1, "nom": "6A", "niveau": 6}])

        response = await test_client.get("/api/classes", headers=auth_headers("eleve"))

        assert response.status_code == 200
        assert response.json()[0]["nom"] == "6A"

    @pytest.mark.asyncio
    async def test_anonymous_refused(self, test_client):
        response = await test_client.get("/api/classes")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_list_for_teacher_filters(self, test_client, mock_supabase, auth_headers):
        response = await test_client.get(
            f"/api/classes/enseignant/{ENSEIGNANT_ID}", headers=auth_headers("enseignant")
        )

        assert response.status_code == 200
        assert response.json() == []
        assert eq_filters(mock_supabase.tables["classes"]) == {"enseignant_id": ENSEIGNANT_ID}

    @pytest.mark.asyncio
    async def test_list_students_of_class(self, test_client, mock_supabase, auth_headers):
        mock_supabase.tables["users"] = make_query(
            [{"id": "s1", "nom": "Dupont", "prenom": "Léa", "email": "lea@ecole.test"}]
        )

        response = await test_client.get(
            "/api/classes/3/eleves", headers=auth_headers("enseignant")
        )

        assert response.status_code == 200
        assert response.json()[0]["prenom"] == "Léa"
        assert eq_filters(mock_supabase.tables["users"]) == {"classe_id": "3", "role": "eleve"}
