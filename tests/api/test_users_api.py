"""API tests for the signed-in user's profile."""

import pytest

from app.domains.user.service import UserService
from tests.factories import create_profile


class TestMe:
    @pytest.mark.asyncio
    async def test_first_visit_creates_profile(self, authenticated_client, test_db, test_user):
        response = await authenticated_client.get("/api/users/me")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == str(test_user.id)
        assert data["email"] == test_user.email
        assert data["is_admin"] is False
        assert await UserService(test_db).get_profile(test_user.id) is not None

    @pytest.mark.asyncio
    async def test_existing_profile(self, authenticated_client, test_db, test_user):
        await create_profile(test_db, user_id=test_user.id, username="islander")

        response = await authenticated_client.get("/api/users/me")

        assert response.json()["data"]["username"] == "islander"

    @pytest.mark.asyncio
    async def test_update(self, authenticated_client, test_user):
        response = await authenticated_client.patch(
            "/api/users/me", json={"bio": "Long stay in Srithanu", "interests": ["yoga", "diving"]}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Profile updated successfully"

        me = (await authenticated_client.get("/api/users/me")).json()["data"]
        assert me["bio"] == "Long stay in Srithanu"
        assert me["interests"] == ["yoga", "diving"]

    @pytest.mark.asyncio
    async def test_admin_flag_is_not_writable(self, authenticated_client, test_db, test_user):
        await authenticated_client.patch("/api/users/me", json={"is_admin": True})

        assert await UserService(test_db).is_admin(test_user.id) is False

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client):
        response = await client.get("/api/users/me")
        assert response.status_code == 401
