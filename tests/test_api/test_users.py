"""Tests for admin user management endpoints."""

import uuid

from httpx import AsyncClient

from staylocal.models.user import User


class TestListUsers:
    async def test_admin_lists_users(self, client: AsyncClient, admin_headers: dict, traveler: User, host: User):
        response = await client.get("/api/v1/users", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["page"] == 1
        assert data["pages"] == 1

    async def test_filter_by_role(self, client: AsyncClient, admin_headers: dict, traveler: User, host: User):
        response = await client.get("/api/v1/users", params={"role": "host"}, headers=admin_headers)
        assert response.status_code == 200
        assert [u["id"] for u in response.json()["items"]] == [str(host.id)]

    async def test_non_admin_forbidden(self, client: AsyncClient, host_headers: dict):
        response = await client.get("/api/v1/users", headers=host_headers)
        assert response.status_code == 403

    async def test_get_unknown_user(self, client: AsyncClient, admin_headers: dict):
        response = await client.get(f"/api/v1/users/{uuid.uuid4()}", headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"detail": "User not found", "error_code": "not_found"}


class TestManageUsers:
    async def test_change_role(self, client: AsyncClient, admin_headers: dict, traveler: User, traveler_headers: dict):
        response = await client.put(
            f"/api/v1/users/{traveler.id}/role", json={"role": "host"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["role"] == "host"

        # The new role applies to the very next request.
        mine = await client.get("/api/v1/properties/host/mine", headers=traveler_headers)
        assert mine.status_code == 200

    async def test_deactivate_blocks_authentication(
        self, client: AsyncClient, admin_headers: dict, traveler: User, traveler_headers: dict
    ):
        response = await client.put(
            f"/api/v1/users/{traveler.id}/status", json={"is_active": False}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        me = await client.get("/api/v1/auth/me", headers=traveler_headers)
        assert me.status_code == 401

    async def test_delete_user(self, client: AsyncClient, admin_headers: dict, traveler: User):
        response = await client.delete(f"/api/v1/users/{traveler.id}", headers=admin_headers)
        assert response.status_code == 200

        missing = await client.get(f"/api/v1/users/{traveler.id}", headers=admin_headers)
        assert missing.status_code == 404

    async def test_admin_cannot_delete_self(self, client: AsyncClient, admin: User, admin_headers: dict):
        response = await client.delete(f"/api/v1/users/{admin.id}", headers=admin_headers)
        assert response.status_code == 422
