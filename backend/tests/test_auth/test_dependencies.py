"""Tests for auth dependencies: token validation and role checks."""

import uuid
from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.auth.jwt import create_access_token, create_token_pair
from hotel_booking.models.guest import Guest
from hotel_booking.models.user import User


def _headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestGetCurrentPrincipal:
    """Exercised through GET /api/v1/auth/me."""

    async def test_valid_staff_token(self, client: AsyncClient, admin_user: User, admin_headers: dict):
        response = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["id"] == str(admin_user.id)

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code in (401, 403)

    async def test_expired_token_rejected(self, client: AsyncClient, admin_user: User):
        token = create_access_token(
            {"sub": str(admin_user.id), "role": "ADMIN"}, expires_delta=timedelta(seconds=-1)
        )
        response = await client.get("/api/v1/auth/me", headers=_headers(token))
        assert response.status_code == 401

    async def test_invalid_token_format(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me", headers=_headers("not.a.valid.jwt"))
        assert response.status_code == 401

    async def test_refresh_token_type_rejected(self, client: AsyncClient, admin_user: User):
        tokens = create_token_pair(str(admin_user.id), "ADMIN")
        response = await client.get("/api/v1/auth/me", headers=_headers(tokens["refresh_token"]))
        assert response.status_code == 401

    async def test_nonexistent_user_rejected(self, client: AsyncClient):
        token = create_access_token({"sub": str(uuid.uuid4()), "role": "ADMIN"})
        response = await client.get("/api/v1/auth/me", headers=_headers(token))
        assert response.status_code == 401

    async def test_stale_role_rejected(self, client: AsyncClient, receptionist_user: User):
        """A token claiming a role the account no longer holds is refused."""
        token = create_access_token({"sub": str(receptionist_user.id), "role": "ADMIN"})
        response = await client.get("/api/v1/auth/me", headers=_headers(token))
        assert response.status_code == 401

    async def test_inactive_user_rejected(
        self, client: AsyncClient, db_session: AsyncSession, admin_user: User, admin_headers: dict
    ):
        admin_user.status = "INACTIVE"
        await db_session.flush()
        response = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert response.status_code == 401


class TestRequireRoles:
    async def test_guest_cannot_reach_staff_endpoint(self, client: AsyncClient, guest_headers: dict):
        response = await client.get("/api/v1/auth/me", headers=guest_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Access Forbidden: Insufficient Role"

    async def test_inactive_guest_rejected(
        self, client: AsyncClient, db_session: AsyncSession, test_guest: Guest, guest_headers: dict
    ):
        test_guest.status = "INACTIVE"
        await db_session.flush()
        response = await client.get(f"/api/v1/guests/{test_guest.id}", headers=guest_headers)
        assert response.status_code == 401

    async def test_receptionist_cannot_use_admin_endpoint(self, client: AsyncClient, receptionist_headers: dict):
        response = await client.get("/api/v1/users", headers=receptionist_headers)
        assert response.status_code == 403
