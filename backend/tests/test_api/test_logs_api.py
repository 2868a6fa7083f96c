"""Tests for the audit log endpoint."""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.models import User
from hotel_booking.services.audit import log_operation


class TestLogs:
    async def test_admin_sees_filtered_entries(
        self, client: AsyncClient, db_session: AsyncSession, admin_user: User, admin_headers: dict
    ):
        log_operation(db_session, "DELETE", "Removed something", admin_user.id)
        log_operation(db_session, "UPDATE", "Changed something", admin_user.id)
        await db_session.flush()

        response = await client.get(
            "/api/v1/logs",
            params={"category": "DELETE", "performed_by": str(admin_user.id)},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["description"] == "Removed something"

    async def test_actions_are_recorded(self, client: AsyncClient, admin_user: User, admin_headers: dict):
        await client.post(
            "/api/v1/amenities", json={"name": "audited-amenity"}, headers=admin_headers
        )
        response = await client.get(
            "/api/v1/logs", params={"category": "CREATE", "performed_by": str(admin_user.id)}, headers=admin_headers
        )
        assert any("audited-amenity" in item["description"] for item in response.json()["items"])

    async def test_non_admin_forbidden(self, client: AsyncClient, receptionist_headers: dict):
        response = await client.get("/api/v1/logs", headers=receptionist_headers)
        assert response.status_code == 403
