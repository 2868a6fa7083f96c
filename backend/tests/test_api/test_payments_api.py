"""Tests for payment endpoints and reservation synchronisation."""

import uuid
from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from hotel_booking.models import Room


@pytest.fixture
async def booked(client: AsyncClient, guest_headers: dict, test_room: Room) -> dict:
    check_in = date.today() + timedelta(days=20)
    response = await client.post(
        "/api/v1/reservations",
        json={
            "room_id": str(test_room.id),
            "check_in": check_in.isoformat(),
            "check_out": (check_in + timedelta(days=1)).isoformat(),
            "amount": "100.00",
            "payment_ref": f"PAY-{uuid.uuid4().hex[:10]}",
        },
        headers=guest_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestPaymentSync:
    async def test_paid_confirms(self, client: AsyncClient, receptionist_headers: dict, booked: dict):
        payment_id = booked["payment"]["id"]
        response = await client.put(
            f"/api/v1/payments/{payment_id}", json={"status": "PAID"}, headers=receptionist_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["payment"]["status"] == "PAID"
        assert data["reservation_status"] == "CONFIRMED"

        response = await client.get(
            f"/api/v1/reservations/{booked['reservation']['id']}", headers=receptionist_headers
        )
        assert response.json()["status"] == "CONFIRMED"

    async def test_failed_cancels(self, client: AsyncClient, receptionist_headers: dict, booked: dict):
        response = await client.put(
            f"/api/v1/payments/{booked['payment']['id']}", json={"status": "FAILED"}, headers=receptionist_headers
        )
        assert response.json()["reservation_status"] == "CANCELLED"

    async def test_pending_leaves_reservation(self, client: AsyncClient, receptionist_headers: dict, booked: dict):
        response = await client.put(
            f"/api/v1/payments/{booked['payment']['id']}", json={"status": "PENDING"}, headers=receptionist_headers
        )
        assert response.status_code == 200
        assert response.json()["reservation_status"] is None

    async def test_paid_after_rebooking_conflicts(
        self, client: AsyncClient, receptionist_headers: dict, guest_headers: dict, booked: dict, test_room: Room
    ):
        payment_url = f"/api/v1/payments/{booked['payment']['id']}"
        await client.put(payment_url, json={"status": "FAILED"}, headers=receptionist_headers)
        response = await client.post(
            "/api/v1/reservations",
            json={
                "room_id": str(test_room.id),
                "check_in": booked["reservation"]["check_in"],
                "check_out": booked["reservation"]["check_out"],
                "amount": "100.00",
                "payment_ref": f"PAY-{uuid.uuid4().hex[:10]}",
            },
            headers=guest_headers,
        )
        assert response.status_code == 201, response.text

        response = await client.put(payment_url, json={"status": "PAID"}, headers=receptionist_headers)

        assert response.status_code == 409
        assert response.json()["kind"] == "conflict"

    async def test_invalid_status(self, client: AsyncClient, receptionist_headers: dict, booked: dict):
        response = await client.put(
            f"/api/v1/payments/{booked['payment']['id']}", json={"status": "REFUNDED"}, headers=receptionist_headers
        )
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid payment status.", "kind": "validation_error"}

    async def test_unknown_payment(self, client: AsyncClient, receptionist_headers: dict):
        response = await client.put(
            f"/api/v1/payments/{uuid.uuid4()}", json={"status": "PAID"}, headers=receptionist_headers
        )
        assert response.status_code == 404

    async def test_admin_cannot_update(self, client: AsyncClient, admin_headers: dict, booked: dict):
        response = await client.put(
            f"/api/v1/payments/{booked['payment']['id']}", json={"status": "PAID"}, headers=admin_headers
        )
        assert response.status_code == 403


class TestReadPayments:
    async def test_list_and_get(self, client: AsyncClient, admin_headers: dict, booked: dict):
        response = await client.get(
            "/api/v1/payments", params={"reservation_id": booked["reservation"]["id"]}, headers=admin_headers
        )
        assert response.status_code == 200
        assert [p["id"] for p in response.json()["items"]] == [booked["payment"]["id"]]

        response = await client.get(f"/api/v1/payments/{booked['payment']['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING"

    async def test_guest_cannot_list(self, client: AsyncClient, guest_headers: dict):
        response = await client.get("/api/v1/payments", headers=guest_headers)
        assert response.status_code == 403
