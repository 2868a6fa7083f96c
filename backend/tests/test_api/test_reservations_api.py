"""Tests for reservation endpoints."""

import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest
from httpx import AsyncClient

from hotel_booking.models import Guest, Room

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _future_dates(offset_start: int = 30, nights: int = 2) -> tuple[str, str]:
    """Return a (check_in, check_out) pair safely in the future as ISO strings."""
    check_in = date.today() + timedelta(days=offset_start)
    check_out = check_in + timedelta(days=nights)
    return check_in.isoformat(), check_out.isoformat()


def _payload(room: Room, offset_start: int = 30, nights: int = 2, **overrides) -> dict:
    ci, co = _future_dates(offset_start, nights)
    payload = {
        "room_id": str(room.id),
        "check_in": ci,
        "check_out": co,
        "amount": str(room.price * nights),
        "payment_ref": f"PAY-{uuid.uuid4().hex[:10]}",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def reservation(client: AsyncClient, guest_headers: dict, test_room: Room) -> dict:
    response = await client.post("/api/v1/reservations", json=_payload(test_room), headers=guest_headers)
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# POST /api/v1/reservations
# ---------------------------------------------------------------------------


class TestCreateReservation:
    async def test_guest_books_for_self(
        self, client: AsyncClient, guest_headers: dict, test_room: Room, test_guest: Guest
    ):
        payload = _payload(test_room, 30, 2)
        response = await client.post("/api/v1/reservations", json=payload, headers=guest_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Room reserved successfully with payment!"
        assert data["reservation"]["guest_id"] == str(test_guest.id)
        assert data["reservation"]["status"] == "PENDING"
        assert data["reservation"]["check_in"] == payload["check_in"]
        assert data["payment"]["payment_ref"] == payload["payment_ref"]
        assert Decimal(data["payment"]["amount"]) == Decimal("200.00")
        assert data["payment"]["reservation_id"] == data["reservation"]["id"]

    async def test_guest_cannot_book_for_another(self, client: AsyncClient, guest_headers: dict, test_room: Room):
        payload = _payload(test_room, guest_id=str(uuid.uuid4()))
        response = await client.post("/api/v1/reservations", json=payload, headers=guest_headers)
        assert response.status_code == 403

    async def test_receptionist_books_for_guest(
        self, client: AsyncClient, receptionist_headers: dict, test_room: Room, test_guest: Guest
    ):
        payload = _payload(test_room, guest_id=str(test_guest.id))
        response = await client.post("/api/v1/reservations", json=payload, headers=receptionist_headers)
        assert response.status_code == 201
        assert response.json()["reservation"]["guest_id"] == str(test_guest.id)

    async def test_receptionist_must_name_guest(
        self, client: AsyncClient, receptionist_headers: dict, test_room: Room
    ):
        response = await client.post("/api/v1/reservations", json=_payload(test_room), headers=receptionist_headers)
        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

    async def test_room_manager_forbidden(self, client: AsyncClient, room_manager_headers: dict, test_room: Room):
        response = await client.post("/api/v1/reservations", json=_payload(test_room), headers=room_manager_headers)
        assert response.status_code == 403

    async def test_amount_mismatch(self, client: AsyncClient, guest_headers: dict, test_room: Room):
        response = await client.post(
            "/api/v1/reservations", json=_payload(test_room, amount="1.00"), headers=guest_headers
        )
        assert response.status_code == 400
        assert response.json() == {
            "detail": "The amount does not match the calculated room price.",
            "kind": "validation_error",
        }

    async def test_overlap_conflict(self, client: AsyncClient, guest_headers: dict, test_room: Room, reservation):
        # Starts on the existing reservation's check-out day.
        response = await client.post("/api/v1/reservations", json=_payload(test_room, 32, 2), headers=guest_headers)
        assert response.status_code == 409
        assert response.json()["kind"] == "conflict"

    async def test_past_dates(self, client: AsyncClient, guest_headers: dict, test_room: Room):
        response = await client.post("/api/v1/reservations", json=_payload(test_room, -3, 2), headers=guest_headers)
        assert response.status_code == 400

    async def test_unknown_room(self, client: AsyncClient, guest_headers: dict, test_room: Room):
        response = await client.post(
            "/api/v1/reservations", json=_payload(test_room, room_id=str(uuid.uuid4())), headers=guest_headers
        )
        assert response.status_code == 404

    async def test_anonymous_rejected(self, client: AsyncClient, test_room: Room):
        response = await client.post("/api/v1/reservations", json=_payload(test_room))
        assert response.status_code in (401, 403)


class TestWalkIn:
    async def test_walk_in_creates_guest(self, client: AsyncClient, receptionist_headers: dict, test_room: Room):
        payload = _payload(
            test_room,
            first_name="Walk",
            last_name="In",
            email="walk.in@example.com",
            phone="+15550001111",
        )
        response = await client.post("/api/v1/reservations/walk-in", json=payload, headers=receptionist_headers)
        assert response.status_code == 201
        guest_id = response.json()["reservation"]["guest_id"]

        response = await client.get(f"/api/v1/guests/{guest_id}", headers=receptionist_headers)
        assert response.json()["status"] == "INACTIVE"

    async def test_guest_cannot_use_walk_in(self, client: AsyncClient, guest_headers: dict, test_room: Room):
        payload = _payload(test_room, first_name="A", last_name="B", email="a.b@example.com", phone="+15550002222")
        response = await client.post("/api/v1/reservations/walk-in", json=payload, headers=guest_headers)
        assert response.status_code == 403


class TestReadReservations:
    async def test_list(self, client: AsyncClient, receptionist_headers: dict, reservation: dict):
        response = await client.get("/api/v1/reservations", headers=receptionist_headers)
        assert response.status_code == 200
        assert reservation["reservation"]["id"] in [r["id"] for r in response.json()["items"]]

    async def test_list_by_status(self, client: AsyncClient, receptionist_headers: dict, reservation: dict):
        response = await client.get(
            "/api/v1/reservations", params={"status": "CONFIRMED"}, headers=receptionist_headers
        )
        assert response.json()["total"] == 0

    async def test_detail_includes_guest_and_payments(
        self, client: AsyncClient, receptionist_headers: dict, reservation: dict, test_guest: Guest
    ):
        reservation_id = reservation["reservation"]["id"]
        response = await client.get(f"/api/v1/reservations/{reservation_id}", headers=receptionist_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["guest"]["email"] == test_guest.email
        assert [p["id"] for p in data["payments"]] == [reservation["payment"]["id"]]

    async def test_detail_not_found(self, client: AsyncClient, receptionist_headers: dict):
        response = await client.get(f"/api/v1/reservations/{uuid.uuid4()}", headers=receptionist_headers)
        assert response.status_code == 404

    async def test_guest_lists_own(
        self, client: AsyncClient, guest_headers: dict, reservation: dict, test_guest: Guest
    ):
        response = await client.get(f"/api/v1/reservations/guest/{test_guest.id}", headers=guest_headers)
        assert response.status_code == 200
        assert response.json()["total"] == 1

    async def test_guest_cannot_list_others(self, client: AsyncClient, guest_headers: dict):
        response = await client.get(f"/api/v1/reservations/guest/{uuid.uuid4()}", headers=guest_headers)
        assert response.status_code == 403


class TestStatusAndCancel:
    async def test_status_flow(self, client: AsyncClient, receptionist_headers: dict, reservation: dict):
        url = f"/api/v1/reservations/{reservation['reservation']['id']}/status"
        for status in ("CONFIRMED", "CHECKED_IN", "CHECKED_OUT"):
            response = await client.patch(url, json={"status": status}, headers=receptionist_headers)
            assert response.status_code == 200, response.text
            assert response.json()["status"] == status

    async def test_illegal_transition(self, client: AsyncClient, receptionist_headers: dict, reservation: dict):
        url = f"/api/v1/reservations/{reservation['reservation']['id']}/status"
        response = await client.patch(url, json={"status": "CHECKED_OUT"}, headers=receptionist_headers)
        assert response.status_code == 400

    async def test_unknown_status(self, client: AsyncClient, receptionist_headers: dict, reservation: dict):
        url = f"/api/v1/reservations/{reservation['reservation']['id']}/status"
        response = await client.patch(url, json={"status": "LOST"}, headers=receptionist_headers)
        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

    async def test_guest_cancels_own(self, client: AsyncClient, guest_headers: dict, reservation: dict):
        url = f"/api/v1/reservations/{reservation['reservation']['id']}/cancel"
        response = await client.post(url, headers=guest_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"

    async def test_cancelled_dates_bookable_again(
        self, client: AsyncClient, guest_headers: dict, test_room: Room, reservation: dict
    ):
        await client.post(f"/api/v1/reservations/{reservation['reservation']['id']}/cancel", headers=guest_headers)
        response = await client.post("/api/v1/reservations", json=_payload(test_room), headers=guest_headers)
        assert response.status_code == 201

    async def test_cancel_twice(self, client: AsyncClient, receptionist_headers: dict, reservation: dict):
        url = f"/api/v1/reservations/{reservation['reservation']['id']}/cancel"
        assert (await client.post(url, headers=receptionist_headers)).status_code == 200
        assert (await client.post(url, headers=receptionist_headers)).status_code == 400
