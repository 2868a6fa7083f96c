"""Tests for amenity and room-type endpoints."""

import uuid

from httpx import AsyncClient

from hotel_booking.models import Room, RoomType


async def _create_amenity(client: AsyncClient, headers: dict, name: str | None = None) -> dict:
    response = await client.post(
        "/api/v1/amenities",
        json={"name": name or f"wifi-{uuid.uuid4().hex[:6]}", "description": "Fast wifi"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestAmenities:
    async def test_crud(self, client: AsyncClient, room_manager_headers: dict):
        amenity = await _create_amenity(client, room_manager_headers, "minibar-test")
        assert amenity["name"] == "minibar-test"

        response = await client.get(f"/api/v1/amenities/{amenity['id']}", headers=room_manager_headers)
        assert response.status_code == 200

        response = await client.put(
            f"/api/v1/amenities/{amenity['id']}", json={"description": "Stocked daily"}, headers=room_manager_headers
        )
        assert response.status_code == 200
        assert response.json()["description"] == "Stocked daily"

        response = await client.delete(f"/api/v1/amenities/{amenity['id']}", headers=room_manager_headers)
        assert response.status_code == 200
        response = await client.get(f"/api/v1/amenities/{amenity['id']}", headers=room_manager_headers)
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    async def test_duplicate_name(self, client: AsyncClient, admin_headers: dict):
        await _create_amenity(client, admin_headers, "pool-test")
        response = await client.post("/api/v1/amenities", json={"name": "pool-test"}, headers=admin_headers)
        assert response.status_code == 409

    async def test_receptionist_can_read_not_write(self, client: AsyncClient, receptionist_headers: dict):
        response = await client.get("/api/v1/amenities", headers=receptionist_headers)
        assert response.status_code == 200
        response = await client.post("/api/v1/amenities", json={"name": "spa"}, headers=receptionist_headers)
        assert response.status_code == 403


class TestRoomTypes:
    async def test_create_with_amenities(self, client: AsyncClient, admin_headers: dict):
        amenity = await _create_amenity(client, admin_headers)
        response = await client.post(
            "/api/v1/room-types",
            json={"name": f"Suite-{uuid.uuid4().hex[:6]}", "description": "Sea view", "amenity_ids": [amenity["id"]]},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert [a["id"] for a in response.json()["amenities"]] == [amenity["id"]]

    async def test_unknown_amenity(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            "/api/v1/room-types",
            json={"name": "Broken", "amenity_ids": [str(uuid.uuid4())]},
            headers=admin_headers,
        )
        assert response.status_code == 404

    async def test_attach_and_detach_amenity(
        self, client: AsyncClient, admin_headers: dict, test_room_type: RoomType
    ):
        amenity = await _create_amenity(client, admin_headers)
        url = f"/api/v1/room-types/{test_room_type.id}/amenities/{amenity['id']}"

        response = await client.post(url, headers=admin_headers)
        assert response.status_code == 200
        assert amenity["id"] in [a["id"] for a in response.json()["amenities"]]

        response = await client.post(url, headers=admin_headers)
        assert response.status_code == 409

        response = await client.delete(url, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["amenities"] == []

    async def test_rename(self, client: AsyncClient, room_manager_headers: dict, test_room_type: RoomType):
        response = await client.put(
            f"/api/v1/room-types/{test_room_type.id}", json={"name": "Renamed Type"}, headers=room_manager_headers
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed Type"

    async def test_delete_in_use_conflicts(self, client: AsyncClient, admin_headers: dict, test_room: Room):
        response = await client.delete(f"/api/v1/room-types/{test_room.room_type_id}", headers=admin_headers)
        assert response.status_code == 409

    async def test_delete_unused(self, client: AsyncClient, admin_headers: dict, test_room_type: RoomType):
        response = await client.delete(f"/api/v1/room-types/{test_room_type.id}", headers=admin_headers)
        assert response.status_code == 200
