"""Rooms API router.

Room management is restricted to admins and room managers; the availability
listing is public so the booking front-end can render a calendar.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.api.deps import Principal, get_db, require_roles
from hotel_booking.errors import ConflictError, NotFoundError
from hotel_booking.models.reservation import Reservation
from hotel_booking.models.room import Room, RoomImage, RoomType
from hotel_booking.schemas.auth import MessageResponse
from hotel_booking.schemas.room import (
    AvailableRoomsResponse,
    RoomCreate,
    RoomListResponse,
    RoomResponse,
    RoomUpdate,
)
from hotel_booking.services.audit import log_operation
from hotel_booking.services.availability import reserved_dates
from hotel_booking.storage.images import ImageStorage, get_image_storage

router = APIRouter(prefix="/api/v1/rooms", tags=["rooms"])

_ROOM_ADMINS = ("ADMIN", "ROOM_MANAGER")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _get_room(db: AsyncSession, room_id: uuid.UUID) -> Room:
    room = await db.get(Room, room_id)
    if room is None:
        raise NotFoundError("Room not found")
    return room


async def _ensure_room_type(db: AsyncSession, room_type_id: uuid.UUID) -> None:
    if await db.get(RoomType, room_type_id) is None:
        raise NotFoundError("Room type not found")


async def _ensure_number_free(db: AsyncSession, room_number: str, exclude_id: uuid.UUID | None = None) -> None:
    query = select(Room).where(Room.room_number == room_number)
    if exclude_id is not None:
        query = query.where(Room.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none() is not None:
        raise ConflictError("Room number already exists")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/available", response_model=AvailableRoomsResponse, summary="List bookable rooms")
async def list_available_rooms(db: AsyncSession = Depends(get_db)) -> dict:
    """Return every AVAILABLE room with the upcoming days it is already reserved."""
    result = await db.execute(select(Room).where(Room.status == "AVAILABLE").order_by(Room.room_number))
    rooms = []
    for room in result.scalars().all():
        rooms.append(
            {
                "id": room.id,
                "room_number": room.room_number,
                "price": room.price,
                "room_type": room.room_type.name,
                "amenities": [amenity.name for amenity in room.room_type.amenities],
                "reserved_dates": await reserved_dates(db, room.id),
            }
        )
    return {"available_rooms": rooms}


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED, summary="Create a room")
async def create_room(
    body: RoomCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_ROOM_ADMINS)),
) -> Room:
    await _ensure_room_type(db, body.room_type_id)
    await _ensure_number_free(db, body.room_number)

    room = Room(**body.model_dump(), created_by=principal.id)
    db.add(room)
    log_operation(db, "CREATE", f"Created Room: {body.room_number}", principal.id)
    await db.flush()
    await db.refresh(room)
    return room


@router.get("", response_model=RoomListResponse, summary="List rooms")
async def list_rooms(
    status_filter: str | None = Query(None, alias="status", description="Filter by room status"),
    room_type_id: uuid.UUID | None = Query(None, description="Filter by room type"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_ROOM_ADMINS)),
) -> dict:
    filters = []
    if status_filter is not None:
        filters.append(Room.status == status_filter)
    if room_type_id is not None:
        filters.append(Room.room_type_id == room_type_id)

    total = (await db.execute(select(func.count()).select_from(Room).where(*filters))).scalar_one()
    result = await db.execute(select(Room).where(*filters).order_by(Room.room_number).offset(skip).limit(limit))
    log_operation(db, "READ", "Fetched all rooms", principal.id)
    return {"items": list(result.scalars().all()), "total": total}


@router.get("/{room_id}", response_model=RoomResponse, summary="Get a room")
async def get_room(
    room_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_ROOM_ADMINS)),
) -> Room:
    room = await _get_room(db, room_id)
    log_operation(db, "READ", f"Fetched Room by ID: {room_id}", principal.id)
    return room


@router.put("/{room_id}", response_model=RoomResponse, summary="Update a room")
async def update_room(
    room_id: uuid.UUID,
    body: RoomUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_ROOM_ADMINS)),
) -> Room:
    """Partially update a room's number, type, price or status."""
    room = await _get_room(db, room_id)
    update_data = body.model_dump(exclude_unset=True)

    if "room_number" in update_data:
        await _ensure_number_free(db, update_data["room_number"], exclude_id=room.id)
    if "room_type_id" in update_data:
        await _ensure_room_type(db, update_data["room_type_id"])

    for field, value in update_data.items():
        setattr(room, field, value)

    log_operation(db, "UPDATE", f"Updated Room ID: {room_id}: {update_data}", principal.id)
    await db.flush()
    await db.refresh(room)
    return room


@router.delete("/{room_id}", response_model=MessageResponse, summary="Delete a room")
async def delete_room(
    room_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_ROOM_ADMINS)),
    storage: ImageStorage = Depends(get_image_storage),
) -> dict:
    """Delete a room (and its images) that has never been reserved; otherwise mark it UNAVAILABLE instead."""
    room = await _get_room(db, room_id)
    has_history = (
        await db.execute(select(func.count()).select_from(Reservation).where(Reservation.room_id == room.id))
    ).scalar_one()
    if has_history:
        raise ConflictError("Room has reservations; set its status to UNAVAILABLE instead")

    image_names = list(
        (await db.execute(select(RoomImage.image_url).where(RoomImage.room_id == room.id))).scalars().all()
    )
    await db.execute(delete(RoomImage).where(RoomImage.room_id == room.id))
    await db.delete(room)
    log_operation(db, "DELETE", f"Deleted Room ID: {room_id}, Number: {room.room_number}", principal.id)
    await db.flush()
    for name in image_names:
        storage.delete(name)
    return {"message": "Room deleted successfully"}
