"""Room types API router, including the room type ↔ amenity links."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.api.deps import STAFF, Principal, get_db, require_roles
from hotel_booking.errors import ConflictError, NotFoundError
from hotel_booking.models.room import Amenity, Room, RoomType
from hotel_booking.schemas.auth import MessageResponse
from hotel_booking.schemas.room import RoomTypeCreate, RoomTypeResponse, RoomTypeUpdate
from hotel_booking.services.audit import log_operation

router = APIRouter(prefix="/api/v1/room-types", tags=["room-types"])

_CATALOG_ADMINS = ("ADMIN", "ROOM_MANAGER")


async def _get_room_type(db: AsyncSession, room_type_id: uuid.UUID) -> RoomType:
    room_type = await db.get(RoomType, room_type_id)
    if room_type is None:
        raise NotFoundError("Room type not found")
    return room_type


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: uuid.UUID | None = None) -> None:
    query = select(RoomType).where(RoomType.name == name)
    if exclude_id is not None:
        query = query.where(RoomType.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none() is not None:
        raise ConflictError("Room type name must be unique")


async def _load_amenities(db: AsyncSession, amenity_ids: list[uuid.UUID]) -> list[Amenity]:
    if not amenity_ids:
        return []
    result = await db.execute(select(Amenity).where(Amenity.id.in_(amenity_ids)))
    amenities = list(result.scalars().all())
    missing = set(amenity_ids) - {a.id for a in amenities}
    if missing:
        raise NotFoundError(f"Amenity not found: {', '.join(sorted(str(m) for m in missing))}")
    return amenities


@router.post(
    "", response_model=RoomTypeResponse, status_code=status.HTTP_201_CREATED, summary="Create a room type"
)
async def create_room_type(
    body: RoomTypeCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_CATALOG_ADMINS)),
) -> RoomType:
    await _ensure_name_free(db, body.name)
    room_type = RoomType(
        name=body.name,
        description=body.description,
        amenities=await _load_amenities(db, body.amenity_ids),
    )
    db.add(room_type)
    log_operation(db, "CREATE", f"Created Room Type: {body.name}, Description: {body.description}", principal.id)
    await db.flush()
    await db.refresh(room_type)
    return room_type


@router.get("", response_model=list[RoomTypeResponse], summary="List room types")
async def list_room_types(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> list[RoomType]:
    result = await db.execute(select(RoomType).order_by(RoomType.name))
    log_operation(db, "READ", "Fetched all room types", principal.id)
    return list(result.scalars().all())


@router.get("/{room_type_id}", response_model=RoomTypeResponse, summary="Get a room type")
async def get_room_type(
    room_type_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> RoomType:
    return await _get_room_type(db, room_type_id)


@router.put("/{room_type_id}", response_model=RoomTypeResponse, summary="Update a room type")
async def update_room_type(
    room_type_id: uuid.UUID,
    body: RoomTypeUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_CATALOG_ADMINS)),
) -> RoomType:
    room_type = await _get_room_type(db, room_type_id)
    update_data = body.model_dump(exclude_unset=True)
    if "name" in update_data:
        await _ensure_name_free(db, update_data["name"], exclude_id=room_type.id)

    old = {"name": room_type.name, "description": room_type.description}
    for field, value in update_data.items():
        setattr(room_type, field, value)

    log_operation(
        db,
        "UPDATE",
        f"Updated Room Type - ID: {room_type.id}. Changes: old={old} new={update_data}",
        principal.id,
    )
    await db.flush()
    await db.refresh(room_type)
    return room_type


@router.delete("/{room_type_id}", response_model=MessageResponse, summary="Delete a room type")
async def delete_room_type(
    room_type_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_CATALOG_ADMINS)),
) -> dict:
    """Delete a room type that no room uses."""
    room_type = await _get_room_type(db, room_type_id)
    in_use = (
        await db.execute(select(func.count()).select_from(Room).where(Room.room_type_id == room_type.id))
    ).scalar_one()
    if in_use:
        raise ConflictError("Room type is still assigned to rooms")

    await db.delete(room_type)
    log_operation(db, "DELETE", f"Deleted Room Type - ID: {room_type.id}, Name: {room_type.name}", principal.id)
    await db.flush()
    return {"message": "Room type deleted"}


@router.post(
    "/{room_type_id}/amenities/{amenity_id}",
    response_model=RoomTypeResponse,
    summary="Attach an amenity to a room type",
)
async def add_amenity(
    room_type_id: uuid.UUID,
    amenity_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_CATALOG_ADMINS)),
) -> RoomType:
    room_type = await _get_room_type(db, room_type_id)
    (amenity,) = await _load_amenities(db, [amenity_id])
    if amenity in room_type.amenities:
        raise ConflictError("Amenity already assigned to this room type")

    room_type.amenities.append(amenity)
    log_operation(db, "CREATE", f"Added amenity {amenity.name} to room type {room_type.name}", principal.id)
    await db.flush()
    await db.refresh(room_type)
    return room_type


@router.delete(
    "/{room_type_id}/amenities/{amenity_id}",
    response_model=RoomTypeResponse,
    summary="Detach an amenity from a room type",
)
async def remove_amenity(
    room_type_id: uuid.UUID,
    amenity_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_CATALOG_ADMINS)),
) -> RoomType:
    room_type = await _get_room_type(db, room_type_id)
    amenity = next((a for a in room_type.amenities if a.id == amenity_id), None)
    if amenity is None:
        raise NotFoundError("Amenity is not assigned to this room type")

    room_type.amenities.remove(amenity)
    log_operation(db, "DELETE", f"Removed amenity {amenity.name} from room type {room_type.name}", principal.id)
    await db.flush()
    await db.refresh(room_type)
    return room_type
