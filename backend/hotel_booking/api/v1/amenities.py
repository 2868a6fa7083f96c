"""Amenities CRUD API router."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.api.deps import STAFF, Principal, get_db, require_roles
from hotel_booking.errors import ConflictError, NotFoundError
from hotel_booking.models.room import Amenity
from hotel_booking.schemas.auth import MessageResponse
from hotel_booking.schemas.room import AmenityCreate, AmenityResponse, AmenityUpdate
from hotel_booking.services.audit import log_operation

router = APIRouter(prefix="/api/v1/amenities", tags=["amenities"])

_CATALOG_ADMINS = ("ADMIN", "ROOM_MANAGER")


async def _get_amenity(db: AsyncSession, amenity_id: uuid.UUID) -> Amenity:
    amenity = await db.get(Amenity, amenity_id)
    if amenity is None:
        raise NotFoundError("Amenity not found")
    return amenity


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: uuid.UUID | None = None) -> None:
    query = select(Amenity).where(Amenity.name == name)
    if exclude_id is not None:
        query = query.where(Amenity.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none() is not None:
        raise ConflictError("Amenity name must be unique")


@router.post("", response_model=AmenityResponse, status_code=status.HTTP_201_CREATED, summary="Create an amenity")
async def create_amenity(
    body: AmenityCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_CATALOG_ADMINS)),
) -> Amenity:
    await _ensure_name_free(db, body.name)
    amenity = Amenity(**body.model_dump())
    db.add(amenity)
    log_operation(db, "CREATE", f"Created Amenity: {body.name}, Description: {body.description}", principal.id)
    await db.flush()
    await db.refresh(amenity)
    return amenity


@router.get("", response_model=list[AmenityResponse], summary="List amenities")
async def list_amenities(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> list[Amenity]:
    result = await db.execute(select(Amenity).order_by(Amenity.name))
    return list(result.scalars().all())


@router.get("/{amenity_id}", response_model=AmenityResponse, summary="Get an amenity")
async def get_amenity(
    amenity_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> Amenity:
    return await _get_amenity(db, amenity_id)


@router.put("/{amenity_id}", response_model=AmenityResponse, summary="Update an amenity")
async def update_amenity(
    amenity_id: uuid.UUID,
    body: AmenityUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_CATALOG_ADMINS)),
) -> Amenity:
    amenity = await _get_amenity(db, amenity_id)
    update_data = body.model_dump(exclude_unset=True)
    if "name" in update_data:
        await _ensure_name_free(db, update_data["name"], exclude_id=amenity.id)

    for field, value in update_data.items():
        setattr(amenity, field, value)

    log_operation(db, "UPDATE", f"Updated Amenity {amenity.id}: {update_data}", principal.id)
    await db.flush()
    await db.refresh(amenity)
    return amenity


@router.delete("/{amenity_id}", response_model=MessageResponse, summary="Delete an amenity")
async def delete_amenity(
    amenity_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_CATALOG_ADMINS)),
) -> dict:
    amenity = await _get_amenity(db, amenity_id)
    await db.delete(amenity)
    log_operation(db, "DELETE", f"Deleted Amenity {amenity.name}", principal.id)
    await db.flush()
    return {"message": "Amenity deleted"}
