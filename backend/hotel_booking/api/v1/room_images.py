"""Room images API router.

Uploads are multipart requests handled by admins and room managers. Files
are written through :class:`ImageStorage` before the rows are flushed and
removed again if anything in the request fails.
"""

import uuid

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.api.deps import Principal, get_db, require_roles
from hotel_booking.config import settings
from hotel_booking.errors import NotFoundError, ValidationError
from hotel_booking.models.room import Room, RoomImage
from hotel_booking.schemas.auth import MessageResponse
from hotel_booking.schemas.room import RoomImageListResponse, RoomImageResponse
from hotel_booking.services.audit import log_operation
from hotel_booking.storage.images import ImageStorage, get_image_storage

router = APIRouter(prefix="/api/v1/room-images", tags=["room-images"])

_IMAGE_ADMINS = ("ADMIN", "ROOM_MANAGER")


async def _get_image(db: AsyncSession, image_id: uuid.UUID) -> RoomImage:
    image = await db.get(RoomImage, image_id)
    if image is None:
        raise NotFoundError("Room image not found")
    return image


@router.post(
    "",
    response_model=RoomImageListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload images for a room",
)
async def upload_room_images(
    room_id: uuid.UUID = Form(...),
    images: list[UploadFile] = File(..., description="JPEG, PNG or GIF files"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_IMAGE_ADMINS)),
    storage: ImageStorage = Depends(get_image_storage),
) -> dict:
    if len(images) > settings.max_images_per_upload:
        raise ValidationError(f"At most {settings.max_images_per_upload} images can be uploaded at once")
    if await db.get(Room, room_id) is None:
        raise NotFoundError("Room not found")

    saved: list[str] = []
    try:
        for upload in images:
            saved.append(await storage.save(upload))
        room_images = [RoomImage(room_id=room_id, image_url=name) for name in saved]
        db.add_all(room_images)
        log_operation(db, "CREATE", f"Added {len(saved)} image(s) for Room ID: {room_id}", principal.id)
        await db.flush()
    except Exception:
        for name in saved:
            storage.delete(name)
        raise

    for image in room_images:
        await db.refresh(image)
    return {"items": room_images, "total": len(room_images)}


@router.get("", response_model=RoomImageListResponse, summary="List room images")
async def list_room_images(
    room_id: uuid.UUID | None = Query(None, description="Only images of this room"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(50, ge=1, le=200, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_IMAGE_ADMINS)),
) -> dict:
    filters = [RoomImage.room_id == room_id] if room_id is not None else []
    total = (await db.execute(select(func.count()).select_from(RoomImage).where(*filters))).scalar_one()
    result = await db.execute(
        select(RoomImage).where(*filters).order_by(RoomImage.created_at).offset(skip).limit(limit)
    )
    log_operation(db, "READ", "Fetched all room images", principal.id)
    return {"items": list(result.scalars().all()), "total": total}


@router.get("/{image_id}", response_model=RoomImageResponse, summary="Get a room image")
async def get_room_image(
    image_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_IMAGE_ADMINS)),
) -> RoomImage:
    image = await _get_image(db, image_id)
    log_operation(db, "READ", f"Fetched Room Image ID: {image_id}", principal.id)
    return image


@router.patch("/{image_id}", response_model=RoomImageResponse, summary="Replace a room image file")
async def replace_room_image(
    image_id: uuid.UUID,
    image: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_IMAGE_ADMINS)),
    storage: ImageStorage = Depends(get_image_storage),
) -> RoomImage:
    room_image = await _get_image(db, image_id)
    old_name = room_image.image_url

    new_name = await storage.save(image)
    try:
        room_image.image_url = new_name
        log_operation(db, "UPDATE", f"Updated Image ID: {image_id} with new file: {new_name}", principal.id)
        await db.flush()
    except Exception:
        storage.delete(new_name)
        raise

    storage.delete(old_name)
    await db.refresh(room_image)
    return room_image


@router.delete("/{image_id}", response_model=MessageResponse, summary="Delete a room image")
async def delete_room_image(
    image_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*_IMAGE_ADMINS)),
    storage: ImageStorage = Depends(get_image_storage),
) -> dict:
    room_image = await _get_image(db, image_id)
    name = room_image.image_url
    await db.delete(room_image)
    log_operation(db, "DELETE", f"Deleted Room Image ID: {image_id}", principal.id)
    await db.flush()
    storage.delete(name)
    return {"message": "Room image deleted successfully"}
