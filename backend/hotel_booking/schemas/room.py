"""Pydantic v2 request/response schemas for the room catalog."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RoomStatus = Literal["AVAILABLE", "UNAVAILABLE", "MAINTENANCE"]

# ---------------------------------------------------------------------------
# Amenities
# ---------------------------------------------------------------------------


class AmenityCreate(BaseModel):
    """Schema for creating an amenity."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class AmenityUpdate(BaseModel):
    """Schema for partially updating an amenity."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class AmenityResponse(BaseModel):
    """Amenity returned by the API."""

    id: uuid.UUID
    name: str
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Room types
# ---------------------------------------------------------------------------


class RoomTypeCreate(BaseModel):
    """Schema for creating a room type."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    amenity_ids: list[uuid.UUID] = Field(default_factory=list)


class RoomTypeUpdate(BaseModel):
    """Schema for partially updating a room type."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class RoomTypeResponse(BaseModel):
    """Room type with its amenities."""

    id: uuid.UUID
    name: str
    description: str | None = None
    amenities: list[AmenityResponse] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


class RoomCreate(BaseModel):
    """Schema for creating a room."""

    room_number: str = Field(..., min_length=1, max_length=20)
    room_type_id: uuid.UUID
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    status: RoomStatus = "AVAILABLE"


class RoomUpdate(BaseModel):
    """Schema for partially updating a room. All fields optional."""

    room_number: str | None = Field(None, min_length=1, max_length=20)
    room_type_id: uuid.UUID | None = None
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    status: RoomStatus | None = None


class RoomResponse(BaseModel):
    """Room with nested room type."""

    id: uuid.UUID
    room_number: str
    price: Decimal
    status: str
    room_type: RoomTypeResponse
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomListResponse(BaseModel):
    """Paginated list of rooms."""

    items: list[RoomResponse]
    total: int


class AvailableRoomResponse(BaseModel):
    """Bookable room plus the upcoming days it is already held."""

    id: uuid.UUID
    room_number: str
    price: Decimal
    room_type: str
    amenities: list[str]
    reserved_dates: list[str]


class AvailableRoomsResponse(BaseModel):
    """Public availability listing."""

    available_rooms: list[AvailableRoomResponse]


# ---------------------------------------------------------------------------
# Room images
# ---------------------------------------------------------------------------


class RoomImageResponse(BaseModel):
    """Stored room image; the file is served from ``/uploads/<image_url>``."""

    id: uuid.UUID
    room_id: uuid.UUID
    image_url: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomImageListResponse(BaseModel):
    items: list[RoomImageResponse]
    total: int
