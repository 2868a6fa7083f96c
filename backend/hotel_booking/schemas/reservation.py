"""Pydantic v2 request/response schemas for reservation endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hotel_booking.schemas.guest import GuestResponse
from hotel_booking.schemas.payment import PaymentResponse

ReservationStatus = Literal["PENDING", "CONFIRMED", "CHECKED_IN", "CHECKED_OUT", "CANCELLED"]
PaymentStatus = Literal["PENDING", "PAID", "FAILED"]

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ReservationCreate(BaseModel):
    """Schema for booking a room.

    ``guest_id`` may be omitted when a guest books for themselves. ``amount``
    must equal the server-side price exactly.
    """

    room_id: uuid.UUID
    guest_id: uuid.UUID | None = None
    check_in: date
    check_out: date
    amount: Decimal = Field(..., ge=0)
    payment_ref: str = Field(..., min_length=1, max_length=255)
    payment_status: PaymentStatus = "PENDING"


class WalkInReservationCreate(BaseModel):
    """Schema for a front-desk booking that may create the guest."""

    room_id: uuid.UUID
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=3, max_length=50)
    check_in: date
    check_out: date
    amount: Decimal = Field(..., ge=0)
    payment_ref: str = Field(..., min_length=1, max_length=255)
    payment_status: PaymentStatus = "PENDING"


class ReservationStatusUpdate(BaseModel):
    """Schema for moving a reservation along its lifecycle.

    Kept as a plain string so unknown statuses reach the lifecycle check and
    are reported as ``validation_error`` like every other illegal change.
    """

    status: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ReservationResponse(BaseModel):
    """Standard reservation response."""

    id: uuid.UUID
    room_id: uuid.UUID
    guest_id: uuid.UUID
    check_in: date
    check_out: date
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReservationDetailResponse(ReservationResponse):
    """Reservation with its guest and payments."""

    guest: GuestResponse | None = None
    payments: list[PaymentResponse] = []


class ReservationCreatedResponse(BaseModel):
    """Returned after a successful booking."""

    message: str
    reservation: ReservationResponse
    payment: PaymentResponse


class ReservationListResponse(BaseModel):
    """Paginated list of reservations."""

    items: list[ReservationResponse]
    total: int
