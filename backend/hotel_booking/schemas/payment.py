"""Pydantic v2 request/response schemas for payment endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class PaymentStatusRequest(BaseModel):
    """Schema for changing a payment's status.

    Validated by the payment service so that bad values come back as a
    ``validation_error`` rather than a schema error.
    """

    status: str


class PaymentResponse(BaseModel):
    """Payment returned by the API."""

    id: uuid.UUID
    reservation_id: uuid.UUID
    payment_ref: str
    amount: Decimal
    status: str
    transaction_date: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentListResponse(BaseModel):
    """Paginated list of payments."""

    items: list[PaymentResponse]
    total: int


class PaymentStatusResponse(BaseModel):
    """Payment after a status change plus the reservation status it forced."""

    payment: PaymentResponse
    reservation_status: str | None = None
