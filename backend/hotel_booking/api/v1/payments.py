"""Payments API router."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.api.deps import STAFF, Principal, get_db, require_roles
from hotel_booking.models.payment import Payment
from hotel_booking.schemas.payment import (
    PaymentListResponse,
    PaymentResponse,
    PaymentStatusRequest,
    PaymentStatusResponse,
)
from hotel_booking.services import payment_service

router = APIRouter(prefix="/api/v1/payments", tags=["payments"])


@router.get("", response_model=PaymentListResponse, summary="List payments")
async def list_payments(
    status_filter: str | None = Query(None, alias="status", description="Filter by payment status"),
    reservation_id: uuid.UUID | None = Query(None, description="Filter by reservation"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> dict:
    items, total = await payment_service.list_payments(
        db, status=status_filter, reservation_id=reservation_id, skip=skip, limit=limit
    )
    return {"items": items, "total": total}


@router.get("/{payment_id}", response_model=PaymentResponse, summary="Get a payment")
async def get_payment(
    payment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> Payment:
    return await payment_service.get_payment(db, payment_id)


@router.put("/{payment_id}", response_model=PaymentStatusResponse, summary="Change payment status")
async def update_payment_status(
    payment_id: uuid.UUID,
    body: PaymentStatusRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("RECEPTIONIST")),
) -> dict:
    """Set PENDING/PAID/FAILED; PAID confirms and FAILED cancels the reservation."""
    update = await payment_service.update_payment_status(db, payment_id, body.status, principal.id)
    return {"payment": update.payment, "reservation_status": update.reservation_status}
