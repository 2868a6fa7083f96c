"""Reservations API router.

Thin HTTP layer over :mod:`hotel_booking.services.reservation_service`; all
booking rules (pricing, overlap, lifecycle) live in the service.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.api.deps import GUEST_ROLE, STAFF, Principal, get_db, require_roles
from hotel_booking.models.reservation import Reservation
from hotel_booking.schemas.reservation import (
    ReservationCreate,
    ReservationCreatedResponse,
    ReservationDetailResponse,
    ReservationListResponse,
    ReservationResponse,
    ReservationStatusUpdate,
    WalkInReservationCreate,
)
from hotel_booking.services import reservation_service
from hotel_booking.services.audit import log_operation

router = APIRouter(prefix="/api/v1/reservations", tags=["reservations"])


@router.post(
    "",
    response_model=ReservationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reserve a room",
)
async def create_reservation(
    body: ReservationCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(GUEST_ROLE, "RECEPTIONIST")),
) -> dict:
    """Reserve a room together with its initiating payment.

    Guests book for themselves (``guest_id`` may be omitted); receptionists
    must name the guest.
    """
    guest_id = body.guest_id
    if principal.is_guest:
        if guest_id is not None and guest_id != principal.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Guests can only reserve rooms for themselves",
            )
        guest_id = principal.id

    reservation, payment = await reservation_service.create_reservation(
        db,
        room_id=body.room_id,
        guest_id=guest_id,
        check_in=body.check_in,
        check_out=body.check_out,
        claimed_amount=body.amount,
        payment_ref=body.payment_ref,
        payment_status=body.payment_status,
        actor_id=principal.id,
    )
    return {
        "message": "Room reserved successfully with payment!",
        "reservation": reservation,
        "payment": payment,
    }


@router.post(
    "/walk-in",
    response_model=ReservationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Front-desk booking, creating the guest if needed",
)
async def create_walk_in_reservation(
    body: WalkInReservationCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("RECEPTIONIST")),
) -> dict:
    reservation, payment = await reservation_service.create_walk_in_reservation(
        db,
        room_id=body.room_id,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        phone=body.phone,
        check_in=body.check_in,
        check_out=body.check_out,
        claimed_amount=body.amount,
        payment_ref=body.payment_ref,
        payment_status=body.payment_status,
        actor_id=principal.id,
    )
    return {
        "message": "Room reserved successfully with payment!",
        "reservation": reservation,
        "payment": payment,
    }


@router.get("", response_model=ReservationListResponse, summary="List reservations")
async def list_reservations(
    status_filter: str | None = Query(None, alias="status", description="Filter by reservation status"),
    room_id: uuid.UUID | None = Query(None, description="Filter by room"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> dict:
    items, total = await reservation_service.list_reservations(
        db, status=status_filter, room_id=room_id, skip=skip, limit=limit
    )
    log_operation(db, "READ", "Fetched all reservations", principal.id)
    return {"items": items, "total": total}


@router.get(
    "/guest/{guest_id}",
    response_model=ReservationListResponse,
    summary="List a guest's reservations",
)
async def list_guest_reservations(
    guest_id: uuid.UUID,
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF, GUEST_ROLE)),
) -> dict:
    """Staff may list anyone's reservations; guests only their own."""
    if principal.is_guest and principal.id != guest_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access Forbidden: Insufficient Role",
        )
    items, total = await reservation_service.list_reservations(db, guest_id=guest_id, skip=skip, limit=limit)
    return {"items": items, "total": total}


@router.get("/{reservation_id}", response_model=ReservationDetailResponse, summary="Get a reservation")
async def get_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> Reservation:
    return await reservation_service.get_reservation(db, reservation_id)


@router.patch("/{reservation_id}/status", response_model=ReservationResponse, summary="Change reservation status")
async def update_reservation_status(
    reservation_id: uuid.UUID,
    body: ReservationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("ADMIN", "RECEPTIONIST")),
) -> Reservation:
    """Apply a lifecycle transition (e.g. CONFIRMED -> CHECKED_IN)."""
    return await reservation_service.update_reservation_status(db, reservation_id, body.status, principal.id)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse, summary="Cancel a reservation")
async def cancel_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(GUEST_ROLE, "RECEPTIONIST", "ADMIN")),
) -> Reservation:
    """Cancel a PENDING or CONFIRMED reservation. Guests may cancel only their own."""
    return await reservation_service.cancel_reservation(
        db,
        reservation_id,
        actor_id=principal.id,
        guest_id=principal.id if principal.is_guest else None,
    )
