"""Payment status changes and their effect on the owning reservation."""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.errors import ConflictError, NotFoundError, ValidationError
from hotel_booking.models.payment import PAYMENT_STATUSES, Payment
from hotel_booking.models.reservation import Reservation
from hotel_booking.notifications.email import send_email
from hotel_booking.services.audit import log_operation
from hotel_booking.services.availability import find_conflicts, non_blocking_statuses
from hotel_booking.services.reservation_service import as_uuid, lock_room_row, room_lock

logger = logging.getLogger(__name__)

# PENDING has no entry: it leaves the reservation untouched.
RESERVATION_STATUS_FOR_PAYMENT = {
    "PAID": "CONFIRMED",
    "FAILED": "CANCELLED",
}

_NOTIFICATION_TEMPLATES = {
    "CONFIRMED": "reservation_confirmed",
    "CANCELLED": "reservation_cancelled",
}


@dataclass
class PaymentStatusUpdate:
    """Result of :func:`update_payment_status`.

    ``reservation_status`` is the status forced onto the reservation, or
    ``None`` when the reservation was left unchanged.
    """

    payment: Payment
    reservation_status: str | None


async def get_payment(db: AsyncSession, payment_id: uuid.UUID | str) -> Payment:
    """Return a payment or raise ``NotFoundError``."""
    payment = await db.get(Payment, as_uuid(payment_id, "payment id"))
    if payment is None:
        raise NotFoundError("Payment not found.")
    return payment


async def list_payments(
    db: AsyncSession,
    *,
    status: str | None = None,
    reservation_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Payment], int]:
    """Return a page of payments (newest first) and the total match count."""
    filters = []
    if status is not None:
        filters.append(Payment.status == status)
    if reservation_id is not None:
        filters.append(Payment.reservation_id == reservation_id)

    total_result = await db.execute(select(func.count()).select_from(Payment).where(*filters))
    result = await db.execute(
        select(Payment).where(*filters).order_by(Payment.transaction_date.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total_result.scalar_one()


def _reclaims_dates(current: str, forced: str) -> bool:
    """True when forcing ``forced`` puts a reservation's released days back on hold."""
    released = non_blocking_statuses()
    return current in released and forced not in released


async def update_payment_status(
    db: AsyncSession,
    payment_id: uuid.UUID | str,
    new_status: str,
    actor_id: uuid.UUID | None = None,
) -> PaymentStatusUpdate:
    """Set a payment's status and force the matching reservation status.

    ``PAID`` confirms the reservation and ``FAILED`` cancels it, regardless of
    where the reservation currently is in its lifecycle. Both rows change in
    the caller's transaction and are committed (or rolled back) together.

    Confirming a reservation whose days were released (e.g. cancelled after
    an earlier failed payment) re-checks the room under the same locks as a
    new booking, since another guest may hold those days by now.

    Raises:
        ValidationError: ``new_status`` is not PENDING, PAID or FAILED.
        NotFoundError: Unknown payment.
        ConflictError: The reservation's days have been booked by someone else.
    """
    if not new_status:
        raise ValidationError("Payment status is required to update the payment.")
    if new_status not in PAYMENT_STATUSES:
        raise ValidationError("Invalid payment status.")

    payment = await get_payment(db, payment_id)
    previous = payment.status
    reservation = await db.get(Reservation, payment.reservation_id)
    reservation_status = RESERVATION_STATUS_FOR_PAYMENT.get(new_status) if reservation is not None else None

    if reservation_status is not None and _reclaims_dates(reservation.status, reservation_status):
        async with room_lock(reservation.room_id):
            await lock_room_row(db, reservation.room_id)
            conflicts = await find_conflicts(
                db,
                reservation.room_id,
                reservation.check_in,
                reservation.check_out,
                exclude_reservation_id=reservation.id,
            )
            if conflicts:
                logger.warning(
                    "Payment %s marked %s but reservation %s cannot be revived: room rebooked by %s",
                    payment.id,
                    new_status,
                    reservation.id,
                    ", ".join(str(conflict.id) for conflict in conflicts),
                )
                raise ConflictError(
                    "Room has been reserved by another booking for these dates; the reservation cannot be confirmed."
                )
            _apply(db, payment, reservation, new_status, reservation_status, previous, actor_id)
            await db.flush()
            await db.commit()
    else:
        _apply(db, payment, reservation, new_status, reservation_status, previous, actor_id)
        await db.flush()

    await db.refresh(payment)
    if reservation is not None:
        await db.refresh(reservation)

    logger.info(
        "Payment %s status %s -> %s (reservation status: %s)",
        payment.id,
        previous,
        new_status,
        reservation_status or "unchanged",
    )

    if reservation_status is not None:
        await send_email(
            reservation.guest.email,
            _NOTIFICATION_TEMPLATES[reservation_status],
            guest_name=f"{reservation.guest.first_name} {reservation.guest.last_name}",
            room_number=reservation.room.room_number,
            check_in=reservation.check_in.isoformat(),
            check_out=reservation.check_out.isoformat(),
        )

    return PaymentStatusUpdate(payment=payment, reservation_status=reservation_status)


def _apply(
    db: AsyncSession,
    payment: Payment,
    reservation: Reservation | None,
    new_status: str,
    reservation_status: str | None,
    previous: str,
    actor_id: uuid.UUID | None,
) -> None:
    payment.status = new_status
    if reservation_status is not None:
        reservation.status = reservation_status
    log_operation(
        db,
        "UPDATE",
        f"Payment {payment.payment_ref} status {previous} -> {new_status}"
        + (f"; reservation {payment.reservation_id} -> {reservation_status}" if reservation_status else ""),
        actor_id,
    )
