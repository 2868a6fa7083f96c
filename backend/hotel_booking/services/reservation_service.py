"""Reservation lifecycle: booking, status transitions and cancellation.

Booking creation is the one place where ordering matters: the availability
check and the insert for a room must not interleave with another booking
for the same room. Both creation paths therefore funnel into ``_book``,
which holds a per-room lock (row lock in the database plus an in-process
``asyncio.Lock``) across the check, the inserts and the commit.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
import weakref
from datetime import date
from decimal import Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.errors import ConflictError, NotFoundError, ValidationError
from hotel_booking.models.guest import Guest
from hotel_booking.models.payment import PAYMENT_STATUSES, Payment
from hotel_booking.models.reservation import RESERVATION_STATUSES, Reservation
from hotel_booking.models.room import Room
from hotel_booking.services.audit import log_operation
from hotel_booking.services.availability import find_conflicts
from hotel_booking.services.dates import DateLike, to_date
from hotel_booking.services.pricing import compute_price, verify_claimed_amount

logger = logging.getLogger(__name__)

# CHECKED_OUT and CANCELLED are terminal.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "PENDING": frozenset({"CONFIRMED", "CANCELLED"}),
    "CONFIRMED": frozenset({"CHECKED_IN", "CANCELLED"}),
    "CHECKED_IN": frozenset({"CHECKED_OUT"}),
    "CHECKED_OUT": frozenset(),
    "CANCELLED": frozenset(),
}

_room_locks: weakref.WeakValueDictionary[uuid.UUID, asyncio.Lock] = weakref.WeakValueDictionary()


def room_lock(room_id: uuid.UUID) -> asyncio.Lock:
    """In-process lock serializing writes that claim days on one room."""
    lock = _room_locks.get(room_id)
    if lock is None:
        lock = asyncio.Lock()
        _room_locks[room_id] = lock
    return lock


async def lock_room_row(db: AsyncSession, room_id: uuid.UUID) -> None:
    """Take the room row lock for the rest of the transaction (no-op on SQLite)."""
    await db.execute(select(Room.id).where(Room.id == room_id).with_for_update())


def as_uuid(value: uuid.UUID | str, label: str) -> uuid.UUID:
    """Parse an identifier, reporting malformed ones as validation errors."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {label}: {value!r}") from None


def validate_transition(current: str, new: str) -> None:
    """Raise ``ValidationError`` unless ``current -> new`` is an allowed edge."""
    if new not in RESERVATION_STATUSES:
        raise ValidationError("Invalid status provided.")
    if new not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise ValidationError(f"Cannot change reservation status from {current} to {new}.")


def _validate_stay(check_in: DateLike, check_out: DateLike) -> tuple[date, date]:
    start, end = to_date(check_in), to_date(check_out)
    if start < date.today():
        raise ValidationError("Check-in date cannot be in the past.")
    if start > end:
        raise ValidationError("Check-in date must be before check-out date.")
    return start, end


def _require(**fields: object) -> None:
    missing = [name for name, value in fields.items() if value is None or value == ""]
    if missing:
        raise ValidationError(f"All fields are required. Missing: {', '.join(missing)}")


async def _bookable_room(db: AsyncSession, room_id: uuid.UUID | str) -> Room:
    room = await db.get(Room, as_uuid(room_id, "room id"))
    if room is None:
        raise NotFoundError("Room not found.")
    if room.status != "AVAILABLE":
        raise ConflictError("Room is not available for booking.")
    return room


def integrity_conflict_message(exc: IntegrityError) -> str:
    """Describe which unique constraint a failed booking insert ran into."""
    detail = str(exc.orig)
    if "payment_ref" in detail:
        return "Payment reference has already been used."
    if "email" in detail or "phone" in detail:
        return "A guest with this e-mail or phone number already exists."
    return "Booking conflicts with existing data."


async def _ensure_payment_ref_unused(db: AsyncSession, payment_ref: str) -> None:
    result = await db.execute(select(Payment.id).where(Payment.payment_ref == payment_ref))
    if result.scalar_one_or_none() is not None:
        raise ConflictError("Payment reference has already been used.")


async def _book(
    db: AsyncSession,
    room: Room,
    guest: Guest,
    check_in: date,
    check_out: date,
    amount: Decimal,
    payment_ref: str,
    payment_status: str,
    actor_id: uuid.UUID | None,
) -> tuple[Reservation, Payment]:
    """Check availability and insert reservation + payment as one unit."""
    async with room_lock(room.id):
        await lock_room_row(db, room.id)

        if await find_conflicts(db, room.id, check_in, check_out):
            logger.warning(
                "Rejected booking of room %s for %s..%s: dates already reserved",
                room.room_number,
                check_in,
                check_out,
            )
            raise ConflictError("Room is already reserved for the selected dates.")

        if guest not in db:
            db.add(guest)

        reservation = Reservation(
            room_id=room.id,
            guest_id=guest.id,
            check_in=check_in,
            check_out=check_out,
            status="PENDING",
        )
        db.add(reservation)
        try:
            await db.flush()
            payment = Payment(
                reservation_id=reservation.id,
                payment_ref=payment_ref,
                amount=amount,
                status=payment_status,
            )
            db.add(payment)
            log_operation(
                db,
                "CREATE",
                f"Reserved room {room.room_number} from {check_in} to {check_out} "
                f"for guest {guest.id} (payment {payment_ref}, {payment_status})",
                actor_id or guest.id,
            )
            await db.flush()
        except IntegrityError as exc:
            # A walk-in guest or the payment reference was inserted concurrently.
            raise ConflictError(integrity_conflict_message(exc)) from None

        await db.commit()

    await db.refresh(reservation)
    await db.refresh(payment)
    logger.info(
        "Reservation %s created for room %s (%s..%s, amount %s)",
        reservation.id,
        room.room_number,
        check_in,
        check_out,
        amount,
    )
    return reservation, payment


async def create_reservation(
    db: AsyncSession,
    *,
    room_id: uuid.UUID | str | None,
    guest_id: uuid.UUID | str | None,
    check_in: DateLike | None,
    check_out: DateLike | None,
    claimed_amount: Decimal | int | str | None,
    payment_ref: str | None,
    payment_status: str | None = "PENDING",
    actor_id: uuid.UUID | None = None,
) -> tuple[Reservation, Payment]:
    """Book a room for an existing guest together with its initiating payment.

    Returns:
        The created ``(reservation, payment)`` pair, already committed.

    Raises:
        ValidationError: Missing fields, past or inverted dates, zero-night
            stays, unknown payment status, or a claimed amount that differs
            from the computed price.
        NotFoundError: Unknown room or guest.
        ConflictError: Room not bookable, dates overlap an existing
            reservation, or the payment reference is already used.
    """
    _require(
        room_id=room_id,
        guest_id=guest_id,
        check_in=check_in,
        check_out=check_out,
        amount=claimed_amount,
        payment_ref=payment_ref,
        payment_status=payment_status,
    )
    start, end = _validate_stay(check_in, check_out)  # type: ignore[arg-type]
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError("Invalid payment status.")

    room = await _bookable_room(db, room_id)  # type: ignore[arg-type]
    guest = await db.get(Guest, as_uuid(guest_id, "guest id"))  # type: ignore[arg-type]
    if guest is None:
        raise NotFoundError("Guest not found.")

    amount = compute_price(room.price, start, end)
    verify_claimed_amount(claimed_amount, amount)  # type: ignore[arg-type]
    await _ensure_payment_ref_unused(db, payment_ref)  # type: ignore[arg-type]

    return await _book(db, room, guest, start, end, amount, payment_ref, payment_status, actor_id)  # type: ignore[arg-type]


async def create_walk_in_reservation(
    db: AsyncSession,
    *,
    room_id: uuid.UUID | str,
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    check_in: DateLike,
    check_out: DateLike,
    claimed_amount: Decimal | int | str,
    payment_ref: str,
    payment_status: str = "PENDING",
    actor_id: uuid.UUID | None = None,
) -> tuple[Reservation, Payment]:
    """Front-desk booking: reuse the guest matching ``email``/``phone`` or create one.

    Runs the same validation and the same locked check-then-insert as
    :func:`create_reservation`; a newly created guest is committed only if
    the booking succeeds.
    """
    _require(
        room_id=room_id,
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        check_in=check_in,
        check_out=check_out,
        amount=claimed_amount,
        payment_ref=payment_ref,
        payment_status=payment_status,
    )
    start, end = _validate_stay(check_in, check_out)
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError("Invalid payment status.")

    room = await _bookable_room(db, room_id)
    amount = compute_price(room.price, start, end)
    verify_claimed_amount(claimed_amount, amount)
    await _ensure_payment_ref_unused(db, payment_ref)

    result = await db.execute(select(Guest).where(or_(Guest.email == email, Guest.phone == phone)))
    guest = result.scalars().first()
    if guest is None:
        guest = Guest(
            id=uuid.uuid4(),
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            hashed_password=None,
            status="INACTIVE",
        )
        logger.info("Creating walk-in guest %s", email)

    return await _book(db, room, guest, start, end, amount, payment_ref, payment_status, actor_id)


async def get_reservation(db: AsyncSession, reservation_id: uuid.UUID | str) -> Reservation:
    """Return a reservation or raise ``NotFoundError``."""
    reservation = await db.get(Reservation, as_uuid(reservation_id, "reservation id"))
    if reservation is None:
        raise NotFoundError("Reservation not found.")
    return reservation


async def list_reservations(
    db: AsyncSession,
    *,
    status: str | None = None,
    room_id: uuid.UUID | None = None,
    guest_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Reservation], int]:
    """Return a page of reservations (newest first) and the total match count."""
    filters = []
    if status is not None:
        filters.append(Reservation.status == status)
    if room_id is not None:
        filters.append(Reservation.room_id == room_id)
    if guest_id is not None:
        filters.append(Reservation.guest_id == guest_id)

    total_result = await db.execute(select(func.count()).select_from(Reservation).where(*filters))
    total = total_result.scalar_one()

    result = await db.execute(
        select(Reservation).where(*filters).order_by(Reservation.created_at.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


async def update_reservation_status(
    db: AsyncSession,
    reservation_id: uuid.UUID | str,
    new_status: str,
    actor_id: uuid.UUID | None = None,
) -> Reservation:
    """Move a reservation along the lifecycle, rejecting illegal edges."""
    if new_status not in RESERVATION_STATUSES:
        raise ValidationError("Invalid status provided.")

    reservation = await get_reservation(db, reservation_id)
    previous = reservation.status
    validate_transition(previous, new_status)

    reservation.status = new_status
    log_operation(
        db,
        "UPDATE",
        f"Reservation {reservation.id} status {previous} -> {new_status}",
        actor_id,
    )
    await db.flush()
    await db.refresh(reservation)
    logger.info("Reservation %s status %s -> %s", reservation.id, previous, new_status)
    return reservation


async def cancel_reservation(
    db: AsyncSession,
    reservation_id: uuid.UUID | str,
    actor_id: uuid.UUID | None = None,
    guest_id: uuid.UUID | None = None,
) -> Reservation:
    """Cancel a PENDING or CONFIRMED reservation.

    When ``guest_id`` is given the reservation must belong to that guest;
    other guests' reservations are reported as not found.
    """
    reservation = await get_reservation(db, reservation_id)
    if guest_id is not None and reservation.guest_id != guest_id:
        raise NotFoundError("Reservation not found.")
    return await update_reservation_status(db, reservation.id, "CANCELLED", actor_id)
