"""Room availability: detects reservations that hold any of the requested days.

Occupancy is inclusive on both ends: a reservation holds every calendar day
from check-in through check-out. A stay that checks out on the 10th therefore
conflicts with one that checks in on the 10th.
"""

import logging
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.config import settings
from hotel_booking.models.reservation import Reservation
from hotel_booking.services.dates import DateLike, enumerate_days

logger = logging.getLogger(__name__)

NON_BLOCKING_STATUSES = ("CHECKED_OUT",)


def non_blocking_statuses() -> tuple[str, ...]:
    """Reservation statuses that release the room's days."""
    if settings.cancelled_reservations_block:
        return NON_BLOCKING_STATUSES
    return (*NON_BLOCKING_STATUSES, "CANCELLED")


async def find_conflicts(
    db: AsyncSession,
    room_id: uuid.UUID,
    check_in: DateLike,
    check_out: DateLike,
    exclude_reservation_id: uuid.UUID | None = None,
) -> list[Reservation]:
    """Return blocking reservations on ``room_id`` that share a day with the range."""
    query = select(Reservation).where(
        Reservation.room_id == room_id,
        Reservation.check_out >= date.today(),
        Reservation.status.not_in(non_blocking_statuses()),
    )
    if exclude_reservation_id is not None:
        query = query.where(Reservation.id != exclude_reservation_id)

    result = await db.execute(query)
    requested = set(enumerate_days(check_in, check_out))

    conflicts = [
        reservation
        for reservation in result.scalars().all()
        if requested.intersection(enumerate_days(reservation.check_in, reservation.check_out))
    ]
    if conflicts:
        logger.info(
            "Room %s has %d conflicting reservation(s) for %s..%s",
            room_id,
            len(conflicts),
            check_in,
            check_out,
        )
    return conflicts


async def is_available(
    db: AsyncSession,
    room_id: uuid.UUID,
    check_in: DateLike,
    check_out: DateLike,
) -> bool:
    """True when no blocking reservation holds any day of ``check_in..check_out``."""
    return not await find_conflicts(db, room_id, check_in, check_out)


async def reserved_dates(db: AsyncSession, room_id: uuid.UUID) -> list[str]:
    """Sorted list of upcoming days held by blocking reservations on a room."""
    result = await db.execute(
        select(Reservation.check_in, Reservation.check_out).where(
            Reservation.room_id == room_id,
            Reservation.check_out >= date.today(),
            Reservation.status.not_in(non_blocking_statuses()),
        )
    )
    days: set[str] = set()
    for check_in, check_out in result.all():
        days.update(enumerate_days(check_in, check_out))
    return sorted(days)
