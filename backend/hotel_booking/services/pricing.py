"""Reservation pricing."""

import math
from datetime import datetime, time
from decimal import Decimal, InvalidOperation

from hotel_booking.errors import ValidationError
from hotel_booking.services.dates import DateLike, to_date

_SECONDS_PER_DAY = 24 * 60 * 60


def _to_decimal(value: Decimal | int | str, label: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid {label}: {value!r}") from None
    if not amount.is_finite():
        raise ValidationError(f"Invalid {label}: {value!r}")
    return amount


def count_nights(check_in: DateLike, check_out: DateLike) -> int:
    """Whole nights between two dates, rounding partial days up."""
    start = datetime.combine(to_date(check_in), time.min)
    end = datetime.combine(to_date(check_out), time.min)
    return math.ceil((end - start).total_seconds() / _SECONDS_PER_DAY)


def compute_price(nightly_rate: Decimal | int | str, check_in: DateLike, check_out: DateLike) -> Decimal:
    """Return ``nightly_rate * nights`` for a stay.

    Raises:
        ValidationError: If the stay is zero or negative nights long.
    """
    nights = count_nights(check_in, check_out)
    if nights <= 0:
        raise ValidationError("Check-out date must be after check-in date.")
    return _to_decimal(nightly_rate, "nightly rate") * nights


def verify_claimed_amount(claimed: Decimal | int | str, computed: Decimal) -> None:
    """Reject a client-supplied amount that is not a number or differs from the server-side price."""
    if _to_decimal(claimed, "amount") != computed:
        raise ValidationError("The amount does not match the calculated room price.")
