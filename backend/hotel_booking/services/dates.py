"""Calendar-day helpers shared by availability checks and room listings."""

from datetime import date, datetime, timedelta

from hotel_booking.errors import ValidationError

DateLike = date | str


def to_date(value: DateLike) -> date:
    """Coerce a ``date`` or ISO ``YYYY-MM-DD`` string (time part ignored) to a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        day, rest = value[:10], value[10:]
        if rest and rest[0] not in "T ":
            raise ValueError(value)
        return date.fromisoformat(day)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r}") from None


def enumerate_days(start: DateLike, end: DateLike) -> list[str]:
    """Return every day from ``start`` through ``end`` as ``YYYY-MM-DD`` strings.

    Both endpoints are included, so a stay checking in and out on the same day
    occupies one day. Returns an empty list when ``start`` is after ``end``.

    >>> enumerate_days("2024-03-01", "2024-03-03")
    ['2024-03-01', '2024-03-02', '2024-03-03']
    """
    first, last = to_date(start), to_date(end)
    span = (last - first).days
    return [(first + timedelta(days=offset)).isoformat() for offset in range(span + 1)]
