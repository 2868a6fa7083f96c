"""One-time password issuing and verification."""

import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.config import settings
from hotel_booking.errors import ValidationError
from hotel_booking.models.otp import OneTimePassword
from hotel_booking.notifications.email import send_email

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Naive UTC now, matching the naive ``expires_at`` column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_code(length: int | None = None) -> str:
    """Random numeric code without a leading zero."""
    length = length or settings.otp_length
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


async def issue_otp(db: AsyncSession, email: str) -> str:
    """Create or replace the OTP for ``email`` and e-mail it."""
    code = generate_code()
    expires_at = _utcnow() + timedelta(minutes=settings.otp_expire_minutes)

    result = await db.execute(select(OneTimePassword).where(OneTimePassword.email == email))
    entry = result.scalar_one_or_none()
    if entry is None:
        entry = OneTimePassword(email=email, code=code, expires_at=expires_at)
        db.add(entry)
    else:
        entry.code = code
        entry.expires_at = expires_at
    await db.flush()

    logger.info("Issued OTP for %s (expires %s)", email, expires_at.isoformat())
    await send_email(email, "otp", otp=code, ttl_minutes=str(settings.otp_expire_minutes))
    return code


async def verify_otp(db: AsyncSession, email: str, code: str) -> None:
    """Consume a valid OTP.

    Raises:
        ValidationError: If no code was issued, the code is wrong, or it expired.
    """
    result = await db.execute(select(OneTimePassword).where(OneTimePassword.email == email))
    entry = result.scalar_one_or_none()

    if entry is None or not secrets.compare_digest(entry.code, code):
        raise ValidationError("Invalid or expired OTP.")
    if _utcnow() > entry.expires_at:
        raise ValidationError("OTP has expired.")

    await db.delete(entry)
    await db.flush()
