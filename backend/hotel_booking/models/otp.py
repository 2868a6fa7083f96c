"""One-time password model used for e-mail verification and password resets."""

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from hotel_booking.database import Base, UUIDPrimaryKeyMixin


class OneTimePassword(UUIDPrimaryKeyMixin, Base):
    """The latest OTP issued for an e-mail address (one row per address)."""

    __tablename__ = "one_time_passwords"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    code: Mapped[str] = mapped_column(String(12), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(nullable=False)  # naive UTC
