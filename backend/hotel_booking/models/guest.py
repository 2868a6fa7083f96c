"""Guest domain model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_booking.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Guest(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Guest model: self-registered visitors who book rooms.

    Accounts start ``INACTIVE`` and become ``ACTIVE`` once the e-mailed OTP is
    verified. Walk-in guests created at the front desk have no password.
    """

    __tablename__ = "guests"

    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(50), unique=True)
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="INACTIVE", nullable=False)

    # Relationships
    reservations: Mapped[list["Reservation"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="guest", lazy="selectin"
    )

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"

    def __repr__(self) -> str:
        return f"<Guest id={self.id} email={self.email!r} status={self.status!r}>"
