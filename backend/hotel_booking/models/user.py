"""User model: staff accounts and roles."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from hotel_booking.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

STAFF_ROLES = ("ADMIN", "ROOM_MANAGER", "RECEPTIONIST")
ACCOUNT_STATUSES = ("ACTIVE", "INACTIVE")


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Hotel staff member who manages rooms, guests and reservations."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), default="RECEPTIONIST", nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE", nullable=False)

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
