"""Payment model: money received (or expected) for a reservation."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_booking.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

PAYMENT_STATUSES = ("PENDING", "PAID", "FAILED")


class Payment(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A payment attached to a reservation."""

    __tablename__ = "payments"

    reservation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("reservations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Reference issued by the payment provider / front desk, supplied by the client.
    payment_ref: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="PENDING", index=True)  # PENDING, PAID, FAILED
    transaction_date: Mapped[datetime] = mapped_column(server_default=func.now())

    reservation: Mapped["Reservation"] = relationship(back_populates="payments", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, reservation_id={self.reservation_id}, status={self.status})>"
