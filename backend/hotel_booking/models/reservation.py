"""Reservation model: a guest's stay in a room."""

import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_booking.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

RESERVATION_STATUSES = ("PENDING", "CONFIRMED", "CHECKED_IN", "CHECKED_OUT", "CANCELLED")


class Reservation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A booking of one room by one guest for an inclusive range of days.

    Rows are never deleted in the normal flow; cancellation is a status.
    """

    __tablename__ = "reservations"

    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("guests.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default="PENDING",
        index=True,
    )  # PENDING, CONFIRMED, CHECKED_IN, CHECKED_OUT, CANCELLED

    # Relationships
    room: Mapped["Room"] = relationship(back_populates="reservations", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    guest: Mapped["Guest"] = relationship(back_populates="reservations", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    payments: Mapped[list["Payment"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="reservation", lazy="selectin", order_by="Payment.transaction_date"
    )

    __table_args__ = (Index("ix_reservations_room_dates", "room_id", "check_in", "check_out"),)

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, room_id={self.room_id}, guest_id={self.guest_id}, status={self.status})>"
        )
