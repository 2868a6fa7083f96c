"""Room catalog models: amenities, room types, rooms and their images."""

import uuid
from decimal import Decimal

from sqlalchemy import Column, ForeignKey, Numeric, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_booking.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

ROOM_STATUSES = ("AVAILABLE", "UNAVAILABLE", "MAINTENANCE")

# Junction table; owned by neither side.
room_type_amenities = Table(
    "room_type_amenities",
    Base.metadata,
    Column("room_type_id", ForeignKey("room_types.id", ondelete="CASCADE"), primary_key=True),
    Column("amenity_id", ForeignKey("amenities.id", ondelete="CASCADE"), primary_key=True),
)


class Amenity(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A feature offered by a room type (Wi-Fi, minibar, sea view, ...)."""

    __tablename__ = "amenities"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)

    room_types: Mapped[list["RoomType"]] = relationship(
        secondary=room_type_amenities, back_populates="amenities", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Amenity(id={self.id}, name={self.name!r})>"


class RoomType(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A category of room, e.g. Standard or Suite."""

    __tablename__ = "room_types"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)

    amenities: Mapped[list[Amenity]] = relationship(
        secondary=room_type_amenities, back_populates="room_types", lazy="selectin"
    )
    rooms: Mapped[list["Room"]] = relationship(back_populates="room_type", lazy="selectin")

    def __repr__(self) -> str:
        return f"<RoomType(id={self.id}, name={self.name!r})>"


class Room(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A bookable room with a nightly price."""

    __tablename__ = "rooms"

    room_number: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="AVAILABLE", index=True)
    room_type_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("room_types.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    room_type: Mapped[RoomType] = relationship(back_populates="rooms", lazy="selectin")
    reservations: Mapped[list["Reservation"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="room", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, number={self.room_number!r}, status={self.status!r})>"


class RoomImage(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A photo of a room; ``image_url`` is the stored file name under the upload directory."""

    __tablename__ = "room_images"

    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<RoomImage(id={self.id}, room_id={self.room_id}, image_url={self.image_url!r})>"
