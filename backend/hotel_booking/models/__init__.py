"""SQLAlchemy models for the hotel booking backend.

All models are imported here so that ``Base.metadata`` knows every table
before ``create_all`` (or a migration tool) inspects it. If you add a new
model, import it in this file.
"""

from hotel_booking.models.audit_log import AuditLog
from hotel_booking.models.guest import Guest
from hotel_booking.models.otp import OneTimePassword
from hotel_booking.models.payment import Payment
from hotel_booking.models.reservation import Reservation
from hotel_booking.models.room import Amenity, Room, RoomImage, RoomType, room_type_amenities
from hotel_booking.models.user import User

__all__ = [
    "Amenity",
    "AuditLog",
    "Guest",
    "OneTimePassword",
    "Payment",
    "Reservation",
    "Room",
    "RoomImage",
    "RoomType",
    "User",
    "room_type_amenities",
]
