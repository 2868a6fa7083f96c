"""Shared API dependencies: single import point for all routers::

    from hotel_booking.api.deps import Principal, get_db, require_roles
"""

from hotel_booking.auth.dependencies import (
    GUEST_ROLE,
    STAFF,
    Principal,
    get_current_principal,
    require_roles,
)
from hotel_booking.database import get_db

__all__ = [
    "GUEST_ROLE",
    "STAFF",
    "Principal",
    "get_current_principal",
    "get_db",
    "require_roles",
]
