"""Audit log model: who did what, and when."""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from hotel_booking.database import Base, UUIDPrimaryKeyMixin

AUDIT_CATEGORIES = ("CREATE", "READ", "UPDATE", "DELETE", "LOGIN")


class AuditLog(UUIDPrimaryKeyMixin, Base):
    """One recorded operation.

    ``performed_by`` is deliberately not a foreign key: the actor can be a
    staff user or a guest, and the trail must survive account deletion.
    """

    __tablename__ = "audit_logs"
    __mapper_args__ = {"eager_defaults": True}

    category: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    performed_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), index=True)

    def __repr__(self) -> str:
        return f"<AuditLog(id={self.id}, category={self.category!r}, performed_by={self.performed_by})>"
