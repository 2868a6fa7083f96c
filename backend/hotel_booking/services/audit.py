"""Audit trail helpers."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def log_operation(
    db: AsyncSession,
    category: str,
    description: str,
    performed_by: uuid.UUID | None,
) -> AuditLog:
    """Queue an audit entry on the caller's session.

    The entry is written with the caller's unit of work, so a rolled-back
    operation leaves no trail of something that never happened.
    """
    entry = AuditLog(category=category, description=description, performed_by=performed_by)
    db.add(entry)
    logger.debug("Audit %s by %s: %s", category, performed_by, description)
    return entry
