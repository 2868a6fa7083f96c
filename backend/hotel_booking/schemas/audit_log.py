"""Pydantic v2 response schemas for the audit log."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AuditLogResponse(BaseModel):
    """A single audit entry."""

    id: uuid.UUID
    category: str
    description: str
    performed_by: uuid.UUID | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuditLogListResponse(BaseModel):
    """Paginated audit entries, newest first."""

    items: list[AuditLogResponse]
    total: int
