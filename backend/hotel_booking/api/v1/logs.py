"""Audit log API router (admins only)."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.api.deps import Principal, get_db, require_roles
from hotel_booking.models.audit_log import AuditLog
from hotel_booking.schemas.audit_log import AuditLogListResponse

router = APIRouter(prefix="/api/v1/logs", tags=["logs"])


@router.get("", response_model=AuditLogListResponse, summary="List audit entries")
async def list_logs(
    category: str | None = Query(None, description="Filter by category (CREATE, READ, UPDATE, DELETE, LOGIN)"),
    performed_by: uuid.UUID | None = Query(None, description="Filter by actor"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(50, ge=1, le=200, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("ADMIN")),
) -> dict:
    """Return audit entries, newest first."""
    filters = []
    if category is not None:
        filters.append(AuditLog.category == category)
    if performed_by is not None:
        filters.append(AuditLog.performed_by == performed_by)

    total = (await db.execute(select(func.count()).select_from(AuditLog).where(*filters))).scalar_one()
    result = await db.execute(
        select(AuditLog).where(*filters).order_by(AuditLog.created_at.desc()).offset(skip).limit(limit)
    )
    return {"items": list(result.scalars().all()), "total": total}
