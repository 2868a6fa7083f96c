"""Staff users API router.

Admins manage every account; room managers and receptionists may read and
edit only their own profile and password.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.api.deps import STAFF, Principal, get_db, require_roles
from hotel_booking.auth.passwords import hash_password
from hotel_booking.errors import ConflictError, NotFoundError
from hotel_booking.models.user import User
from hotel_booking.schemas.auth import (
    MessageResponse,
    PasswordChange,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserStatusUpdate,
    UserUpdate,
)
from hotel_booking.services.audit import log_operation

router = APIRouter(prefix="/api/v1/users", tags=["users"])


async def _get_visible_user(user_id: uuid.UUID, principal: Principal, db: AsyncSession) -> User:
    """Fetch a user the caller may see; other people's accounts are 404 for non-admins."""
    if principal.role != "ADMIN" and principal.id != user_id:
        raise NotFoundError("User not found")
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _ensure_unique_contact(
    db: AsyncSession,
    email: str | None,
    phone: str | None,
    exclude_id: uuid.UUID | None = None,
) -> None:
    clauses = []
    if email is not None:
        clauses.append(User.email == email)
    if phone is not None:
        clauses.append(User.phone == phone)
    if not clauses:
        return

    query = select(User).where(or_(*clauses))
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    existing = (await db.execute(query)).scalars().first()
    if existing is not None:
        if existing.email == email:
            raise ConflictError("Email already exists. Please try another one.")
        raise ConflictError("Phone number already exists. Please try another one.")


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a staff account",
)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("ADMIN")),
) -> User:
    """Create a staff account. Email and phone must be unique."""
    await _ensure_unique_contact(db, body.email, body.phone)

    user = User(
        email=body.email,
        phone=body.phone,
        first_name=body.first_name,
        last_name=body.last_name,
        hashed_password=hash_password(body.password),
        role=body.role,
        status="ACTIVE",
    )
    db.add(user)
    log_operation(db, "CREATE", f"Created {body.role} account {body.email}", principal.id)
    await db.flush()
    await db.refresh(user)
    return user


@router.get("", response_model=UserListResponse, summary="List staff accounts")
async def list_users(
    role: str | None = Query(None, description="Filter by role"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("ADMIN")),
) -> dict:
    """Return a paginated list of staff accounts."""
    filters = [User.role == role] if role else []
    total = (await db.execute(select(func.count()).select_from(User).where(*filters))).scalar_one()
    result = await db.execute(
        select(User).where(*filters).order_by(User.created_at.desc()).offset(skip).limit(limit)
    )
    log_operation(db, "READ", "Fetched all users", principal.id)
    return {"items": list(result.scalars().all()), "total": total}


@router.get("/{user_id}", response_model=UserResponse, summary="Get a staff account")
async def get_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> User:
    return await _get_visible_user(user_id, principal, db)


@router.put("/{user_id}", response_model=UserResponse, summary="Update a staff profile")
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> User:
    """Partially update a profile. Only explicitly provided fields are changed."""
    user = await _get_visible_user(user_id, principal, db)
    update_data = body.model_dump(exclude_unset=True)
    await _ensure_unique_contact(db, update_data.get("email"), update_data.get("phone"), exclude_id=user.id)

    changes = [f"{field}: {getattr(user, field)} -> {value}" for field, value in update_data.items()]
    for field, value in update_data.items():
        setattr(user, field, value)

    log_operation(db, "UPDATE", f"Updated user {user.id}. Changes: {', '.join(changes)}", principal.id)
    await db.flush()
    await db.refresh(user)
    return user


@router.patch("/{user_id}/status", response_model=UserResponse, summary="Activate or deactivate a staff account")
async def change_user_status(
    user_id: uuid.UUID,
    body: UserStatusUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("ADMIN")),
) -> User:
    user = await _get_visible_user(user_id, principal, db)
    user.status = body.status
    log_operation(db, "UPDATE", f"User {user.email} status set to {body.status}", principal.id)
    await db.flush()
    await db.refresh(user)
    return user


@router.patch("/{user_id}/password", response_model=MessageResponse, summary="Change a staff password")
async def change_user_password(
    user_id: uuid.UUID,
    body: PasswordChange,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> dict:
    user = await _get_visible_user(user_id, principal, db)
    user.hashed_password = hash_password(body.password)
    log_operation(db, "UPDATE", f"Changed password for user {user.email}", principal.id)
    await db.flush()
    return {"message": "Password successfully updated"}


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete a staff account")
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("ADMIN")),
) -> dict:
    user = await _get_visible_user(user_id, principal, db)
    await db.delete(user)
    log_operation(db, "DELETE", f"Deleted user {user.email}", principal.id)
    await db.flush()
    return {"message": "User deleted"}
