"""Guests API router: self-registration, OTP verification and profiles.

Registration creates an ``INACTIVE`` guest and e-mails an OTP; posting the
OTP to ``/activate`` makes the account ``ACTIVE``. Changing the e-mail address
deactivates the account again until the new address is verified.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.api.deps import GUEST_ROLE, STAFF, Principal, get_db, require_roles
from hotel_booking.auth.jwt import create_token_pair
from hotel_booking.auth.passwords import hash_password, verify_password
from hotel_booking.errors import ConflictError, NotFoundError
from hotel_booking.models.guest import Guest
from hotel_booking.models.user import User
from hotel_booking.schemas.auth import LoginRequest, MessageResponse, PasswordChange, TokenResponse
from hotel_booking.schemas.guest import (
    GuestAuthResponse,
    GuestListResponse,
    GuestRegister,
    GuestResponse,
    GuestUpdate,
    OTPRequest,
    OTPVerify,
    PasswordReset,
)
from hotel_booking.services.audit import log_operation
from hotel_booking.services.otp_service import issue_otp, verify_otp

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/guests", tags=["guests"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _ensure_contact_free(
    db: AsyncSession,
    email: str | None,
    phone: str | None,
    exclude_guest_id: uuid.UUID | None = None,
) -> None:
    """Raise 409 if the email or phone already belongs to a staff user or another guest."""
    clauses_user = []
    clauses_guest = []
    if email is not None:
        clauses_user.append(User.email == email)
        clauses_guest.append(Guest.email == email)
    if phone is not None:
        clauses_user.append(User.phone == phone)
        clauses_guest.append(Guest.phone == phone)
    if not clauses_user:
        return

    user = (await db.execute(select(User).where(or_(*clauses_user)))).scalars().first()
    guest_query = select(Guest).where(or_(*clauses_guest))
    if exclude_guest_id is not None:
        guest_query = guest_query.where(Guest.id != exclude_guest_id)
    guest = (await db.execute(guest_query)).scalars().first()

    taken = user or guest
    if taken is not None:
        if taken.email == email:
            raise ConflictError("Email already exists. Please try another one.")
        raise ConflictError("Phone number already exists. Please try another one.")


async def _get_guest_by_email(db: AsyncSession, email: str) -> Guest:
    result = await db.execute(select(Guest).where(Guest.email == email))
    guest = result.scalar_one_or_none()
    if guest is None:
        raise NotFoundError("Guest not found")
    return guest


async def _get_own_guest(guest_id: uuid.UUID, principal: Principal, db: AsyncSession) -> Guest:
    """Guests may only act on their own record."""
    if principal.is_guest and principal.id != guest_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access Forbidden: Insufficient Role",
        )
    guest = await db.get(Guest, guest_id)
    if guest is None:
        raise NotFoundError("Guest not found")
    return guest


# ---------------------------------------------------------------------------
# Registration / verification / login
# ---------------------------------------------------------------------------


@router.post(
    "/register",
    response_model=GuestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a guest account",
)
async def register_guest(body: GuestRegister, db: AsyncSession = Depends(get_db)) -> Guest:
    """Create an inactive guest and e-mail a verification OTP."""
    await _ensure_contact_free(db, body.email, body.phone)

    guest = Guest(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        phone=body.phone,
        hashed_password=hash_password(body.password),
        status="INACTIVE",
    )
    db.add(guest)
    await db.flush()
    await issue_otp(db, body.email)

    log_operation(
        db,
        "CREATE",
        f"Guest registered successfully. Email: {body.email}, Phone: {body.phone}",
        guest.id,
    )
    await db.refresh(guest)
    return guest


@router.post("/activate", response_model=MessageResponse, summary="Verify a guest e-mail with an OTP")
async def activate_guest(body: OTPVerify, db: AsyncSession = Depends(get_db)) -> dict:
    guest = await _get_guest_by_email(db, body.email)
    await verify_otp(db, body.email, body.otp)
    guest.status = "ACTIVE"
    log_operation(db, "UPDATE", f"Guest {guest.email} verified and activated", guest.id)
    await db.flush()
    return {"message": "Guest successfully activated"}


@router.post("/otp", response_model=MessageResponse, summary="Send a new OTP")
async def send_otp(body: OTPRequest, db: AsyncSession = Depends(get_db)) -> dict:
    await _get_guest_by_email(db, body.email)
    await issue_otp(db, body.email)
    return {"message": "OTP sent to email"}


@router.post("/login", response_model=GuestAuthResponse, summary="Guest login")
async def login_guest(body: LoginRequest, db: AsyncSession = Depends(get_db)) -> GuestAuthResponse:
    result = await db.execute(select(Guest).where(Guest.email == body.email))
    guest = result.scalar_one_or_none()

    if guest is None or not verify_password(body.password, guest.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not guest.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is not verified. Please check your email for the OTP.",
        )

    log_operation(db, "LOGIN", f"Guest {guest.first_name} {guest.last_name} logged in", guest.id)
    tokens = create_token_pair(str(guest.id), GUEST_ROLE)
    return GuestAuthResponse(guest=GuestResponse.model_validate(guest), tokens=TokenResponse(**tokens))


@router.post("/forgot-password", response_model=MessageResponse, summary="E-mail a password reset OTP")
async def forgot_password(body: OTPRequest, db: AsyncSession = Depends(get_db)) -> dict:
    await _get_guest_by_email(db, body.email)
    await issue_otp(db, body.email)
    return {"message": "OTP sent to email"}


@router.post("/reset-password", response_model=MessageResponse, summary="Reset a password with an OTP")
async def reset_password(body: PasswordReset, db: AsyncSession = Depends(get_db)) -> dict:
    guest = await _get_guest_by_email(db, body.email)
    await verify_otp(db, body.email, body.otp)
    guest.hashed_password = hash_password(body.new_password)
    log_operation(db, "UPDATE", f"Password reset for guest {guest.email}", guest.id)
    await db.flush()
    return {"message": "Password successfully reset"}


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


@router.get("", response_model=GuestListResponse, summary="List guests with optional search")
async def list_guests(
    search: str | None = Query(None, description="Search by name, email or phone (case-insensitive)"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF)),
) -> dict:
    """Return a paginated list of guests."""
    base_filter = []
    if search:
        pattern = f"%{search}%"
        base_filter.append(
            or_(
                Guest.first_name.ilike(pattern),
                Guest.last_name.ilike(pattern),
                Guest.email.ilike(pattern),
                Guest.phone.ilike(pattern),
            )
        )

    total = (await db.execute(select(func.count()).select_from(Guest).where(*base_filter))).scalar_one()
    result = await db.execute(
        select(Guest).where(*base_filter).order_by(Guest.created_at.desc()).offset(skip).limit(limit)
    )
    log_operation(db, "READ", "Fetched all guests", principal.id)
    return {"items": list(result.scalars().all()), "total": total}


@router.get("/{guest_id}", response_model=GuestResponse, summary="Get a guest by ID")
async def get_guest(
    guest_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(*STAFF, GUEST_ROLE)),
) -> Guest:
    return await _get_own_guest(guest_id, principal, db)


@router.put("/{guest_id}", response_model=GuestResponse, summary="Update own guest profile")
async def update_guest(
    guest_id: uuid.UUID,
    body: GuestUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(GUEST_ROLE)),
) -> Guest:
    """Partially update the caller's profile.

    A new e-mail address deactivates the account and triggers a fresh OTP.
    """
    guest = await _get_own_guest(guest_id, principal, db)
    update_data = body.model_dump(exclude_unset=True)
    await _ensure_contact_free(db, update_data.get("email"), update_data.get("phone"), exclude_guest_id=guest.id)

    changes = [
        f"{field}: {getattr(guest, field)} -> {value}"
        for field, value in update_data.items()
        if getattr(guest, field) != value
    ]
    email_changed = "email" in update_data and update_data["email"] != guest.email

    for field, value in update_data.items():
        setattr(guest, field, value)

    if email_changed:
        guest.status = "INACTIVE"
        await issue_otp(db, guest.email)
        changes.append("Status changed to INACTIVE, otp email sent.")

    log_operation(db, "UPDATE", f"Updated guest with ID {guest.id}. Changes: {', '.join(changes)}", principal.id)
    await db.flush()
    await db.refresh(guest)
    return guest


@router.put("/{guest_id}/password", response_model=MessageResponse, summary="Change own password")
async def change_guest_password(
    guest_id: uuid.UUID,
    body: PasswordChange,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles(GUEST_ROLE)),
) -> dict:
    guest = await _get_own_guest(guest_id, principal, db)
    guest.hashed_password = hash_password(body.password)
    log_operation(
        db,
        "UPDATE",
        f"Changed password for Guest with ID {guest.id} ({guest.first_name} {guest.last_name})",
        principal.id,
    )
    await db.flush()
    return {"message": "Password successfully updated"}
