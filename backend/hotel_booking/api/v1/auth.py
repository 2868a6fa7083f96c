"""Auth API router: staff login, token refresh and the current profile."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.api.deps import GUEST_ROLE, STAFF, Principal, get_db, require_roles
from hotel_booking.auth.jwt import create_token_pair, decode_token
from hotel_booking.auth.passwords import verify_password
from hotel_booking.models.guest import Guest
from hotel_booking.models.user import User
from hotel_booking.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    TokenResponse,
    UserResponse,
)
from hotel_booking.services.audit import log_operation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _invalid_refresh(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# ---------------------------------------------------------------------------
# POST /login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)) -> AuthResponse:
    """Authenticate a staff member with email and password."""
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )

    log_operation(db, "LOGIN", f"User {user.email} logged in", user.id)
    logger.info("Staff login: %s (%s)", user.email, user.role)
    tokens = create_token_pair(str(user.id), user.role)

    return AuthResponse(
        user=UserResponse.model_validate(user),
        tokens=TokenResponse(**tokens),
    )


# ---------------------------------------------------------------------------
# POST /refresh
# ---------------------------------------------------------------------------


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)) -> TokenResponse:
    """Exchange a valid refresh token (staff or guest) for a new token pair."""
    try:
        payload = decode_token(body.refresh_token)
    except JWTError:
        raise _invalid_refresh("Invalid or expired refresh token") from None

    if payload.get("type") != "refresh":
        raise _invalid_refresh("Invalid token type")

    sub = payload.get("sub")
    role = payload.get("role")
    if sub is None or role is None:
        raise _invalid_refresh("Invalid token payload")

    try:
        principal_id = uuid.UUID(sub)
    except ValueError:
        raise _invalid_refresh("Invalid token payload") from None

    if role == GUEST_ROLE:
        account: User | Guest | None = await db.get(Guest, principal_id)
        current_role = GUEST_ROLE
    else:
        account = await db.get(User, principal_id)
        current_role = account.role if account is not None else role

    if account is None or not account.is_active:
        raise _invalid_refresh("User not found or inactive")

    return TokenResponse(**create_token_pair(str(account.id), current_role))


# ---------------------------------------------------------------------------
# GET /me
# ---------------------------------------------------------------------------


@router.get("/me", response_model=UserResponse)
async def me(
    principal: Principal = Depends(require_roles(*STAFF)),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Return the currently authenticated staff member's profile."""
    user = await db.get(User, principal.id)
    assert user is not None  # checked by the dependency
    return user
