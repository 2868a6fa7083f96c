"""FastAPI authentication and role-check dependencies."""

import uuid
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.auth.jwt import decode_token
from hotel_booking.database import get_db
from hotel_booking.models.guest import Guest
from hotel_booking.models.user import User

GUEST_ROLE = "GUEST"
STAFF = ("ADMIN", "ROOM_MANAGER", "RECEPTIONIST")

# Rejects requests without a Bearer token before any lookup
_bearer_scheme = HTTPBearer()


@dataclass(frozen=True)
class Principal:
    """The authenticated caller: a staff user or a guest."""

    id: uuid.UUID
    role: str
    email: str

    @property
    def is_guest(self) -> bool:
        return self.role == GUEST_ROLE


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """Validate the Bearer token and load the user or guest it names.

    Raises:
        HTTPException 401: Invalid/expired token, wrong token type, unknown
            or inactive account.
    """
    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise _unauthorized() from None

    # Only accept access tokens, not refresh tokens
    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    sub: str | None = payload.get("sub")
    role: str | None = payload.get("role")
    if sub is None or role is None:
        raise _unauthorized()

    try:
        principal_id = uuid.UUID(sub)
    except ValueError:
        raise _unauthorized() from None

    account: User | Guest | None
    if role == GUEST_ROLE:
        account = await db.get(Guest, principal_id)
    else:
        account = await db.get(User, principal_id)
        # Role changes take effect immediately, not at token expiry.
        if account is not None and account.role != role:
            raise _unauthorized()

    if account is None:
        raise _unauthorized()
    if not account.is_active:
        raise _unauthorized("Account is inactive")

    return Principal(id=account.id, role=role, email=account.email)


def require_roles(*roles: str) -> Callable[..., Coroutine[Any, Any, Principal]]:
    """Build a dependency that admits only callers holding one of ``roles``.

    Usage::

        @router.get("/rooms")
        async def list_rooms(principal: Principal = Depends(require_roles("ADMIN", "ROOM_MANAGER"))):
            ...
    """
    allowed = frozenset(roles)

    async def _check(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access Forbidden: Insufficient Role",
            )
        return principal

    return _check
