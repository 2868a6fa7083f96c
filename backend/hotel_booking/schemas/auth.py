"""Pydantic v2 request/response schemas for staff authentication and users."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

StaffRole = Literal["ADMIN", "ROOM_MANAGER", "RECEPTIONIST"]
AccountStatus = Literal["ACTIVE", "INACTIVE"]

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Schema for email/password login (staff and guests)."""

    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    """Schema for token refresh."""

    refresh_token: str


class UserCreate(BaseModel):
    """Schema for an admin creating a staff account."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)
    role: StaffRole = "RECEPTIONIST"


class UserUpdate(BaseModel):
    """Schema for partially updating a staff profile. All fields optional."""

    email: EmailStr | None = None
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)


class UserStatusUpdate(BaseModel):
    """Schema for activating/deactivating a staff account."""

    status: AccountStatus


class PasswordChange(BaseModel):
    """Schema for setting a new password."""

    password: str = Field(..., min_length=8, max_length=128)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    """JWT token pair returned on successful authentication."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Public staff profile information."""

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    role: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(BaseModel):
    """Paginated list of staff users."""

    items: list[UserResponse]
    total: int


class AuthResponse(BaseModel):
    """Combined user + tokens returned on login."""

    user: UserResponse
    tokens: TokenResponse


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
