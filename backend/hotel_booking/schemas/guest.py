"""Pydantic v2 request/response schemas for guest endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hotel_booking.schemas.auth import TokenResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class GuestRegister(BaseModel):
    """Schema for guest self-registration."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=8, max_length=128)


class GuestUpdate(BaseModel):
    """Schema for partially updating a guest profile. All fields optional."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=3, max_length=50)


class OTPRequest(BaseModel):
    """Ask for a (new) OTP to be e-mailed."""

    email: EmailStr


class OTPVerify(BaseModel):
    """Activate an account with the e-mailed OTP."""

    email: EmailStr
    otp: str = Field(..., min_length=4, max_length=12)


class PasswordReset(BaseModel):
    """Reset a forgotten password with an OTP."""

    email: EmailStr
    otp: str = Field(..., min_length=4, max_length=12)
    new_password: str = Field(..., min_length=8, max_length=128)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class GuestResponse(BaseModel):
    """Public guest information returned by the API."""

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GuestListResponse(BaseModel):
    """Paginated list of guests."""

    items: list[GuestResponse]
    total: int


class GuestAuthResponse(BaseModel):
    """Guest profile + tokens returned on login."""

    guest: GuestResponse
    tokens: TokenResponse
