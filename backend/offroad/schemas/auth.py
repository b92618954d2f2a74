"""Pydantic schemas for authentication."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from offroad.schemas.common import PHONE_PATTERN


class RegisterRequest(BaseModel):
    """Account signup schema. New accounts always get the user role."""

    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    password: str = Field(..., min_length=6, description="Password (minimum 6 characters)")

    model_config = {"str_strip_whitespace": True}

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1, description="Password")


class UserResponse(BaseModel):
    """User response schema (for /me endpoint)."""

    id: int
    name: str
    email: EmailStr
    phone: str
    role: str
    is_admin: bool
    is_active: bool
    profile_image: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class LoginResponse(BaseModel):
    """Login response schema."""

    message: str
    user: UserResponse
    expires_at: datetime


class LogoutResponse(BaseModel):
    """Logout response schema."""

    message: str


class SessionInfo(BaseModel):
    """Session information schema."""

    user: UserResponse
    is_admin: bool


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    name: Optional[str] = Field(None, min_length=2, max_length=50)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    profile_image: Optional[str] = Field(None, max_length=500)

    model_config = {"str_strip_whitespace": True}


class PasswordChangeRequest(BaseModel):
    """Password change request schema."""

    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=6, description="New password (minimum 6 characters)")


class PasswordChangeResponse(BaseModel):
    """Password change response schema."""

    message: str
    success: bool = True
