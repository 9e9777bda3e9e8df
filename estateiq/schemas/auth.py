"""
Pydantic schemas for authentication requests and responses.
Handles registration, login and token-carrying user payloads.
"""

from pydantic import EmailStr, Field, field_validator
from typing import Optional
from estateiq.schemas.common import CamelModel
from estateiq.schemas.user import UserResponse


class RegisterRequest(CamelModel):
    """Registration request schema. Password length is checked by the service."""

    email: EmailStr = Field(..., description="User's email address", examples=["ana@example.com"])
    password: str = Field(..., min_length=1, max_length=128, examples=["securepassword123"])
    first_name: str = Field(..., min_length=1, max_length=100, examples=["Ana"])
    last_name: str = Field(..., min_length=1, max_length=100, examples=["Popescu"])
    phone_number: str = Field(..., min_length=1, max_length=20, examples=["+40712345678"])

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("first_name", "last_name", "phone_number")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v


class LoginRequest(CamelModel):
    """Login request schema."""

    email: EmailStr = Field(..., description="User's email address", examples=["ana@example.com"])
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class AuthData(CamelModel):
    """User plus a freshly issued access token."""

    user: UserResponse
    token: str = Field(..., description="JWT access token, valid for 7 days")


class AuthResponse(CamelModel):
    success: bool = True
    data: AuthData
    message: Optional[str] = None


class UserData(CamelModel):
    user: UserResponse


class UserDataResponse(CamelModel):
    """``{success, data: {user}}`` as returned by profile and verify endpoints."""

    success: bool = True
    data: UserData
    message: Optional[str] = None


class TokenUserResponse(CamelModel):
    """User fields as carried inside the token."""

    success: bool = True
    data: UserResponse
    message: Optional[str] = None
