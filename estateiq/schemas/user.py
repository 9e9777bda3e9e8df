"""
Pydantic schemas for user profiles, password changes and favorites.
"""

from pydantic import Field
from typing import List, Optional
from datetime import datetime
from estateiq.models.user import UserType
from estateiq.schemas.common import CamelModel


class UserResponse(CamelModel):
    """User response schema (excluding sensitive data)."""

    id: str = Field(..., description="User's unique identifier", examples=["123e4567-e89b-12d3-a456-426614174000"])
    email: str
    first_name: str = Field(..., examples=["Ana"])
    last_name: str = Field(..., examples=["Popescu"])
    phone_number: Optional[str] = Field(None, examples=["+40712345678"])
    user_type: UserType = Field(..., description="Account type", examples=["user"])
    profile_picture_url: Optional[str] = None
    is_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdateRequest(CamelModel):
    """
    Profile update request.
    Names are checked by the service so a missing one yields a specific message.
    """

    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=20)
    profile_picture_url: Optional[str] = Field(None, max_length=500)


class ChangePasswordRequest(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None
    confirm_password: Optional[str] = None


class FavoriteNotesRequest(CamelModel):
    notes: Optional[str] = Field(None, max_length=5000)


class FavoriteItem(CamelModel):
    """A saved listing as shown on the favorites page."""

    id: str
    title: str
    price: float
    predicted_price: Optional[float] = None
    surface: float
    bedrooms: int
    address: str
    city: str
    type: str
    image: Optional[str] = None
    date_saved: datetime
    notes: Optional[str] = None


class FavoriteRecord(CamelModel):
    """Stored favorite row returned after add or notes update."""

    id: int
    user_id: str
    property_id: str
    date_saved: datetime
    notes: Optional[str] = None


class FavoriteStatus(CamelModel):
    is_favorite: bool


class FavoriteListResponse(CamelModel):
    success: bool = True
    data: List[FavoriteItem]
