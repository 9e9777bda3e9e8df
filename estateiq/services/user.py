"""
User service for profile management, password changes and favorites.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from estateiq.repositories.user import UserRepository
from estateiq.repositories.property import PropertyRepository
from estateiq.repositories.favorite import FavoriteRepository
from estateiq.models.user import User
from estateiq.models.saved_listing import SavedListing
from estateiq.schemas.user import ProfileUpdateRequest, ChangePasswordRequest
from estateiq.utils.exceptions import (
    APIException,
    InternalServerError,
    DuplicateResourceError,
    FavoriteNotFoundError,
    PropertyNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from sqlalchemy.exc import IntegrityError
import uuid
import logging

logger = logging.getLogger(__name__)


class UserService:
    """
    Account self-service for an authenticated user.
    Every method acts on the caller's own data only.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.favorite_repo = FavoriteRepository(db_session)

    async def update_profile(self, user: User, data: ProfileUpdateRequest) -> User:
        """
        Update names (both required), phone number and picture.

        Raises:
            ValidationError: If first or last name is missing
            DuplicateResourceError: If the phone number belongs to another account
        """
        try:
            first_name = (data.first_name or "").strip()
            last_name = (data.last_name or "").strip()
            if not first_name or not last_name:
                raise ValidationError("First name and last name are required")

            updates: Dict[str, Any] = {"first_name": first_name, "last_name": last_name}

            if data.phone_number:
                phone_number = data.phone_number.strip()
                if await self.user_repo.get_by_phone_number(phone_number, exclude_user_id=user.id):
                    raise DuplicateResourceError("Phone number is already in use by another account")
                updates["phone_number"] = phone_number

            if data.profile_picture_url:
                updates["profile_picture_url"] = data.profile_picture_url

            updated_user = await self.user_repo.update_profile(user.id, updates)
            if not updated_user:
                raise UserNotFoundError()
            return updated_user

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update profile for user {user.id}: {e}")
            raise InternalServerError()

    async def change_password(self, user: User, data: ChangePasswordRequest) -> None:
        """
        Change the caller's password after checking the current one.

        Raises:
            ValidationError: On missing fields, mismatch, short password or wrong current password
        """
        if not data.current_password or not data.new_password or not data.confirm_password:
            raise ValidationError("All password fields are required")

        if data.new_password != data.confirm_password:
            raise ValidationError("New password and confirmation do not match")

        if len(data.new_password) < 8:
            raise ValidationError("New password must be at least 8 characters long")

        if not user.verify_password(data.current_password):
            logger.warning(f"Password change rejected for {user.email}: wrong current password")
            raise ValidationError("Current password is incorrect")

        await self.user_repo.update_password(user.id, data.new_password)
        logger.info(f"Password changed for user {user.email}")

    async def list_favorites(self, user: User) -> List[Dict[str, Any]]:
        """Saved listings, most recent first, shaped for the favorites page."""
        favorites = await self.favorite_repo.list_for_user(user.id)
        return [self._favorite_item(favorite) for favorite in favorites]

    async def add_favorite(
        self,
        user: User,
        property_id: uuid.UUID,
        notes: Optional[str] = None
    ) -> SavedListing:
        """
        Raises:
            PropertyNotFoundError: If the listing does not exist
            DuplicateResourceError: If it is already saved
        """
        if not await self.property_repo.exists(property_id):
            raise PropertyNotFoundError()

        if await self.favorite_repo.is_favorite(user.id, property_id):
            raise DuplicateResourceError("Property is already in your favorites")

        try:
            return await self.favorite_repo.add_favorite(user.id, property_id, notes)
        except IntegrityError:
            # Concurrent insert won the unique (user, property) constraint
            raise DuplicateResourceError("Property is already in your favorites")

    async def remove_favorite(self, user: User, property_id: uuid.UUID) -> None:
        if not await self.favorite_repo.remove_favorite(user.id, property_id):
            raise FavoriteNotFoundError()

    async def update_favorite_notes(
        self,
        user: User,
        property_id: uuid.UUID,
        notes: Optional[str]
    ) -> SavedListing:
        favorite = await self.favorite_repo.update_notes(user.id, property_id, notes)
        if favorite is None:
            raise FavoriteNotFoundError()
        return favorite

    async def is_favorite(self, user: User, property_id: uuid.UUID) -> bool:
        return await self.favorite_repo.is_favorite(user.id, property_id)

    @staticmethod
    def _favorite_item(favorite: SavedListing) -> Dict[str, Any]:
        listing = favorite.property_rel
        primary_image = listing.primary_image
        return {
            "id": str(listing.id),
            "title": listing.title,
            "price": float(listing.price),
            "predicted_price": listing.predicted_price,
            "surface": listing.total_surface_area,
            "bedrooms": listing.number_of_rooms,
            "address": listing.address_text,
            "city": listing.city,
            "type": listing.property_category,
            "image": primary_image.image_url if primary_image else None,
            "date_saved": favorite.date_saved,
            "notes": favorite.notes,
        }
