"""
Favorite repository for users' saved listings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc
from estateiq.repositories.base import BaseRepository
from estateiq.models.saved_listing import SavedListing
from typing import List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)


class FavoriteRepository(BaseRepository[SavedListing]):
    """
    Repository for ``user_saved_listings``.
    Rows are addressed by (user, property) rather than by their own id.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(SavedListing, db)

    async def list_for_user(self, user_id: uuid.UUID) -> List[SavedListing]:
        """Saved listings for a user, most recently saved first. Listings are loaded eagerly."""
        try:
            query = (
                select(SavedListing)
                .where(SavedListing.user_id == user_id)
                .order_by(desc(SavedListing.date_saved), desc(SavedListing.id))
            )
            result = await self.db.execute(query)
            favorites = list(result.scalars().all())
            logger.debug(f"Retrieved {len(favorites)} favorites for user {user_id}")
            return favorites
        except Exception as e:
            logger.error(f"Failed to list favorites for user {user_id}: {e}")
            raise

    async def get_favorite(self, user_id: uuid.UUID, property_id: uuid.UUID) -> Optional[SavedListing]:
        result = await self.db.execute(
            select(SavedListing).where(
                SavedListing.user_id == user_id,
                SavedListing.property_id == property_id
            )
        )
        return result.scalar_one_or_none()

    async def is_favorite(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            select(func.count()).select_from(SavedListing).where(
                SavedListing.user_id == user_id,
                SavedListing.property_id == property_id
            )
        )
        return (result.scalar() or 0) > 0

    async def add_favorite(
        self,
        user_id: uuid.UUID,
        property_id: uuid.UUID,
        notes: Optional[str] = None
    ) -> SavedListing:
        favorite = await self.create({
            "user_id": user_id,
            "property_id": property_id,
            "notes": notes,
        })
        logger.info(f"User {user_id} saved property {property_id}")
        return favorite

    async def update_notes(
        self,
        user_id: uuid.UUID,
        property_id: uuid.UUID,
        notes: Optional[str]
    ) -> Optional[SavedListing]:
        """Replace the notes on a favorite; ``None`` clears them."""
        try:
            favorite = await self.get_favorite(user_id, property_id)
            if favorite is None:
                return None

            favorite.notes = notes
            await self.db.commit()
            await self.db.refresh(favorite)
            logger.debug(f"Updated notes on favorite {favorite.id}")
            return favorite
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update favorite notes for user {user_id}: {e}")
            raise

    async def remove_favorite(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        favorite = await self.get_favorite(user_id, property_id)
        if favorite is None:
            return False

        deleted = await self.delete(favorite.id)
        if deleted:
            logger.info(f"User {user_id} removed property {property_id} from favorites")
        return deleted
