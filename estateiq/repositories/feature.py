"""
Feature repository for the amenities catalogue.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from estateiq.repositories.base import BaseRepository
from estateiq.models.feature import Feature
from typing import Iterable, List
import logging

logger = logging.getLogger(__name__)


class FeatureRepository(BaseRepository[Feature]):
    """Repository for features and amenities."""

    def __init__(self, db: AsyncSession):
        super().__init__(Feature, db)

    async def get_or_create_many(self, names: Iterable[str]) -> List[Feature]:
        """
        Resolve feature names to catalogue rows, adding missing ones to the session.
        New rows are flushed, not committed; the caller owns the transaction.
        """
        cleaned: List[str] = []
        for name in names:
            name = (name or "").strip()
            if name and name not in cleaned:
                cleaned.append(name)

        if not cleaned:
            return []

        try:
            result = await self.db.execute(select(Feature).where(Feature.feature_name.in_(cleaned)))
            existing = {feature.feature_name: feature for feature in result.scalars().all()}

            features = []
            for name in cleaned:
                feature = existing.get(name)
                if feature is None:
                    feature = Feature(feature_name=name)
                    self.db.add(feature)
                    logger.debug(f"Adding feature to catalogue: {name}")
                features.append(feature)

            await self.db.flush()
            return features
        except Exception as e:
            logger.error(f"Failed to resolve features {cleaned}: {e}")
            raise
