"""
Property repository for listings with filtering, bounding-box search and market statistics.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func, desc
from estateiq.repositories.base import BaseRepository
from estateiq.repositories.feature import FeatureRepository
from estateiq.models.property import Property
from estateiq.models.image import PropertyImage
from typing import Optional, List, Dict, Any, Tuple
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertySearchFilters:
    """Filters shared by the paginated list and the area search."""

    def __init__(
        self,
        property_category: Optional[str] = None,
        city: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        owner_id: Optional[uuid.UUID] = None,
        is_active: Optional[bool] = True
    ):
        self.property_category = property_category
        self.city = city
        self.min_price = min_price
        self.max_price = max_price
        self.owner_id = owner_id
        self.is_active = is_active


class BoundingBox:
    """Axis-aligned latitude/longitude rectangle."""

    def __init__(self, north: float, south: float, east: float, west: float):
        self.north = north
        self.south = south
        self.east = east
        self.west = west

    @classmethod
    def from_points(cls, points: List[Tuple[float, float]]) -> "BoundingBox":
        """Smallest box containing every (lat, lng) point."""
        if not points:
            raise ValueError("At least one coordinate is required")
        latitudes = [lat for lat, _ in points]
        longitudes = [lng for _, lng in points]
        return cls(
            north=max(latitudes),
            south=min(latitudes),
            east=max(longitudes),
            west=min(longitudes)
        )

    def to_dict(self) -> Dict[str, float]:
        return {"north": self.north, "south": self.south, "east": self.east, "west": self.west}


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for listings.
    Images, features and predictions are loaded eagerly through the model relationships.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)
        self.feature_repo = FeatureRepository(db)

    async def create_property(
        self,
        property_data: Dict[str, Any],
        image_urls: Optional[List[str]] = None,
        feature_names: Optional[List[str]] = None
    ) -> Property:
        """
        Create a new listing with validation. The first image becomes the primary one.

        Raises:
            ValueError: If validation fails
            Exception: If database operation fails
        """
        try:
            property_obj = Property(**property_data)
            property_obj.validate_all()

            property_obj.images = self._build_images(image_urls or [])
            property_obj.features = await self.feature_repo.get_or_create_many(feature_names or [])

            self.db.add(property_obj)
            await self.db.commit()

            created_property = await self.get_property_with_details(property_obj.id)
            logger.info(f"Created property: {created_property.title} (ID: {created_property.id})")
            return created_property
        except ValueError as e:
            await self.db.rollback()
            logger.error(f"Property validation failed: {e}")
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create property: {e}")
            raise

    async def get_property_with_details(self, property_id: uuid.UUID) -> Optional[Property]:
        """
        Get listing with images, features and predictions freshly loaded.

        Returns:
            Property or None if not found
        """
        try:
            query = (
                select(Property)
                .where(Property.id == property_id)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            property_obj = result.scalar_one_or_none()

            if property_obj:
                logger.debug(f"Retrieved property with details: {property_id}")

            return property_obj
        except Exception as e:
            logger.error(f"Failed to get property with details {property_id}: {e}")
            raise

    async def list_properties(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Property], int]:
        """
        List listings newest first with filtering and pagination.

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            query = select(Property)
            count_query = select(func.count()).select_from(Property)

            conditions = self._build_filter_conditions(filters)
            if conditions:
                query = query.where(and_(*conditions))
                count_query = count_query.where(and_(*conditions))

            count_result = await self.db.execute(count_query)
            total_count = count_result.scalar() or 0

            query = query.order_by(desc(Property.created_at)).offset(skip).limit(limit)
            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Property list returned {len(properties)} of {total_count} total results")
            return list(properties), total_count
        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise

    async def search_by_bounds(
        self,
        bounds: BoundingBox,
        filters: Optional[PropertySearchFilters] = None,
        limit: int = 50
    ) -> List[Property]:
        """
        Listings whose coordinates fall inside the bounding box (edges included).
        Listings without coordinates never match.
        """
        try:
            conditions = self._build_filter_conditions(filters or PropertySearchFilters())
            conditions.extend([
                Property.latitude.is_not(None),
                Property.longitude.is_not(None),
                Property.latitude.between(bounds.south, bounds.north),
                Property.longitude.between(bounds.west, bounds.east),
            ])

            query = (
                select(Property)
                .where(and_(*conditions))
                .order_by(desc(Property.created_at))
                .limit(limit)
            )
            result = await self.db.execute(query)
            properties = list(result.scalars().all())

            logger.debug(f"Area search returned {len(properties)} properties in {bounds.to_dict()}")
            return properties
        except Exception as e:
            logger.error(f"Failed to search properties by area: {e}")
            raise

    async def list_active(self) -> List[Property]:
        result = await self.db.execute(
            select(Property).where(Property.is_active.is_(True)).order_by(desc(Property.created_at))
        )
        return list(result.scalars().all())

    async def count_comparables(
        self,
        city: str,
        property_category: str,
        exclude_property_id: Optional[uuid.UUID] = None
    ) -> int:
        """Count active listings in the same city and category."""
        try:
            query = (
                select(func.count())
                .select_from(Property)
                .where(
                    Property.is_active.is_(True),
                    func.lower(Property.city) == city.strip().lower(),
                    func.lower(Property.property_category) == property_category.strip().lower(),
                )
            )
            if exclude_property_id:
                query = query.where(Property.id != exclude_property_id)

            result = await self.db.execute(query)
            return result.scalar() or 0
        except Exception as e:
            logger.error(f"Failed to count comparables for {city}/{property_category}: {e}")
            raise

    async def get_price_statistics(self, city: str) -> Dict[str, Dict[str, Any]]:
        """
        Average asking price and listing count per category for a city.

        Returns:
            {"apartment": {"average_price": 125000.0, "count": 12}, ...}
        """
        try:
            category = func.lower(Property.property_category)
            query = (
                select(
                    category.label("category"),
                    func.avg(Property.price).label("average_price"),
                    func.count().label("count"),
                )
                .where(
                    Property.is_active.is_(True),
                    func.lower(Property.city) == city.strip().lower(),
                )
                .group_by(category)
            )
            result = await self.db.execute(query)

            statistics = {
                row.category: {"average_price": float(row.average_price), "count": row.count}
                for row in result.all()
            }
            logger.debug(f"Price statistics for {city}: {statistics}")
            return statistics
        except Exception as e:
            logger.error(f"Failed to compute price statistics for {city}: {e}")
            raise

    async def update_property(
        self,
        property_id: uuid.UUID,
        update_data: Dict[str, Any],
        image_urls: Optional[List[str]] = None,
        feature_names: Optional[List[str]] = None
    ) -> Optional[Property]:
        """
        Apply a partial update. ``image_urls`` and ``feature_names`` replace the
        current collections when given.

        Raises:
            ValueError: If the updated listing fails validation
        """
        try:
            property_obj = await self.get_property_with_details(property_id)
            if property_obj is None:
                return None

            for field, value in update_data.items():
                if value is not None:
                    setattr(property_obj, field, value)
            property_obj.validate_all()

            if image_urls is not None:
                property_obj.images = self._build_images(image_urls, property_obj.images)
            if feature_names is not None:
                property_obj.features = await self.feature_repo.get_or_create_many(feature_names)

            await self.db.commit()

            updated_property = await self.get_property_with_details(property_id)
            logger.info(f"Updated property: {property_id}")
            return updated_property
        except ValueError as e:
            await self.db.rollback()
            logger.error(f"Property validation failed for {property_id}: {e}")
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update property {property_id}: {e}")
            raise

    async def delete_property(self, property_id: uuid.UUID) -> bool:
        """Delete a listing together with its images, predictions, feature links and favorites."""
        try:
            # Reload so the cascades see rows added through other repositories
            property_obj = await self.get_property_with_details(property_id)
            if property_obj is None:
                return False

            await self.db.delete(property_obj)
            await self.db.commit()
            logger.info(f"Deleted property: {property_id}")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise

    @staticmethod
    def _build_images(
        image_urls: List[str],
        existing: Optional[List[PropertyImage]] = None
    ) -> List[PropertyImage]:
        """Gallery in the given order; the first URL is primary. Known URLs keep their row."""
        by_url = {image.image_url: image for image in existing or []}
        images = []
        for index, url in enumerate(dict.fromkeys(image_urls)):
            image = by_url.get(url) or PropertyImage(image_url=url)
            image.is_primary = index == 0
            image.sort_order = index
            images.append(image)
        return images

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List:
        """
        Build SQLAlchemy filter conditions from search filters.
        """
        conditions = []

        if filters.is_active is not None:
            conditions.append(Property.is_active.is_(filters.is_active))

        if filters.property_category:
            conditions.append(
                func.lower(Property.property_category) == filters.property_category.strip().lower()
            )

        if filters.city:
            conditions.append(func.lower(Property.city) == filters.city.strip().lower())

        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        if filters.owner_id:
            conditions.append(Property.owner_id == filters.owner_id)

        return conditions
