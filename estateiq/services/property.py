"""
Property service for listings: browsing, area search and owner-managed CRUD.
Also shapes ORM rows into the frontend's listing fields.
"""

from typing import Optional, List, Dict, Any, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from estateiq.config import settings
from estateiq.repositories.property import PropertyRepository, PropertySearchFilters, BoundingBox
from estateiq.models.property import Property
from estateiq.models.user import User
from estateiq.schemas.property import PropertyCreate, PropertyUpdate, AreaSearchRequest
from estateiq.utils.exceptions import (
    APIException,
    InternalServerError,
    InsufficientPermissionsError,
    PropertyNotFoundError,
    ValidationError,
)
import uuid
import logging

logger = logging.getLogger(__name__)

MIN_AREA_POINTS = 3
DEFAULT_DESCRIPTION = "No description available"

# Request field name -> column name
UPDATE_FIELD_MAP = {
    "title": "title",
    "description": "description",
    "listing_type": "listing_type",
    "property_type": "property_category",
    "price": "price",
    "currency": "currency",
    "surface": "total_surface_area",
    "bedrooms": "number_of_rooms",
    "bathrooms": "bathrooms",
    "year_built": "construction_year",
    "address": "address_text",
    "city": "city",
    "county": "county",
    "latitude": "latitude",
    "longitude": "longitude",
    "is_active": "is_active",
}


class PropertyService:
    """
    Listing service with ownership rules.
    Anyone can browse active listings; only the owner or an admin may change one.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)

    async def list_properties(
        self,
        page: int = 1,
        limit: int = settings.default_page_size,
        filters: Optional[PropertySearchFilters] = None
    ) -> Tuple[List[Property], Dict[str, Any]]:
        """
        Paginated active listings, newest first.
        ``limit`` is capped at the configured maximum page size.

        Returns:
            Tuple of (properties, pagination dict with page/limit/total/has_more)
        """
        try:
            page = max(page, 1)
            limit = max(1, min(limit, settings.max_page_size))
            skip = (page - 1) * limit

            properties, total = await self.property_repo.list_properties(
                filters or PropertySearchFilters(),
                skip=skip,
                limit=limit
            )

            pagination = {
                "page": page,
                "limit": limit,
                "total": total,
                "has_more": skip + len(properties) < total,
            }
            return properties, pagination

        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise

    async def list_all_active(self) -> List[Property]:
        return await self.property_repo.list_active()

    async def get_property(self, property_id: uuid.UUID, current_user: Optional[User] = None) -> Property:
        """
        Get listing by ID. Inactive listings are only visible to their owner and admins.

        Raises:
            PropertyNotFoundError: If the listing doesn't exist or is hidden from the caller
        """
        property_obj = await self.property_repo.get_property_with_details(property_id)

        if not property_obj:
            raise PropertyNotFoundError()

        if not property_obj.is_active:
            if not current_user or not current_user.can_manage_property(property_obj.owner_id):
                raise PropertyNotFoundError()

        logger.debug(f"Retrieved property: {property_id}")
        return property_obj

    async def search_by_area(self, request: AreaSearchRequest) -> Tuple[List[Property], BoundingBox]:
        """
        Active listings inside the bounding box of the given polygon.

        Raises:
            ValidationError: If fewer than three coordinate pairs are given
        """
        coordinates = request.coordinates or []
        if len(coordinates) < MIN_AREA_POINTS:
            raise ValidationError(
                "Invalid coordinates. Please provide at least 3 coordinate pairs for area search."
            )

        bounds = BoundingBox.from_points([(point.lat, point.lng) for point in coordinates])

        filters = PropertySearchFilters()
        if request.filters:
            filters.property_category = request.filters.property_type
            filters.min_price = request.filters.min_price
            filters.max_price = request.filters.max_price

        properties = await self.property_repo.search_by_bounds(
            bounds,
            filters,
            limit=settings.area_search_limit
        )
        logger.info(f"Area search found {len(properties)} properties")
        return properties, bounds

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a listing owned by the caller.

        Raises:
            ValidationError: If the listing fails model validation
        """
        try:
            create_data = {
                "title": property_data.title.strip(),
                "description": property_data.description,
                "listing_type": property_data.listing_type,
                "property_category": property_data.property_type,
                "price": property_data.price,
                "currency": property_data.currency,
                "total_surface_area": property_data.surface,
                "number_of_rooms": property_data.bedrooms,
                "bathrooms": property_data.bathrooms,
                "construction_year": property_data.year_built,
                "address_text": property_data.address.strip(),
                "city": property_data.city.strip(),
                "county": property_data.county,
                "latitude": property_data.latitude,
                "longitude": property_data.longitude,
                "owner_id": current_user.id,
            }

            property_obj = await self.property_repo.create_property(
                create_data,
                image_urls=property_data.images,
                feature_names=property_data.features
            )

            logger.info(f"Property created by user {current_user.email}: {property_obj.title} (ID: {property_obj.id})")
            return property_obj

        except ValueError as e:
            raise ValidationError(str(e))
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create property for user {current_user.id}: {e}")
            raise InternalServerError()

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        current_user: User
    ) -> Property:
        """
        Partially update a listing.

        Raises:
            PropertyNotFoundError: If the listing doesn't exist
            InsufficientPermissionsError: If the caller is neither owner nor admin
            ValidationError: If no field is given or the result is invalid
        """
        try:
            existing_property = await self.property_repo.get_property_with_details(property_id)
            if not existing_property:
                raise PropertyNotFoundError()

            if not current_user.can_manage_property(existing_property.owner_id):
                raise InsufficientPermissionsError("update this property")

            provided = property_data.model_dump(exclude_unset=True)
            update_data = {
                UPDATE_FIELD_MAP[field]: value
                for field, value in provided.items()
                if field in UPDATE_FIELD_MAP and value is not None
            }
            image_urls = provided.get("images")
            feature_names = provided.get("features")

            if not update_data and image_urls is None and feature_names is None:
                raise ValidationError("No valid fields provided for update")

            updated_property = await self.property_repo.update_property(
                property_id,
                update_data,
                image_urls=image_urls,
                feature_names=feature_names
            )
            if not updated_property:
                raise PropertyNotFoundError()

            logger.info(f"Property updated by user {current_user.email}: {property_id}")
            return updated_property

        except ValueError as e:
            raise ValidationError(str(e))
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise InternalServerError()

    async def delete_property(self, property_id: uuid.UUID, current_user: User) -> bool:
        """
        Delete a listing and everything attached to it.

        Raises:
            PropertyNotFoundError: If the listing doesn't exist
            InsufficientPermissionsError: If the caller is neither owner nor admin
        """
        existing_property = await self.property_repo.get_property_with_details(property_id)
        if not existing_property:
            raise PropertyNotFoundError()

        if not current_user.can_manage_property(existing_property.owner_id):
            raise InsufficientPermissionsError("delete this property")

        deleted = await self.property_repo.delete_property(property_id)
        if deleted:
            logger.info(f"Property deleted by user {current_user.email}: {property_id}")
        return deleted

    @staticmethod
    def to_summary(
        property_obj: Property,
        include_images: bool = True,
        include_predictions: bool = True,
        include_features: bool = False,
        image_limit: Optional[int] = None
    ) -> Dict[str, Any]:
        """Listing card fields, snake_case (the response schema camel-cases them)."""
        summary = {
            "id": str(property_obj.id),
            "title": property_obj.title,
            "price": float(property_obj.price),
            "surface": property_obj.total_surface_area,
            "bedrooms": property_obj.number_of_rooms,
            "bathrooms": property_obj.bathrooms,
            "address": property_obj.address_text,
            "city": property_obj.city,
            "county": property_obj.county,
            "latitude": property_obj.latitude,
            "longitude": property_obj.longitude,
            "type": property_obj.property_category,
            "year_built": property_obj.construction_year,
            "listed_date": property_obj.created_at,
            "new_listing": property_obj.is_new_listing(settings.new_listing_days),
        }

        if include_images:
            images = property_obj.images
            if image_limit is not None:
                images = images[:image_limit]
            summary["images"] = [image.image_url for image in images]

        if include_predictions:
            summary["predicted_price"] = property_obj.predicted_price

        if include_features:
            summary["features"] = [feature.feature_name for feature in property_obj.features]

        return summary

    @classmethod
    def to_detail(cls, property_obj: Property) -> Dict[str, Any]:
        detail = cls.to_summary(property_obj, include_features=True)
        prediction = property_obj.latest_prediction
        detail.update({
            "description": property_obj.description or DEFAULT_DESCRIPTION,
            "currency": property_obj.currency.value,
            "listing_type": property_obj.listing_type.value,
            "prediction_confidence": prediction.confidence_score if prediction else None,
            "owner_id": str(property_obj.owner_id) if property_obj.owner_id else None,
            "is_active": property_obj.is_active,
            "updated_at": property_obj.updated_at,
        })
        return detail
