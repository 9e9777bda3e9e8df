"""
Listing API endpoints: browsing, detail, map area search and owner-managed CRUD.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional, List
from uuid import UUID
from decimal import Decimal
import logging

from estateiq.config import settings
from estateiq.models.user import User
from estateiq.repositories.property import PropertySearchFilters
from estateiq.services.property import PropertyService
from estateiq.schemas.common import APIResponse, MessageResponse, PaginationMeta
from estateiq.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertySummary,
    PropertyDetail,
    PropertyListResponse,
    PropertyDetailResponse,
    AreaSearchRequest,
    AreaSearchResponse,
    SearchArea,
    SearchBounds,
)
from estateiq.utils.dependencies import (
    get_current_user,
    get_optional_current_user,
    get_property_service
)
from estateiq.utils.exceptions import APIException, InternalServerError
from estateiq.schemas.error import get_crud_error_responses, get_common_error_responses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["Properties"])
listings_router = APIRouter(prefix="/listings", tags=["Properties"])


@router.get(
    "",
    response_model=PropertyListResponse,
    status_code=status.HTTP_200_OK,
    summary="List active properties",
    description="Paginated active listings, newest first",
    responses=get_common_error_responses()
)
async def list_properties(
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(
        settings.default_page_size,
        ge=1,
        description=f"Listings per page (capped at {settings.max_page_size})"
    ),
    include_images: bool = Query(True, alias="includeImages"),
    include_predictions: bool = Query(True, alias="includePredictions"),
    include_features: bool = Query(False, alias="includeFeatures"),
    property_type: Optional[str] = Query(None, alias="type", description="Property category"),
    city: Optional[str] = Query(None),
    min_price: Optional[Decimal] = Query(None, ge=0, alias="minPrice"),
    max_price: Optional[Decimal] = Query(None, ge=0, alias="maxPrice"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    try:
        filters = PropertySearchFilters(
            property_category=property_type,
            city=city,
            min_price=min_price,
            max_price=max_price
        )

        properties, pagination = await property_service.list_properties(
            page=page,
            limit=limit,
            filters=filters
        )

        summaries = [
            PropertySummary.model_validate(
                PropertyService.to_summary(
                    property_obj,
                    include_images=include_images,
                    include_predictions=include_predictions,
                    include_features=include_features,
                    image_limit=settings.listing_image_preview_count
                )
            )
            for property_obj in properties
        ]

        return PropertyListResponse(
            data=summaries,
            pagination=PaginationMeta(**pagination)
        )

    except APIException:
        raise
    except Exception as e:
        logger.error(f"Failed to list properties: {e}", exc_info=True)
        raise InternalServerError()


@router.post(
    "/search-by-area",
    response_model=AreaSearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Search listings inside a map area",
    description="Active listings within the bounding box of at least three coordinates",
    responses=get_common_error_responses()
)
async def search_by_area(
    search_request: AreaSearchRequest,
    property_service: PropertyService = Depends(get_property_service)
) -> AreaSearchResponse:
    """
    Raises:
        ValidationError: If fewer than three coordinate pairs are given
    """
    properties, bounds = await property_service.search_by_area(search_request)

    return AreaSearchResponse(
        data=[
            PropertySummary.model_validate(
                PropertyService.to_summary(property_obj, image_limit=settings.listing_image_preview_count)
            )
            for property_obj in properties
        ],
        search_area=SearchArea(bounds=SearchBounds(**bounds.to_dict()))
    )


@router.get(
    "/{property_id}",
    response_model=PropertyDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get property details",
    responses=get_common_error_responses()
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailResponse:
    """
    Raises:
        PropertyNotFoundError: If the listing doesn't exist
    """
    property_obj = await property_service.get_property(property_id, current_user)
    return PropertyDetailResponse(data=PropertyDetail.model_validate(PropertyService.to_detail(property_obj)))


@router.post(
    "",
    response_model=PropertyDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a listing owned by the authenticated user",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailResponse:
    """
    Raises:
        ValidationError: If the listing data is invalid
    """
    try:
        property_obj = await property_service.create_property(property_data, current_user)
        return PropertyDetailResponse(
            data=PropertyDetail.model_validate(PropertyService.to_detail(property_obj)),
            message="Property created successfully"
        )

    except APIException:
        raise
    except Exception as e:
        logger.error(f"Create property endpoint failed: {e}", exc_info=True)
        raise InternalServerError()


@router.put(
    "/{property_id}",
    response_model=PropertyDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property",
    description="Partial update. Only the owner or an admin may update a listing.",
    responses=get_crud_error_responses()
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailResponse:
    """
    Raises:
        PropertyNotFoundError: If the listing doesn't exist
        InsufficientPermissionsError: If the caller is neither owner nor admin
        ValidationError: If the update data is invalid
    """
    try:
        property_obj = await property_service.update_property(property_id, property_data, current_user)
        return PropertyDetailResponse(
            data=PropertyDetail.model_validate(PropertyService.to_detail(property_obj)),
            message="Property updated successfully"
        )

    except APIException:
        raise
    except Exception as e:
        logger.error(f"Update property endpoint failed: {e}", exc_info=True)
        raise InternalServerError()


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete property",
    description="Delete a listing with its images, predictions and saved entries. Owner or admin only.",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    await property_service.delete_property(property_id, current_user)
    return MessageResponse(message="Property deleted successfully")


@listings_router.get(
    "",
    response_model=APIResponse[List[PropertySummary]],
    status_code=status.HTTP_200_OK,
    summary="List all active listings",
    description="Every active listing in summary form, without pagination"
)
async def list_listings(
    property_service: PropertyService = Depends(get_property_service)
) -> APIResponse[List[PropertySummary]]:
    properties = await property_service.list_all_active()
    return APIResponse[List[PropertySummary]](
        data=[
            PropertySummary.model_validate(
                PropertyService.to_summary(property_obj, image_limit=settings.listing_image_preview_count)
            )
            for property_obj in properties
        ]
    )
