"""
Pydantic schemas for listing requests and responses.
Responses use the frontend field names (surface, bedrooms, type, listedDate, ...).
"""

from pydantic import Field, field_validator, model_serializer
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from estateiq.models.property import ListingType, Currency
from estateiq.schemas.common import CamelModel, PaginationMeta

OPTIONAL_SUMMARY_FIELDS = ("images", "predicted_price", "features")


class PropertyBase(CamelModel):
    """Fields shared by create requests."""

    title: str = Field(
        ...,
        min_length=5,
        max_length=255,
        description="Listing title",
        examples=["Apartament 3 camere Floreasca"]
    )

    description: Optional[str] = Field(None, max_length=10000)

    listing_type: ListingType = Field(ListingType.SALE, description="SALE or RENT")

    property_type: str = Field(
        ...,
        alias="type",
        min_length=2,
        max_length=50,
        description="Property category (apartment, house, villa, ...)",
        examples=["apartment"]
    )

    price: Decimal = Field(..., gt=0, examples=[185000])
    currency: Currency = Currency.EUR

    surface: float = Field(..., gt=0, le=100000, description="Surface in square meters", examples=[82.5])
    bedrooms: int = Field(..., ge=0, le=100, description="Number of rooms", examples=[3])
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    year_built: Optional[int] = Field(None, ge=1800, le=2100)

    address: str = Field(..., min_length=3, max_length=500, examples=["Strada Barbu Văcărescu 120"])
    city: str = Field(..., min_length=2, max_length=100, examples=["București"])
    county: Optional[str] = Field(None, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("property_type")
    @classmethod
    def normalize_type(cls, v: str) -> str:
        return v.strip().lower()


class PropertyCreate(PropertyBase):
    """Create request. The first image URL becomes the primary image."""

    images: List[str] = Field(default_factory=list, max_length=50)
    features: List[str] = Field(default_factory=list, max_length=100)


class PropertyUpdate(CamelModel):
    """Partial update; omitted fields keep their value. Lists replace the current ones."""

    title: Optional[str] = Field(None, min_length=5, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)
    listing_type: Optional[ListingType] = None
    property_type: Optional[str] = Field(None, alias="type", min_length=2, max_length=50)
    price: Optional[Decimal] = Field(None, gt=0)
    currency: Optional[Currency] = None
    surface: Optional[float] = Field(None, gt=0, le=100000)
    bedrooms: Optional[int] = Field(None, ge=0, le=100)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    address: Optional[str] = Field(None, min_length=3, max_length=500)
    city: Optional[str] = Field(None, min_length=2, max_length=100)
    county: Optional[str] = Field(None, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    is_active: Optional[bool] = None
    images: Optional[List[str]] = None
    features: Optional[List[str]] = None

    @field_validator("property_type")
    @classmethod
    def normalize_type(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v


class PropertySummary(CamelModel):
    """Listing card as returned by list and area search endpoints."""

    id: str
    title: str
    price: float
    surface: float
    bedrooms: int
    bathrooms: Optional[int] = None
    address: str
    city: str
    county: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    type: str
    year_built: Optional[int] = None
    listed_date: datetime
    new_listing: bool = False
    images: List[str] = Field(default_factory=list)
    predicted_price: Optional[float] = None
    features: Optional[List[str]] = None

    @model_serializer(mode="wrap")
    def _omit_unrequested(self, handler):
        # images, predictedPrice and features only appear when requested
        data = handler(self)
        for name in OPTIONAL_SUMMARY_FIELDS:
            if name not in self.model_fields_set:
                data.pop(name, None)
                data.pop(type(self).model_fields[name].alias, None)
        return data


class PropertyDetail(PropertySummary):
    """Full listing view."""

    description: str
    currency: str
    listing_type: str
    prediction_confidence: Optional[float] = None
    owner_id: Optional[str] = None
    is_active: bool = True
    updated_at: Optional[datetime] = None


class PropertyListResponse(CamelModel):
    success: bool = True
    data: List[PropertySummary]
    pagination: PaginationMeta


class PropertyDetailResponse(CamelModel):
    success: bool = True
    data: PropertyDetail
    message: Optional[str] = None


class Coordinate(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class AreaSearchFilters(CamelModel):
    property_type: Optional[str] = Field(None, alias="type")
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)


class AreaSearchRequest(CamelModel):
    """Polygon drawn on the map; only its bounding box is used."""

    coordinates: Optional[List[Coordinate]] = None
    filters: Optional[AreaSearchFilters] = None


class SearchBounds(CamelModel):
    north: float
    south: float
    east: float
    west: float


class SearchArea(CamelModel):
    bounds: SearchBounds


class AreaSearchResponse(CamelModel):
    success: bool = True
    data: List[PropertySummary]
    search_area: SearchArea
