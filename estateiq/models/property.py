"""
Property model for sale and rental listings.
Handles listing data with location, pricing, and relationship management.
"""

from sqlalchemy import (
    String, Text, Integer, Numeric, Float, Boolean, Uuid,
    Enum as SQLEnum, Index, ForeignKey
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estateiq.database import Base, as_utc, utcnow
from estateiq.models.feature import property_feature_link
from decimal import Decimal
from datetime import timedelta
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estateiq.models.user import User
    from estateiq.models.image import PropertyImage
    from estateiq.models.prediction import PricePrediction
    from estateiq.models.saved_listing import SavedListing
    from estateiq.models.feature import Feature


class ListingType(str, enum.Enum):
    """Listing type enumeration for sale or rental listings."""
    SALE = "SALE"
    RENT = "RENT"


class Currency(str, enum.Enum):
    EUR = "EUR"
    RON = "RON"
    USD = "USD"


class Property(Base):
    """
    Property model for managing sale and rental listings.
    Coordinates are plain float columns; area search filters on a bounding box.
    """

    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )

    # Basic listing information
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Listing title"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Detailed property description"
    )

    listing_type: Mapped[ListingType] = mapped_column(
        SQLEnum(ListingType),
        nullable=False,
        default=ListingType.SALE,
        index=True
    )

    property_category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
        comment="apartment, house, villa, duplex, studio, penthouse, ..."
    )

    # Pricing information
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        index=True
    )

    currency: Mapped[Currency] = mapped_column(
        SQLEnum(Currency),
        nullable=False,
        default=Currency.EUR
    )

    # Property specifications
    total_surface_area: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Surface area in square meters"
    )

    number_of_rooms: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    construction_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Location information
    address_text: Mapped[str] = mapped_column(String(500), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    county: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Status and ownership
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the listing is publicly visible"
    )

    owner_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="User who created the listing; imported listings have none"
    )

    # Relationships
    owner: Mapped[Optional["User"]] = relationship(
        "User",
        back_populates="properties",
        lazy="noload"
    )

    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="(PropertyImage.is_primary.desc(), PropertyImage.sort_order.asc(), PropertyImage.id.asc())"
    )

    predictions: Mapped[List["PricePrediction"]] = relationship(
        "PricePrediction",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="(PricePrediction.prediction_date.desc(), PricePrediction.id.desc())"
    )

    features: Mapped[List["Feature"]] = relationship(
        "Feature",
        secondary=property_feature_link,
        back_populates="properties",
        lazy="selectin",
        order_by="Feature.feature_name"
    )

    saved_listings: Mapped[List["SavedListing"]] = relationship(
        "SavedListing",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="select"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}..., price={self.price})>"

    @property
    def primary_image(self) -> Optional["PropertyImage"]:
        """Get the primary image for this property."""
        for image in self.images:
            if image.is_primary:
                return image
        # Fall back to the first image if no primary is set
        return self.images[0] if self.images else None

    @property
    def latest_prediction(self) -> Optional["PricePrediction"]:
        return self.predictions[0] if self.predictions else None

    @property
    def predicted_price(self) -> Optional[float]:
        prediction = self.latest_prediction
        return float(prediction.predicted_price) if prediction else None

    def is_new_listing(self, window_days: int = 7) -> bool:
        """Check whether the listing was created within the last ``window_days`` days."""
        if not self.created_at:
            return False
        return as_utc(self.created_at) > utcnow() - timedelta(days=window_days)

    def validate_price(self) -> None:
        """
        Validate listing price.

        Raises:
            ValueError: If price is invalid
        """
        if self.price is None or Decimal(str(self.price)) <= 0:
            raise ValueError("Property price must be greater than 0")

        if Decimal(str(self.price)) > Decimal("999999999999.99"):
            raise ValueError("Property price exceeds maximum allowed value")

    def validate_rooms(self) -> None:
        if self.number_of_rooms is None or self.number_of_rooms < 0:
            raise ValueError("Number of rooms cannot be negative")

        if self.bathrooms is not None and self.bathrooms < 0:
            raise ValueError("Number of bathrooms cannot be negative")

    def validate_area(self) -> None:
        if self.total_surface_area is None or self.total_surface_area <= 0:
            raise ValueError("Property surface must be greater than 0")

    def validate_coordinates(self) -> None:
        """
        Validate latitude and longitude coordinates.

        Raises:
            ValueError: If coordinates are invalid
        """
        if self.latitude is not None:
            if not (-90 <= self.latitude <= 90):
                raise ValueError("Latitude must be between -90 and 90 degrees")

        if self.longitude is not None:
            if not (-180 <= self.longitude <= 180):
                raise ValueError("Longitude must be between -180 and 180 degrees")

    def validate_all(self) -> None:
        """
        Run all validation checks on the property.

        Raises:
            ValueError: If any validation fails
        """
        self.validate_price()
        self.validate_rooms()
        self.validate_area()
        self.validate_coordinates()

    def to_dict(self, include_relationships: bool = False) -> dict:
        """
        Convert property to dictionary using column names.

        Args:
            include_relationships: Whether to include images, features and the latest prediction

        Returns:
            Dictionary representation of property
        """
        result = {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "listing_type": self.listing_type.value,
            "property_category": self.property_category,
            "price": float(self.price),
            "currency": self.currency.value,
            "total_surface_area": self.total_surface_area,
            "number_of_rooms": self.number_of_rooms,
            "bathrooms": self.bathrooms,
            "construction_year": self.construction_year,
            "address_text": self.address_text,
            "city": self.city,
            "county": self.county,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "is_active": self.is_active,
            "owner_id": str(self.owner_id) if self.owner_id else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_relationships:
            result["images"] = [image.to_dict() for image in self.images]
            result["features"] = [feature.feature_name for feature in self.features]
            prediction = self.latest_prediction
            result["latest_prediction"] = prediction.to_dict() if prediction else None

        return result


# Composite index for the default listing query (active listings, newest first)
active_created_index = Index(
    "idx_properties_active_created",
    Property.is_active,
    Property.created_at.desc()
)

# Composite index for comparable lookups and market statistics
city_category_index = Index(
    "idx_properties_city_category",
    Property.city,
    Property.property_category,
    Property.is_active
)

# Bounding-box searches on plain coordinate columns
coordinates_index = Index(
    "idx_properties_coordinates",
    Property.latitude,
    Property.longitude
)
