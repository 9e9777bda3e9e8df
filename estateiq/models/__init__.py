"""
Database models for the EstateIQ API.
Includes users, listings, images, stored predictions, favorites and amenities.
"""

from estateiq.models.user import User, UserType
from estateiq.models.feature import Feature, property_feature_link
from estateiq.models.property import Property, ListingType, Currency
from estateiq.models.image import PropertyImage
from estateiq.models.prediction import PricePrediction
from estateiq.models.saved_listing import SavedListing

# Export all models for easy importing
__all__ = [
    "User",
    "UserType",
    "Property",
    "ListingType",
    "Currency",
    "PropertyImage",
    "PricePrediction",
    "SavedListing",
    "Feature",
    "property_feature_link",
]
