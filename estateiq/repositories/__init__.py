"""
Repository layer for database operations.
"""

from estateiq.repositories.base import BaseRepository
from estateiq.repositories.user import UserRepository
from estateiq.repositories.property import PropertyRepository, PropertySearchFilters, BoundingBox
from estateiq.repositories.feature import FeatureRepository
from estateiq.repositories.prediction import PredictionRepository
from estateiq.repositories.favorite import FavoriteRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "BoundingBox",
    "FeatureRepository",
    "PredictionRepository",
    "FavoriteRepository",
]
