"""
Pydantic schemas for request/response validation.
All public payloads use camelCase keys.
"""

from estateiq.schemas.common import APIResponse, MessageResponse, PaginationMeta
from estateiq.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    AuthData,
    AuthResponse,
    UserData,
    UserDataResponse,
    TokenUserResponse,
)
from estateiq.schemas.user import (
    UserResponse,
    ProfileUpdateRequest,
    ChangePasswordRequest,
    FavoriteNotesRequest,
    FavoriteItem,
    FavoriteRecord,
    FavoriteStatus,
    FavoriteListResponse,
)
from estateiq.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertySummary,
    PropertyDetail,
    PropertyListResponse,
    PropertyDetailResponse,
    AreaSearchRequest,
    AreaSearchResponse,
)
from estateiq.schemas.prediction import (
    PricePredictionRequest,
    PricePredictionResponse,
    PropertyPredictionResponse,
    PredictionHistoryResponse,
    FactorCatalogueResponse,
    MarketTrendsResponse,
)
from estateiq.schemas.error import ErrorResponse

__all__ = [
    "APIResponse",
    "MessageResponse",
    "PaginationMeta",
    "RegisterRequest",
    "LoginRequest",
    "AuthData",
    "AuthResponse",
    "UserData",
    "UserDataResponse",
    "TokenUserResponse",
    "UserResponse",
    "ProfileUpdateRequest",
    "ChangePasswordRequest",
    "FavoriteNotesRequest",
    "FavoriteItem",
    "FavoriteRecord",
    "FavoriteStatus",
    "FavoriteListResponse",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertySummary",
    "PropertyDetail",
    "PropertyListResponse",
    "PropertyDetailResponse",
    "AreaSearchRequest",
    "AreaSearchResponse",
    "PricePredictionRequest",
    "PricePredictionResponse",
    "PropertyPredictionResponse",
    "PredictionHistoryResponse",
    "FactorCatalogueResponse",
    "MarketTrendsResponse",
    "ErrorResponse",
]
