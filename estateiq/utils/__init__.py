"""
Utility modules for the EstateIQ API.
"""

from .auth import (
    create_access_token,
    verify_token,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    BadRequestError,
    InternalServerError,
    ServiceUnavailableError,
    InvalidCredentialsError,
    TokenExpiredError,
    InvalidTokenError,
    InsufficientPermissionsError,
    PropertyNotFoundError,
    UserNotFoundError,
    FavoriteNotFoundError,
    DuplicateResourceError
)

from .pricing import estimate_price, PriceEstimate

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_access_token",
    "verify_token",
    "TokenPayload",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "BadRequestError",
    "InternalServerError",
    "ServiceUnavailableError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "InvalidTokenError",
    "InsufficientPermissionsError",
    "PropertyNotFoundError",
    "UserNotFoundError",
    "FavoriteNotFoundError",
    "DuplicateResourceError",

    # Pricing
    "estimate_price",
    "PriceEstimate",
]
