"""
API route handlers for the EstateIQ API.
"""

from .auth import router as auth_router
from .properties import router as properties_router, listings_router
from .predictions import router as predictions_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "properties_router",
    "listings_router",
    "predictions_router",
    "users_router",
]
