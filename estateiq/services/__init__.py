"""
Service layer for business logic implementation.
Contains services for authentication, listings, predictions, user accounts and error handling.
"""

from .auth import AuthService
from .property import PropertyService
from .prediction import PredictionService
from .user import UserService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "PredictionService",
    "UserService",
    "ErrorHandlerService"
]
