"""
Exceptions raised by services and dependencies.
Each one carries the HTTP status and the ``error`` code of the error envelope.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """
    Base for errors rendered as ``{success: false, message, error, ...}``.
    Subclasses pick the status, the code and a default message.
    """

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "API_ERROR"
    default_detail: str = "Request failed"

    def __init__(self, detail: Optional[str] = None, headers: Optional[Dict[str, Any]] = None):
        super().__init__(
            status_code=self.http_status,
            detail=detail or self.default_detail,
            headers=headers
        )


class BadRequestError(APIException):
    http_status = status.HTTP_400_BAD_REQUEST
    error_code = "BAD_REQUEST"


class ValidationError(BadRequestError):
    """Rejected input. ``field_errors`` end up in the envelope's ``details``."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, detail: str, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(detail)
        self.field_errors = field_errors or []


class DuplicateResourceError(BadRequestError):
    """Email, phone number or favorite that already exists."""

    error_code = "DUPLICATE_RESOURCE"


class UnauthorizedError(APIException):
    http_status = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"
    default_detail = "Authentication required"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidCredentialsError(UnauthorizedError):
    default_detail = "Invalid email or password"


class TokenExpiredError(UnauthorizedError):
    default_detail = "Token has expired"


class InvalidTokenError(UnauthorizedError):
    default_detail = "Invalid token"


class ForbiddenError(APIException):
    http_status = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_detail = "Access forbidden"


class InsufficientPermissionsError(ForbiddenError):
    """Caller is neither the owner of the listing nor an admin."""

    def __init__(self, action: str):
        super().__init__(f"Insufficient permissions to {action}")


class NotFoundError(APIException):
    http_status = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, detail: Optional[str] = None):
        super().__init__(detail or f"{resource} not found")


class PropertyNotFoundError(NotFoundError):
    """Unknown listing, or an inactive one the caller may not see."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__("Property", detail)


class UserNotFoundError(NotFoundError):

    def __init__(self, detail: Optional[str] = None):
        super().__init__("User", detail)


class FavoriteNotFoundError(NotFoundError):

    def __init__(self, detail: str = "Property not found in your favorites"):
        super().__init__("Favorite", detail)


class InternalServerError(APIException):
    error_code = "INTERNAL_SERVER_ERROR"
    default_detail = "An unexpected error occurred. Please try again later."


class ServiceUnavailableError(APIException):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "SERVICE_UNAVAILABLE"
    default_detail = "Service temporarily unavailable"
