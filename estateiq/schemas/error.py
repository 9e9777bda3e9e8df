"""
Error response schemas used in endpoint documentation.
Every failure is returned as ``{success: false, message, error, details?, requestId}``.
"""

from pydantic import Field
from typing import Any, Dict, List, Optional
from estateiq.schemas.common import CamelModel


class ErrorDetail(CamelModel):
    """Single field-level problem in a validation error."""

    field: str = Field(..., description="Dotted path of the offending field", examples=["email"])
    message: str = Field(..., description="What is wrong with the value")
    type: Optional[str] = Field(None, description="Validator error type")


class ErrorResponse(CamelModel):
    """Standard error envelope."""

    success: bool = False
    message: str = Field(..., description="Human-readable error message")
    error: str = Field(..., description="Machine-readable error code", examples=["NOT_FOUND"])
    details: Optional[List[ErrorDetail]] = None
    request_id: Optional[str] = Field(None, description="Identifier for log correlation")


def _example(code: str, message: str) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "error": code,
        "requestId": "abc12345",
    }


COMMON_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {
        "description": "Bad Request - invalid input or business rule violation",
        "model": ErrorResponse,
        "content": {"application/json": {"example": _example("VALIDATION_ERROR", "Request validation failed")}},
    },
    401: {
        "description": "Unauthorized - missing, invalid or expired token",
        "model": ErrorResponse,
        "content": {"application/json": {"example": _example("UNAUTHORIZED", "Authentication token required")}},
    },
    403: {
        "description": "Forbidden - not allowed to modify this resource",
        "model": ErrorResponse,
        "content": {"application/json": {"example": _example("FORBIDDEN", "Insufficient permissions to update this property")}},
    },
    404: {
        "description": "Not Found",
        "model": ErrorResponse,
        "content": {"application/json": {"example": _example("NOT_FOUND", "Property not found")}},
    },
    500: {
        "description": "Internal Server Error",
        "model": ErrorResponse,
        "content": {"application/json": {"example": _example("INTERNAL_SERVER_ERROR", "An unexpected error occurred. Please try again later.")}},
    },
    503: {
        "description": "Service Unavailable",
        "model": ErrorResponse,
        "content": {"application/json": {"example": _example("SERVICE_UNAVAILABLE", "Database connection failed")}},
    },
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_common_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get common error response schemas for most endpoints."""
    return get_error_responses(400, 404, 500)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for authenticated write operations."""
    return get_error_responses(400, 401, 403, 404, 500)
