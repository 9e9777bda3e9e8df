"""
Tests for error handling and response formatting.
Tests custom exceptions, the error envelope and the request logging middleware.
"""

import pytest
import json
from unittest.mock import Mock
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError, OperationalError

from estateiq.services.error_handler import ErrorHandlerService, GENERIC_ERROR_MESSAGE
from estateiq.utils.exceptions import (
    BadRequestError,
    DuplicateResourceError,
    ForbiddenError,
    InsufficientPermissionsError,
    InternalServerError,
    NotFoundError,
    PropertyNotFoundError,
    UnauthorizedError,
    ValidationError,
)


class TestExceptions:
    """Test custom exception status codes and error codes."""

    @pytest.mark.parametrize("exception,status_code,error_code", [
        (BadRequestError("bad"), 400, "BAD_REQUEST"),
        (ValidationError("invalid"), 400, "VALIDATION_ERROR"),
        (DuplicateResourceError("taken"), 400, "DUPLICATE_RESOURCE"),
        (UnauthorizedError(), 401, "UNAUTHORIZED"),
        (ForbiddenError(), 403, "FORBIDDEN"),
        (NotFoundError("Thing"), 404, "NOT_FOUND"),
        (InternalServerError(), 500, "INTERNAL_SERVER_ERROR"),
    ])
    def test_status_and_code(self, exception, status_code, error_code):
        assert exception.status_code == status_code
        assert exception.error_code == error_code

    def test_insufficient_permissions_message(self):
        assert InsufficientPermissionsError("delete this property").detail == (
            "Insufficient permissions to delete this property"
        )

    def test_not_found_default_message(self):
        assert PropertyNotFoundError().detail == "Property not found"


class TestErrorHandlerService:
    """Test error envelope formatting."""

    def test_format_error_response(self):
        response = ErrorHandlerService.format_error_response(
            error_code="TEST_ERROR",
            message="Test error message",
            details=[{"field": "price", "message": "must be positive"}],
            request_id="abc12345"
        )

        assert response == {
            "success": False,
            "message": "Test error message",
            "error": "TEST_ERROR",
            "details": [{"field": "price", "message": "must be positive"}],
            "requestId": "abc12345",
        }

    def test_format_error_response_omits_empty_details(self):
        response = ErrorHandlerService.format_error_response("TEST_ERROR", "message", request_id="abc")

        assert "details" not in response

    def test_handle_api_exception(self):
        response = ErrorHandlerService.handle_api_exception(PropertyNotFoundError())

        assert response.status_code == 404
        body = json.loads(response.body)
        assert body["success"] is False
        assert body["message"] == "Property not found"
        assert body["error"] == "NOT_FOUND"
        assert len(body["requestId"]) == 8

    def test_handle_api_exception_reuses_request_id(self):
        request = Mock()
        request.state.request_id = "req00001"
        request.url.path = "/api/properties"

        response = ErrorHandlerService.handle_api_exception(BadRequestError("bad"), request)

        assert json.loads(response.body)["requestId"] == "req00001"

    def test_handle_validation_error(self):
        errors = [
            {"loc": ("body", "surface"), "msg": "Input should be greater than 0", "type": "greater_than"},
            {"loc": ("body", "location", "city"), "msg": "Field required", "type": "missing"},
        ]

        response = ErrorHandlerService.handle_validation_error(errors)

        assert response.status_code == 400
        body = json.loads(response.body)
        assert body["message"] == "surface: Input should be greater than 0"
        assert [d["field"] for d in body["details"]] == ["surface", "location.city"]

    def test_handle_integrity_error(self):
        exception = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))

        response = ErrorHandlerService.handle_database_error(exception)

        assert response.status_code == 400
        body = json.loads(response.body)
        assert body["error"] == "INTEGRITY_ERROR"
        assert body["message"] == "Constraint violation: Duplicate value for unique field"

    def test_handle_other_database_error(self):
        exception = OperationalError("SELECT 1", {}, Exception("connection refused"))

        response = ErrorHandlerService.handle_database_error(exception)

        assert response.status_code == 500
        assert json.loads(response.body)["error"] == "DATABASE_ERROR"

    def test_handle_unexpected_error_hides_details(self):
        response = ErrorHandlerService.handle_unexpected_error(RuntimeError("secret stack detail"))

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["message"] == GENERIC_ERROR_MESSAGE
        assert "secret" not in response.body.decode()


class TestErrorResponses:
    """Test error responses produced by the running app."""

    async def test_unknown_route(self, async_client: AsyncClient):
        response = await async_client.get("/api/does-not-exist")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "NOT_FOUND"
        assert body["requestId"] == response.headers["X-Request-ID"]

    async def test_method_not_allowed(self, async_client: AsyncClient):
        response = await async_client.delete("/api/predict/factors")

        assert response.status_code == 405
        assert response.json()["error"] == "METHOD_NOT_ALLOWED"

    async def test_malformed_json(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/login",
            content="{not json",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    async def test_missing_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/users/favorites")

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication token required"


class TestRequestLoggingMiddleware:

    async def test_request_id_headers(self, async_client: AsyncClient):
        response = await async_client.get("/")

        assert len(response.headers["X-Request-ID"]) == 8
        assert float(response.headers["X-Processing-Time"]) >= 0

    async def test_client_request_id_is_echoed(self, async_client: AsyncClient):
        response = await async_client.get("/", headers={"X-Request-ID": "client-trace-1"})

        assert response.headers["X-Request-ID"] == "client-trace-1"

    async def test_oversized_request_rejected(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/login",
            content=b"x" * (1024 * 1024 + 1),
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["message"].startswith("Request size")


class TestHealthEndpoints:

    async def test_root(self, async_client: AsyncClient):
        response = await async_client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["api_prefix"] == "/api"

    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"
