"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
import logging

from estateiq.config import settings
from estateiq.database import test_database_connection, create_tables, close_db_connection
from estateiq.routers import (
    auth_router,
    properties_router,
    listings_router,
    predictions_router,
    users_router,
)
from estateiq.utils.exceptions import APIException, ServiceUnavailableError
from estateiq.services.error_handler import ErrorHandlerService
from estateiq.middleware import RequestLoggingMiddleware

# Configure logging
logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Checks the database and creates missing tables on startup.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    db_connected = await test_database_connection()
    if db_connected:
        await create_tables()
    else:
        logger.error("Failed to connect to database on startup")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Real-estate listing and price estimation API.

    ## Features

    * **Listings**: Browse, filter and paginate active properties; owners manage their own listings
    * **Map search**: Find listings inside the bounding box of a drawn area
    * **Price estimates**: Formula-based price estimates, stored per listing with history
    * **Accounts**: Registration, JWT login, profile management and saved listings

    ## Authentication

    Obtain a token from `/api/auth/login` or `/api/auth/register` and send it as
    `Authorization: Bearer <token>`. Tokens are valid for 7 days.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login and token checks"},
        {"name": "Properties", "description": "Listing browsing, search and management"},
        {"name": "Predictions", "description": "Price estimates and market information"},
        {"name": "Users", "description": "Profile, password and saved listings"},
        {"name": "Health", "description": "Service status"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    RequestLoggingMiddleware,
    enable_request_logging=not settings.is_testing,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Processing-Time"],
)

app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(properties_router, prefix=settings.api_prefix)
app.include_router(listings_router, prefix=settings.api_prefix)
app.include_router(predictions_router, prefix=settings.api_prefix)
app.include_router(users_router, prefix=settings.api_prefix)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorHandlerService.handle_validation_error(exc.errors(), request)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
    return ErrorHandlerService.handle_validation_error(exc.errors(), request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    """Basic service information."""
    return {
        "success": True,
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check with a database round trip.
    Returns 503 when the database is unreachable.
    """
    if not await test_database_connection():
        raise ServiceUnavailableError("Database connection failed")

    return {
        "success": True,
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "estateiq.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
