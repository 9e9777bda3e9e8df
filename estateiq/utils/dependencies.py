"""
FastAPI dependency injection utilities for authentication and services.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from estateiq.database import get_db
from estateiq.models.user import User
from estateiq.services.auth import AuthService
from estateiq.services.property import PropertyService
from estateiq.services.prediction import PredictionService
from estateiq.services.user import UserService
from estateiq.utils.auth import TokenPayload, verify_token
from estateiq.utils.exceptions import UnauthorizedError


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_prediction_service(db: AsyncSession = Depends(get_db)) -> PredictionService:
    return PredictionService(db)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenPayload:
    """
    Decode the bearer token without loading the user.

    Raises:
        UnauthorizedError: If no token is provided
        InvalidTokenError, TokenExpiredError: If the token does not verify
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    return verify_token(credentials.credentials)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        UnauthorizedError: If no token provided
        InvalidTokenError: If the token is invalid or its user no longer exists
        TokenExpiredError: If the token is expired
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    return await auth_service.get_current_user(credentials.credentials)


async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """
    Current user if a valid token is provided, otherwise None.
    Used by public endpoints that show more to owners and admins.
    """
    if not credentials:
        return None

    try:
        return await auth_service.get_current_user(credentials.credentials)
    except UnauthorizedError:
        return None
