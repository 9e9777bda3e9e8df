"""
Authentication API endpoints: registration, login, profile and token checks.
Tokens are stateless JWTs valid for 7 days.
"""

from fastapi import APIRouter, Depends, status
from estateiq.models.user import User
from estateiq.services.auth import AuthService
from estateiq.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    AuthData,
    AuthResponse,
    UserData,
    UserDataResponse,
    TokenUserResponse,
)
from estateiq.schemas.common import MessageResponse
from estateiq.schemas.user import UserResponse, ProfileUpdateRequest
from estateiq.schemas.error import get_error_responses, get_crud_error_responses
from estateiq.utils.auth import TokenPayload
from estateiq.utils.dependencies import get_auth_service, get_current_user, get_token_payload
from estateiq.utils.exceptions import APIException, BadRequestError, InternalServerError
import uuid
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(user: User, token: str, message: str) -> AuthResponse:
    return AuthResponse(
        data=AuthData(user=UserResponse.model_validate(user.to_dict()), token=token),
        message=message
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    responses=get_error_responses(400, 500)
)
async def register(
    register_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Create an account and return it with an access token.

    Raises:
        ValidationError: If the password is shorter than 8 characters
        DuplicateResourceError: If the email or phone number is already registered
    """
    try:
        user, token = await auth_service.register(register_data)
        return _auth_response(user, token, "User registered successfully")

    except APIException:
        raise
    except Exception as e:
        logger.error(f"Registration endpoint failed: {e}")
        raise InternalServerError()


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    responses=get_error_responses(400, 401, 500)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Authenticate with email and password.

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong
    """
    user, token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    return _auth_response(user, token, "Login successful")


@router.get(
    "/profile",
    response_model=UserDataResponse,
    summary="Get profile",
    description="Fresh user data from the database",
    responses=get_error_responses(401, 404, 500)
)
async def get_profile(
    token_payload: TokenPayload = Depends(get_token_payload),
    auth_service: AuthService = Depends(get_auth_service)
) -> UserDataResponse:
    """
    Raises:
        UserNotFoundError: If the token's user has been deleted
    """
    try:
        user_id = uuid.UUID(token_payload.user_id)
    except ValueError:
        raise BadRequestError("Invalid user identifier in token")

    user = await auth_service.get_user_by_id(user_id)
    return UserDataResponse(
        data=UserData(user=UserResponse.model_validate(user.to_dict())),
        message="Profile retrieved successfully"
    )


@router.put(
    "/profile",
    response_model=AuthResponse,
    summary="Update profile",
    description="Update names and phone number; returns a re-issued token",
    responses=get_crud_error_responses()
)
async def update_profile(
    profile_data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    user, token = await auth_service.update_profile(current_user, profile_data)
    return _auth_response(user, token, "Profile updated successfully")


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="User logout",
    description="Tokens are stateless; the client discards its copy"
)
async def logout() -> MessageResponse:
    logger.info("User logout request received")
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/verify",
    response_model=UserDataResponse,
    summary="Verify token",
    responses=get_error_responses(401)
)
async def verify(
    token_payload: TokenPayload = Depends(get_token_payload)
) -> UserDataResponse:
    return UserDataResponse(
        data=UserData(user=UserResponse.model_validate(token_payload.to_user_dict())),
        message="Token is valid"
    )


@router.get(
    "/me",
    response_model=TokenUserResponse,
    summary="Get current user from token",
    description="User fields carried inside the token, without a database lookup",
    responses=get_error_responses(401)
)
async def get_me(
    token_payload: TokenPayload = Depends(get_token_payload)
) -> TokenUserResponse:
    return TokenUserResponse(
        data=UserResponse.model_validate(token_payload.to_user_dict()),
        message="User profile retrieved successfully"
    )
