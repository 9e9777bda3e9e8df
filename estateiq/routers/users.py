"""
Account endpoints for the authenticated user: profile, password and favorites.
"""

from fastapi import APIRouter, Depends, status, Path, Body
from typing import Optional
from uuid import UUID
import logging

from estateiq.models.user import User
from estateiq.services.user import UserService
from estateiq.schemas.auth import UserData, UserDataResponse
from estateiq.schemas.common import APIResponse, MessageResponse
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
from estateiq.schemas.error import get_crud_error_responses, get_error_responses
from estateiq.utils.dependencies import get_current_user, get_user_service
from estateiq.utils.exceptions import APIException, InternalServerError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _favorite_record(favorite) -> FavoriteRecord:
    return FavoriteRecord.model_validate(favorite.to_dict())


@router.get(
    "/profile",
    response_model=UserDataResponse,
    summary="Get my profile",
    responses=get_error_responses(401)
)
async def get_profile(current_user: User = Depends(get_current_user)) -> UserDataResponse:
    return UserDataResponse(data=UserData(user=UserResponse.model_validate(current_user.to_dict())))


@router.put(
    "/profile",
    response_model=UserDataResponse,
    summary="Update my profile",
    description="First and last name are required; the phone number must not belong to another account",
    responses=get_crud_error_responses()
)
async def update_profile(
    profile_data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
) -> UserDataResponse:
    user = await user_service.update_profile(current_user, profile_data)
    return UserDataResponse(
        data=UserData(user=UserResponse.model_validate(user.to_dict())),
        message="Profile updated successfully"
    )


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change my password",
    responses=get_error_responses(400, 401, 500)
)
async def change_password(
    password_data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
) -> MessageResponse:
    """
    Raises:
        ValidationError: On missing fields, mismatch, short password or wrong current password
    """
    try:
        await user_service.change_password(current_user, password_data)
        return MessageResponse(message="Password changed successfully")

    except APIException:
        raise
    except Exception as e:
        logger.error(f"Password change failed for user {current_user.id}: {e}", exc_info=True)
        raise InternalServerError()


@router.get(
    "/favorites",
    response_model=FavoriteListResponse,
    summary="List my saved listings",
    responses=get_error_responses(401)
)
async def list_favorites(
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
) -> FavoriteListResponse:
    favorites = await user_service.list_favorites(current_user)
    return FavoriteListResponse(data=[FavoriteItem.model_validate(item) for item in favorites])


@router.post(
    "/favorites/{property_id}",
    response_model=APIResponse[FavoriteRecord],
    status_code=status.HTTP_201_CREATED,
    summary="Save a listing",
    responses=get_crud_error_responses()
)
async def add_favorite(
    property_id: UUID = Path(..., description="Property ID"),
    notes_data: Optional[FavoriteNotesRequest] = Body(None),
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
) -> APIResponse[FavoriteRecord]:
    """
    Raises:
        PropertyNotFoundError: If the listing does not exist
        DuplicateResourceError: If the listing is already saved
    """
    favorite = await user_service.add_favorite(
        current_user,
        property_id,
        notes_data.notes if notes_data else None
    )
    return APIResponse[FavoriteRecord](
        data=_favorite_record(favorite),
        message="Property added to favorites successfully"
    )


@router.delete(
    "/favorites/{property_id}",
    response_model=MessageResponse,
    summary="Remove a saved listing",
    responses=get_crud_error_responses()
)
async def remove_favorite(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
) -> MessageResponse:
    await user_service.remove_favorite(current_user, property_id)
    return MessageResponse(message="Property removed from favorites successfully")


@router.put(
    "/favorites/{property_id}/notes",
    response_model=APIResponse[FavoriteRecord],
    summary="Update notes on a saved listing",
    responses=get_crud_error_responses()
)
async def update_favorite_notes(
    notes_data: FavoriteNotesRequest,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
) -> APIResponse[FavoriteRecord]:
    favorite = await user_service.update_favorite_notes(current_user, property_id, notes_data.notes)
    return APIResponse[FavoriteRecord](
        data=_favorite_record(favorite),
        message="Notes updated successfully"
    )


@router.get(
    "/favorites/{property_id}/status",
    response_model=APIResponse[FavoriteStatus],
    summary="Check whether a listing is saved",
    responses=get_error_responses(400, 401)
)
async def favorite_status(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
) -> APIResponse[FavoriteStatus]:
    is_favorite = await user_service.is_favorite(current_user, property_id)
    return APIResponse[FavoriteStatus](data=FavoriteStatus(is_favorite=is_favorite))
