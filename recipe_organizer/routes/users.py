"""User routes"""

import logging

from fastapi import APIRouter, Depends

from recipe_organizer.auth.jwt import get_current_user
from recipe_organizer.errors import NotFound, ValidationFailed
from recipe_organizer.models.user import UserPreferences, UserResponse, UserUpdateRequest
from recipe_organizer.services.database_service import db_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(
    current_user: dict = Depends(get_current_user)
):
    """Get current user's profile"""
    return UserResponse.from_document(current_user)


@router.put("/me", response_model=UserResponse)
async def update_current_user_profile(
    updates: UserUpdateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Update current user's profile"""
    update_data = updates.model_dump(exclude_unset=True, exclude_none=True, exclude={"preferences"})

    if updates.preferences is not None:
        # Overlay onto the stored preferences so omitted keys survive
        preferences = UserPreferences(**(current_user.get("preferences") or {})).model_dump()
        preferences.update(updates.preferences.model_dump(exclude_unset=True, exclude_none=True))
        update_data["preferences"] = UserPreferences(**preferences).model_dump()

    if not update_data:
        raise ValidationFailed("No updates provided")

    updated_user = db_service.update_user(current_user["id"], update_data)

    if not updated_user:
        raise NotFound("User not found")

    logger.info(f"User {current_user['id']} updated profile fields: {sorted(update_data)}")
    return UserResponse.from_document(updated_user)
