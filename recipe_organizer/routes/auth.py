"""Authentication routes"""

import logging

from fastapi import APIRouter, Depends, status

from recipe_organizer.auth.jwt import create_user_token, get_current_user
from recipe_organizer.auth.passwords import hash_password, needs_rehash, verify_password
from recipe_organizer.errors import Conflict, Unauthenticated
from recipe_organizer.models.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserPreferences,
    UserResponse,
)
from recipe_organizer.services.database_service import db_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """Create an account and return an access token"""
    with db_service.transaction():
        if db_service.get_user_by_email(request.email):
            raise Conflict("User already exists with this email")

        user = db_service.create_user({
            "email": request.email,
            "name": request.name,
            "password_hash": hash_password(request.password),
            "avatar": None,
            "preferences": UserPreferences().model_dump(),
            "is_email_verified": False,
        })

    logger.info(f"User registered: {user['id']}")
    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.from_document(user),
        access_token=create_user_token(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    """Exchange email and password for an access token"""
    user = db_service.get_user_by_email(request.email)
    if not user or not verify_password(user.get("password_hash", ""), request.password):
        logger.warning(f"Failed login attempt for {request.email}")
        raise Unauthenticated("Invalid email or password")

    if needs_rehash(user["password_hash"]):
        user = db_service.update_user(user["id"], {"password_hash": hash_password(request.password)})

    logger.info(f"User logged in: {user['id']}")
    return AuthResponse(
        message="Login successful",
        user=UserResponse.from_document(user),
        access_token=create_user_token(user),
    )


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    current_user: dict = Depends(get_current_user)
):
    """Get current user's profile"""
    return UserResponse.from_document(current_user)
