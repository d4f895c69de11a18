"""User and authentication models"""

from typing import List, Literal, Optional

from pydantic import EmailStr, Field, field_validator

from recipe_organizer.models.base import CamelModel, RequestModel


class NutritionGoals(CamelModel):
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    fiber: Optional[float] = None
    sodium: Optional[float] = None


class UserPreferences(CamelModel):
    dietary_restrictions: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    cuisine_preferences: List[str] = Field(default_factory=list)
    cooking_skill_level: Literal["beginner", "intermediate", "advanced"] = "beginner"
    meal_prep_time: int = 30
    serving_size: int = 4
    nutrition_goals: NutritionGoals = Field(default_factory=NutritionGoals)


class UserPreferencesUpdate(RequestModel):
    """Partial preferences overlay"""
    dietary_restrictions: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    cuisine_preferences: Optional[List[str]] = None
    cooking_skill_level: Optional[Literal["beginner", "intermediate", "advanced"]] = None
    meal_prep_time: Optional[int] = Field(None, ge=0)
    serving_size: Optional[int] = Field(None, ge=1)
    nutrition_goals: Optional[NutritionGoals] = None


class RegisterRequest(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=2, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdateRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    avatar: Optional[str] = None
    preferences: Optional[UserPreferencesUpdate] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    avatar: Optional[str] = None
    preferences: UserPreferences
    is_email_verified: bool = False
    created_at: str
    updated_at: Optional[str] = None

    @classmethod
    def from_document(cls, user: dict) -> "UserResponse":
        return cls(
            id=user["id"],
            email=user["email"],
            name=user["name"],
            avatar=user.get("avatar"),
            preferences=UserPreferences(**(user.get("preferences") or {})),
            is_email_verified=user.get("is_email_verified", False),
            created_at=user["created_at"],
            updated_at=user.get("updated_at"),
        )


class AuthResponse(CamelModel):
    message: str
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
