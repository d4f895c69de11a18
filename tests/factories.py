"""Test data factories for Recipe Organizer API tests"""

import uuid
from datetime import date, timedelta
from typing import List, Optional

from recipe_organizer.auth.passwords import hash_password
from recipe_organizer.models.user import UserPreferences


def create_user(
    user_id: Optional[str] = None,
    email: Optional[str] = None,
    name: str = "Test User",
    password: str = "secret123",
) -> dict:
    """Create a user document for storing directly in the database"""
    uid = user_id or str(uuid.uuid4())
    return {
        "id": uid,
        "email": email or f"user-{uid[:8]}@example.com",
        "name": name,
        "password_hash": hash_password(password),
        "avatar": None,
        "preferences": UserPreferences().model_dump(),
        "is_email_verified": False,
    }


def recipe_request(
    title: str = "Tomato Soup",
    is_public: bool = False,
    servings: int = 4,
    tags: Optional[List[str]] = None,
    ingredients: Optional[List[dict]] = None,
    **overrides,
) -> dict:
    """Request body for POST /recipes"""
    body = {
        "title": title,
        "description": f"How to make {title.lower()}",
        "prepTime": 10,
        "cookTime": 20,
        "servings": servings,
        "difficulty": "easy",
        "cuisine": "Italian",
        "category": "Soup",
        "ingredients": ingredients or [
            {"name": "Tomato", "quantity": 4, "unit": "pcs"},
            {"name": "Olive oil", "quantity": 2, "unit": "tbsp"},
        ],
        "instructions": [
            {"stepNumber": 1, "instruction": "Chop the tomatoes"},
            {"stepNumber": 2, "instruction": "Simmer for 20 minutes", "duration": 20},
        ],
        "tags": tags if tags is not None else ["soup", "vegetarian"],
        "isPublic": is_public,
    }
    body.update(overrides)
    return body


def pantry_item_request(
    name: str = "Milk",
    quantity: float = 2,
    location: str = "fridge",
    expires_in_days: Optional[int] = None,
    **overrides,
) -> dict:
    """Request body for POST /pantry"""
    body = {
        "ingredientName": name,
        "category": "dairy",
        "quantity": quantity,
        "unit": "l",
        "location": location,
    }
    if expires_in_days is not None:
        body["expirationDate"] = (date.today() + timedelta(days=expires_in_days)).isoformat()
    body.update(overrides)
    return body


def shopping_item_request(name: str = "Eggs", quantity: float = 12, **overrides) -> dict:
    body = {"ingredientName": name, "quantity": quantity, "unit": "pcs"}
    body.update(overrides)
    return body


def meal_plan_request(
    recipe_id: Optional[str] = None,
    start: Optional[date] = None,
    days: int = 7,
    **overrides,
) -> dict:
    """Request body for POST /meal-plans"""
    start = start or date(2026, 3, 2)
    body = {
        "name": "Week plan",
        "startDate": start.isoformat(),
        "endDate": (start + timedelta(days=days - 1)).isoformat(),
        "meals": [],
    }
    if recipe_id:
        body["meals"] = [
            {"recipeId": recipe_id, "date": start.isoformat(), "mealType": "dinner"},
        ]
    body.update(overrides)
    return body
