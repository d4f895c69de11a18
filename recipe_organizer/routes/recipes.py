"""Recipe routes"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from recipe_organizer.auth.jwt import get_current_user, get_current_user_optional
from recipe_organizer.errors import Forbidden, NotFound
from recipe_organizer.models.base import MessageResponse, Pagination
from recipe_organizer.models.recipe import (
    Difficulty,
    RecipeCreateRequest,
    RecipeListResponse,
    RecipeResponse,
    RecipeUpdateRequest,
)
from recipe_organizer.services.database_service import db_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _newest_first(docs: List[dict]) -> List[dict]:
    return sorted(docs, key=lambda d: d.get("created_at", ""), reverse=True)


def _matches_search(recipe: dict, term: str) -> bool:
    term = term.lower()
    return (
        term in recipe.get("title", "").lower()
        or term in recipe.get("description", "").lower()
        or any(term in tag.lower() for tag in recipe.get("tags", []))
    )


def get_visible_recipe(recipe_id: str, user: Optional[dict]) -> dict:
    """Load a recipe the user may read; other users' private recipes are hidden"""
    recipe = db_service.get_recipe(recipe_id)
    if not recipe:
        raise NotFound("Recipe not found", {"recipe_id": recipe_id})
    if not recipe.get("is_public") and (not user or recipe["created_by"] != user["id"]):
        raise NotFound("Recipe not found", {"recipe_id": recipe_id})
    return recipe


def _get_owned_recipe(recipe_id: str, user: dict, action: str) -> dict:
    recipe = db_service.get_recipe(recipe_id)
    if not recipe:
        raise NotFound("Recipe not found", {"recipe_id": recipe_id})
    if recipe["created_by"] != user["id"]:
        raise Forbidden(f"Not authorized to {action} this recipe", {"recipe_id": recipe_id})
    return recipe


@router.get("", response_model=RecipeListResponse)
async def list_recipes(
    search: Optional[str] = None,
    tags: Optional[str] = None,
    difficulty: Optional[Difficulty] = None,
    cuisine: Optional[str] = None,
    category: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: Optional[dict] = Depends(get_current_user_optional)
):
    """List public recipes plus the caller's own"""
    recipes = db_service.get_visible_recipes(current_user["id"] if current_user else None)

    if search:
        recipes = [r for r in recipes if _matches_search(r, search)]
    if tags:
        wanted = {t.strip() for t in tags.split(",") if t.strip()}
        recipes = [r for r in recipes if wanted.intersection(r.get("tags", []))]
    if difficulty:
        recipes = [r for r in recipes if r.get("difficulty") == difficulty]
    if cuisine:
        recipes = [r for r in recipes if r.get("cuisine") == cuisine]
    if category:
        recipes = [r for r in recipes if r.get("category") == category]

    page_items, pagination = Pagination.slice(_newest_first(recipes), page, limit)
    return RecipeListResponse(
        recipes=[RecipeResponse(**r) for r in page_items],
        pagination=pagination,
    )


@router.get("/my", response_model=List[RecipeResponse])
async def list_my_recipes(
    current_user: dict = Depends(get_current_user)
):
    """Get the current user's recipes"""
    recipes = db_service.get_user_recipes(current_user["id"])
    return [RecipeResponse(**r) for r in _newest_first(recipes)]


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    current_user: Optional[dict] = Depends(get_current_user_optional)
):
    """Get a recipe by ID"""
    return RecipeResponse(**get_visible_recipe(recipe_id, current_user))


@router.post("", response_model=RecipeResponse, status_code=201)
async def create_recipe(
    request: RecipeCreateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Create a recipe owned by the current user"""
    recipe = db_service.create_recipe({
        **request.model_dump(),
        "rating": 0,
        "review_count": 0,
        "created_by": current_user["id"],
    })
    return RecipeResponse(**recipe)


@router.put("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    request: RecipeUpdateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Update a recipe (owner only)"""
    _get_owned_recipe(recipe_id, current_user, "update")
    updates = request.model_dump(exclude_unset=True, exclude_none=True)
    recipe = db_service.update_recipe(recipe_id, updates)
    logger.info(f"Recipe {recipe_id} updated by {current_user['id']}")
    return RecipeResponse(**recipe)


@router.delete("/{recipe_id}", response_model=MessageResponse)
async def delete_recipe(
    recipe_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Delete a recipe (owner only)"""
    _get_owned_recipe(recipe_id, current_user, "delete")
    db_service.delete_recipe(recipe_id)
    return MessageResponse(message="Recipe deleted successfully")
