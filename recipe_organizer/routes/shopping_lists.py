"""Shopping list routes"""

import logging
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Query, status

from recipe_organizer.auth.jwt import get_current_user
from recipe_organizer.errors import NotFound
from recipe_organizer.models.base import MessageResponse, Pagination
from recipe_organizer.models.shopping_list import (
    GenerateShoppingListRequest,
    ListStatus,
    MarkPurchasedRequest,
    ShoppingListCreateRequest,
    ShoppingListItemRequest,
    ShoppingListItemUpdateRequest,
    ShoppingListListResponse,
    ShoppingListResponse,
    ShoppingListStatistics,
    ShoppingListSummary,
    ShoppingListUpdateRequest,
)
from recipe_organizer.routes.recipes import get_visible_recipe
from recipe_organizer.services.database_service import db_service, generate_id

logger = logging.getLogger(__name__)
router = APIRouter()


def merge_item(items: List[dict], item: dict) -> dict:
    """Add ``item`` to ``items``, folding it into an entry with the same name"""
    name = item["ingredient_name"].lower()
    for existing in items:
        if existing["ingredient_name"].lower() == name:
            existing["quantity"] += item["quantity"]
            if item.get("estimated_price"):
                existing["estimated_price"] = item["estimated_price"]
            return existing

    new_item = {
        "id": generate_id(),
        "category": None,
        "estimated_price": None,
        "actual_price": None,
        "notes": None,
        **item,
        "is_purchased": False,
    }
    items.append(new_item)
    return new_item


def _find_item(shopping_list: dict, item_id: str) -> dict:
    for item in shopping_list["items"]:
        if item["id"] == item_id:
            return item
    raise NotFound("Item not found in shopping list", {"item_id": item_id})


def _get_list(list_id: str, user: dict) -> dict:
    shopping_list = db_service.get_shopping_list(list_id, user["id"])
    if not shopping_list:
        raise NotFound("Shopping list not found", {"list_id": list_id})
    return shopping_list


def _render(shopping_list: dict, with_statistics: bool = False) -> ShoppingListResponse:
    result = ShoppingListResponse(**shopping_list)
    if with_statistics:
        result.statistics = ShoppingListStatistics.from_items(shopping_list["items"])
    return result


def _save_items(shopping_list: dict, **extra) -> ShoppingListResponse:
    updated = db_service.update_shopping_list(shopping_list["id"], {"items": shopping_list["items"], **extra})
    return _render(updated, with_statistics=True)


@router.get("", response_model=ShoppingListListResponse)
async def list_shopping_lists(
    status_filter: Optional[ListStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: dict = Depends(get_current_user)
):
    """List shopping lists with counts per status"""
    all_lists = db_service.get_user_shopping_lists(current_user["id"])
    lists = all_lists

    if status_filter:
        lists = [s for s in lists if s["status"] == status_filter]
    if search:
        lists = [s for s in lists if search.lower() in s["name"].lower()]

    lists = sorted(lists, key=lambda s: s.get("created_at", ""), reverse=True)
    page_items, pagination = Pagination.slice(lists, page, limit)

    def count(value: str) -> int:
        return sum(1 for s in all_lists if s["status"] == value)

    return ShoppingListListResponse(
        shopping_lists=[_render(s) for s in page_items],
        pagination=pagination,
        summary=ShoppingListSummary(
            total_lists=len(all_lists),
            active_lists=count("active"),
            completed_lists=count("completed"),
            archived_lists=count("archived"),
        ),
    )


@router.post("", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED)
async def create_shopping_list(
    request: ShoppingListCreateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Create a shopping list"""
    items: List[dict] = []
    for item in request.items:
        merge_item(items, item.model_dump())

    shopping_list = db_service.create_shopping_list({
        "user_id": current_user["id"],
        "name": request.name,
        "items": items,
        "status": "active",
        "total_budget": request.total_budget,
        "notes": request.notes,
    })
    return _render(shopping_list, with_statistics=True)


@router.post("/generate", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED)
async def generate_shopping_list(
    request: GenerateShoppingListRequest,
    current_user: dict = Depends(get_current_user)
):
    """Create a list holding the combined ingredients of the given recipes.

    With ``servings`` every recipe is scaled to that many servings. Ingredients
    sharing a name and unit are summed.
    """
    combined: Dict[Tuple[str, str], dict] = {}
    for recipe_id in request.recipe_ids:
        recipe = get_visible_recipe(recipe_id, current_user)
        factor = request.servings / recipe["servings"] if request.servings else 1

        for ingredient in recipe["ingredients"]:
            key = (ingredient["name"].strip().lower(), ingredient["unit"].strip().lower())
            quantity = round(ingredient["quantity"] * factor, 2)
            if key in combined:
                combined[key]["quantity"] = round(combined[key]["quantity"] + quantity, 2)
            else:
                combined[key] = {
                    "id": generate_id(),
                    "ingredient_name": ingredient["name"].strip(),
                    "quantity": quantity,
                    "unit": ingredient["unit"],
                    "category": recipe.get("category"),
                    "is_purchased": False,
                    "estimated_price": None,
                    "actual_price": None,
                    "notes": ingredient.get("notes"),
                }

    shopping_list = db_service.create_shopping_list({
        "user_id": current_user["id"],
        "name": request.list_name,
        "items": list(combined.values()),
        "status": "active",
        "total_budget": None,
        "notes": f"Generated from {len(request.recipe_ids)} recipe(s)",
    })
    logger.info(f"Shopping list {shopping_list['id']} generated from {len(request.recipe_ids)} recipe(s)")
    return _render(shopping_list, with_statistics=True)


@router.get("/{list_id}", response_model=ShoppingListResponse)
async def get_shopping_list(
    list_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Get a shopping list with statistics"""
    return _render(_get_list(list_id, current_user), with_statistics=True)


@router.put("/{list_id}", response_model=ShoppingListResponse)
async def update_shopping_list(
    list_id: str,
    request: ShoppingListUpdateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Update name, status, budget or notes"""
    _get_list(list_id, current_user)
    updates = request.model_dump(exclude_unset=True, exclude_none=True)
    return _render(db_service.update_shopping_list(list_id, updates), with_statistics=True)


@router.delete("/{list_id}", response_model=MessageResponse)
async def delete_shopping_list(
    list_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Delete a shopping list"""
    _get_list(list_id, current_user)
    db_service.delete_shopping_list(list_id)
    return MessageResponse(message="Shopping list deleted successfully")


@router.post("/{list_id}/items", response_model=ShoppingListResponse)
async def add_item(
    list_id: str,
    request: ShoppingListItemRequest,
    current_user: dict = Depends(get_current_user)
):
    """Add an item; an item with the same name has its quantity increased"""
    with db_service.transaction():
        shopping_list = _get_list(list_id, current_user)
        merge_item(shopping_list["items"], request.model_dump())
        return _save_items(shopping_list)


@router.put("/{list_id}/items/{item_id}", response_model=ShoppingListResponse)
async def update_item(
    list_id: str,
    item_id: str,
    request: ShoppingListItemUpdateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Update an item in a shopping list"""
    with db_service.transaction():
        shopping_list = _get_list(list_id, current_user)
        _find_item(shopping_list, item_id).update(request.model_dump(exclude_unset=True, exclude_none=True))
        return _save_items(shopping_list)


@router.delete("/{list_id}/items/{item_id}", response_model=ShoppingListResponse)
async def remove_item(
    list_id: str,
    item_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Remove an item from a shopping list"""
    with db_service.transaction():
        shopping_list = _get_list(list_id, current_user)
        shopping_list["items"].remove(_find_item(shopping_list, item_id))
        return _save_items(shopping_list)


@router.patch("/{list_id}/items/{item_id}/purchased", response_model=ShoppingListResponse)
async def mark_item_purchased(
    list_id: str,
    item_id: str,
    request: MarkPurchasedRequest,
    current_user: dict = Depends(get_current_user)
):
    """Mark an item as (not) purchased; a fully purchased active list is completed"""
    with db_service.transaction():
        shopping_list = _get_list(list_id, current_user)
        item = _find_item(shopping_list, item_id)
        item["is_purchased"] = request.is_purchased
        if request.actual_price is not None:
            item["actual_price"] = request.actual_price

        extra = {}
        if shopping_list["status"] == "active" and all(i["is_purchased"] for i in shopping_list["items"]):
            extra["status"] = "completed"
            logger.info(f"Shopping list {list_id} completed")
        return _save_items(shopping_list, **extra)
