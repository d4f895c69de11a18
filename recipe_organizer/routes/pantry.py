"""Pantry routes"""

import logging
from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from recipe_organizer.auth.jwt import get_current_user
from recipe_organizer.errors import NotFound, ValidationFailed
from recipe_organizer.models.base import MessageResponse, Pagination
from recipe_organizer.models.pantry import (
    ConsumeRequest,
    Location,
    PantryItemCreateRequest,
    PantryItemResponse,
    PantryItemResult,
    PantryItemUpdateRequest,
    PantryListResponse,
    PantrySummary,
)
from recipe_organizer.services.database_service import db_service

logger = logging.getLogger(__name__)
router = APIRouter()

EXPIRING_SOON_DAYS = 7


def is_low_stock(item: dict) -> bool:
    return item.get("quantity", 0) <= item.get("min_quantity", 1)


def is_expiring(item: dict, days: int = EXPIRING_SOON_DAYS, today: Optional[date] = None) -> bool:
    """Expires within ``days`` days and has not expired yet"""
    if not item.get("expiration_date"):
        return False
    today = today or date.today()
    expires = date.fromisoformat(item["expiration_date"])
    return today <= expires <= today + timedelta(days=days)


def _get_item(item_id: str, user: dict) -> dict:
    item = db_service.get_pantry_item(item_id, user["id"])
    if not item:
        raise NotFound("Pantry item not found", {"item_id": item_id})
    return item


@router.get("", response_model=PantryListResponse)
async def list_pantry_items(
    category: Optional[str] = None,
    location: Optional[Location] = None,
    search: Optional[str] = None,
    low_stock: bool = Query(False, alias="lowStock"),
    expiring_soon: bool = Query(False, alias="expiringSoon"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: dict = Depends(get_current_user)
):
    """List pantry items with filters and summary counts"""
    all_items = db_service.get_user_pantry_items(current_user["id"])
    items = all_items

    if category:
        items = [i for i in items if category.lower() in i.get("category", "").lower()]
    if location:
        items = [i for i in items if i.get("location") == location]
    if search:
        items = [i for i in items if search.lower() in i["ingredient_name"].lower()]
    if low_stock:
        items = [i for i in items if is_low_stock(i)]
    if expiring_soon:
        items = [i for i in items if is_expiring(i)]

    items = sorted(items, key=lambda i: i.get("created_at", ""), reverse=True)
    page_items, pagination = Pagination.slice(items, page, limit)
    return PantryListResponse(
        items=[PantryItemResponse(**i) for i in page_items],
        pagination=pagination,
        summary=PantrySummary(
            total_items=len(items),
            low_stock_items=sum(1 for i in all_items if is_low_stock(i)),
            expiring_items=sum(1 for i in all_items if is_expiring(i)),
        ),
    )


@router.get("/low-stock", response_model=List[PantryItemResponse])
async def list_low_stock_items(
    current_user: dict = Depends(get_current_user)
):
    """Items at or below their minimum quantity, lowest first"""
    items = [i for i in db_service.get_user_pantry_items(current_user["id"]) if is_low_stock(i)]
    return [PantryItemResponse(**i) for i in sorted(items, key=lambda i: i["quantity"])]


@router.get("/expiring", response_model=List[PantryItemResponse])
async def list_expiring_items(
    days: int = Query(EXPIRING_SOON_DAYS, ge=1, le=365),
    current_user: dict = Depends(get_current_user)
):
    """Items expiring within ``days`` days, soonest first"""
    items = [i for i in db_service.get_user_pantry_items(current_user["id"]) if is_expiring(i, days)]
    return [PantryItemResponse(**i) for i in sorted(items, key=lambda i: i["expiration_date"])]


@router.get("/categories", response_model=List[str])
async def list_categories(
    current_user: dict = Depends(get_current_user)
):
    """Distinct categories of the user's pantry items"""
    items = db_service.get_user_pantry_items(current_user["id"])
    return sorted({i["category"] for i in items if i.get("category")})


@router.post("", response_model=PantryItemResult, status_code=status.HTTP_201_CREATED)
async def add_pantry_item(
    request: PantryItemCreateRequest,
    response: Response,
    current_user: dict = Depends(get_current_user)
):
    """Add an item; an existing item with the same name and location is topped up"""
    data = request.model_dump(mode="json")

    with db_service.transaction():
        existing = db_service.find_pantry_item(current_user["id"], request.ingredient_name, request.location)
        if existing:
            updates = {"quantity": existing["quantity"] + request.quantity}
            if data["purchase_date"]:
                updates["purchase_date"] = data["purchase_date"]
            if data["expiration_date"]:
                updates["expiration_date"] = data["expiration_date"]
            item = db_service.update_pantry_item(existing["id"], updates)
            response.status_code = status.HTTP_200_OK
            logger.info(f"Pantry item {item['id']} topped up to {item['quantity']}")
            return PantryItemResult(
                message="Item quantity updated successfully",
                item=PantryItemResponse(**item),
            )

        data["purchase_date"] = data["purchase_date"] or date.today().isoformat()
        item = db_service.create_pantry_item({**data, "user_id": current_user["id"]})

    return PantryItemResult(message="Pantry item created successfully", item=PantryItemResponse(**item))


@router.get("/{item_id}", response_model=PantryItemResponse)
async def get_pantry_item(
    item_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Get a pantry item"""
    return PantryItemResponse(**_get_item(item_id, current_user))


@router.put("/{item_id}", response_model=PantryItemResponse)
async def update_pantry_item(
    item_id: str,
    request: PantryItemUpdateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Update a pantry item"""
    _get_item(item_id, current_user)
    updates = request.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    item = db_service.update_pantry_item(item_id, updates)
    return PantryItemResponse(**item)


@router.delete("/{item_id}", response_model=MessageResponse)
async def delete_pantry_item(
    item_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Delete a pantry item"""
    _get_item(item_id, current_user)
    db_service.delete_pantry_item(item_id)
    return MessageResponse(message="Pantry item deleted successfully")


@router.post("/{item_id}/consume", response_model=PantryItemResult)
async def consume_pantry_item(
    item_id: str,
    request: ConsumeRequest,
    current_user: dict = Depends(get_current_user)
):
    """Use up some of an item; it is removed when nothing is left"""
    with db_service.transaction():
        item = _get_item(item_id, current_user)
        if item["quantity"] < request.quantity:
            raise ValidationFailed("Not enough quantity available", {"available": item["quantity"]})

        remaining = item["quantity"] - request.quantity
        if remaining <= 0:
            db_service.delete_pantry_item(item_id)
            logger.info(f"Pantry item {item_id} consumed and removed")
            return PantryItemResult(message="Item consumed completely and removed from pantry")

        item = db_service.update_pantry_item(item_id, {"quantity": remaining})

    return PantryItemResult(message="Item consumed successfully", item=PantryItemResponse(**item))
