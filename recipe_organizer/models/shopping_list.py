"""Shopping list models"""

import math
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from recipe_organizer.models.base import CamelModel, Pagination, RequestModel

ListStatus = Literal["active", "completed", "archived"]


class ShoppingListItemRequest(RequestModel):
    ingredient_name: str = Field(..., min_length=1, max_length=100)
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1)
    category: Optional[str] = None
    estimated_price: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator("ingredient_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ShoppingListItemUpdateRequest(RequestModel):
    ingredient_name: Optional[str] = Field(None, min_length=1, max_length=100)
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    is_purchased: Optional[bool] = None
    estimated_price: Optional[float] = Field(None, ge=0)
    actual_price: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class MarkPurchasedRequest(RequestModel):
    is_purchased: bool = True
    actual_price: Optional[float] = Field(None, ge=0)


class ShoppingListCreateRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)
    items: List[ShoppingListItemRequest] = Field(default_factory=list)
    total_budget: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ShoppingListUpdateRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[ListStatus] = None
    total_budget: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class GenerateShoppingListRequest(RequestModel):
    """Build a list from the ingredients of one or more recipes"""
    recipe_ids: List[str] = Field(..., min_length=1)
    list_name: str = Field(..., min_length=1, max_length=100)
    servings: Optional[int] = Field(None, gt=0)


class ShoppingListItemResponse(CamelModel):
    id: str
    ingredient_name: str
    quantity: float
    unit: str
    category: Optional[str] = None
    is_purchased: bool = False
    estimated_price: Optional[float] = None
    actual_price: Optional[float] = None
    notes: Optional[str] = None


class ShoppingListStatistics(CamelModel):
    total_items: int
    purchased_items: int
    remaining_items: int
    completion_percentage: int
    total_estimated_cost: float
    total_actual_cost: float

    @classmethod
    def from_items(cls, items: List[dict]) -> "ShoppingListStatistics":
        total = len(items)
        purchased = [i for i in items if i.get("is_purchased")]
        return cls(
            total_items=total,
            purchased_items=len(purchased),
            remaining_items=total - len(purchased),
            completion_percentage=math.floor(len(purchased) / total * 100 + 0.5) if total else 0,
            total_estimated_cost=sum(i.get("estimated_price") or 0 for i in items),
            total_actual_cost=sum(i.get("actual_price") or 0 for i in items),
        )


class ShoppingListResponse(CamelModel):
    id: str
    name: str
    items: List[ShoppingListItemResponse]
    status: str
    total_budget: Optional[float] = None
    notes: Optional[str] = None
    created_at: str
    updated_at: str
    statistics: Optional[ShoppingListStatistics] = None


class ShoppingListSummary(CamelModel):
    total_lists: int
    active_lists: int
    completed_lists: int
    archived_lists: int


class ShoppingListListResponse(CamelModel):
    shopping_lists: List[ShoppingListResponse]
    pagination: Pagination
    summary: ShoppingListSummary
