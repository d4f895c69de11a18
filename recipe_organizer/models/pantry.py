"""Pantry models"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from recipe_organizer.models.base import CamelModel, Pagination, RequestModel

Location = Literal["pantry", "fridge", "freezer"]


class PantryItemCreateRequest(RequestModel):
    ingredient_name: str = Field(..., min_length=1, max_length=100)
    category: str = Field("other", min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1)
    location: Location = "pantry"
    purchase_date: Optional[date] = None
    expiration_date: Optional[date] = None
    notes: Optional[str] = None
    min_quantity: float = Field(1, ge=0)

    @field_validator("ingredient_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class PantryItemUpdateRequest(RequestModel):
    ingredient_name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = None
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = Field(None, min_length=1)
    location: Optional[Location] = None
    purchase_date: Optional[date] = None
    expiration_date: Optional[date] = None
    notes: Optional[str] = None
    min_quantity: Optional[float] = Field(None, ge=0)

    @field_validator("ingredient_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ConsumeRequest(RequestModel):
    quantity: float = Field(..., gt=0)


class PantryItemResponse(CamelModel):
    id: str
    ingredient_name: str
    category: str
    quantity: float
    unit: str
    location: str
    purchase_date: Optional[date] = None
    expiration_date: Optional[date] = None
    notes: Optional[str] = None
    min_quantity: float = 1
    created_at: str
    updated_at: str


class PantrySummary(CamelModel):
    total_items: int
    low_stock_items: int
    expiring_items: int


class PantryListResponse(CamelModel):
    items: List[PantryItemResponse]
    pagination: Pagination
    summary: PantrySummary


class PantryItemResult(CamelModel):
    """Outcome of adding or consuming an item"""
    message: str
    item: Optional[PantryItemResponse] = None
