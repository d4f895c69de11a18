"""Meal plan models"""

import datetime
from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator

from recipe_organizer.models.base import CamelModel, Pagination, RequestModel

MealType = Literal["breakfast", "lunch", "dinner", "snack"]


class MealRequest(RequestModel):
    recipe_id: str = Field(..., min_length=1)
    date: datetime.date
    meal_type: MealType
    servings: int = Field(4, ge=1)
    notes: Optional[str] = None


class MealUpdateRequest(RequestModel):
    recipe_id: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime.date] = None
    meal_type: Optional[MealType] = None
    servings: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None


class MealPlanCreateRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)
    start_date: datetime.date
    end_date: datetime.date
    meals: List[MealRequest] = Field(default_factory=list)
    notes: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class MealPlanUpdateRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    meals: Optional[List[MealRequest]] = None
    notes: Optional[str] = None


class MealResponse(CamelModel):
    id: str
    recipe_id: str
    date: datetime.date
    meal_type: str
    servings: int
    notes: Optional[str] = None


class DateRange(CamelModel):
    start: datetime.date
    end: datetime.date
    days: int


class MealPlanStatistics(CamelModel):
    total_meals: int
    meals_by_type: Dict[str, int]
    date_range: DateRange

    @classmethod
    def from_plan(cls, plan: dict) -> "MealPlanStatistics":
        start = datetime.date.fromisoformat(plan["start_date"])
        end = datetime.date.fromisoformat(plan["end_date"])
        by_type: Dict[str, int] = {}
        for meal in plan.get("meals", []):
            by_type[meal["meal_type"]] = by_type.get(meal["meal_type"], 0) + 1
        return cls(
            total_meals=len(plan.get("meals", [])),
            meals_by_type=by_type,
            date_range=DateRange(start=start, end=end, days=(end - start).days + 1),
        )


class MealPlanResponse(CamelModel):
    id: str
    name: str
    start_date: datetime.date
    end_date: datetime.date
    meals: List[MealResponse]
    notes: Optional[str] = None
    created_at: str
    updated_at: str
    statistics: Optional[MealPlanStatistics] = None


class MealPlanListResponse(CamelModel):
    meal_plans: List[MealPlanResponse]
    pagination: Pagination
