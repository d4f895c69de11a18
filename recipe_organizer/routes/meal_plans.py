"""Meal plan routes"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from recipe_organizer.auth.jwt import get_current_user
from recipe_organizer.errors import NotFound, ValidationFailed
from recipe_organizer.models.base import MessageResponse, Pagination
from recipe_organizer.models.meal_plan import (
    MealPlanCreateRequest,
    MealPlanListResponse,
    MealPlanResponse,
    MealPlanStatistics,
    MealPlanUpdateRequest,
    MealRequest,
    MealUpdateRequest,
)
from recipe_organizer.routes.recipes import get_visible_recipe
from recipe_organizer.services.database_service import db_service, generate_id

logger = logging.getLogger(__name__)
router = APIRouter()


def _check_date_range(start: date, end: date):
    if end < start:
        raise ValidationFailed("End date must be after start date")


def _check_meal(meal: dict, start: date, end: date, user: dict):
    """A meal must fall inside the plan and reference a recipe the user can see"""
    meal_date = date.fromisoformat(meal["date"])
    if not start <= meal_date <= end:
        raise ValidationFailed(
            "Meal date must be within the meal plan date range",
            {"date": meal["date"]},
        )
    get_visible_recipe(meal["recipe_id"], user)


def _plan_range(plan: dict):
    return date.fromisoformat(plan["start_date"]), date.fromisoformat(plan["end_date"])


def _new_meal(meal: MealRequest) -> dict:
    return {"id": generate_id(), **meal.model_dump(mode="json")}


def _get_plan(plan_id: str, user: dict) -> dict:
    plan = db_service.get_meal_plan(plan_id, user["id"])
    if not plan:
        raise NotFound("Meal plan not found", {"plan_id": plan_id})
    return plan


def _find_meal(plan: dict, meal_id: str) -> dict:
    for meal in plan["meals"]:
        if meal["id"] == meal_id:
            return meal
    raise NotFound("Meal not found in meal plan", {"meal_id": meal_id})


def _render(plan: dict, with_statistics: bool = False) -> MealPlanResponse:
    result = MealPlanResponse(**plan)
    if with_statistics:
        result.statistics = MealPlanStatistics.from_plan(plan)
    return result


@router.get("", response_model=MealPlanListResponse)
async def list_meal_plans(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: dict = Depends(get_current_user)
):
    """List meal plans overlapping the given date window"""
    plans = db_service.get_user_meal_plans(current_user["id"])

    if start_date:
        plans = [p for p in plans if date.fromisoformat(p["end_date"]) >= start_date]
    if end_date:
        plans = [p for p in plans if date.fromisoformat(p["start_date"]) <= end_date]
    if search:
        plans = [p for p in plans if search.lower() in p["name"].lower()]

    plans = sorted(plans, key=lambda p: (p["start_date"], p.get("created_at", "")), reverse=True)
    page_items, pagination = Pagination.slice(plans, page, limit)
    return MealPlanListResponse(
        meal_plans=[_render(p) for p in page_items],
        pagination=pagination,
    )


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_meal_plan(
    request: MealPlanCreateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Create a meal plan"""
    _check_date_range(request.start_date, request.end_date)
    meals = [_new_meal(m) for m in request.meals]
    for meal in meals:
        _check_meal(meal, request.start_date, request.end_date, current_user)

    plan = db_service.create_meal_plan({
        "user_id": current_user["id"],
        "name": request.name,
        "start_date": request.start_date.isoformat(),
        "end_date": request.end_date.isoformat(),
        "meals": meals,
        "notes": request.notes,
    })
    return _render(plan, with_statistics=True)


@router.get("/{plan_id}", response_model=MealPlanResponse)
async def get_meal_plan(
    plan_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Get a meal plan with statistics"""
    return _render(_get_plan(plan_id, current_user), with_statistics=True)


@router.put("/{plan_id}", response_model=MealPlanResponse)
async def update_meal_plan(
    plan_id: str,
    request: MealPlanUpdateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Update a meal plan; ``meals`` replaces the whole meal list"""
    with db_service.transaction():
        plan = _get_plan(plan_id, current_user)
        current_start, current_end = _plan_range(plan)
        start = request.start_date or current_start
        end = request.end_date or current_end
        _check_date_range(start, end)

        updates = request.model_dump(mode="json", exclude_unset=True, exclude_none=True, exclude={"meals"})
        meals = [_new_meal(m) for m in request.meals] if request.meals is not None else plan["meals"]
        for meal in meals:
            _check_meal(meal, start, end, current_user)
        if request.meals is not None:
            updates["meals"] = meals

        return _render(db_service.update_meal_plan(plan_id, updates), with_statistics=True)


@router.delete("/{plan_id}", response_model=MessageResponse)
async def delete_meal_plan(
    plan_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Delete a meal plan"""
    _get_plan(plan_id, current_user)
    db_service.delete_meal_plan(plan_id)
    return MessageResponse(message="Meal plan deleted successfully")


@router.post("/{plan_id}/meals", response_model=MealPlanResponse)
async def add_meal(
    plan_id: str,
    request: MealRequest,
    current_user: dict = Depends(get_current_user)
):
    """Add a meal to a plan"""
    with db_service.transaction():
        plan = _get_plan(plan_id, current_user)
        meal = _new_meal(request)
        _check_meal(meal, *_plan_range(plan), current_user)
        plan["meals"].append(meal)
        updated = db_service.update_meal_plan(plan_id, {"meals": plan["meals"]})
    return _render(updated, with_statistics=True)


@router.put("/{plan_id}/meals/{meal_id}", response_model=MealPlanResponse)
async def update_meal(
    plan_id: str,
    meal_id: str,
    request: MealUpdateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Update a meal in a plan"""
    with db_service.transaction():
        plan = _get_plan(plan_id, current_user)
        meal = _find_meal(plan, meal_id)
        meal.update(request.model_dump(mode="json", exclude_unset=True, exclude_none=True))
        _check_meal(meal, *_plan_range(plan), current_user)
        updated = db_service.update_meal_plan(plan_id, {"meals": plan["meals"]})
    return _render(updated, with_statistics=True)


@router.delete("/{plan_id}/meals/{meal_id}", response_model=MealPlanResponse)
async def remove_meal(
    plan_id: str,
    meal_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Remove a meal from a plan"""
    with db_service.transaction():
        plan = _get_plan(plan_id, current_user)
        plan["meals"].remove(_find_meal(plan, meal_id))
        updated = db_service.update_meal_plan(plan_id, {"meals": plan["meals"]})
    return _render(updated, with_statistics=True)
