"""Meal endpoints."""

from datetime import date
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from calorie_tracker.api.dependencies import get_container, require_user
from calorie_tracker.api.schemas import CreateMealRequest, UpdateMealRequest
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.meals import MealCategory
from calorie_tracker.domain.users import AuthUser
from calorie_tracker.services.meals import MealFilters

router = APIRouter(prefix="/meals", tags=["meals"])


@router.get("")
async def list_meals(  # noqa: PLR0913
    day: date | None = Query(default=None, alias="date"),
    date_from: date | None = None,
    date_to: date | None = None,
    category: MealCategory | None = None,
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    sort: Literal["asc", "desc"] = "desc",
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """List meals for a day or a date range."""
    filters = MealFilters(
        day=day,
        date_from=date_from,
        date_to=date_to,
        category=category,
        limit=limit,
        offset=offset,
        sort=sort,
    )
    return container.meal_service.list_meals(user.id, filters).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_meal(
    body: CreateMealRequest,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Save a meal and return it with macronutrient warnings."""
    meal = container.meal_service.create_meal(
        user.id,
        body.model_dump(mode="json", exclude={"ai_generation_id"}),
        ai_generation_id=body.ai_generation_id,
    )
    return meal.model_dump(mode="json")


@router.get("/{meal_id}")
async def get_meal(
    meal_id: UUID,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    return container.meal_service.get_meal(user.id, meal_id).model_dump(mode="json")


@router.patch("/{meal_id}")
async def update_meal(
    meal_id: UUID,
    body: UpdateMealRequest,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    meal = container.meal_service.update_meal(user.id, meal_id, body.changes())
    return meal.model_dump(mode="json")


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    meal_id: UUID,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> Response:
    container.meal_service.delete_meal(user.id, meal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
