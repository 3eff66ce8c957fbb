"""Calorie goal endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from calorie_tracker.api.dependencies import get_container, require_user
from calorie_tracker.api.schemas import CalorieGoalRequest
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.users import AuthUser

router = APIRouter(prefix="/calorie-goals", tags=["calorie-goals"])


@router.get("")
async def list_calorie_goals(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the goal history, newest first."""
    page = container.calorie_goal_service.list_goals(user.id, limit, offset)
    return page.model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_calorie_goal(
    body: CalorieGoalRequest,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Schedule a new goal effective from tomorrow."""
    goal = container.calorie_goal_service.create_goal(user.id, body.daily_goal)
    return goal.model_dump(mode="json")


@router.get("/current")
async def get_current_calorie_goal(
    day: date | None = Query(default=None, alias="date"),
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    goal = container.calorie_goal_service.get_current_goal(user.id, day)
    return goal.model_dump(mode="json")


@router.get("/by-date")
async def get_calorie_goal_by_date(
    day: date = Query(alias="date"),
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the goal starting on a day, with its immutability flag."""
    goal = container.calorie_goal_service.get_goal_by_date(user.id, day)
    return goal.model_dump(mode="json")


@router.patch("/{goal_id}")
async def update_calorie_goal(
    goal_id: UUID,
    body: CalorieGoalRequest,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    goal = container.calorie_goal_service.update_goal(
        user.id, goal_id, body.daily_goal
    )
    return goal.model_dump(mode="json")


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_calorie_goal(
    goal_id: UUID,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> Response:
    container.calorie_goal_service.delete_goal(user.id, goal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
