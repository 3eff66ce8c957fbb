"""Daily progress endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from calorie_tracker.api.dependencies import get_container, require_user
from calorie_tracker.containers import AppContainer
from calorie_tracker.dates import is_date_in_future, is_date_range_valid
from calorie_tracker.domain.users import AuthUser
from calorie_tracker.services.errors import InvalidRequestError

router = APIRouter(prefix="/daily-progress", tags=["daily-progress"])

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("")
async def list_daily_progress(
    response: Response,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = Query(default=30, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return per-day totals, newest day first."""
    if date_from and date_to and not is_date_range_valid(date_from, date_to):
        raise InvalidRequestError("date_from must be less than or equal to date_to")
    page = container.daily_progress_service.list_progress(
        user.id, date_from=date_from, date_to=date_to, limit=limit, offset=offset
    )
    response.headers.update(NO_STORE_HEADERS)
    return page.model_dump(mode="json")


@router.get("/{day}")
async def get_daily_progress(
    day: date,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    if is_date_in_future(day):
        raise InvalidRequestError("Date cannot be in the future")
    progress = container.daily_progress_service.get_progress(user.id, day)
    return progress.model_dump(mode="json")
