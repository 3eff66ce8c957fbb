"""Day-details controller: one day's progress and meals, with deletion."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from calorie_tracker.client.api import CalorieTrackerApi
from calorie_tracker.client.errors import error_message
from calorie_tracker.client.state import StateController
from calorie_tracker.domain.meals import Meal
from calorie_tracker.domain.progress import DailyProgress

logger = logging.getLogger(__name__)

DAY_DETAILS_MEALS_LIMIT = 100


@dataclass(frozen=True)
class DayDetailsState:
    date: date
    progress: DailyProgress | None = None
    meals: tuple[Meal, ...] = field(default_factory=tuple)
    loading: bool = False
    error: str | None = None
    deleting_meal_id: UUID | None = None
    editing_meal: Meal | None = None


class DayDetailsController(StateController[DayDetailsState]):
    """Loads a day's progress and meal list together and keeps them in sync."""

    def __init__(
        self,
        api: CalorieTrackerApi,
        day: date,
        meals_limit: int = DAY_DETAILS_MEALS_LIMIT,
    ) -> None:
        super().__init__(DayDetailsState(date=day))
        self.api = api
        self.meals_limit = meals_limit

    async def load_day_data(self) -> None:
        """Fetch progress and meals concurrently and commit both or neither."""
        generation = self._next_generation()
        self._commit(loading=True, error=None)
        try:
            progress, meals = await self._fetch_day()
        except Exception as exc:
            if self._is_current(generation):
                self._commit(error=error_message(exc), loading=False)
            return
        if self._is_current(generation):
            self._commit(progress=progress, meals=tuple(meals), loading=False)

    async def delete_meal(self, meal_id: UUID) -> None:
        """Delete on the server, then reload the day.

        The meal stays in the list until the reload confirms it is gone.
        """
        self._commit(deleting_meal_id=meal_id)
        try:
            await self.api.delete_meal(meal_id)
        except Exception as exc:
            self._commit(error=error_message(exc), deleting_meal_id=None)
            return
        await self.load_day_data()
        self._commit(deleting_meal_id=None)

    async def refresh_after_meal_change(self) -> None:
        """Reload the day silently; failures are logged, never shown."""
        generation = self._next_generation()
        try:
            progress, meals = await self._fetch_day()
        except Exception:
            logger.exception(
                "Failed to refresh day %s after meal change", self.state.date
            )
            if self._is_current(generation):
                self._commit(loading=False)
            return
        if self._is_current(generation):
            self._commit(progress=progress, meals=tuple(meals), loading=False)

    def set_editing_meal(self, meal: Meal | None) -> None:
        self._commit(editing_meal=meal)

    async def _fetch_day(self) -> tuple[DailyProgress, list[Meal]]:
        day = self.state.date
        return await asyncio.gather(
            self.api.get_daily_progress(day),
            self.api.list_meals(day, limit=self.meals_limit, offset=0),
        )
