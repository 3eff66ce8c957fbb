"""Dashboard controller: paginated daily progress with a selected day."""

import logging
from dataclasses import dataclass, field
from datetime import date

from calorie_tracker.client.api import CalorieTrackerApi
from calorie_tracker.client.errors import error_message
from calorie_tracker.client.state import StateController
from calorie_tracker.domain.progress import DailyProgress

logger = logging.getLogger(__name__)

DASHBOARD_DAYS_LIMIT = 30


@dataclass(frozen=True)
class DashboardState:
    """Dashboard view state; starts loading to avoid an empty-view flash."""

    days: tuple[DailyProgress, ...] = field(default_factory=tuple)
    loading: bool = True
    error: str | None = None
    has_more: bool = True
    offset: int = 0
    limit: int = DASHBOARD_DAYS_LIMIT
    selected_date: date | None = None
    refreshing: bool = False
    is_refetching_after_change: bool = False


class DashboardController(StateController[DashboardState]):
    """Loads daily progress pages and tracks the day shown in the detail pane."""

    def __init__(
        self, api: CalorieTrackerApi, limit: int = DASHBOARD_DAYS_LIMIT
    ) -> None:
        super().__init__(DashboardState(limit=limit))
        self.api = api

    async def load_initial_days(self) -> None:
        """Load the first page, replacing anything already shown."""
        generation = self._supersede(loading=True, error=None)
        try:
            days = await self.api.list_daily_progress(self.state.limit, 0)
        except Exception as exc:
            if self._is_current(generation):
                self._commit(error=error_message(exc), loading=False)
            return
        if self._is_current(generation):
            self._commit(loading=False, **self._first_page(days))

    async def load_more_days(self) -> None:
        """Append the next page unless a load is running or the list is exhausted.

        A running refresh also blocks it: page one is about to replace the
        list and reset the offset.
        """
        state = self.state
        if (
            state.loading
            or state.refreshing
            or state.is_refetching_after_change
            or not state.has_more
        ):
            return
        generation = self._current_generation()
        self._commit(loading=True, error=None)
        try:
            days = await self.api.list_daily_progress(
                self.state.limit, self.state.offset
            )
        except Exception as exc:
            if self._is_current(generation):
                self._commit(error=error_message(exc), loading=False)
            return
        if not self._is_current(generation):
            return
        self._commit(
            days=self.state.days + tuple(days),
            offset=self.state.offset + len(days),
            has_more=len(days) >= self.state.limit,
            loading=False,
        )

    async def refresh_days(self) -> None:
        """Pull-to-refresh: reload page one under the ``refreshing`` flag."""
        generation = self._supersede(refreshing=True, error=None)
        try:
            days = await self.api.list_daily_progress(self.state.limit, 0)
        except Exception as exc:
            if self._is_current(generation):
                self._commit(error=error_message(exc), refreshing=False)
            return
        if self._is_current(generation):
            self._commit(refreshing=False, **self._first_page(days))

    def select_day(self, day: date) -> None:
        self._commit(selected_date=day)

    async def refetch_after_meal_change(self) -> None:
        """Reload page one silently; failures are logged, never shown."""
        generation = self._supersede(is_refetching_after_change=True)
        try:
            days = await self.api.list_daily_progress(self.state.limit, 0)
        except Exception:
            logger.exception("Failed to refetch daily progress after meal change")
            if self._is_current(generation):
                self._commit(is_refetching_after_change=False)
            return
        if self._is_current(generation):
            self._commit(is_refetching_after_change=False, **self._first_page(days))

    def _supersede(self, **flags: object) -> int:
        generation = self._next_generation()
        changes: dict[str, object] = {
            "loading": False,
            "refreshing": False,
            "is_refetching_after_change": False,
        }
        changes.update(flags)
        self._commit(**changes)
        return generation

    def _first_page(self, days: list[DailyProgress]) -> dict[str, object]:
        return {
            "days": tuple(days),
            "offset": len(days),
            "has_more": len(days) >= self.state.limit,
        }
