"""Daily progress summaries built from the daily_progress view."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.pages import Page, Pagination
from calorie_tracker.domain.progress import (
    DEFAULT_CALORIE_GOAL,
    ON_TRACK_TOLERANCE_KCAL,
    DailyProgress,
    DailyProgressRow,
    ProgressStatus,
)


class DailyProgressRepository(Protocol):
    """Read interface for aggregated daily intake."""

    def list_progress(  # noqa: PLR0913
        self,
        user_id: UUID,
        date_from: date | None,
        date_to: date | None,
        limit: int,
        offset: int,
    ) -> tuple[list[DailyProgressRow], int]:
        """Return rows newest first and the total row count."""

    def get_progress(self, user_id: UUID, day: date) -> DailyProgressRow | None:
        """Return the row for a day, or None when no meals were logged."""

    def get_goal_for_date(self, user_id: UUID, day: date) -> int | None:
        """Return the calorie goal in force on a day, if any."""


def calculate_status(total_calories: float, calorie_goal: int) -> ProgressStatus:
    """Classify intake as under, on track or over the goal."""
    if total_calories < calorie_goal - ON_TRACK_TOLERANCE_KCAL:
        return "under"
    if total_calories > calorie_goal + ON_TRACK_TOLERANCE_KCAL:
        return "over"
    return "on_track"


@dataclass
class DailyProgressService:
    """Service returning per-day totals with a computed status."""

    repository: DailyProgressRepository

    def list_progress(
        self,
        user_id: UUID,
        *,
        date_from: date | None = None,
        date_to: date | None = None,
        limit: int = 30,
        offset: int = 0,
    ) -> Page[DailyProgress]:
        """Return a page of daily progress, newest day first."""
        rows, total = self.repository.list_progress(
            user_id, date_from, date_to, limit, offset
        )
        return Page[DailyProgress](
            data=[_to_progress(row) for row in rows],
            pagination=Pagination(total=total, limit=limit, offset=offset),
        )

    def get_progress(self, user_id: UUID, day: date) -> DailyProgress:
        """Return progress for a day; days without meals report zero intake."""
        row = self.repository.get_progress(user_id, day)
        if row is not None:
            return _to_progress(row)
        goal = self.repository.get_goal_for_date(user_id, day)
        return DailyProgress(
            date=day,
            user_id=user_id,
            calorie_goal=goal if goal is not None else DEFAULT_CALORIE_GOAL,
            status="under",
        )


def _to_progress(row: DailyProgressRow) -> DailyProgress:
    total_calories = row.total_calories or 0.0
    return DailyProgress(
        date=row.date,
        user_id=row.user_id,
        total_calories=total_calories,
        total_protein=row.total_protein or 0.0,
        total_carbs=row.total_carbs or 0.0,
        total_fats=row.total_fats or 0.0,
        calorie_goal=row.calorie_goal,
        percentage=row.percentage or 0.0,
        status=calculate_status(total_calories, row.calorie_goal),
    )
