"""Calorie goal history and the goal in force on a given day."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from calorie_tracker.dates import today, tomorrow
from calorie_tracker.domain.goals import CalorieGoal
from calorie_tracker.domain.pages import Page, Pagination
from calorie_tracker.services.errors import ConflictError, NotFoundError

NO_CURRENT_GOAL_MESSAGE = "No calorie goal found. Using default: 2000 kcal"
GOAL_EXISTS_MESSAGE = (
    "A calorie goal for this date already exists. Use PATCH to update."
)


class DuplicateGoalError(ConflictError):
    """A goal already starts on the requested day."""

    def __init__(self, message: str = GOAL_EXISTS_MESSAGE) -> None:
        super().__init__(message)


class CalorieGoalRepository(Protocol):
    """Persistence interface for calorie goals."""

    def list_goals(self, user_id: UUID, limit: int, offset: int) -> list[CalorieGoal]:
        """Return goals ordered by effective date, newest first."""

    def count_goals(self, user_id: UUID) -> int:
        """Return how many goals the user has."""

    def get_current_goal(self, user_id: UUID, day: date) -> CalorieGoal | None:
        """Return the latest goal effective on or before a day."""

    def get_goal_by_date(self, user_id: UUID, day: date) -> CalorieGoal | None:
        """Return the goal starting exactly on a day."""

    def create_goal(
        self, user_id: UUID, daily_goal: int, effective_from: date
    ) -> CalorieGoal:
        """Insert a goal; raise ``DuplicateGoalError`` on a date clash."""

    def update_goal(
        self, user_id: UUID, goal_id: UUID, daily_goal: int
    ) -> CalorieGoal | None:
        """Update a goal's value; return None when it does not exist."""

    def delete_goal(self, user_id: UUID, goal_id: UUID) -> bool:
        """Delete a goal; return False when nothing was deleted."""


@dataclass
class CalorieGoalService:
    """Service for reading and scheduling daily calorie goals."""

    repository: CalorieGoalRepository

    def list_goals(
        self, user_id: UUID, limit: int = 50, offset: int = 0
    ) -> Page[CalorieGoal]:
        return Page[CalorieGoal](
            data=self.repository.list_goals(user_id, limit, offset),
            pagination=Pagination(
                total=self.repository.count_goals(user_id), limit=limit, offset=offset
            ),
        )

    def get_current_goal(self, user_id: UUID, day: date | None = None) -> CalorieGoal:
        """Return the goal in force on a day (default today)."""
        goal = self.repository.get_current_goal(user_id, day or today())
        if goal is None:
            raise NotFoundError(NO_CURRENT_GOAL_MESSAGE)
        return goal

    def get_goal_by_date(self, user_id: UUID, day: date) -> CalorieGoal:
        """Return the goal starting on a day, flagged immutable once started."""
        goal = self.repository.get_goal_by_date(user_id, day)
        if goal is None:
            raise NotFoundError("No calorie goal found for the specified date")
        return goal.model_copy(update={"is_immutable": goal.effective_from <= today()})

    def create_goal(self, user_id: UUID, daily_goal: int) -> CalorieGoal:
        """Schedule a goal starting tomorrow.

        Goals never change retroactively, so new values always take effect
        the next day.
        """
        return self.repository.create_goal(user_id, daily_goal, tomorrow())

    def update_goal(self, user_id: UUID, goal_id: UUID, daily_goal: int) -> CalorieGoal:
        goal = self.repository.update_goal(user_id, goal_id, daily_goal)
        if goal is None:
            raise NotFoundError("Calorie goal not found")
        return goal

    def delete_goal(self, user_id: UUID, goal_id: UUID) -> None:
        if not self.repository.delete_goal(user_id, goal_id):
            raise NotFoundError("Calorie goal not found")
