"""Supabase repository for calorie goals."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client, PostgrestAPIError

from calorie_tracker.domain.goals import CalorieGoal
from calorie_tracker.services.calorie_goals import (
    CalorieGoalRepository,
    DuplicateGoalError,
)

UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseCalorieGoalRepository(CalorieGoalRepository):
    """Supabase implementation for calorie goal persistence."""

    client: Client

    def list_goals(self, user_id: UUID, limit: int, offset: int) -> list[CalorieGoal]:
        response = (
            self.client.table("calorie_goals")
            .select("*")
            .eq("user_id", str(user_id))
            .order("effective_from", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [CalorieGoal.model_validate(row) for row in response.data or []]

    def count_goals(self, user_id: UUID) -> int:
        response = (
            self.client.table("calorie_goals")
            .select("id", count="exact")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        return response.count or 0

    def get_current_goal(self, user_id: UUID, day: date) -> CalorieGoal | None:
        """Return the latest goal that started on or before the day."""
        response = (
            self.client.table("calorie_goals")
            .select("*")
            .eq("user_id", str(user_id))
            .lte("effective_from", day.isoformat())
            .order("effective_from", desc=True)
            .limit(1)
            .execute()
        )
        return _first(response.data)

    def get_goal_by_date(self, user_id: UUID, day: date) -> CalorieGoal | None:
        response = (
            self.client.table("calorie_goals")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("effective_from", day.isoformat())
            .limit(1)
            .execute()
        )
        return _first(response.data)

    def create_goal(
        self, user_id: UUID, daily_goal: int, effective_from: date
    ) -> CalorieGoal:
        """Insert a goal; the unique (user, effective_from) index rejects clashes."""
        try:
            response = (
                self.client.table("calorie_goals")
                .insert(
                    {
                        "user_id": str(user_id),
                        "daily_goal": daily_goal,
                        "effective_from": effective_from.isoformat(),
                    }
                )
                .execute()
            )
        except PostgrestAPIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateGoalError() from exc
            raise
        goal = _first(response.data)
        if goal is None:
            raise RuntimeError("Failed to create calorie goal")
        return goal

    def update_goal(
        self, user_id: UUID, goal_id: UUID, daily_goal: int
    ) -> CalorieGoal | None:
        response = (
            self.client.table("calorie_goals")
            .update({"daily_goal": daily_goal})
            .eq("id", str(goal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return _first(response.data)

    def delete_goal(self, user_id: UUID, goal_id: UUID) -> bool:
        response = (
            self.client.table("calorie_goals")
            .delete()
            .eq("id", str(goal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _first(rows: list[dict[str, object]] | None) -> CalorieGoal | None:
    if not rows:
        return None
    return CalorieGoal.model_validate(rows[0])
