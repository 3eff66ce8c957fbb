"""Supabase repository for the daily_progress view."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.progress import DEFAULT_CALORIE_GOAL, DailyProgressRow
from calorie_tracker.services.daily_progress import DailyProgressRepository


@dataclass
class SupabaseDailyProgressRepository(DailyProgressRepository):
    """Reads per-day totals aggregated by the database."""

    client: Client

    def list_progress(  # noqa: PLR0913
        self,
        user_id: UUID,
        date_from: date | None,
        date_to: date | None,
        limit: int,
        offset: int,
    ) -> tuple[list[DailyProgressRow], int]:
        """Return a page of rows newest first with the exact total."""
        query = (
            self.client.table("daily_progress")
            .select("*", count="exact")
            .eq("user_id", str(user_id))
        )
        if date_from:
            query = query.gte("date", date_from.isoformat())
        if date_to:
            query = query.lte("date", date_to.isoformat())
        response = (
            query.order("date", desc=True).range(offset, offset + limit - 1).execute()
        )
        rows = [_parse_row(row) for row in response.data or []]
        return rows, response.count or 0

    def get_progress(self, user_id: UUID, day: date) -> DailyProgressRow | None:
        response = (
            self.client.table("daily_progress")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def get_goal_for_date(self, user_id: UUID, day: date) -> int | None:
        """Ask the database for the goal in force on a day."""
        response = self.client.rpc(
            "get_current_calorie_goal",
            {"user_uuid": str(user_id), "target_date": day.isoformat()},
        ).execute()
        if response.data is None:
            return None
        return int(response.data)


def _parse_row(row: dict[str, object]) -> DailyProgressRow:
    return DailyProgressRow(
        date=date.fromisoformat(str(row["date"])),
        user_id=UUID(str(row["user_id"])),
        total_calories=_optional_float(row.get("total_calories")),
        total_protein=_optional_float(row.get("total_protein")),
        total_carbs=_optional_float(row.get("total_carbs")),
        total_fats=_optional_float(row.get("total_fats")),
        calorie_goal=int(row.get("calorie_goal") or DEFAULT_CALORIE_GOAL),
        percentage=_optional_float(row.get("percentage")),
    )


def _optional_float(value: object) -> float | None:
    return None if value is None else float(value)
