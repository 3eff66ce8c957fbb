"""Models for daily calorie progress."""

from dataclasses import dataclass
from datetime import date
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

ProgressStatus = Literal["under", "on_track", "over"]

DEFAULT_CALORIE_GOAL = 2000
ON_TRACK_TOLERANCE_KCAL = 100


class DailyProgress(BaseModel):
    """Aggregated intake for one calendar day against the goal in force."""

    date: date
    user_id: UUID
    total_calories: float = 0
    total_protein: float = 0
    total_carbs: float = 0
    total_fats: float = 0
    calorie_goal: int = DEFAULT_CALORIE_GOAL
    percentage: float = 0
    status: ProgressStatus = "under"


@dataclass(frozen=True)
class DailyProgressRow:
    """Row of the daily_progress view; totals are null on days without meals."""

    date: date
    user_id: UUID
    total_calories: float | None
    total_protein: float | None
    total_carbs: float | None
    total_fats: float | None
    calorie_goal: int
    percentage: float | None
