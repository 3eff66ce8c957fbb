"""Models for calorie goals."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel


class CalorieGoal(BaseModel):
    """Daily calorie goal effective from a given day onward."""

    id: UUID
    user_id: UUID
    daily_goal: int
    effective_from: date
    created_at: datetime | None = None
    updated_at: datetime | None = None
    is_immutable: bool | None = None
