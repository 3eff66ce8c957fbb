"""Models for logged meals."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field


class MealCategory(StrEnum):
    """Closed set of meal categories."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    OTHER = "other"


class InputMethod(StrEnum):
    """How a meal's nutritional values were entered."""

    AI = "ai"
    MANUAL = "manual"
    AI_EDITED = "ai-edited"


class MealWarning(BaseModel):
    """Non-blocking validation warning attached to a saved meal."""

    field: str
    message: str


class MealAIGeneration(BaseModel):
    """AI generation summary embedded in a meal."""

    id: UUID
    prompt: str
    assumptions: str | None = None
    model_used: str | None = None
    generation_duration: int | None = None


class Meal(BaseModel):
    """A meal entry owned by a user."""

    id: UUID
    user_id: UUID
    description: str
    calories: int
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None
    category: MealCategory | None = None
    input_method: InputMethod
    meal_timestamp: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None
    ai_generation: MealAIGeneration | None = None
    warnings: list[MealWarning] = Field(default_factory=list)
