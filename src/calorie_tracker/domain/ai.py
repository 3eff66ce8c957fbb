"""Models for AI meal estimation."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

AIGenerationStatus = Literal["pending", "completed", "failed"]


class NutritionalEstimate(BaseModel):
    """Structured estimate returned by the language model."""

    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fats: float | None = Field(default=None, ge=0)
    assumptions: str | None = None
    error: str | None = None

    def is_complete(self) -> bool:
        """Return True when every nutritional value is present."""
        return None not in (self.calories, self.protein, self.carbs, self.fats)


class AIGeneration(BaseModel):
    """Stored AI generation request and its outcome."""

    id: UUID
    user_id: UUID
    prompt: str
    status: AIGenerationStatus
    generated_calories: float | None = None
    generated_protein: float | None = None
    generated_carbs: float | None = None
    generated_fats: float | None = None
    assumptions: str | None = None
    error_message: str | None = None
    model_used: str | None = None
    generation_duration: int | None = None
    meal_id: UUID | None = None
    created_at: datetime | None = None
