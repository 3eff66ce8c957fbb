"""Request bodies accepted by the REST API."""

from datetime import UTC, datetime, timedelta
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from calorie_tracker.domain.meals import InputMethod, MealCategory

MEAL_TIMESTAMP_GRACE = timedelta(minutes=1)
NULLABLE_MEAL_FIELDS = frozenset({"protein", "carbs", "fats", "category"})


def _not_in_future(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    if value > datetime.now(tz=UTC) + MEAL_TIMESTAMP_GRACE:
        raise ValueError("Meal timestamp cannot be in the future")
    return value


class _MealFields(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(min_length=1, max_length=500)
    calories: int = Field(ge=1, le=10000)
    protein: float | None = Field(default=None, ge=0, le=1000)
    carbs: float | None = Field(default=None, ge=0, le=1000)
    fats: float | None = Field(default=None, ge=0, le=1000)
    category: MealCategory | None = None
    meal_timestamp: datetime

    @field_validator("meal_timestamp")
    @classmethod
    def check_timestamp(cls, value: datetime) -> datetime:
        return _not_in_future(value)


class CreateMealRequest(_MealFields):
    """New meal; AI meals must reference the generation they came from."""

    input_method: Literal["ai", "manual"]
    ai_generation_id: UUID | None = Field(default=None, validate_default=True)

    @field_validator("ai_generation_id")
    @classmethod
    def check_generation(cls, value: UUID | None, info: ValidationInfo) -> UUID | None:
        if info.data.get("input_method") != "ai":
            return None
        if value is None:
            raise ValueError("AI generation ID is required for AI-generated meals")
        return value


class UpdateMealRequest(BaseModel):
    """Partial meal update; omitted fields stay unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    description: str | None = Field(default=None, min_length=1, max_length=500)
    calories: int | None = Field(default=None, ge=1, le=10000)
    protein: float | None = Field(default=None, ge=0, le=1000)
    carbs: float | None = Field(default=None, ge=0, le=1000)
    fats: float | None = Field(default=None, ge=0, le=1000)
    category: MealCategory | None = None
    meal_timestamp: datetime | None = None
    input_method: InputMethod | None = None

    def changes(self) -> dict[str, object]:
        """Return the explicitly sent fields as JSON-ready column values."""
        data = self.model_dump(mode="json", exclude_unset=True)
        return {
            key: value
            for key, value in data.items()
            if value is not None or key in NULLABLE_MEAL_FIELDS
        }

    @field_validator("meal_timestamp")
    @classmethod
    def check_timestamp(cls, value: datetime | None) -> datetime | None:
        return _not_in_future(value) if value is not None else None


class CalorieGoalRequest(BaseModel):
    daily_goal: int = Field(ge=1, le=10000)


class AIGenerationRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    prompt: str = Field(min_length=1, max_length=1000)


class CredentialsRequest(BaseModel):
    """Login and signup body; field rules live in the auth service."""

    email: str = ""
    password: str = ""


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    current_password: str = Field(alias="currentPassword")
    new_password: str = Field(alias="newPassword")

    @field_validator("current_password")
    @classmethod
    def check_current_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Aktualne hasło jest wymagane")
        return value

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, value: str) -> str:
        if len(value) < 8:  # noqa: PLR2004
            raise ValueError("Nowe hasło musi mieć co najmniej 8 znaków")
        if len(value) > 100:  # noqa: PLR2004
            raise ValueError("Nowe hasło nie może przekraczać 100 znaków")
        return value
