"""Meal logging service."""

from dataclasses import dataclass
from datetime import date
from typing import Literal, Protocol
from uuid import UUID

from calorie_tracker.domain.meals import InputMethod, Meal, MealCategory, MealWarning
from calorie_tracker.domain.pages import Page, Pagination
from calorie_tracker.services.ai_generations import AIGenerationRepository
from calorie_tracker.services.errors import InvalidRequestError, NotFoundError

MACRO_CALORIES = {"protein": 4, "carbs": 4, "fats": 9}
MACRO_WARNING_THRESHOLD_PERCENT = 5
NUTRITIONAL_FIELDS = ("description", "calories", "protein", "carbs", "fats")


@dataclass(frozen=True)
class MealFilters:
    """Filters for listing meals; ``day`` wins over the date range."""

    day: date | None = None
    date_from: date | None = None
    date_to: date | None = None
    category: MealCategory | None = None
    limit: int = 50
    offset: int = 0
    sort: Literal["asc", "desc"] = "desc"


class MealRepository(Protocol):
    """Persistence interface for meals."""

    def list_meals(self, user_id: UUID, filters: MealFilters) -> list[Meal]:
        """Return meals matching the filters, ordered by meal time."""

    def count_meals(self, user_id: UUID, filters: MealFilters) -> int:
        """Return how many meals match the filters."""

    def get_meal(self, user_id: UUID, meal_id: UUID) -> Meal | None:
        """Return a meal owned by the user."""

    def create_meal(self, user_id: UUID, values: dict[str, object]) -> Meal:
        """Insert a meal row and return it."""

    def update_meal(
        self, user_id: UUID, meal_id: UUID, values: dict[str, object]
    ) -> None:
        """Update columns of a meal owned by the user."""

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal; return False when nothing was deleted."""


def validate_macronutrients(
    calories: float,
    protein: float | None,
    carbs: float | None,
    fats: float | None,
) -> list[MealWarning]:
    """Warn when macros disagree with the calorie total by more than 5%.

    Only checked when all three macros are present.
    """
    if protein is None or carbs is None or fats is None or not calories:
        return []
    calculated = (
        MACRO_CALORIES["protein"] * protein
        + MACRO_CALORIES["carbs"] * carbs
        + MACRO_CALORIES["fats"] * fats
    )
    difference = abs(calories - calculated) / calories * 100
    if difference <= MACRO_WARNING_THRESHOLD_PERCENT:
        return []
    return [
        MealWarning(
            field="macronutrients",
            message=(
                "The calculated calories from macronutrients "
                f"({round(calculated)} kcal) differs by more than 5% from the "
                f"provided calories ({calories:g} kcal). Please verify your input."
            ),
        )
    ]


def should_change_to_ai_edited(meal: Meal, changes: dict[str, object]) -> bool:
    """Return True when an AI meal gets a new nutritional value.

    Category and timestamp edits alone keep the ``ai`` input method.
    """
    if meal.input_method != InputMethod.AI:
        return False
    return any(
        field in changes and changes[field] != getattr(meal, field)
        for field in NUTRITIONAL_FIELDS
    )


@dataclass
class MealService:
    """Service for creating, editing and listing meals."""

    repository: MealRepository
    generation_repository: AIGenerationRepository

    def list_meals(self, user_id: UUID, filters: MealFilters) -> Page[Meal]:
        return Page[Meal](
            data=self.repository.list_meals(user_id, filters),
            pagination=Pagination(
                total=self.repository.count_meals(user_id, filters),
                limit=filters.limit,
                offset=filters.offset,
            ),
        )

    def get_meal(self, user_id: UUID, meal_id: UUID) -> Meal:
        meal = self.repository.get_meal(user_id, meal_id)
        if meal is None:
            raise NotFoundError("Meal not found")
        return meal

    def create_meal(
        self,
        user_id: UUID,
        values: dict[str, object],
        ai_generation_id: UUID | None = None,
    ) -> Meal:
        """Create a meal and attach macro warnings.

        AI meals must reference a completed generation owned by the user;
        the generation is linked to the new meal.
        """
        is_ai = values.get("input_method") == InputMethod.AI
        if is_ai:
            if ai_generation_id is None:
                raise InvalidRequestError(
                    "AI generation ID is required for AI-generated meals"
                )
            self._require_completed_generation(user_id, ai_generation_id)
        warnings = validate_macronutrients(
            values["calories"],
            values.get("protein"),
            values.get("carbs"),
            values.get("fats"),
        )
        meal = self.repository.create_meal(user_id, values)
        if is_ai and ai_generation_id is not None:
            self.generation_repository.link_meal(ai_generation_id, meal.id)
        return meal.model_copy(update={"warnings": warnings})

    def update_meal(
        self, user_id: UUID, meal_id: UUID, changes: dict[str, object]
    ) -> Meal:
        """Apply a partial update; warnings use the merged values."""
        current = self.get_meal(user_id, meal_id)
        values = dict(changes)
        if should_change_to_ai_edited(current, changes):
            values["input_method"] = InputMethod.AI_EDITED.value
        warnings = validate_macronutrients(
            _merged(values, current, "calories"),
            _merged(values, current, "protein"),
            _merged(values, current, "carbs"),
            _merged(values, current, "fats"),
        )
        if values:
            self.repository.update_meal(user_id, meal_id, values)
        updated = self.get_meal(user_id, meal_id)
        return updated.model_copy(update={"warnings": warnings})

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> None:
        if not self.repository.delete_meal(user_id, meal_id):
            raise NotFoundError("Meal not found")

    def _require_completed_generation(
        self, user_id: UUID, generation_id: UUID
    ) -> None:
        generation = self.generation_repository.get_generation(user_id, generation_id)
        if generation is None:
            raise NotFoundError("AI generation not found")
        if generation.status != "completed":
            raise InvalidRequestError(
                "AI generation must be completed before creating a meal"
            )


def _merged(values: dict[str, object], meal: Meal, field: str) -> object:
    return values[field] if field in values else getattr(meal, field)
