"""Supabase repository for meals."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.dates import day_bounds
from calorie_tracker.domain.meals import Meal
from calorie_tracker.services.meals import MealFilters, MealRepository

MEAL_COLUMNS = (
    "*, ai_generation:ai_generations("
    "id, prompt, assumptions, model_used, generation_duration)"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal persistence."""

    client: Client

    def list_meals(self, user_id: UUID, filters: MealFilters) -> list[Meal]:
        """Return meals with their AI generation summary."""
        query = _apply_filters(
            self.client.table("meals").select(MEAL_COLUMNS).eq("user_id", str(user_id)),
            filters,
        )
        response = (
            query.order("meal_timestamp", desc=filters.sort == "desc")
            .range(filters.offset, filters.offset + filters.limit - 1)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def count_meals(self, user_id: UUID, filters: MealFilters) -> int:
        query = _apply_filters(
            self.client.table("meals")
            .select("id", count="exact")
            .eq("user_id", str(user_id)),
            filters,
        )
        response = query.limit(1).execute()
        return response.count or 0

    def get_meal(self, user_id: UUID, meal_id: UUID) -> Meal | None:
        response = (
            self.client.table("meals")
            .select(MEAL_COLUMNS)
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def create_meal(self, user_id: UUID, values: dict[str, object]) -> Meal:
        """Insert a meal row and return it."""
        response = (
            self.client.table("meals")
            .insert({**values, "user_id": str(user_id)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_meal(response.data[0])

    def update_meal(
        self, user_id: UUID, meal_id: UUID, values: dict[str, object]
    ) -> None:
        self.client.table("meals").update(values).eq("id", str(meal_id)).eq(
            "user_id", str(user_id)
        ).execute()

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        response = (
            self.client.table("meals")
            .delete()
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _apply_filters(query, filters: MealFilters):
    if filters.day:
        start, end = day_bounds(filters.day)
        query = query.gte("meal_timestamp", start).lte("meal_timestamp", end)
    else:
        if filters.date_from:
            query = query.gte("meal_timestamp", day_bounds(filters.date_from)[0])
        if filters.date_to:
            query = query.lte("meal_timestamp", day_bounds(filters.date_to)[1])
    if filters.category:
        query = query.eq("category", filters.category.value)
    return query


def _parse_meal(row: dict[str, object]) -> Meal:
    data = dict(row)
    generation = data.pop("ai_generation", None)
    if isinstance(generation, list):
        generation = generation[0] if generation else None
    return Meal.model_validate({**data, "ai_generation": generation})
