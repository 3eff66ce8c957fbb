"""Supabase repository for AI generation records."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.ai import AIGeneration, NutritionalEstimate
from calorie_tracker.services.ai_generations import AIGenerationRepository


@dataclass
class SupabaseAIGenerationRepository(AIGenerationRepository):
    """Supabase implementation for AI generation records."""

    client: Client

    def create_pending(self, user_id: UUID, prompt: str) -> AIGeneration:
        """Insert a pending record before the model is called."""
        response = (
            self.client.table("ai_generations")
            .insert({"user_id": str(user_id), "prompt": prompt, "status": "pending"})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to initialize AI generation")
        return AIGeneration.model_validate(response.data[0])

    def mark_failed(
        self,
        generation_id: UUID,
        error_message: str,
        duration_ms: int,
        model_used: str | None,
    ) -> AIGeneration:
        values: dict[str, object] = {
            "status": "failed",
            "error_message": error_message,
            "generation_duration": duration_ms,
        }
        if model_used:
            values["model_used"] = model_used
        return self._update(generation_id, values)

    def mark_completed(
        self,
        generation_id: UUID,
        estimate: NutritionalEstimate,
        duration_ms: int,
        model_used: str,
    ) -> AIGeneration:
        return self._update(
            generation_id,
            {
                "status": "completed",
                "generated_calories": estimate.calories,
                "generated_protein": estimate.protein,
                "generated_carbs": estimate.carbs,
                "generated_fats": estimate.fats,
                "assumptions": estimate.assumptions,
                "generation_duration": duration_ms,
                "model_used": model_used,
            },
        )

    def get_generation(
        self, user_id: UUID, generation_id: UUID
    ) -> AIGeneration | None:
        response = (
            self.client.table("ai_generations")
            .select("*")
            .eq("id", str(generation_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return AIGeneration.model_validate(response.data[0])

    def list_generations(
        self, user_id: UUID, limit: int, offset: int
    ) -> list[AIGeneration]:
        response = (
            self.client.table("ai_generations")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [AIGeneration.model_validate(row) for row in response.data or []]

    def count_generations(self, user_id: UUID) -> int:
        response = (
            self.client.table("ai_generations")
            .select("id", count="exact")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        return response.count or 0

    def link_meal(self, generation_id: UUID, meal_id: UUID) -> None:
        """Point a generation at the meal created from it."""
        self.client.table("ai_generations").update({"meal_id": str(meal_id)}).eq(
            "id", str(generation_id)
        ).execute()

    def _update(self, generation_id: UUID, values: dict[str, object]) -> AIGeneration:
        response = (
            self.client.table("ai_generations")
            .update(values)
            .eq("id", str(generation_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save AI generation results")
        return AIGeneration.model_validate(response.data[0])
