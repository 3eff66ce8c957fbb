"""AI generation records: request, estimate, persist the outcome."""

import logging
import time
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.ai import AIGeneration, NutritionalEstimate
from calorie_tracker.domain.pages import Page, Pagination
from calorie_tracker.services.errors import NotFoundError, UnavailableError
from calorie_tracker.services.nutrition import NutritionEstimationService

logger = logging.getLogger(__name__)

AI_UNAVAILABLE_MESSAGE = "AI service temporarily unavailable. Please try again later."


class AIGenerationRepository(Protocol):
    """Persistence interface for AI generation records."""

    def create_pending(self, user_id: UUID, prompt: str) -> AIGeneration:
        """Insert a pending record and return it."""

    def mark_failed(
        self,
        generation_id: UUID,
        error_message: str,
        duration_ms: int,
        model_used: str | None,
    ) -> AIGeneration:
        """Mark a record failed and return the updated row."""

    def mark_completed(
        self,
        generation_id: UUID,
        estimate: NutritionalEstimate,
        duration_ms: int,
        model_used: str,
    ) -> AIGeneration:
        """Store the estimate on a record and return the updated row."""

    def get_generation(
        self, user_id: UUID, generation_id: UUID
    ) -> AIGeneration | None:
        """Return a record owned by the user."""

    def list_generations(
        self, user_id: UUID, limit: int, offset: int
    ) -> list[AIGeneration]:
        """Return the user's records, newest first."""

    def count_generations(self, user_id: UUID) -> int:
        """Return how many records the user has."""

    def link_meal(self, generation_id: UUID, meal_id: UUID) -> None:
        """Attach the meal created from a generation."""


@dataclass
class AIGenerationService:
    """Runs nutrition estimates and records every attempt."""

    repository: AIGenerationRepository
    estimator: NutritionEstimationService

    async def create_generation(self, user_id: UUID, prompt: str) -> AIGeneration:
        """Estimate a meal and return the stored record.

        A refusal from the model is stored as a ``failed`` record and returned
        normally. A crash of the estimator marks the record failed and raises
        ``UnavailableError``.
        """
        started = time.monotonic()
        pending = self.repository.create_pending(user_id, prompt)
        try:
            estimate = await self.estimator.estimate(prompt)
        except Exception as exc:
            logger.exception("Nutrition estimate failed for generation %s", pending.id)
            self.repository.mark_failed(
                pending.id,
                error_message=str(exc) or "Unknown error during AI generation",
                duration_ms=_elapsed_ms(started),
                model_used=None,
            )
            raise UnavailableError(AI_UNAVAILABLE_MESSAGE) from exc

        duration_ms = _elapsed_ms(started)
        if estimate.error:
            return self.repository.mark_failed(
                pending.id,
                error_message=estimate.error,
                duration_ms=duration_ms,
                model_used=self.estimator.model,
            )
        return self.repository.mark_completed(
            pending.id,
            estimate,
            duration_ms=duration_ms,
            model_used=self.estimator.model,
        )

    def get_generation(self, user_id: UUID, generation_id: UUID) -> AIGeneration:
        generation = self.repository.get_generation(user_id, generation_id)
        if generation is None:
            raise NotFoundError("AI generation not found")
        return generation

    def list_generations(
        self, user_id: UUID, limit: int = 20, offset: int = 0
    ) -> Page[AIGeneration]:
        """Return a page of the user's generations, newest first."""
        return Page[AIGeneration](
            data=self.repository.list_generations(user_id, limit, offset),
            pagination=Pagination(
                total=self.repository.count_generations(user_id),
                limit=limit,
                offset=offset,
            ),
        )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
