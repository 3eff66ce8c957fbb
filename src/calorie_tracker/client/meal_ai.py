"""AI-assist controller for the add-meal form."""

import logging
from dataclasses import dataclass

from calorie_tracker.client.api import CalorieTrackerApi
from calorie_tracker.client.errors import ApiError
from calorie_tracker.client.state import StateController
from calorie_tracker.domain.ai import AIGeneration

logger = logging.getLogger(__name__)

AI_FAILED_MESSAGE = (
    "AI nie mogło przetworzyć tego opisu. Spróbuj być bardziej szczegółowy."
)
AI_CONNECTION_MESSAGE = "Wystąpił błąd połączenia. Spróbuj ponownie."


@dataclass(frozen=True)
class MealAIState:
    ai_result: AIGeneration | None = None
    ai_loading: bool = False
    ai_error: str | None = None


class MealAIController(StateController[MealAIState]):
    """Requests a nutrition estimate and exposes the outcome to the form."""

    def __init__(self, api: CalorieTrackerApi) -> None:
        super().__init__(MealAIState())
        self.api = api

    async def generate(self, prompt: str) -> None:
        generation = self._next_generation()
        self._commit(ai_loading=True, ai_error=None, ai_result=None)
        try:
            result = await self.api.generate_meal_estimate(prompt)
        except ApiError as exc:
            if self._is_current(generation):
                self._commit(ai_loading=False, ai_error=exc.message)
            return
        except Exception:
            logger.exception("AI generation request failed")
            if self._is_current(generation):
                self._commit(ai_loading=False, ai_error=AI_CONNECTION_MESSAGE)
            return
        if not self._is_current(generation):
            return
        self._commit(
            ai_result=result,
            ai_loading=False,
            ai_error=AI_FAILED_MESSAGE if result.status == "failed" else None,
        )

    def reset(self) -> None:
        self._next_generation()
        self._commit(ai_result=None, ai_loading=False, ai_error=None)
