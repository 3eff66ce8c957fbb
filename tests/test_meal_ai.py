"""Tests for the AI-assist controller."""

import asyncio

from calorie_tracker.client.errors import (
    AI_GENERATION_ERROR_MESSAGE,
    ApiError,
    RateLimitError,
)
from calorie_tracker.client.meal_ai import (
    AI_CONNECTION_MESSAGE,
    AI_FAILED_MESSAGE,
    MealAIController,
)
from tests.conftest import FakeApi, make_generation


def test_generate_stores_completed_result() -> None:
    generation = make_generation()
    controller = MealAIController(FakeApi(generation=generation))

    asyncio.run(controller.generate("jajecznica z trzech jaj"))

    state = controller.state
    assert state.ai_result == generation
    assert state.ai_loading is False
    assert state.ai_error is None


def test_failed_generation_sets_hint() -> None:
    generation = make_generation(
        status="failed", error_message="Opis zbyt ogólny", generated_calories=None
    )
    controller = MealAIController(FakeApi(generation=generation))

    asyncio.run(controller.generate("obiad"))

    assert controller.state.ai_result == generation
    assert controller.state.ai_error == AI_FAILED_MESSAGE


def test_rate_limit_message_includes_retry_after() -> None:
    controller = MealAIController(FakeApi(generation=RateLimitError(30)))

    asyncio.run(controller.generate("kanapka z serem"))

    assert controller.state.ai_error == "Zbyt wiele żądań. Spróbuj ponownie za 30s"
    assert controller.state.ai_result is None


def test_api_error_message_is_shown() -> None:
    error = ApiError(AI_GENERATION_ERROR_MESSAGE, status=500)
    controller = MealAIController(FakeApi(generation=error))

    asyncio.run(controller.generate("kanapka z serem"))

    assert controller.state.ai_error == AI_GENERATION_ERROR_MESSAGE


def test_unexpected_error_uses_connection_message() -> None:
    controller = MealAIController(FakeApi(generation=RuntimeError("boom")))

    asyncio.run(controller.generate("kanapka z serem"))

    assert controller.state.ai_error == AI_CONNECTION_MESSAGE
    assert controller.state.ai_loading is False


def test_reset_clears_result() -> None:
    controller = MealAIController(FakeApi())
    asyncio.run(controller.generate("kanapka z serem"))

    controller.reset()

    assert controller.state.ai_result is None
    assert controller.state.ai_error is None
