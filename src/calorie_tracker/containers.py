"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.openai_nutrition_client import OpenAINutritionClient
from calorie_tracker.adapters.supabase_ai_generation_repository import (
    SupabaseAIGenerationRepository,
)
from calorie_tracker.adapters.supabase_auth_gateway import SupabaseAuthGateway
from calorie_tracker.adapters.supabase_calorie_goal_repository import (
    SupabaseCalorieGoalRepository,
)
from calorie_tracker.adapters.supabase_daily_progress_repository import (
    SupabaseDailyProgressRepository,
)
from calorie_tracker.adapters.supabase_error_log_repository import (
    SupabaseErrorLogRepository,
)
from calorie_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from calorie_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from calorie_tracker.config import Settings
from calorie_tracker.services.ai_generations import AIGenerationService
from calorie_tracker.services.auth import AuthService
from calorie_tracker.services.calorie_goals import CalorieGoalService
from calorie_tracker.services.daily_progress import DailyProgressService
from calorie_tracker.services.error_log import ErrorLogService
from calorie_tracker.services.meals import MealService
from calorie_tracker.services.nutrition import NutritionEstimationService
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.rate_limit import SlidingWindowRateLimiter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    daily_progress_service: DailyProgressService
    meal_service: MealService
    calorie_goal_service: CalorieGoalService
    profile_service: ProfileService
    ai_generation_service: AIGenerationService
    ai_rate_limiter: SlidingWindowRateLimiter
    error_log_service: ErrorLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    # Password sign-ins store a user session on the client they run on.
    auth_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    ai_generation_repository = SupabaseAIGenerationRepository(supabase_client)
    nutrition_client = OpenAINutritionClient.create(
        api_key=resolved_settings.openai_api_key,
        base_url=resolved_settings.openai_base_url,
        timeout=resolved_settings.openai_timeout_seconds,
    )
    estimator = NutritionEstimationService(
        client=nutrition_client, model=resolved_settings.openai_model
    )

    async def close_resources() -> None:
        await nutrition_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(
            gateway=SupabaseAuthGateway(auth_client),
            profile_repository=profile_repository,
            skip_email_confirmation=resolved_settings.skip_email_confirmation,
        ),
        daily_progress_service=DailyProgressService(
            SupabaseDailyProgressRepository(supabase_client)
        ),
        meal_service=MealService(
            repository=SupabaseMealRepository(supabase_client),
            generation_repository=ai_generation_repository,
        ),
        calorie_goal_service=CalorieGoalService(
            SupabaseCalorieGoalRepository(supabase_client)
        ),
        profile_service=ProfileService(profile_repository),
        ai_generation_service=AIGenerationService(
            repository=ai_generation_repository, estimator=estimator
        ),
        ai_rate_limiter=SlidingWindowRateLimiter(
            max_requests=resolved_settings.ai_rate_limit_requests,
            window_seconds=resolved_settings.ai_rate_limit_window_seconds,
        ),
        error_log_service=ErrorLogService(SupabaseErrorLogRepository(supabase_client)),
        close_resources=close_resources,
    )
