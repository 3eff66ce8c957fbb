"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from calorie_tracker.client.api import CalorieTrackerApi
from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.ai import AIGeneration, NutritionalEstimate
from calorie_tracker.domain.goals import CalorieGoal
from calorie_tracker.domain.meals import Meal
from calorie_tracker.domain.progress import DailyProgress, DailyProgressRow
from calorie_tracker.domain.users import AuthSession, AuthUser, Profile
from calorie_tracker.services.ai_generations import (
    AIGenerationRepository,
    AIGenerationService,
)
from calorie_tracker.services.auth import AuthGateway, AuthGatewayError, AuthService
from calorie_tracker.services.calorie_goals import (
    CalorieGoalRepository,
    CalorieGoalService,
    DuplicateGoalError,
)
from calorie_tracker.services.daily_progress import (
    DailyProgressRepository,
    DailyProgressService,
)
from calorie_tracker.services.error_log import ErrorLogRepository, ErrorLogService
from calorie_tracker.services.meals import MealFilters, MealRepository, MealService
from calorie_tracker.services.nutrition import (
    NutritionClient,
    NutritionEstimationService,
)
from calorie_tracker.services.profiles import ProfileRepository, ProfileService
from calorie_tracker.services.rate_limit import SlidingWindowRateLimiter

TEST_EMAIL = "jan@example.com"
TEST_PASSWORD = "secret-password"
TEST_TOKEN = "test-access-token"


def make_meal(user_id: UUID | None = None, **overrides: object) -> Meal:
    values: dict[str, object] = {
        "id": uuid4(),
        "user_id": user_id or uuid4(),
        "description": "Owsianka z bananem",
        "calories": 350,
        "protein": 10.0,
        "carbs": 60.0,
        "fats": 7.0,
        "category": "breakfast",
        "input_method": "manual",
        "meal_timestamp": datetime(2025, 10, 30, 8, 30, tzinfo=UTC),
    }
    values.update(overrides)
    return Meal.model_validate(values)


def make_progress(day: date, user_id: UUID | None = None, **overrides) -> DailyProgress:
    values: dict[str, object] = {
        "date": day,
        "user_id": user_id or uuid4(),
        "total_calories": 1800,
        "calorie_goal": 2000,
        "percentage": 90.0,
        "status": "on_track",
    }
    values.update(overrides)
    return DailyProgress.model_validate(values)


def make_goal(user_id: UUID | None = None, **overrides: object) -> CalorieGoal:
    values: dict[str, object] = {
        "id": uuid4(),
        "user_id": user_id or uuid4(),
        "daily_goal": 2000,
        "effective_from": date(2025, 1, 1),
    }
    values.update(overrides)
    return CalorieGoal.model_validate(values)


def make_generation(user_id: UUID | None = None, **overrides) -> AIGeneration:
    values: dict[str, object] = {
        "id": uuid4(),
        "user_id": user_id or uuid4(),
        "prompt": "jajecznica z trzech jaj",
        "status": "completed",
        "generated_calories": 320,
        "generated_protein": 21,
        "generated_carbs": 2,
        "generated_fats": 25,
    }
    values.update(overrides)
    return AIGeneration.model_validate(values)


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, Meal] = field(default_factory=dict)

    def add(self, meal: Meal) -> Meal:
        self.meals[meal.id] = meal
        return meal

    def _matching(self, user_id: UUID, filters: MealFilters) -> list[Meal]:
        meals = [meal for meal in self.meals.values() if meal.user_id == user_id]
        if filters.day:
            meals = [m for m in meals if m.meal_timestamp.date() == filters.day]
        else:
            start, end = filters.date_from, filters.date_to
            if start:
                meals = [m for m in meals if m.meal_timestamp.date() >= start]
            if end:
                meals = [m for m in meals if m.meal_timestamp.date() <= end]
        if filters.category:
            meals = [m for m in meals if m.category == filters.category]
        return sorted(
            meals,
            key=lambda meal: meal.meal_timestamp,
            reverse=filters.sort == "desc",
        )

    def list_meals(self, user_id: UUID, filters: MealFilters) -> list[Meal]:
        meals = self._matching(user_id, filters)
        return meals[filters.offset : filters.offset + filters.limit]

    def count_meals(self, user_id: UUID, filters: MealFilters) -> int:
        return len(self._matching(user_id, filters))

    def get_meal(self, user_id: UUID, meal_id: UUID) -> Meal | None:
        meal = self.meals.get(meal_id)
        if meal is None or meal.user_id != user_id:
            return None
        return meal

    def create_meal(self, user_id: UUID, values: dict[str, object]) -> Meal:
        meal = Meal.model_validate(
            {
                **values,
                "id": uuid4(),
                "user_id": user_id,
                "created_at": datetime.now(tz=UTC),
            }
        )
        return self.add(meal)

    def update_meal(
        self, user_id: UUID, meal_id: UUID, values: dict[str, object]
    ) -> None:
        meal = self.get_meal(user_id, meal_id)
        if meal is not None:
            data = meal.model_dump()
            data.update(values)
            self.meals[meal_id] = Meal.model_validate(data)

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        if self.get_meal(user_id, meal_id) is None:
            return False
        del self.meals[meal_id]
        return True


@dataclass
class InMemoryAIGenerationRepository(AIGenerationRepository):
    """In-memory AI generation repository for tests."""

    generations: dict[UUID, AIGeneration] = field(default_factory=dict)

    def add(self, generation: AIGeneration) -> AIGeneration:
        self.generations[generation.id] = generation
        return generation

    def create_pending(self, user_id: UUID, prompt: str) -> AIGeneration:
        return self.add(
            AIGeneration(
                id=uuid4(),
                user_id=user_id,
                prompt=prompt,
                status="pending",
                created_at=datetime.now(tz=UTC),
            )
        )

    def mark_failed(
        self,
        generation_id: UUID,
        error_message: str,
        duration_ms: int,
        model_used: str | None,
    ) -> AIGeneration:
        return self._update(
            generation_id,
            status="failed",
            error_message=error_message,
            generation_duration=duration_ms,
            model_used=model_used,
        )

    def mark_completed(
        self,
        generation_id: UUID,
        estimate: NutritionalEstimate,
        duration_ms: int,
        model_used: str,
    ) -> AIGeneration:
        return self._update(
            generation_id,
            status="completed",
            generated_calories=estimate.calories,
            generated_protein=estimate.protein,
            generated_carbs=estimate.carbs,
            generated_fats=estimate.fats,
            assumptions=estimate.assumptions,
            generation_duration=duration_ms,
            model_used=model_used,
        )

    def get_generation(
        self, user_id: UUID, generation_id: UUID
    ) -> AIGeneration | None:
        generation = self.generations.get(generation_id)
        if generation is None or generation.user_id != user_id:
            return None
        return generation

    def list_generations(
        self, user_id: UUID, limit: int, offset: int
    ) -> list[AIGeneration]:
        owned = [g for g in self.generations.values() if g.user_id == user_id]
        return list(reversed(owned))[offset : offset + limit]

    def count_generations(self, user_id: UUID) -> int:
        return sum(1 for g in self.generations.values() if g.user_id == user_id)

    def link_meal(self, generation_id: UUID, meal_id: UUID) -> None:
        self._update(generation_id, meal_id=meal_id)

    def _update(self, generation_id: UUID, **values: object) -> AIGeneration:
        updated = self.generations[generation_id].model_copy(update=values)
        self.generations[generation_id] = updated
        return updated


@dataclass
class InMemoryCalorieGoalRepository(CalorieGoalRepository):
    """In-memory calorie goal repository for tests."""

    goals: dict[UUID, CalorieGoal] = field(default_factory=dict)

    def add(self, goal: CalorieGoal) -> CalorieGoal:
        self.goals[goal.id] = goal
        return goal

    def _owned(self, user_id: UUID) -> list[CalorieGoal]:
        return sorted(
            (goal for goal in self.goals.values() if goal.user_id == user_id),
            key=lambda goal: goal.effective_from,
            reverse=True,
        )

    def list_goals(self, user_id: UUID, limit: int, offset: int) -> list[CalorieGoal]:
        return self._owned(user_id)[offset : offset + limit]

    def count_goals(self, user_id: UUID) -> int:
        return len(self._owned(user_id))

    def get_current_goal(self, user_id: UUID, day: date) -> CalorieGoal | None:
        for goal in self._owned(user_id):
            if goal.effective_from <= day:
                return goal
        return None

    def get_goal_by_date(self, user_id: UUID, day: date) -> CalorieGoal | None:
        for goal in self._owned(user_id):
            if goal.effective_from == day:
                return goal
        return None

    def create_goal(
        self, user_id: UUID, daily_goal: int, effective_from: date
    ) -> CalorieGoal:
        if self.get_goal_by_date(user_id, effective_from) is not None:
            raise DuplicateGoalError()
        return self.add(
            CalorieGoal(
                id=uuid4(),
                user_id=user_id,
                daily_goal=daily_goal,
                effective_from=effective_from,
            )
        )

    def update_goal(
        self, user_id: UUID, goal_id: UUID, daily_goal: int
    ) -> CalorieGoal | None:
        goal = self.goals.get(goal_id)
        if goal is None or goal.user_id != user_id:
            return None
        return self.add(goal.model_copy(update={"daily_goal": daily_goal}))

    def delete_goal(self, user_id: UUID, goal_id: UUID) -> bool:
        goal = self.goals.get(goal_id)
        if goal is None or goal.user_id != user_id:
            return False
        del self.goals[goal_id]
        return True


@dataclass
class InMemoryDailyProgressRepository(DailyProgressRepository):
    """In-memory daily progress view for tests."""

    rows: list[DailyProgressRow] = field(default_factory=list)
    goals: dict[date, int] = field(default_factory=dict)

    def list_progress(  # noqa: PLR0913
        self,
        user_id: UUID,
        date_from: date | None,
        date_to: date | None,
        limit: int,
        offset: int,
    ) -> tuple[list[DailyProgressRow], int]:
        rows = [
            row
            for row in self.rows
            if row.user_id == user_id
            and (date_from is None or row.date >= date_from)
            and (date_to is None or row.date <= date_to)
        ]
        rows.sort(key=lambda row: row.date, reverse=True)
        return rows[offset : offset + limit], len(rows)

    def get_progress(self, user_id: UUID, day: date) -> DailyProgressRow | None:
        for row in self.rows:
            if row.user_id == user_id and row.date == day:
                return row
        return None

    def get_goal_for_date(self, user_id: UUID, day: date) -> int | None:
        return self.goals.get(day)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, Profile] = field(default_factory=dict)
    fail_on_create: bool = False

    def get_profile(self, user_id: UUID) -> Profile | None:
        return self.profiles.get(user_id)

    def create_profile(self, user_id: UUID) -> Profile:
        if self.fail_on_create:
            raise RuntimeError("insert failed")
        profile = Profile(id=user_id, created_at=datetime.now(tz=UTC))
        self.profiles[user_id] = profile
        return profile


@dataclass
class InMemoryErrorLogRepository(ErrorLogRepository):
    """In-memory error log repository for tests."""

    entries: list[dict[str, object]] = field(default_factory=list)
    fail: bool = False

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID | None,
        error_type: str,
        error_message: str,
        error_details: dict[str, object] | None,
        context: dict[str, object] | None,
    ) -> None:
        if self.fail:
            raise RuntimeError("error_logs unavailable")
        self.entries.append(
            {
                "user_id": user_id,
                "error_type": error_type,
                "error_message": error_message,
                "error_details": error_details,
                "context": context,
            }
        )


@dataclass
class FakeAuthGateway(AuthGateway):
    """Fake auth backend keyed by email, issuing one token per sign-in."""

    accounts: dict[str, tuple[str, AuthUser]] = field(default_factory=dict)
    tokens: dict[str, AuthUser] = field(default_factory=dict)
    signed_out: list[str] = field(default_factory=list)
    password_updates: list[tuple[UUID, str]] = field(default_factory=list)
    issue_session_on_sign_up: bool = True

    def register(
        self, email: str, password: str, token: str | None = None
    ) -> AuthUser:
        user = AuthUser(id=uuid4(), email=email)
        self.accounts[email] = (password, user)
        if token:
            self.tokens[token] = user
        return user

    def sign_in(self, email: str, password: str) -> AuthSession:
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthGatewayError("Invalid login credentials", 400)
        token = f"token-{uuid4()}"
        self.tokens[token] = account[1]
        return AuthSession(user=account[1], access_token=token)

    def sign_up(self, email: str, password: str) -> AuthSession:
        if email in self.accounts:
            raise AuthGatewayError("User already registered", 422)
        user = self.register(email, password)
        if not self.issue_session_on_sign_up:
            return AuthSession(user=user, access_token=None)
        token = f"token-{uuid4()}"
        self.tokens[token] = user
        return AuthSession(user=user, access_token=token)

    def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)
        self.tokens.pop(access_token, None)

    def get_user(self, access_token: str) -> AuthUser | None:
        user = self.tokens.get(access_token)
        if user is None:
            raise AuthGatewayError("invalid JWT", 401)
        return user

    def update_password(self, user_id: UUID, new_password: str) -> None:
        self.password_updates.append((user_id, new_password))
        for email, (_, user) in list(self.accounts.items()):
            if user.id == user_id:
                self.accounts[email] = (new_password, user)


@dataclass
class FakeNutritionClient(NutritionClient):
    """Fake LLM client returning a fixed payload or raising."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "calories": 320,
            "protein": 21,
            "carbs": 2,
            "fats": 25,
            "assumptions": "3 jajka, 10 g masła",
        }
    )
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def complete_json(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeApi(CalorieTrackerApi):
    """Scriptable API client for controller tests.

    ``pages`` is consumed one entry per ``list_daily_progress`` call; an
    exception entry is raised instead of returned. ``gate`` blocks calls
    until it is set.
    """

    pages: list[list[DailyProgress] | Exception] = field(default_factory=list)
    progress: DailyProgress | Exception | None = None
    meals: list[Meal] | Exception = field(default_factory=list)
    delete_error: Exception | None = None
    profile: Profile | Exception | None = None
    current_goal: CalorieGoal | None | Exception = None
    goal_by_date: CalorieGoal | None | Exception = None
    user_email: str | None = TEST_EMAIL
    logout_error: Exception | None = None
    generation: AIGeneration | Exception | None = None
    gate: asyncio.Event | None = None
    calls: list[tuple[object, ...]] = field(default_factory=list)

    async def _wait(self) -> None:
        if self.gate is not None:
            await self.gate.wait()

    async def list_daily_progress(self, limit: int, offset: int) -> list[DailyProgress]:
        self.calls.append(("list_daily_progress", limit, offset))
        page = self.pages.pop(0) if self.pages else []
        await self._wait()
        if isinstance(page, Exception):
            raise page
        return page

    async def get_daily_progress(self, day: date) -> DailyProgress:
        self.calls.append(("get_daily_progress", day))
        await self._wait()
        return _resolve(self.progress or make_progress(day))

    async def list_meals(
        self, day: date, limit: int = 100, offset: int = 0
    ) -> list[Meal]:
        self.calls.append(("list_meals", day, limit, offset))
        await self._wait()
        return list(_resolve(self.meals))

    async def get_meal(self, meal_id: UUID) -> Meal:
        raise NotImplementedError

    async def create_meal(self, payload: dict[str, object]) -> Meal:
        raise NotImplementedError

    async def update_meal(self, meal_id: UUID, payload: dict[str, object]) -> Meal:
        raise NotImplementedError

    async def delete_meal(self, meal_id: UUID) -> None:
        self.calls.append(("delete_meal", meal_id))
        if self.delete_error is not None:
            raise self.delete_error
        if isinstance(self.meals, list):
            self.meals = [meal for meal in self.meals if meal.id != meal_id]

    async def get_profile(self) -> Profile:
        self.calls.append(("get_profile",))
        return _resolve(self.profile or Profile(id=uuid4()))

    async def get_current_goal(self) -> CalorieGoal | None:
        self.calls.append(("get_current_goal",))
        return _resolve(self.current_goal)

    async def get_goal_by_date(self, day: date) -> CalorieGoal | None:
        self.calls.append(("get_goal_by_date", day))
        return _resolve(self.goal_by_date)

    async def create_goal(self, daily_goal: int) -> CalorieGoal:
        self.calls.append(("create_goal", daily_goal))
        return make_goal(daily_goal=daily_goal)

    async def update_goal(self, goal_id: UUID, daily_goal: int) -> CalorieGoal:
        self.calls.append(("update_goal", goal_id, daily_goal))
        return make_goal(id=goal_id, daily_goal=daily_goal)

    async def get_user_email(self) -> str | None:
        self.calls.append(("get_user_email",))
        return self.user_email

    async def login(self, email: str, password: str) -> AuthUser:
        raise NotImplementedError

    async def signup(self, email: str, password: str) -> AuthUser:
        raise NotImplementedError

    async def logout(self) -> None:
        self.calls.append(("logout",))
        if self.logout_error is not None:
            raise self.logout_error

    async def change_password(self, current_password: str, new_password: str) -> None:
        raise NotImplementedError

    async def generate_meal_estimate(self, prompt: str) -> AIGeneration:
        self.calls.append(("generate_meal_estimate", prompt))
        await self._wait()
        return _resolve(self.generation or make_generation(prompt=prompt))

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


def _resolve(value):  # type: ignore[no-untyped-def]
    if isinstance(value, Exception):
        raise value
    return value


def progress_days(count: int, start: date = date(2025, 10, 30)) -> list[DailyProgress]:
    """Return ``count`` consecutive days of progress, newest first."""
    return [make_progress(start - timedelta(days=index)) for index in range(count)]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
        environment="local",
    )


@pytest.fixture
def auth_gateway() -> FakeAuthGateway:
    return FakeAuthGateway()


@pytest.fixture
def user(auth_gateway: FakeAuthGateway) -> AuthUser:
    return auth_gateway.register(TEST_EMAIL, TEST_PASSWORD, token=TEST_TOKEN)


@pytest.fixture
def auth_headers(user: AuthUser) -> dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def nutrition_client() -> FakeNutritionClient:
    return FakeNutritionClient()


@pytest.fixture
def error_log_repository() -> InMemoryErrorLogRepository:
    return InMemoryErrorLogRepository()


@pytest.fixture
def container(
    settings: Settings,
    auth_gateway: FakeAuthGateway,
    nutrition_client: FakeNutritionClient,
    error_log_repository: InMemoryErrorLogRepository,
) -> AppContainer:
    profile_repository = InMemoryProfileRepository()
    generation_repository = InMemoryAIGenerationRepository()
    estimator = NutritionEstimationService(
        client=nutrition_client, model=settings.openai_model
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(
            gateway=auth_gateway, profile_repository=profile_repository
        ),
        daily_progress_service=DailyProgressService(InMemoryDailyProgressRepository()),
        meal_service=MealService(
            repository=InMemoryMealRepository(),
            generation_repository=generation_repository,
        ),
        calorie_goal_service=CalorieGoalService(InMemoryCalorieGoalRepository()),
        profile_service=ProfileService(profile_repository),
        ai_generation_service=AIGenerationService(
            repository=generation_repository, estimator=estimator
        ),
        ai_rate_limiter=SlidingWindowRateLimiter(
            max_requests=settings.ai_rate_limit_requests,
            window_seconds=settings.ai_rate_limit_window_seconds,
        ),
        error_log_service=ErrorLogService(error_log_repository),
        close_resources=close_resources,
    )

