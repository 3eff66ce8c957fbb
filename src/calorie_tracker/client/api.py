"""HTTP client for the calorie tracker REST API."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol
from uuid import UUID

import httpx

from calorie_tracker.client.errors import (
    AI_GENERATION_ERROR_MESSAGE,
    DAY_NOT_FOUND_MESSAGE,
    DEFAULT_RETRY_AFTER_SECONDS,
    MEAL_NOT_FOUND_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    PROFILE_NOT_FOUND_MESSAGE,
    ApiError,
    RateLimitError,
    describe_status,
)
from calorie_tracker.domain.ai import AIGeneration
from calorie_tracker.domain.goals import CalorieGoal
from calorie_tracker.domain.meals import Meal
from calorie_tracker.domain.progress import DailyProgress
from calorie_tracker.domain.users import AuthUser, Profile

logger = logging.getLogger(__name__)

SERVER_ERROR_PL = "Wystąpił błąd serwera. Spróbuj ponownie później."
GOAL_CHECK_FAILED = "Nie udało się sprawdzić istniejącego celu. Spróbuj ponownie."
GOAL_ALREADY_EXISTS = (
    "Cel na jutro został już utworzony. Odśwież stronę i spróbuj ponownie."
)
GOAL_DELETED = "Cel został usunięty. Odśwież stronę i spróbuj ponownie."
SESSION_EXPIRED = "Sesja wygasła. Zaloguj się ponownie."
LOGIN_FAILED = "Nieprawidłowy email lub hasło"
SIGNUP_FAILED = "Nie udało się utworzyć konta"
LOGOUT_FAILED = "Nie udało się wylogować"
MALFORMED_RESPONSE_MESSAGE = "Nieprawidłowa odpowiedź serwera"

_NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class CalorieTrackerApi(Protocol):
    """Interface for calls made by the view controllers."""

    async def list_daily_progress(self, limit: int, offset: int) -> list[DailyProgress]:
        """Return one page of daily progress entries, newest first."""

    async def get_daily_progress(self, day: date) -> DailyProgress:
        """Return progress for a single day."""

    async def list_meals(
        self, day: date, limit: int = 100, offset: int = 0
    ) -> list[Meal]:
        """Return meals logged on a day."""

    async def get_meal(self, meal_id: UUID) -> Meal:
        """Return a single meal."""

    async def create_meal(self, payload: dict[str, object]) -> Meal:
        """Create a meal and return it with any warnings."""

    async def update_meal(self, meal_id: UUID, payload: dict[str, object]) -> Meal:
        """Update a meal and return it with any warnings."""

    async def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal."""

    async def get_profile(self) -> Profile:
        """Return the signed-in user's profile."""

    async def get_current_goal(self) -> CalorieGoal | None:
        """Return the goal in force today, or None when none is set."""

    async def get_goal_by_date(self, day: date) -> CalorieGoal | None:
        """Return the goal starting exactly on a day, or None."""

    async def create_goal(self, daily_goal: int) -> CalorieGoal:
        """Create a goal effective tomorrow."""

    async def update_goal(self, goal_id: UUID, daily_goal: int) -> CalorieGoal:
        """Update a goal that has not taken effect yet."""

    async def get_user_email(self) -> str | None:
        """Return the signed-in user's email, or None when unavailable."""

    async def login(self, email: str, password: str) -> AuthUser:
        """Sign in with email and password."""

    async def signup(self, email: str, password: str) -> AuthUser:
        """Create an account."""

    async def logout(self) -> None:
        """Sign out of the current session."""

    async def change_password(self, current_password: str, new_password: str) -> None:
        """Change the signed-in user's password."""

    async def generate_meal_estimate(self, prompt: str) -> AIGeneration:
        """Ask the server to estimate a meal's nutrition from a description."""


@dataclass
class HttpxCalorieTrackerApi(CalorieTrackerApi):
    """HTTPX-backed API client; session cookies persist on the client."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls,
        base_url: str,
        timeout: float = 15.0,
        access_token: str | None = None,
    ) -> "HttpxCalorieTrackerApi":
        """Create an API client with a managed httpx session."""
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
        return cls(
            http_client=httpx.AsyncClient(
                base_url=base_url, timeout=timeout, headers=headers
            )
        )

    async def list_daily_progress(self, limit: int, offset: int) -> list[DailyProgress]:
        response = await self._request(
            "GET",
            "/api/v1/daily-progress",
            params={"limit": limit, "offset": offset},
            headers=_NO_CACHE_HEADERS,
        )
        if not response.is_success:
            raise _status_error(response, "Failed to fetch daily progress")
        return [DailyProgress.model_validate(row) for row in _data(response)]

    async def get_daily_progress(self, day: date) -> DailyProgress:
        response = await self._request(
            "GET", f"/api/v1/daily-progress/{day.isoformat()}"
        )
        if not response.is_success:
            raise _status_error(
                response, "Failed to fetch day progress", DAY_NOT_FOUND_MESSAGE
            )
        return DailyProgress.model_validate(response.json())

    async def list_meals(
        self, day: date, limit: int = 100, offset: int = 0
    ) -> list[Meal]:
        response = await self._request(
            "GET",
            "/api/v1/meals",
            params={"date": day.isoformat(), "limit": limit, "offset": offset},
        )
        if not response.is_success:
            raise _status_error(response, "Failed to fetch meals")
        return [Meal.model_validate(row) for row in _data(response)]

    async def get_meal(self, meal_id: UUID) -> Meal:
        response = await self._request("GET", f"/api/v1/meals/{meal_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            raise ApiError("Posiłek nie został znaleziony", status=404)
        if not response.is_success:
            raise ApiError(
                "Nie udało się wczytać posiłku. Spróbuj ponownie.",
                status=response.status_code,
            )
        return Meal.model_validate(response.json())

    async def create_meal(self, payload: dict[str, object]) -> Meal:
        response = await self._request("POST", "/api/v1/meals", json=payload)
        if not response.is_success:
            raise _mutation_error(
                response,
                "Nie znaleziono generacji AI. Spróbuj wygenerować ponownie.",
            )
        return Meal.model_validate(response.json())

    async def update_meal(self, meal_id: UUID, payload: dict[str, object]) -> Meal:
        response = await self._request(
            "PATCH", f"/api/v1/meals/{meal_id}", json=payload
        )
        if not response.is_success:
            raise _mutation_error(
                response,
                "Posiłek nie został znaleziony. Możliwe że został usunięty.",
            )
        return Meal.model_validate(response.json())

    async def delete_meal(self, meal_id: UUID) -> None:
        response = await self._request("DELETE", f"/api/v1/meals/{meal_id}")
        if not response.is_success:
            raise _status_error(
                response, "Failed to delete meal", MEAL_NOT_FOUND_MESSAGE
            )

    async def get_profile(self) -> Profile:
        response = await self._request(
            "GET", "/api/v1/profile", headers=_NO_CACHE_HEADERS
        )
        if not response.is_success:
            raise _status_error(
                response, "Failed to fetch profile", PROFILE_NOT_FOUND_MESSAGE
            )
        return Profile.model_validate(response.json())

    async def get_current_goal(self) -> CalorieGoal | None:
        response = await self._request(
            "GET", "/api/v1/calorie-goals/current", headers=_NO_CACHE_HEADERS
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if not response.is_success:
            raise _status_error(response, "Failed to fetch current goal")
        return CalorieGoal.model_validate(response.json())

    async def get_goal_by_date(self, day: date) -> CalorieGoal | None:
        response = await self._request(
            "GET", "/api/v1/calorie-goals/by-date", params={"date": day.isoformat()}
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if not response.is_success:
            raise ApiError(GOAL_CHECK_FAILED, status=response.status_code)
        return CalorieGoal.model_validate(response.json())

    async def create_goal(self, daily_goal: int) -> CalorieGoal:
        response = await self._request(
            "POST", "/api/v1/calorie-goals", json={"daily_goal": daily_goal}
        )
        if response.status_code == httpx.codes.CONFLICT:
            raise ApiError(GOAL_ALREADY_EXISTS, status=409)
        if not response.is_success:
            raise _goal_error(response)
        return CalorieGoal.model_validate(response.json())

    async def update_goal(self, goal_id: UUID, daily_goal: int) -> CalorieGoal:
        response = await self._request(
            "PATCH",
            f"/api/v1/calorie-goals/{goal_id}",
            json={"daily_goal": daily_goal},
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise ApiError(GOAL_DELETED, status=404)
        if not response.is_success:
            raise _goal_error(response)
        return CalorieGoal.model_validate(response.json())

    async def get_user_email(self) -> str | None:
        try:
            response = await self._request(
                "GET", "/api/v1/auth/me", headers=_NO_CACHE_HEADERS
            )
        except ApiError:
            logger.exception("Failed to fetch user email")
            return None
        if not response.is_success:
            logger.warning("Failed to fetch user email: %s", response.status_code)
            return None
        return _body(response).get("email")

    async def login(self, email: str, password: str) -> AuthUser:
        response = await self._request(
            "POST", "/api/v1/auth/login", json={"email": email, "password": password}
        )
        if not response.is_success:
            raise _auth_error(response, LOGIN_FAILED)
        return AuthUser.model_validate(_body(response).get("user"))

    async def signup(self, email: str, password: str) -> AuthUser:
        response = await self._request(
            "POST", "/api/v1/auth/signup", json={"email": email, "password": password}
        )
        if not response.is_success:
            raise _auth_error(response, SIGNUP_FAILED)
        return AuthUser.model_validate(_body(response).get("user"))

    async def logout(self) -> None:
        response = await self._request("POST", "/api/v1/auth/logout")
        if not response.is_success:
            raise _auth_error(response, LOGOUT_FAILED)

    async def change_password(self, current_password: str, new_password: str) -> None:
        response = await self._request(
            "PATCH",
            "/api/v1/profile/password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise ApiError(
                _joined_details(response, "Błąd podczas zmiany hasła"), status=400
            )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise ApiError(SESSION_EXPIRED, status=401)
        if response.status_code == httpx.codes.INTERNAL_SERVER_ERROR:
            raise ApiError(SERVER_ERROR_PL, status=500)
        if not response.is_success:
            raise _unexpected(response)

    async def generate_meal_estimate(self, prompt: str) -> AIGeneration:
        response = await self._request(
            "POST", "/api/v1/ai-generations", json={"prompt": prompt}
        )
        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            retry_after = _body(response).get("retry_after")
            raise RateLimitError(
                int(retry_after) if retry_after else DEFAULT_RETRY_AFTER_SECONDS
            )
        if not response.is_success:
            raise ApiError(AI_GENERATION_ERROR_MESSAGE, status=response.status_code)
        return AIGeneration.model_validate(response.json())

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        try:
            return await self.http_client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Request %s %s failed: %s", method, url, exc)
            raise ApiError(NETWORK_ERROR_MESSAGE) from exc


def _body(response: httpx.Response) -> dict[str, object]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _data(response: httpx.Response) -> list[dict[str, object]]:
    rows = _body(response).get("data")
    if not isinstance(rows, list):
        raise ApiError(MALFORMED_RESPONSE_MESSAGE, status=response.status_code)
    return rows


def _details(response: httpx.Response) -> dict[str, str]:
    details = _body(response).get("details")
    if not isinstance(details, dict):
        return {}
    return {str(key): str(value) for key, value in details.items()}


def _joined_details(response: httpx.Response, fallback: str) -> str:
    details = _details(response)
    if details:
        return ", ".join(details.values())
    message = _body(response).get("message")
    return str(message) if message else fallback


def _status_error(
    response: httpx.Response, fallback: str, not_found: str | None = None
) -> ApiError:
    message = describe_status(
        response.status_code, response.reason_phrase, fallback, not_found
    )
    return ApiError(message, status=response.status_code)


def _unexpected(response: httpx.Response) -> ApiError:
    return ApiError(
        f"Nieoczekiwany błąd: {response.reason_phrase}", status=response.status_code
    )


def _mutation_error(response: httpx.Response, not_found: str) -> ApiError:
    status = response.status_code
    if status == httpx.codes.BAD_REQUEST:
        return ApiError(
            _joined_details(response, "Nieprawidłowe dane"),
            status=status,
            details=_details(response),
        )
    if status == httpx.codes.NOT_FOUND:
        return ApiError(not_found, status=status)
    if status == httpx.codes.INTERNAL_SERVER_ERROR:
        return ApiError(SERVER_ERROR_PL, status=status)
    return _unexpected(response)


def _goal_error(response: httpx.Response) -> ApiError:
    status = response.status_code
    if status == httpx.codes.BAD_REQUEST:
        return ApiError(
            _joined_details(response, "Błąd podczas operacji"),
            status=status,
            details=_details(response),
        )
    if status == httpx.codes.INTERNAL_SERVER_ERROR:
        return ApiError(SERVER_ERROR_PL, status=status)
    return _unexpected(response)


def _auth_error(response: httpx.Response, fallback: str) -> ApiError:
    error = _body(response).get("error")
    return ApiError(str(error) if error else fallback, status=response.status_code)
