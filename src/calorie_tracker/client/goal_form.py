"""Calorie goal form: local validation and the save-for-tomorrow flow."""

import logging
import math
from dataclasses import asdict, dataclass

from calorie_tracker.client.api import CalorieTrackerApi
from calorie_tracker.client.errors import ApiError, ValidationFailed
from calorie_tracker.client.state import StateController
from calorie_tracker.dates import tomorrow
from calorie_tracker.domain.goals import CalorieGoal

logger = logging.getLogger(__name__)

MIN_GOAL = 1
MAX_GOAL = 10000

GOAL_NETWORK_ERROR = "Błąd połączenia. Sprawdź internet i spróbuj ponownie."


def validate_goal_value(value: str) -> str | None:
    """Return the validation message for a goal entry, or None when valid."""
    if not value.strip():
        return "Cel kaloryczny jest wymagany"
    try:
        number = float(value)
    except ValueError:
        return "Cel musi być liczbą"
    if math.isnan(number):
        return "Cel musi być liczbą"
    if not number.is_integer():
        return "Cel musi być liczbą całkowitą"
    if number < MIN_GOAL:
        return f"Cel musi być większy lub równy {MIN_GOAL}"
    if number > MAX_GOAL:
        return f"Cel musi być mniejszy lub równy {MAX_GOAL}"
    return None


async def save_goal_for_tomorrow(
    api: CalorieTrackerApi, daily_goal: int
) -> CalorieGoal:
    """Create or update the goal starting tomorrow.

    A goal that already took effect is never edited; a new one is created
    instead. Network failures surface with a connection message.
    """
    try:
        existing = await api.get_goal_by_date(tomorrow())
        if existing is None or existing.is_immutable:
            return await api.create_goal(daily_goal)
        return await api.update_goal(existing.id, daily_goal)
    except ApiError as exc:
        if exc.status is None:
            raise ApiError(GOAL_NETWORK_ERROR) from exc
        raise


@dataclass(frozen=True)
class GoalFormState:
    goal_value: str = ""
    is_saving: bool = False
    validation_error: str | None = None
    api_error: str | None = None


class CalorieGoalFormController(StateController[GoalFormState]):
    """Edit-goal dialog state seeded from the current goal."""

    def __init__(
        self, api: CalorieTrackerApi, current_goal: CalorieGoal | None = None
    ) -> None:
        super().__init__(_initial_state(current_goal))
        self.api = api
        self.current_goal = current_goal

    def update_goal_value(self, value: str) -> None:
        self._commit(goal_value=value, validation_error=None, api_error=None)

    def validate_field(self) -> bool:
        message = validate_goal_value(self.state.goal_value)
        self._commit(validation_error=message)
        return message is None

    async def submit_goal(self) -> CalorieGoal:
        """Validate, then save the goal for tomorrow.

        Raises ``ValidationFailed`` without any request when the value is
        invalid, and re-raises ``ApiError`` after recording its message.
        """
        message = validate_goal_value(self.state.goal_value)
        if message is not None:
            self._commit(validation_error=message)
            raise ValidationFailed(message)
        self._commit(is_saving=True, validation_error=None, api_error=None)
        try:
            saved = await save_goal_for_tomorrow(
                self.api, int(float(self.state.goal_value))
            )
        except ApiError as exc:
            logger.warning("Saving calorie goal failed: %s", exc.message)
            self._commit(is_saving=False, api_error=exc.message)
            raise
        self._commit(is_saving=False)
        return saved

    def reset(self) -> None:
        self._commit(**asdict(_initial_state(self.current_goal)))


def _initial_state(current_goal: CalorieGoal | None) -> GoalFormState:
    value = str(current_goal.daily_goal) if current_goal else ""
    return GoalFormState(goal_value=value)

