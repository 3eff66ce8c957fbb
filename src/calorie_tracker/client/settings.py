"""Settings controller: profile, current goal, email and dialog flags."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from calorie_tracker.client.api import CalorieTrackerApi
from calorie_tracker.client.errors import error_message
from calorie_tracker.client.state import StateController
from calorie_tracker.domain.goals import CalorieGoal
from calorie_tracker.domain.users import Profile

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"


@dataclass(frozen=True)
class SettingsState:
    profile: Profile | None = None
    current_goal: CalorieGoal | None = None
    user_email: str | None = None
    is_loading: bool = True
    error: str | None = None
    show_edit_goal_dialog: bool = False
    show_change_password_dialog: bool = False
    show_logout_dialog: bool = False


class SettingsController(StateController[SettingsState]):
    """Backs the settings page.

    A missing current goal is a normal "not set yet" state rather than an
    error. ``navigate`` receives the path to open after logout.
    """

    def __init__(self, api: CalorieTrackerApi, navigate: Callable[[str], None]) -> None:
        super().__init__(SettingsState())
        self.api = api
        self.navigate = navigate

    async def load_data(self) -> None:
        generation = self._next_generation()
        self._commit(is_loading=True, error=None)
        try:
            profile, current_goal, user_email = await self._fetch_all()
        except Exception as exc:
            if self._is_current(generation):
                self._commit(error=error_message(exc), is_loading=False)
            return
        if self._is_current(generation):
            self._commit(
                profile=profile,
                current_goal=current_goal,
                user_email=user_email,
                is_loading=False,
            )

    async def refresh_data(self) -> None:
        """Reload without the loading flag; failures are logged, never shown."""
        generation = self._next_generation()
        try:
            profile, current_goal, user_email = await self._fetch_all()
        except Exception:
            logger.exception("Failed to refresh settings data")
            if self._is_current(generation):
                self._commit(is_loading=False)
            return
        if self._is_current(generation):
            self._commit(
                profile=profile,
                current_goal=current_goal,
                user_email=user_email,
                is_loading=False,
            )

    def open_edit_goal_dialog(self) -> None:
        self._commit(show_edit_goal_dialog=True)

    def close_edit_goal_dialog(self) -> None:
        self._commit(show_edit_goal_dialog=False)

    def open_change_password_dialog(self) -> None:
        self._commit(show_change_password_dialog=True)

    def close_change_password_dialog(self) -> None:
        self._commit(show_change_password_dialog=False)

    def open_logout_dialog(self) -> None:
        self._commit(show_logout_dialog=True)

    def close_logout_dialog(self) -> None:
        self._commit(show_logout_dialog=False)

    async def logout(self) -> None:
        """Sign out and go to the login page, even when sign-out fails."""
        try:
            await self.api.logout()
        except Exception:
            logger.exception("Logout error")
        self.navigate(LOGIN_PATH)

    async def _fetch_all(self) -> tuple[Profile, CalorieGoal | None, str | None]:
        return await asyncio.gather(
            self.api.get_profile(),
            self.api.get_current_goal(),
            self.api.get_user_email(),
        )
