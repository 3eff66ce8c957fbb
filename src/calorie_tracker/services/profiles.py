"""Application profiles, one per account."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.users import Profile
from calorie_tracker.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for an account."""

    def create_profile(self, user_id: UUID) -> Profile:
        """Insert the profile row for a new account."""


@dataclass
class ProfileService:
    """Service for reading profiles."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID) -> Profile:
        profile = self.repository.get_profile(user_id)
        if profile is None:
            logger.warning("Profile not found for user %s", user_id)
            raise NotFoundError("Profile not found")
        return profile
