"""Supabase repository for profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.users import Profile
from calorie_tracker.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return Profile.model_validate(response.data[0])

    def create_profile(self, user_id: UUID) -> Profile:
        """Insert the profile row for a new account."""
        now = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("profiles")
            .insert({"id": str(user_id), "created_at": now, "updated_at": now})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create profile")
        return Profile.model_validate(response.data[0])
