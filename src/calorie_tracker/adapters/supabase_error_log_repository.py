"""Supabase repository for error logs."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.services.error_log import ErrorLogRepository


@dataclass
class SupabaseErrorLogRepository(ErrorLogRepository):
    """Supabase-backed error log repository."""

    client: Client

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID | None,
        error_type: str,
        error_message: str,
        error_details: dict[str, object] | None,
        context: dict[str, object] | None,
    ) -> None:
        """Create an error log row."""
        self.client.table("error_logs").insert(
            {
                "user_id": str(user_id) if user_id else None,
                "error_type": error_type,
                "error_message": error_message,
                "error_details": error_details,
                "context": context,
            }
        ).execute()
