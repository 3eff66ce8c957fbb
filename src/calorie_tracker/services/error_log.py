"""Persistent error log for unexpected server failures."""

import logging
import traceback
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

logger = logging.getLogger(__name__)


class ErrorLogRepository(Protocol):
    """Persistence interface for error log rows."""

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID | None,
        error_type: str,
        error_message: str,
        error_details: dict[str, object] | None,
        context: dict[str, object] | None,
    ) -> None:
        """Insert an error log row."""


@dataclass
class ErrorLogService:
    """Records unexpected errors; never raises."""

    repository: ErrorLogRepository

    def log(
        self,
        error_type: str,
        error: BaseException,
        user_id: UUID | None = None,
        context: dict[str, object] | None = None,
    ) -> None:
        """Store an error with its stack trace, falling back to the logger."""
        details: dict[str, object] = {
            "name": type(error).__name__,
            "stack": "".join(traceback.format_exception(error)),
        }
        try:
            self.repository.create_entry(
                user_id=user_id,
                error_type=error_type,
                error_message=str(error) or type(error).__name__,
                error_details=details,
                context=context,
            )
        except Exception:
            logger.exception(
                "Failed to record %s error for user %s", error_type, user_id
            )
