"""Models for accounts and profiles."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class AuthUser(BaseModel):
    """Authenticated account as reported by the auth backend."""

    id: UUID
    email: str | None = None


class Profile(BaseModel):
    """Application profile, one per account."""

    id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class AuthSession:
    """Signed-in user with the tokens issued for them."""

    user: AuthUser
    access_token: str | None
    refresh_token: str | None = None
