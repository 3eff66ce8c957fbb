"""Account sign-in, sign-up and password changes over the auth backend."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.users import AuthSession, AuthUser
from calorie_tracker.services.errors import InvalidRequestError, ServiceError
from calorie_tracker.services.profiles import ProfileRepository
from calorie_tracker.validation import (
    EMAIL_PATTERN,
    validate_email,
    validate_password,
    validate_password_required,
)

logger = logging.getLogger(__name__)

INVALID_EMAIL_MESSAGE = "Nieprawidłowy format email"
INVALID_CREDENTIALS_MESSAGE = "Nieprawidłowy email lub hasło"
USER_EXISTS_MESSAGE = "Użytkownik z tym adresem email już istnieje"
SIGNUP_FAILED_MESSAGE = "Nie udało się utworzyć konta. Spróbuj ponownie później."
UNEXPECTED_AUTH_MESSAGE = (
    "Wystąpił nieoczekiwany błąd. Spróbuj ponownie później."
)
WRONG_CURRENT_PASSWORD_MESSAGE = "Aktualne hasło jest nieprawidłowe"


class AuthGatewayError(Exception):
    """The auth backend rejected a request."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class AuthGateway(Protocol):
    """Interface for the hosted auth backend."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with a password; raise ``AuthGatewayError`` on failure."""

    def sign_up(self, email: str, password: str) -> AuthSession:
        """Register an account; raise ``AuthGatewayError`` on failure."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user owning a valid access token."""

    def update_password(self, user_id: UUID, new_password: str) -> None:
        """Set a new password for an account."""


class AuthFlowError(ServiceError):
    """Auth form failure rendered as ``{"error": message}``."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class AuthService:
    """Application service for the account lifecycle."""

    gateway: AuthGateway
    profile_repository: ProfileRepository
    skip_email_confirmation: bool = False

    def login(self, email: str, password: str) -> AuthSession:
        """Sign in; bad credentials never reveal which field was wrong."""
        if not EMAIL_PATTERN.match(email):
            raise AuthFlowError(INVALID_EMAIL_MESSAGE)
        message = validate_password_required(password)
        if message:
            raise AuthFlowError(message)
        try:
            return self.gateway.sign_in(email, password)
        except AuthGatewayError as exc:
            logger.info("Sign-in rejected: %s", exc.message)
            raise AuthFlowError(INVALID_CREDENTIALS_MESSAGE) from exc

    def signup(self, email: str, password: str) -> AuthSession:
        """Register an account and create its profile row.

        A failed profile insert is only logged; the account already exists.
        With email confirmation skipped the session opened by sign-up is
        closed again so the user signs in explicitly.
        """
        message = validate_email(email) or validate_password(password)
        if message:
            raise AuthFlowError(message)
        try:
            session = self.gateway.sign_up(email, password)
        except AuthGatewayError as exc:
            if "already registered" in exc.message:
                raise AuthFlowError(USER_EXISTS_MESSAGE, status_code=409) from exc
            logger.warning("Sign-up rejected: %s", exc.message)
            raise AuthFlowError(SIGNUP_FAILED_MESSAGE) from exc

        try:
            self.profile_repository.create_profile(session.user.id)
        except Exception:
            logger.exception("Error creating profile for user %s", session.user.id)

        if self.skip_email_confirmation and session.access_token:
            self.gateway.sign_out(session.access_token)
            return AuthSession(user=session.user, access_token=None)
        return session

    def logout(self, access_token: str | None) -> None:
        if access_token:
            self.gateway.sign_out(access_token)

    def authenticate(self, access_token: str) -> AuthUser | None:
        """Resolve an access token to its user, or None when invalid."""
        try:
            return self.gateway.get_user(access_token)
        except AuthGatewayError as exc:
            logger.info("Access token rejected: %s", exc.message)
            return None

    def change_password(
        self, user: AuthUser, current_password: str, new_password: str
    ) -> None:
        """Replace the password after re-checking the current one."""
        if current_password == new_password:
            raise InvalidRequestError("Nowe hasło musi być różne od obecnego")
        if not user.email:
            raise InvalidRequestError(WRONG_CURRENT_PASSWORD_MESSAGE)
        try:
            self.gateway.sign_in(user.email, current_password)
        except AuthGatewayError as exc:
            raise InvalidRequestError(WRONG_CURRENT_PASSWORD_MESSAGE) from exc
        self.gateway.update_password(user.id, new_password)
