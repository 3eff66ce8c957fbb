"""Supabase Auth gateway."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from calorie_tracker.domain.users import AuthSession, AuthUser
from calorie_tracker.services.auth import AuthGateway, AuthGatewayError


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Auth gateway over Supabase Auth.

    Uses its own client: a password sign-in stores the user's session on
    the client, which must not leak into service-role table queries.
    """

    client: Client

    def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise AuthGatewayError(exc.message, _status(exc)) from exc
        if response.user is None:
            raise AuthGatewayError("Sign-in returned no user")
        return _to_session(response.user, response.session)

    def sign_up(self, email: str, password: str) -> AuthSession:
        try:
            response = self.client.auth.sign_up({"email": email, "password": password})
        except AuthError as exc:
            raise AuthGatewayError(exc.message, _status(exc)) from exc
        if response.user is None:
            raise AuthGatewayError("Sign-up returned no user")
        return _to_session(response.user, response.session)

    def sign_out(self, access_token: str) -> None:
        """Revoke the session that issued the token."""
        try:
            self.client.auth.admin.sign_out(access_token)
        except AuthError as exc:
            raise AuthGatewayError(exc.message, _status(exc)) from exc

    def get_user(self, access_token: str) -> AuthUser | None:
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            raise AuthGatewayError(exc.message, _status(exc)) from exc
        if response is None or response.user is None:
            return None
        return AuthUser(id=UUID(response.user.id), email=response.user.email)

    def update_password(self, user_id: UUID, new_password: str) -> None:
        try:
            self.client.auth.admin.update_user_by_id(
                str(user_id), {"password": new_password}
            )
        except AuthError as exc:
            raise AuthGatewayError(exc.message, _status(exc)) from exc


def _to_session(user, session) -> AuthSession:
    return AuthSession(
        user=AuthUser(id=UUID(user.id), email=user.email),
        access_token=session.access_token if session else None,
        refresh_token=session.refresh_token if session else None,
    )


def _status(exc: AuthError) -> int | None:
    return getattr(exc, "status", None)
