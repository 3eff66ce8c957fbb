"""Request dependencies shared by the routers."""

from fastapi import Depends, Request

from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.users import AuthUser
from calorie_tracker.services.errors import AuthenticationError

BEARER_PREFIX = "bearer "


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def access_token_from(request: Request, cookie_name: str) -> str | None:
    """Return the bearer token, falling back to the session cookie."""
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX) :].strip()
        if token:
            return token
    return request.cookies.get(cookie_name) or None


async def require_user(
    request: Request, container: AppContainer = Depends(get_container)
) -> AuthUser:
    """Resolve the signed-in user or answer 401."""
    token = access_token_from(request, container.settings.session_cookie_name)
    user = container.auth_service.authenticate(token) if token else None
    if user is None:
        raise AuthenticationError("Authentication required")
    request.state.user = user
    return user
