"""Session endpoints: login, signup, logout and the current user."""

from fastapi import APIRouter, Depends, Request, Response, status

from calorie_tracker.api.dependencies import (
    access_token_from,
    get_container,
    require_user,
)
from calorie_tracker.api.schemas import CredentialsRequest
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.users import AuthSession, AuthUser

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(
    response: Response, container: AppContainer, access_token: str
) -> None:
    response.set_cookie(
        key=container.settings.session_cookie_name,
        value=access_token,
        httponly=True,
        samesite="lax",
        secure=container.settings.environment != "local",
        path="/",
    )


def _session_body(session: AuthSession) -> dict[str, object]:
    return {
        "user": {"id": str(session.user.id), "email": session.user.email},
        "access_token": session.access_token,
    }


@router.post("/login")
async def login(
    body: CredentialsRequest,
    response: Response,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Sign in and store the access token in the session cookie."""
    session = container.auth_service.login(body.email, body.password)
    if session.access_token:
        _set_session_cookie(response, container, session.access_token)
    return _session_body(session)


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    body: CredentialsRequest,
    response: Response,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    session = container.auth_service.signup(body.email, body.password)
    if session.access_token:
        _set_session_cookie(response, container, session.access_token)
    return _session_body(session)


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    """Revoke the session and clear the cookie."""
    cookie_name = container.settings.session_cookie_name
    container.auth_service.logout(access_token_from(request, cookie_name))
    response.delete_cookie(cookie_name, path="/")
    return {"success": True}


@router.get("/me")
async def me(user: AuthUser = Depends(require_user)) -> dict[str, object]:
    return {"id": str(user.id), "email": user.email}
