"""Profile endpoints."""

from fastapi import APIRouter, Depends

from calorie_tracker.api.dependencies import get_container, require_user
from calorie_tracker.api.schemas import ChangePasswordRequest
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.users import AuthUser

router = APIRouter(prefix="/profile", tags=["profile"])

PASSWORD_CHANGED_MESSAGE = "Hasło zostało zmienione pomyślnie"


@router.get("")
async def get_profile(
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    return container.profile_service.get_profile(user.id).model_dump(mode="json")


@router.patch("/password")
async def change_password(
    body: ChangePasswordRequest,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Change the password after verifying the current one."""
    container.auth_service.change_password(
        user, body.current_password, body.new_password
    )
    return {"message": PASSWORD_CHANGED_MESSAGE}
