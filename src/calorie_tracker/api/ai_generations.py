"""AI generation endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.dependencies import get_container, require_user
from calorie_tracker.api.schemas import AIGenerationRequest
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.users import AuthUser

router = APIRouter(prefix="/ai-generations", tags=["ai-generations"])

RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."


@router.post("", status_code=status.HTTP_201_CREATED, response_model=None)
async def create_ai_generation(
    body: AIGenerationRequest,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object] | JSONResponse:
    """Estimate a meal description; limited per user in a sliding window."""
    key = str(user.id)
    result = container.ai_rate_limiter.check(key)
    if not result.allowed:
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": RATE_LIMIT_MESSAGE,
                "retry_after": result.retry_after_seconds,
            },
            headers={"Retry-After": str(result.retry_after_seconds)},
        )
    container.ai_rate_limiter.hit(key)
    generation = await container.ai_generation_service.create_generation(
        user.id, body.prompt
    )
    return generation.model_dump(mode="json")


@router.get("")
async def list_ai_generations(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    page = container.ai_generation_service.list_generations(user.id, limit, offset)
    return page.model_dump(mode="json")


@router.get("/{generation_id}")
async def get_ai_generation(
    generation_id: UUID,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    generation = container.ai_generation_service.get_generation(
        user.id, generation_id
    )
    return generation.model_dump(mode="json")
