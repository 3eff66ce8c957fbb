"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from calorie_tracker.api.ai_generations import router as ai_generations_router
from calorie_tracker.api.auth import router as auth_router
from calorie_tracker.api.calorie_goals import router as calorie_goals_router
from calorie_tracker.api.daily_progress import router as daily_progress_router
from calorie_tracker.api.meals import router as meals_router
from calorie_tracker.api.profile import router as profile_router
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.services.auth import UNEXPECTED_AUTH_MESSAGE, AuthFlowError
from calorie_tracker.services.errors import ServiceError

API_PREFIX = "/api/v1"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    for router in (
        auth_router,
        daily_progress_router,
        meals_router,
        calorie_goals_router,
        profile_router,
        ai_generations_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(RequestValidationError)
    async def validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "details": validation_details(exc.errors()),
            },
        )

    @app.exception_handler(AuthFlowError)
    async def auth_flow_error(request: Request, exc: AuthFlowError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(ServiceError)
    async def service_error(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "message": exc.message},
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error in %s %s", request.method, request.url.path)
        if request.url.path.startswith(f"{API_PREFIX}/auth/"):
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": UNEXPECTED_AUTH_MESSAGE},
            )
        user = getattr(request.state, "user", None)
        route = request.scope.get("route")
        request.app.state.container.error_log_service.log(
            error_type=f"{getattr(route, 'name', 'request')}_failed",
            error=exc,
            user_id=user.id if user else None,
            context={"endpoint": f"{request.method} {request.url.path}"},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
            },
        )

    return app


def validation_details(errors: list[dict[str, object]]) -> dict[str, str]:
    """Map pydantic errors to ``{"field.path": message}``, first error wins."""
    details: dict[str, str] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in {"body", "query", "path"}:
            location = location[1:]
        field = ".".join(location) or "request"
        details.setdefault(field, _error_message(error))
    return details


def _error_message(error: dict[str, object]) -> str:
    context = error.get("ctx")
    if error.get("type") == "value_error" and isinstance(context, dict):
        return str(context.get("error", error.get("msg", "")))
    return str(error.get("msg", ""))
