"""FastAPI application factory for the wellness API."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from wellness_tracker.api.models import (
    AchievementRequest,
    HydrationRequest,
    MealRequest,
    MoodRequest,
    StatsRequest,
)
from wellness_tracker.app_logging import configure_logging
from wellness_tracker.config import normalize_prefix
from wellness_tracker.containers import ServiceContainer
from wellness_tracker.domain.errors import KeyValueStoreError, ValidationError


def create_app(container: ServiceContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    router = APIRouter(prefix=normalize_prefix(container.settings.service_prefix))

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            {"error": str(exc)}, status_code=status.HTTP_400_BAD_REQUEST
        )

    @app.exception_handler(RequestValidationError)
    async def malformed_body(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = sorted(
            {".".join(str(part) for part in error["loc"][1:]) for error in exc.errors()}
        )
        return JSONResponse(
            {"error": f"Invalid request fields: {', '.join(fields) or 'body'}"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    def storage_failure(action: str, exc: KeyValueStoreError) -> JSONResponse:
        logger.exception("Failed to %s", action)
        return JSONResponse(
            {"error": f"Failed to {action}: {exc}"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @router.get("/health")
    async def health() -> JSONResponse:
        """Health check used by clients to detect the service."""
        return JSONResponse(
            {"status": "ok", "timestamp": datetime.now(tz=UTC).isoformat()}
        )

    @router.get("/diagnostics")
    async def diagnostics(request: Request) -> JSONResponse:
        """Exercise the key/value store and report each stage."""
        state_container: ServiceContainer = request.app.state.container
        settings = state_container.settings
        report = state_container.tracking_service.run_diagnostics(
            config_present=bool(settings.supabase_url and settings.supabase_service_key)
        )
        return JSONResponse(report.to_json())

    @router.post("/mood")
    async def save_mood(body: MoodRequest, request: Request) -> JSONResponse:
        """Replace the mood for a user's day."""
        body.require("user_id", "date", "mood")
        service = request.app.state.container.tracking_service
        try:
            result = service.save_mood(body.user_id, body.date, body.mood)
        except KeyValueStoreError as exc:
            return storage_failure("save mood", exc)
        return JSONResponse(result.to_json())

    @router.get("/mood/{user_id}/{day}")
    async def get_mood(user_id: str, day: str, request: Request) -> JSONResponse:
        """Return the mood for a user's day, or null."""
        service = request.app.state.container.tracking_service
        try:
            entry = service.get_mood(user_id, day)
        except KeyValueStoreError as exc:
            return storage_failure("fetch mood", exc)
        return JSONResponse(entry.to_json() if entry else None)

    @router.post("/meals")
    async def add_meal(body: MealRequest, request: Request) -> JSONResponse:
        """Append a meal to a user's day."""
        body.require("user_id", "date", "meal")
        service = request.app.state.container.tracking_service
        try:
            result = service.add_meal(body.user_id, body.date, body.meal)
        except KeyValueStoreError as exc:
            return storage_failure("save meal", exc)
        return JSONResponse(result.to_json())

    @router.get("/meals/{user_id}/{day}")
    async def get_meals(user_id: str, day: str, request: Request) -> JSONResponse:
        """Return a user's meals for a day."""
        service = request.app.state.container.tracking_service
        try:
            log = service.get_meals(user_id, day)
        except KeyValueStoreError as exc:
            return storage_failure("fetch meals", exc)
        return JSONResponse(log.to_json())

    @router.post("/hydration")
    async def add_hydration(body: HydrationRequest, request: Request) -> JSONResponse:
        """Append a drink to a user's day."""
        body.require("user_id", "date", "amount")
        service = request.app.state.container.tracking_service
        try:
            result = service.add_hydration(body.user_id, body.date, body.amount)
        except KeyValueStoreError as exc:
            return storage_failure("save hydration", exc)
        return JSONResponse(result.to_json())

    @router.get("/hydration/{user_id}/{day}")
    async def get_hydration(user_id: str, day: str, request: Request) -> JSONResponse:
        """Return a user's drinks for a day."""
        service = request.app.state.container.tracking_service
        try:
            log = service.get_hydration(user_id, day)
        except KeyValueStoreError as exc:
            return storage_failure("fetch hydration", exc)
        return JSONResponse(log.to_json())

    @router.get("/stats/{user_id}")
    async def get_stats(user_id: str, request: Request) -> JSONResponse:
        """Return a user's stats snapshot."""
        service = request.app.state.container.tracking_service
        try:
            snapshot = service.get_stats(user_id)
        except KeyValueStoreError as exc:
            return storage_failure("fetch stats", exc)
        return JSONResponse(snapshot.to_json())

    @router.post("/stats")
    async def save_stats(body: StatsRequest, request: Request) -> JSONResponse:
        """Replace a user's stats snapshot."""
        body.require("user_id", "stats")
        service = request.app.state.container.tracking_service
        try:
            result = service.save_stats(body.user_id, body.stats)
        except KeyValueStoreError as exc:
            return storage_failure("save stats", exc)
        return JSONResponse(result.to_json())

    @router.get("/achievements/{user_id}")
    async def get_achievements(user_id: str, request: Request) -> JSONResponse:
        """Return a user's badges."""
        service = request.app.state.container.tracking_service
        try:
            log = service.get_achievements(user_id)
        except KeyValueStoreError as exc:
            return storage_failure("fetch achievements", exc)
        return JSONResponse(log.to_json())

    @router.post("/achievements")
    async def add_achievement(
        body: AchievementRequest, request: Request
    ) -> JSONResponse:
        """Award a badge to a user."""
        body.require("user_id", "badge")
        service = request.app.state.container.tracking_service
        try:
            result = service.add_achievement(body.user_id, body.badge)
        except KeyValueStoreError as exc:
            return storage_failure("save achievement", exc)
        return JSONResponse(result.to_json())

    app.include_router(router)
    return app
