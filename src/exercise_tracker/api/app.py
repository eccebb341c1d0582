"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from exercise_tracker.api.ui import router as ui_router
from exercise_tracker.app_logging import configure_logging
from exercise_tracker.config import parse_allowed_origins
from exercise_tracker.containers import AppContainer
from exercise_tracker.domain.errors import ErrorKind, InvalidInputError, TrackerError
from exercise_tracker.domain.models import (
    CreatedExercise,
    ExerciseLog,
    ExerciseRecord,
    UserRecord,
)

_STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_USERNAME: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}
_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Exercise tracker started: environment=%s",
            app.state.container.settings.environment,
        )
        yield
        await app.state.container.close_resources()
        logger.info("Exercise tracker stopped")

    app = FastAPI(title="Exercise Tracker", lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allowed_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ui_router)

    @app.exception_handler(TrackerError)
    async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
        status_code = _STATUS_BY_KIND.get(
            exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Request failed: path=%s error=%s", request.url.path, exc)
            return JSONResponse(
                status_code=status_code, content={"error": "Internal server error"}
            )
        return JSONResponse(status_code=status_code, content={"error": exc.detail})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code in {
            status.HTTP_404_NOT_FOUND,
            status.HTTP_405_METHOD_NOT_ALLOWED,
        }:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"error": "Route not found"},
            )
        return JSONResponse(
            status_code=exc.status_code, content={"error": str(exc.detail)}
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    @app.get("/health")
    async def health(request: Request) -> JSONResponse:
        """Report whether the storage backend is reachable."""
        state_container: AppContainer = request.app.state.container
        if not state_container.health_check():
            logger.warning("Health check failed: storage unreachable")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unavailable"},
            )
        return JSONResponse(content={"status": "ok"})

    @app.post("/api/users")
    async def create_user(request: Request) -> dict[str, object]:
        """Register a user."""
        payload = await _read_payload(request)
        state_container: AppContainer = request.app.state.container
        user = state_container.user_service.create_user(payload.get("username"))
        return _serialize_user(user)

    @app.get("/api/users")
    async def list_users(request: Request) -> list[dict[str, object]]:
        """Return all users ordered by id."""
        state_container: AppContainer = request.app.state.container
        return [
            _serialize_user(user)
            for user in state_container.user_service.get_all_users()
        ]

    @app.post("/api/users/{user_id}/exercises")
    async def create_exercise(user_id: str, request: Request) -> dict[str, object]:
        """Log an exercise for a user."""
        payload = await _read_payload(request)
        state_container: AppContainer = request.app.state.container
        created = state_container.exercise_service.create_exercise(
            user_id,
            payload.get("description"),
            payload.get("duration"),
            payload.get("date"),
        )
        return _serialize_created_exercise(created)

    @app.get("/api/users/{user_id}/logs")
    async def exercise_logs(
        user_id: str,
        request: Request,
        from_date: str | None = Query(default=None, alias="from"),
        to_date: str | None = Query(default=None, alias="to"),
        limit: str | None = None,
    ) -> dict[str, object]:
        """Return a user's exercise log with optional date range and limit."""
        state_container: AppContainer = request.app.state.container
        log = state_container.exercise_service.get_user_exercise_logs(
            user_id, from_date, to_date, limit
        )
        return _serialize_log(log)

    return app


async def _read_payload(request: Request) -> dict[str, object]:
    """Read a JSON or form body into a dict; other bodies read as empty."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        return dict(form.items())
    if content_type.startswith("application/json"):
        if not await request.body():
            return {}
        try:
            body = await request.json()
        except ValueError as exc:
            raise InvalidInputError("Request body must be valid JSON") from exc
        return body if isinstance(body, dict) else {}
    return {}


def _serialize_user(user: UserRecord) -> dict[str, object]:
    return {"id": user.id, "username": user.username}


def _serialize_created_exercise(created: CreatedExercise) -> dict[str, object]:
    return {
        "userId": created.user_id,
        "exerciseId": created.exercise_id,
        "description": created.description,
        "duration": created.duration,
        "date": created.date,
    }


def _serialize_entry(entry: ExerciseRecord) -> dict[str, object]:
    return {
        "id": entry.id,
        "description": entry.description,
        "duration": entry.duration,
        "date": entry.date,
    }


def _serialize_log(log: ExerciseLog) -> dict[str, object]:
    return {
        "id": log.id,
        "username": log.username,
        "logs": [_serialize_entry(entry) for entry in log.logs],
        "count": log.count,
    }
