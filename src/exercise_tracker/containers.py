"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from exercise_tracker.adapters.sql_database import SqlDatabase
from exercise_tracker.adapters.sql_exercise_repository import SqlExerciseRepository
from exercise_tracker.adapters.sql_user_repository import SqlUserRepository
from exercise_tracker.adapters.supabase_exercise_repository import (
    SupabaseExerciseRepository,
)
from exercise_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from exercise_tracker.config import Settings
from exercise_tracker.services.exercises import ExerciseRepository, ExerciseService
from exercise_tracker.services.users import UserRepository, UserService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    exercise_service: ExerciseService
    close_resources: Callable[[], Awaitable[None]]
    health_check: Callable[[], bool]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    user_repository: UserRepository
    exercise_repository: ExerciseRepository
    database: SqlDatabase | None = None
    health_check: Callable[[], bool]

    if resolved_settings.storage_backend == "supabase":
        supabase_client = create_client(
            str(resolved_settings.supabase_url),
            str(resolved_settings.supabase_service_key),
        )
        supabase_users = SupabaseUserRepository(supabase_client)
        user_repository = supabase_users
        exercise_repository = SupabaseExerciseRepository(supabase_client)
        health_check = supabase_users.health_check
    else:
        database = SqlDatabase(
            resolved_settings.database_url, echo=resolved_settings.database_echo
        )
        database.create_schema()
        user_repository = SqlUserRepository(database)
        exercise_repository = SqlExerciseRepository(database)
        health_check = database.health_check
    _logger.info("Using %s storage backend", resolved_settings.storage_backend)

    user_service = UserService(user_repository)
    exercise_service = ExerciseService(
        user_service=user_service,
        repository=exercise_repository,
    )

    async def close_resources() -> None:
        if database is not None:
            database.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        exercise_service=exercise_service,
        close_resources=close_resources,
        health_check=health_check,
    )
