"""Shared test fixtures."""

import asyncio
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date

import pytest

from exercise_tracker.adapters.sql_database import SqlDatabase
from exercise_tracker.adapters.sql_exercise_repository import SqlExerciseRepository
from exercise_tracker.adapters.sql_user_repository import SqlUserRepository
from exercise_tracker.config import Settings
from exercise_tracker.containers import AppContainer, build_container
from exercise_tracker.domain.errors import DuplicateUsernameError
from exercise_tracker.domain.models import ExerciseRecord, UserRecord
from exercise_tracker.services.exercises import ExerciseRepository, ExerciseService
from exercise_tracker.services.users import UserRepository, UserService

FIXED_TODAY = date(2024, 3, 15)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[int, UserRecord] = field(default_factory=dict)

    def create_user(self, username: str) -> UserRecord:
        if self.get_by_username(username) is not None:
            raise DuplicateUsernameError()
        user = UserRecord(id=len(self.users) + 1, username=username)
        self.users[user.id] = user
        return user

    def get_by_id(self, user_id: int) -> UserRecord | None:
        return self.users.get(user_id)

    def get_by_username(self, username: str) -> UserRecord | None:
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    def list_users(self) -> list[UserRecord]:
        return sorted(self.users.values(), key=lambda user: user.id)


@dataclass
class InMemoryExerciseRepository(ExerciseRepository):
    """In-memory exercise repository for tests."""

    exercises: list[ExerciseRecord] = field(default_factory=list)

    def create_exercise(
        self, user_id: int, description: str, duration: int, date: str
    ) -> ExerciseRecord:
        exercise = ExerciseRecord(
            id=len(self.exercises) + 1,
            user_id=user_id,
            description=description,
            duration=duration,
            date=date,
        )
        self.exercises.append(exercise)
        return exercise

    def get_exercise(self, exercise_id: int) -> ExerciseRecord | None:
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None

    def list_exercises(
        self,
        user_id: int,
        from_date: str | None = None,
        to_date: str | None = None,
        limit: int | None = None,
    ) -> list[ExerciseRecord]:
        matches = sorted(
            self._matching(user_id, from_date, to_date),
            key=lambda exercise: (exercise.date, exercise.id),
        )
        if limit and limit > 0:
            return matches[:limit]
        return matches

    def count_exercises(
        self, user_id: int, from_date: str | None = None, to_date: str | None = None
    ) -> int:
        return len(self._matching(user_id, from_date, to_date))

    def _matching(
        self, user_id: int, from_date: str | None, to_date: str | None
    ) -> list[ExerciseRecord]:
        return [
            exercise
            for exercise in self.exercises
            if exercise.user_id == user_id
            and (not from_date or exercise.date >= from_date)
            and (not to_date or exercise.date <= to_date)
        ]


@pytest.fixture
def settings() -> Settings:
    return Settings(storage_backend="sql", database_url="sqlite://")


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def exercise_repository() -> InMemoryExerciseRepository:
    return InMemoryExerciseRepository()


@pytest.fixture
def user_service(user_repository: InMemoryUserRepository) -> UserService:
    return UserService(user_repository)


@pytest.fixture
def exercise_service(
    user_service: UserService, exercise_repository: InMemoryExerciseRepository
) -> ExerciseService:
    return ExerciseService(
        user_service=user_service,
        repository=exercise_repository,
        today=lambda: FIXED_TODAY,
    )


@pytest.fixture
def container(
    settings: Settings,
    user_service: UserService,
    exercise_service: ExerciseService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=user_service,
        exercise_service=exercise_service,
        close_resources=close_resources,
        health_check=lambda: True,
    )


@pytest.fixture
def database() -> Iterator[SqlDatabase]:
    with SqlDatabase("sqlite://") as db:
        db.create_schema()
        yield db


@pytest.fixture
def sql_user_repository(database: SqlDatabase) -> SqlUserRepository:
    return SqlUserRepository(database)


@pytest.fixture
def sql_exercise_repository(database: SqlDatabase) -> SqlExerciseRepository:
    return SqlExerciseRepository(database)


@pytest.fixture
def sql_container(settings: Settings) -> Iterator[AppContainer]:
    container = build_container(settings)
    yield container
    asyncio.run(container.close_resources())
