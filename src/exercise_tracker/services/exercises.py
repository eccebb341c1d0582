"""Services for logging and querying exercises."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from exercise_tracker.domain.models import CreatedExercise, ExerciseLog, ExerciseRecord
from exercise_tracker.services.users import UserService
from exercise_tracker.services.validation import (
    validate_exercise_data,
    validate_query_params,
)

_logger = logging.getLogger(__name__)


class ExerciseRepository(Protocol):
    """Persistence interface for exercise entries."""

    def create_exercise(
        self, user_id: int, description: str, duration: int, date: str
    ) -> ExerciseRecord:
        """Create an exercise entry and return it."""

    def get_exercise(self, exercise_id: int) -> ExerciseRecord | None:
        """Return an exercise entry by id, if present."""

    def list_exercises(
        self,
        user_id: int,
        from_date: str | None = None,
        to_date: str | None = None,
        limit: int | None = None,
    ) -> list[ExerciseRecord]:
        """Return a user's entries within inclusive date bounds, oldest first."""

    def count_exercises(
        self, user_id: int, from_date: str | None = None, to_date: str | None = None
    ) -> int:
        """Return how many entries match the date bounds."""


@dataclass
class ExerciseService:
    """Application service for exercise logs."""

    user_service: UserService
    repository: ExerciseRepository
    today: Callable[[], date] | None = None

    def create_exercise(
        self,
        user_id: object,
        description: object,
        duration: object,
        date_value: object = None,
    ) -> CreatedExercise:
        """Log an exercise for an existing user."""
        user = self.user_service.get_user(user_id)
        data = validate_exercise_data(
            description, duration, date_value, today=self.today
        )
        exercise = self.repository.create_exercise(
            user.id, data.description, data.duration, data.date
        )
        _logger.info(
            "Logged exercise: user_id=%s exercise_id=%s date=%s",
            user.id,
            exercise.id,
            exercise.date,
        )
        return CreatedExercise(
            user_id=user.id,
            exercise_id=exercise.id,
            description=exercise.description,
            duration=exercise.duration,
            date=exercise.date,
        )

    def get_user_exercise_logs(
        self,
        user_id: object,
        from_date: object = None,
        to_date: object = None,
        limit: object = None,
    ) -> ExerciseLog:
        """Return a user's filtered entries and the unlimited matching count."""
        user = self.user_service.get_user(user_id)
        query = validate_query_params(from_date, to_date, limit)
        logs = self.repository.list_exercises(
            user.id, query.from_date, query.to_date, query.limit
        )
        count = self.repository.count_exercises(
            user.id, query.from_date, query.to_date
        )
        return ExerciseLog(id=user.id, username=user.username, logs=logs, count=count)
