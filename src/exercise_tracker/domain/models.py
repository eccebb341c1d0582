"""Domain models for the exercise tracker."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: int
    username: str


@dataclass(frozen=True)
class ExerciseRecord:
    """Represents an exercise entry stored in the database."""

    id: int
    user_id: int
    description: str
    duration: int
    date: str


@dataclass(frozen=True)
class ExerciseInput:
    """Validated exercise fields ready for persistence."""

    description: str
    duration: int
    date: str


@dataclass(frozen=True)
class LogQuery:
    """Validated filters for an exercise log query."""

    from_date: str | None = None
    to_date: str | None = None
    limit: int | None = None


@dataclass(frozen=True)
class CreatedExercise:
    """Result of logging an exercise for a user."""

    user_id: int
    exercise_id: int
    description: str
    duration: int
    date: str


@dataclass(frozen=True)
class ExerciseLog:
    """A user's filtered exercise entries with the total matching count."""

    id: int
    username: str
    logs: list[ExerciseRecord]
    count: int
