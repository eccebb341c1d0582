"""SQLAlchemy-backed exercise repository."""

from dataclasses import dataclass

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError

from exercise_tracker.adapters.sql_database import ExerciseRow, SqlDatabase
from exercise_tracker.domain.errors import NotFoundError
from exercise_tracker.domain.models import ExerciseRecord
from exercise_tracker.services.exercises import ExerciseRepository


@dataclass
class SqlExerciseRepository(ExerciseRepository):
    """SQL implementation for exercise entries."""

    database: SqlDatabase

    def create_exercise(
        self, user_id: int, description: str, duration: int, date: str
    ) -> ExerciseRecord:
        """Insert an exercise row and return it."""
        try:
            with self.database.session() as session:
                row = ExerciseRow(
                    user_id=user_id,
                    description=description,
                    duration=duration,
                    date=date,
                )
                session.add(row)
                session.flush()
                return _to_exercise(row)
        except IntegrityError as exc:
            raise NotFoundError("User not found") from exc

    def get_exercise(self, exercise_id: int) -> ExerciseRecord | None:
        """Return an exercise row by id."""
        with self.database.session() as session:
            row = session.get(ExerciseRow, exercise_id)
            return _to_exercise(row) if row else None

    def list_exercises(
        self,
        user_id: int,
        from_date: str | None = None,
        to_date: str | None = None,
        limit: int | None = None,
    ) -> list[ExerciseRecord]:
        """Return matching rows by ascending date, then insertion order."""
        statement = _filter_by_date(
            select(ExerciseRow).where(ExerciseRow.user_id == user_id),
            from_date,
            to_date,
        ).order_by(ExerciseRow.date.asc(), ExerciseRow.id.asc())
        if limit and limit > 0:
            statement = statement.limit(limit)
        with self.database.session() as session:
            return [_to_exercise(row) for row in session.scalars(statement).all()]

    def count_exercises(
        self, user_id: int, from_date: str | None = None, to_date: str | None = None
    ) -> int:
        """Return the number of matching rows, ignoring any limit."""
        statement = _filter_by_date(
            select(func.count(ExerciseRow.id)).where(ExerciseRow.user_id == user_id),
            from_date,
            to_date,
        )
        with self.database.session() as session:
            return int(session.scalar(statement) or 0)


def _filter_by_date(
    statement: Select, from_date: str | None, to_date: str | None
) -> Select:
    if from_date:
        statement = statement.where(ExerciseRow.date >= from_date)
    if to_date:
        statement = statement.where(ExerciseRow.date <= to_date)
    return statement


def _to_exercise(row: ExerciseRow) -> ExerciseRecord:
    return ExerciseRecord(
        id=row.id,
        user_id=row.user_id,
        description=row.description,
        duration=row.duration,
        date=row.date,
    )
