"""Supabase repository for exercise entries."""

from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from exercise_tracker.domain.errors import NotFoundError, StorageError
from exercise_tracker.domain.models import ExerciseRecord
from exercise_tracker.services.exercises import ExerciseRepository

_COLUMNS = "id, user_id, description, duration, date"
FOREIGN_KEY_VIOLATION = "23503"


@dataclass
class SupabaseExerciseRepository(ExerciseRepository):
    """Supabase implementation for exercise entries."""

    client: Client

    def create_exercise(
        self, user_id: int, description: str, duration: int, date: str
    ) -> ExerciseRecord:
        """Create an exercise row and return it."""
        payload = {
            "user_id": user_id,
            "description": description,
            "duration": duration,
            "date": date,
        }
        try:
            response = self.client.table("exercises").insert(payload).execute()
        except APIError as exc:
            if exc.code == FOREIGN_KEY_VIOLATION:
                raise NotFoundError("User not found") from exc
            raise
        if not response.data:
            raise StorageError("Failed to create exercise in Supabase")
        return _parse_exercise(response.data[0])

    def get_exercise(self, exercise_id: int) -> ExerciseRecord | None:
        """Return an exercise row by id."""
        response = (
            self.client.table("exercises")
            .select(_COLUMNS)
            .eq("id", exercise_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_exercise(response.data[0])

    def list_exercises(
        self,
        user_id: int,
        from_date: str | None = None,
        to_date: str | None = None,
        limit: int | None = None,
    ) -> list[ExerciseRecord]:
        """Return matching rows by ascending date, then insertion order."""
        query = self.client.table("exercises").select(_COLUMNS).eq("user_id", user_id)
        if from_date:
            query = query.gte("date", from_date)
        if to_date:
            query = query.lte("date", to_date)
        query = query.order("date", desc=False).order("id", desc=False)
        if limit and limit > 0:
            query = query.limit(limit)
        response = query.execute()
        return [_parse_exercise(row) for row in response.data or []]

    def count_exercises(
        self, user_id: int, from_date: str | None = None, to_date: str | None = None
    ) -> int:
        """Return the number of matching rows using an exact count."""
        query = (
            self.client.table("exercises")
            .select("id", count="exact")
            .eq("user_id", user_id)
        )
        if from_date:
            query = query.gte("date", from_date)
        if to_date:
            query = query.lte("date", to_date)
        response = query.execute()
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])


def _parse_exercise(row: dict[str, object]) -> ExerciseRecord:
    return ExerciseRecord(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        description=str(row.get("description", "")),
        duration=int(row.get("duration", 0)),
        date=str(row.get("date", "")),
    )
