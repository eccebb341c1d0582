"""SQLAlchemy-backed user repository."""

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from exercise_tracker.adapters.sql_database import SqlDatabase, UserRow
from exercise_tracker.domain.errors import DuplicateUsernameError
from exercise_tracker.domain.models import UserRecord
from exercise_tracker.services.users import UserRepository


@dataclass
class SqlUserRepository(UserRepository):
    """SQL implementation for user persistence."""

    database: SqlDatabase

    def create_user(self, username: str) -> UserRecord:
        """Insert a user row and return it."""
        try:
            with self.database.session() as session:
                row = UserRow(username=username)
                session.add(row)
                session.flush()
                return _to_user(row)
        except IntegrityError as exc:
            raise DuplicateUsernameError() from exc

    def get_by_id(self, user_id: int) -> UserRecord | None:
        """Return the user for an id, if present."""
        with self.database.session() as session:
            row = session.get(UserRow, user_id)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> UserRecord | None:
        """Return the user with an exact username, if present."""
        with self.database.session() as session:
            row = session.scalars(
                select(UserRow).where(UserRow.username == username).limit(1)
            ).first()
            return _to_user(row) if row else None

    def list_users(self) -> list[UserRecord]:
        """Return all users ordered by id."""
        with self.database.session() as session:
            rows = session.scalars(select(UserRow).order_by(UserRow.id)).all()
            return [_to_user(row) for row in rows]


def _to_user(row: UserRow) -> UserRecord:
    return UserRecord(id=row.id, username=row.username)
