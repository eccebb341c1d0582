"""SQLAlchemy engine, schema and session management."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    DateTime,
    Engine,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    event,
    text,
)
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    sessionmaker,
)
from sqlalchemy.pool import StaticPool

from exercise_tracker.domain.errors import StorageError

_logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for exercise tracker tables."""


class UserRow(Base):
    """Row in the users table."""

    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String, nullable=False, unique=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz=UTC),
    )


class ExerciseRow(Base):
    """Row in the exercises table."""

    __tablename__ = "exercises"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz=UTC),
    )


class SqlDatabase:
    """Owns the engine and hands out short-lived sessions.

    Use as a context manager or call ``close()`` on shutdown to release the
    connection pool.
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.engine = _create_engine(database_url, echo)
        self._session_factory = sessionmaker(self.engine, expire_on_commit=False)

    def create_schema(self) -> None:
        """Create tables and indexes that do not exist yet."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a session that commits on success and rolls back on error.

        Integrity errors propagate so repositories can translate constraint
        violations. Every other database error, including integers the driver
        cannot bind, becomes ``StorageError``.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError:
            session.rollback()
            raise
        except (SQLAlchemyError, OverflowError) as exc:
            session.rollback()
            _logger.error("Database operation failed: %s", exc)
            raise StorageError("Database operation failed") from exc
        finally:
            session.close()

    def health_check(self) -> bool:
        """Return true when the database answers a trivial query."""
        try:
            with self.session() as session:
                session.execute(text("SELECT 1"))
        except StorageError:
            return False
        return True

    def close(self) -> None:
        """Dispose of pooled connections."""
        self.engine.dispose()

    def __enter__(self) -> "SqlDatabase":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()


def _create_engine(database_url: str, echo: bool) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo, pool_pre_ping=True)

    # Connections are used from threads other than the one that opened them.
    connect_args = {"check_same_thread": False}
    if url.database in (None, "", ":memory:"):
        engine = create_engine(
            url, echo=echo, connect_args=connect_args, poolclass=StaticPool
        )
    else:
        engine = create_engine(url, echo=echo, connect_args=connect_args)

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine
