"""User-related business logic."""

import logging
from dataclasses import dataclass
from typing import Protocol

from exercise_tracker.domain.errors import NotFoundError
from exercise_tracker.domain.models import UserRecord
from exercise_tracker.services.validation import (
    MAX_INTEGER,
    validate_user_id,
    validate_username,
)

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def create_user(self, username: str) -> UserRecord:
        """Create and return a new user, raising on a duplicate username."""

    def get_by_id(self, user_id: int) -> UserRecord | None:
        """Return the user with the given id, if present."""

    def get_by_username(self, username: str) -> UserRecord | None:
        """Return the user with the exact username, if present."""

    def list_users(self) -> list[UserRecord]:
        """Return all users ordered by id."""


@dataclass
class UserService:
    """Application service for user registration and lookup."""

    repository: UserRepository

    def create_user(self, username: object) -> UserRecord:
        """Register a new user under a validated username."""
        valid_username = validate_username(username)
        user = self.repository.create_user(valid_username)
        _logger.info("Created user: id=%s username=%s", user.id, user.username)
        return user

    def get_all_users(self) -> list[UserRecord]:
        """Return every registered user."""
        return self.repository.list_users()

    def get_user(self, user_id: object) -> UserRecord:
        """Return an existing user for a raw id or raise."""
        valid_id = validate_user_id(user_id)
        # No stored row can have an id beyond the INTEGER range.
        user = None
        if valid_id <= MAX_INTEGER:
            user = self.repository.get_by_id(valid_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
