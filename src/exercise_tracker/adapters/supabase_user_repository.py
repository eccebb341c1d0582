"""Supabase-backed user repository."""

from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from exercise_tracker.domain.errors import DuplicateUsernameError, StorageError
from exercise_tracker.domain.models import UserRecord
from exercise_tracker.services.users import UserRepository

UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def create_user(self, username: str) -> UserRecord:
        """Create a new user row and return it."""
        try:
            response = (
                self.client.table("users").insert({"username": username}).execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateUsernameError() from exc
            raise
        if not response.data:
            raise StorageError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def get_by_id(self, user_id: int) -> UserRecord | None:
        """Return the user for an id, if present."""
        response = (
            self.client.table("users")
            .select("id, username")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_user(response.data[0])
        return None

    def get_by_username(self, username: str) -> UserRecord | None:
        """Return the user with an exact username, if present."""
        response = (
            self.client.table("users")
            .select("id, username")
            .eq("username", username)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_user(response.data[0])
        return None

    def list_users(self) -> list[UserRecord]:
        """Return all users ordered by id."""
        response = (
            self.client.table("users")
            .select("id, username")
            .order("id", desc=False)
            .execute()
        )
        return [_parse_user(row) for row in response.data or []]

    def health_check(self) -> bool:
        """Return true when the users table answers a one-row query."""
        try:
            self.client.table("users").select("id").limit(1).execute()
        except APIError:
            return False
        return True


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(id=int(row["id"]), username=str(row["username"]))
