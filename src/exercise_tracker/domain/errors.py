"""Error taxonomy for the exercise tracker.

Every failure the services raise carries an ``ErrorKind``; the HTTP layer maps
status codes from the kind and returns ``detail`` as the message.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Categories of failures surfaced to callers."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    DUPLICATE_USERNAME = "duplicate_username"
    INTERNAL = "internal"


class TrackerError(Exception):
    """Base exception carrying an error kind and a human-readable detail."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidInputError(TrackerError):
    """Malformed, missing or out-of-range request data."""

    kind = ErrorKind.INVALID_INPUT

    @classmethod
    def from_messages(cls, messages: list[str]) -> "InvalidInputError":
        """Combine accumulated validation messages into one error."""
        return cls(", ".join(messages))


class NotFoundError(TrackerError):
    """A referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND


class DuplicateUsernameError(TrackerError):
    """A username uniqueness violation."""

    kind = ErrorKind.DUPLICATE_USERNAME

    def __init__(self, detail: str = "Username already exists") -> None:
        super().__init__(detail)


class StorageError(TrackerError):
    """Unexpected failure in the storage layer."""

    kind = ErrorKind.INTERNAL
