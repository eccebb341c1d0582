"""Input validation for user and exercise requests.

Validators either return normalized values or raise ``InvalidInputError``.
Exercise data and log query checks collect every problem before raising so a
single response can report all of them.
"""

import math
import re
from collections.abc import Callable
from datetime import UTC, date, datetime

from exercise_tracker.domain.errors import InvalidInputError
from exercise_tracker.domain.models import ExerciseInput, LogQuery

MAX_USERNAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
# Largest value a signed 64-bit INTEGER column holds.
MAX_INTEGER = 2**63 - 1

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)
_CANONICAL_ID = re.compile(r"[1-9]\d*", re.ASCII)


def validate_username(username: object) -> str:
    """Return the trimmed username or raise if it is unusable."""
    if not isinstance(username, str):
        raise InvalidInputError("Username is required and must be a string")

    trimmed = username.strip()
    if not trimmed:
        raise InvalidInputError("Username cannot be empty")
    if len(trimmed) > MAX_USERNAME_LENGTH:
        raise InvalidInputError(
            f"Username cannot exceed {MAX_USERNAME_LENGTH} characters"
        )
    return trimmed


def validate_exercise_data(
    description: object,
    duration: object,
    date_value: object = None,
    today: Callable[[], date] | None = None,
) -> ExerciseInput:
    """Validate exercise fields, defaulting the date to today in UTC."""
    errors: list[str] = []

    if not isinstance(description, str) or not description.strip():
        errors.append("Description is required and cannot be empty")
    elif len(description.strip()) > MAX_DESCRIPTION_LENGTH:
        errors.append(
            f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"
        )

    # A zero duration is falsy and therefore reported as missing.
    parsed_duration = parse_leading_int(duration)
    if (
        not duration
        or parsed_duration is None
        or not 0 < parsed_duration <= MAX_INTEGER
    ):
        errors.append("Duration is required and must be a positive integer")

    valid_date: str | None = None
    if date_value:
        valid_date, error = _check_date(
            date_value,
            format_error="Date must be in YYYY-MM-DD format",
            invalid_error="Invalid date provided",
        )
        if error:
            errors.append(error)
    else:
        valid_date = (today or _utc_today)().isoformat()

    if errors:
        raise InvalidInputError.from_messages(errors)

    return ExerciseInput(
        description=str(description).strip(),
        duration=int(parsed_duration or 0),
        date=str(valid_date),
    )


def validate_user_id(user_id: object) -> int:
    """Return the user id as an int when it is a canonical positive integer."""
    parsed: int | None = None
    if isinstance(user_id, int) and not isinstance(user_id, bool):
        parsed = user_id
    elif isinstance(user_id, float) and user_id.is_integer():
        parsed = int(user_id)
    elif isinstance(user_id, str) and _CANONICAL_ID.fullmatch(user_id.strip()):
        parsed = int(user_id.strip())

    if parsed is None or parsed <= 0:
        raise InvalidInputError("Invalid user ID")
    return parsed


def validate_query_params(
    from_date: object = None, to_date: object = None, limit: object = None
) -> LogQuery:
    """Validate optional log filters."""
    errors: list[str] = []
    valid_from: str | None = None
    valid_to: str | None = None
    valid_limit: int | None = None

    if from_date:
        valid_from, error = _check_date(
            from_date,
            format_error="from date must be in YYYY-MM-DD format",
            invalid_error="Invalid from date provided",
        )
        if error:
            errors.append(error)

    if to_date:
        valid_to, error = _check_date(
            to_date,
            format_error="to date must be in YYYY-MM-DD format",
            invalid_error="Invalid to date provided",
        )
        if error:
            errors.append(error)

    if limit:
        parsed_limit = parse_leading_int(limit)
        if parsed_limit is None or parsed_limit <= 0:
            errors.append("limit must be a positive integer")
        else:
            # Any limit past the row id range already covers every row.
            valid_limit = min(parsed_limit, MAX_INTEGER)

    # ISO dates are fixed width, so string order is chronological order.
    if valid_from and valid_to and valid_from > valid_to:
        errors.append("from date cannot be after to date")

    if errors:
        raise InvalidInputError.from_messages(errors)

    return LogQuery(from_date=valid_from, to_date=valid_to, limit=valid_limit)


def parse_leading_int(value: object) -> int | None:
    """Parse an integer from the leading digits of a value.

    ``"30"`` and ``"30 minutes"`` both give 30 and floats are truncated.
    Returns None when no integer can be read.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def _check_date(
    value: object, format_error: str, invalid_error: str
) -> tuple[str | None, str | None]:
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        return None, format_error
    try:
        date.fromisoformat(value)
    except ValueError:
        return None, invalid_error
    return value, None


def _utc_today() -> date:
    return datetime.now(tz=UTC).date()
