"""Timestamp parsing and ordering rules for time entries.

All timestamps are handled as naive UTC datetimes truncated to milliseconds,
which is exactly what MongoDB stores and hands back. Normalizing before
comparing keeps validation consistent with what ends up in the database.
"""
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from app.utils.errors import InvalidRangeError, InvalidTimestampError

_datetime_adapter = TypeAdapter(datetime)


def utcnow() -> datetime:
    """Current time as naive UTC, millisecond precision."""
    return normalize(datetime.now(timezone.utc))


def normalize(value: datetime) -> datetime:
    """
    Convert a datetime to naive UTC with millisecond precision.

    Naive values are assumed to already be UTC.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def parse_timestamp(raw: Any, label: str = "time") -> datetime:
    """
    Parse an ISO-8601 timestamp.

    Args:
        raw: String (or datetime) received from the caller
        label: Human name of the field, used in the error message

    Returns:
        Naive UTC datetime

    Raises:
        InvalidTimestampError: If the value is missing, blank or unparseable

    Example:
        >>> parse_timestamp("2024-01-01T10:00:00Z")
        datetime.datetime(2024, 1, 1, 10, 0)
    """
    if isinstance(raw, datetime):
        return normalize(raw)

    if not isinstance(raw, str) or not raw.strip():
        raise InvalidTimestampError(f"Invalid {label}")

    try:
        parsed = _datetime_adapter.validate_python(raw.strip())
    except ValidationError:
        raise InvalidTimestampError(f"Invalid {label}") from None

    return normalize(parsed)


def parse_filter_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Parse a query filter value, returning None when it is missing or invalid."""
    if not raw:
        return None
    try:
        return parse_timestamp(raw)
    except InvalidTimestampError:
        return None


def validate_order(start: datetime, end: Optional[datetime]) -> None:
    """
    Require start < end whenever an end time is present.

    Raises:
        InvalidRangeError: If start is equal to or later than end
    """
    if end is not None and start >= end:
        raise InvalidRangeError("Start time must be before end time")


def is_blank(raw: Any) -> bool:
    """Whether a timestamp value is an empty or whitespace-only string."""
    return isinstance(raw, str) and not raw.strip()
