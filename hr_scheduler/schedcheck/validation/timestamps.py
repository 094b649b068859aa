"""Timestamp coercion shared by the date-based rules."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError

Clock = Callable[[], datetime]

# Same coercion CallLike.scheduled_at gets, so epoch numbers agree
_EPOCH_ADAPTER = TypeAdapter(datetime)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce a datetime, date, epoch number or ISO-8601 string to an aware datetime.

    Epoch numbers follow pydantic's rule: seconds, or milliseconds once the
    value is too large to be seconds. Naive values are read as local time.
    Returns None when the value cannot be interpreted as a point in time.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = _EPOCH_ADAPTER.validate_python(value)
        except ValidationError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    return as_aware(parsed)


def as_aware(moment: datetime) -> datetime:
    """Attach the local timezone to a naive datetime."""
    if moment.tzinfo is None:
        return moment.astimezone()
    return moment


def is_blank(value: Any) -> bool:
    """True for values that count as an omitted optional field."""
    return value is None or (isinstance(value, str) and not value.strip())
