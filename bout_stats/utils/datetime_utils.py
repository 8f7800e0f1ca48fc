"""Datetime helpers.

All wall-clock times handled by the engine are timezone-aware UTC.
Naive datetimes coming from collaborators are assumed to be UTC.
"""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Get the current time in UTC, timezone-aware."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_epoch_ms(value: datetime) -> float:
    """Milliseconds since the epoch for a wall-clock time."""
    return ensure_utc(value).timestamp() * 1000


def seconds_between(start: datetime, end: datetime) -> float:
    """Signed seconds from ``start`` to ``end``."""
    return (to_epoch_ms(end) - to_epoch_ms(start)) / 1000
