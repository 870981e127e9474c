from __future__ import annotations
from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return timezone-aware UTC datetime.

    Preferred over deprecated/naive utcnow().
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert any datetime to timezone-aware UTC.

    - Naive datetimes are treated as UTC and marked accordingly.
    - Aware datetimes are converted to UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_unix(dt: datetime) -> int:
    """Whole UNIX seconds, the resolution JWT claims are stored at."""
    return int(to_utc(dt).timestamp())


def from_unix(value: int | float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


def seconds_until(moment: datetime, now: datetime | None = None) -> int:
    """Whole seconds from ``now`` until ``moment``; negative once it has passed."""
    return to_unix(moment) - to_unix(now or now_utc())
