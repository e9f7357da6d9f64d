from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def now_millis() -> int:
    return int(utcnow().timestamp() * 1000)


def to_iso_z(dt: datetime) -> str:
    """ISO-8601 with millisecond precision and a trailing Z, e.g. 2024-01-01T00:00:00.000Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_millis(value: Any) -> Optional[int]:
    """
    Parse an ISO-8601 string into epoch milliseconds.
    Naive values are treated as UTC. Returns None when the value can't be parsed.
    """
    if not isinstance(value, str):
        return None

    s = value.strip().replace("Z", "+00:00")
    if not s:
        return None
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(round(dt.timestamp() * 1000))
