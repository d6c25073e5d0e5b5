"""UTC datetime helpers.

Progress timestamps, step anchors and side-event timestamps are compared
with each other, so every value is normalized to timezone-aware UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime (the engine's default clock)."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize dt to aware UTC; None passes through.

    Side-event tables are written by other clients and may hold naive
    timestamps; those are taken to be UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_iso_utc(value: str) -> datetime:
    """Parse an ISO 8601 string (trailing 'Z' allowed) as aware UTC.

    Raises:
        ValueError: value is not an ISO 8601 date or datetime.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return ensure_utc(parsed)  # type: ignore[return-value]
