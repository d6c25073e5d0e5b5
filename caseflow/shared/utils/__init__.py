"""Shared helpers: UTC datetimes and id generation."""

from cuid2 import cuid_wrapper

from caseflow.shared.utils.datetime import ensure_utc, parse_iso_utc, utc_now

_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2 string (primary keys for rows this service inserts)."""
    value = _cuid()
    if not isinstance(value, str):
        raise TypeError(f"Expected str from cuid2, got {type(value).__name__}")
    return value


__all__ = ["ensure_utc", "generate_cuid", "parse_iso_utc", "utc_now"]
