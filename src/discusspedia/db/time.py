# src/discusspedia/db/time.py
"""Time utilities for database models and API payloads."""

from datetime import UTC, datetime

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    SQLite drops tzinfo on the way back, so rows are stored naive and always in UTC.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def format_timestamp(value: datetime | str) -> str:
    """Render a stored timestamp as ``YYYY-MM-DD HH:MM:SS``."""
    if isinstance(value, str):
        # Raw SQL paths on SQLite may hand back the stored text unchanged.
        value = datetime.fromisoformat(value)
    return value.strftime(TIMESTAMP_FORMAT)
