"""Shared constants and small builders for the test modules."""

from datetime import datetime, timezone

# Reference instant for time-sensitive operations.
NOW = "2026-01-01T00:00:00.000Z"
MEETUP_AT = "2026-04-03T18:30:00.000Z"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def actor(user_id: str) -> dict:
    """Request headers identifying the acting user."""
    return {"X-Actor-Id": user_id}
