from datetime import datetime, timedelta, timezone

from cookbook_club.errors import DomainValidationError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str | datetime | None, error_message: str) -> datetime:
    """Parse an ISO-8601 timestamp, raising DomainValidationError when it is not one."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError(error_message)
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise DomainValidationError(error_message) from e
    return ensure_utc(parsed)


def resolve_now(now: str | datetime | None = None) -> datetime:
    """Caller-supplied reference instant, falling back to the wall clock."""
    if now is None:
        return utc_now()
    return parse_timestamp(now, "Invalid timestamp. Use ISO format.")


def format_timestamp(value: datetime) -> str:
    """Render as ``2026-04-03T18:30:00.000Z``."""
    return ensure_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# Earliest representable instant; offsets reaching past it land here.
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def hours_before(value: datetime, hours: float) -> datetime:
    try:
        return value - timedelta(hours=hours)
    except OverflowError:
        return EARLIEST
