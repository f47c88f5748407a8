from typing import Any

from cookbook_club.errors import DomainValidationError


def require_non_empty(value: Any, label: str) -> str:
    """Return the stripped string, or raise when it is missing or blank."""
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError(f"{label} is required.")
    return value.strip()


def optional_text(value: str | None) -> str | None:
    """Strip optional contact fields; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
