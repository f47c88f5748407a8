from __future__ import annotations

from enum import Enum

from cookbook_club.errors import DomainValidationError


class Role(str, Enum):
    HOST = "host"
    ADMIN = "admin"
    CO_ADMIN = "co_admin"
    MEMBER = "member"


class ClubPolicy(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


def parse_role(value: Role | str) -> Role:
    try:
        return Role(value)
    except ValueError as e:
        raise DomainValidationError(f"Invalid role: {value}") from e


def parse_club_policy(value: ClubPolicy | str) -> ClubPolicy:
    try:
        return ClubPolicy(value)
    except ValueError as e:
        raise DomainValidationError(f"Invalid policy: {value}") from e


def is_privileged(role: Role | None) -> bool:
    """Host, admin and co_admin may manage members and cookbook access."""
    match role:
        case Role.HOST | Role.ADMIN | Role.CO_ADMIN:
            return True
        case Role.MEMBER | None:
            return False


def can_assign_roles(role: Role | None) -> bool:
    match role:
        case Role.HOST | Role.ADMIN:
            return True
        case Role.CO_ADMIN | Role.MEMBER | None:
            return False


def can_invite(policy: ClubPolicy, role: Role | None) -> bool:
    """Open clubs let any member invite; closed clubs only privileged roles."""
    if role is None:
        return False
    match policy:
        case ClubPolicy.OPEN:
            return True
        case ClubPolicy.CLOSED:
            return is_privileged(role)
