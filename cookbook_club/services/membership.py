import logging
from datetime import datetime

from cookbook_club.domain.clock import resolve_now
from cookbook_club.domain.roles import Role, parse_role
from cookbook_club.errors import DomainValidationError, PreconditionFailedError
import cookbook_club.repositories.meetup as meetup_repo
import cookbook_club.repositories.membership as membership_repo
from cookbook_club.schemas.membership import MemberWithUser, Membership
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.services.authorization import (
    assert_can_assign_roles,
    assert_can_invite,
    require_club,
    require_membership,
    require_user,
)
from cookbook_club.services.notification import schedule_meetup_reminders

logger = logging.getLogger(__name__)


def _assignable_role(role: Role | str) -> Role:
    parsed = parse_role(role)
    if parsed == Role.HOST:
        raise DomainValidationError("Use host transfer to assign host role.")
    return parsed


def invite_member(
    state: StateSnapshot,
    actor_user_id: str,
    user_id: str,
    role: Role | str = Role.MEMBER,
    now: str | datetime | None = None,
) -> Membership:
    """
    Add a user to the club.

    - Actor and target must be known users
    - Closed clubs: only host/admin/co_admin may invite; open clubs: any member
    - Role cannot be host (use host transfer)
    - Idempotent: an existing membership is returned unchanged

    The new member sees cookbooks from the current upcoming meetup onwards
    and, when that meetup is already scheduled, gets its reminders.
    """
    club = require_club(state)
    require_user(state, actor_user_id)
    require_user(state, user_id)
    assert_can_invite(state, actor_user_id)
    parsed_role = _assignable_role(role)

    existing = membership_repo.get_membership(state, club.id, user_id)
    if existing is not None:
        return existing

    timestamp = resolve_now(now)
    upcoming = meetup_repo.get_upcoming_meetup(state, club.id)
    membership = membership_repo.create_membership(
        state,
        club_id=club.id,
        user_id=user_id,
        role=parsed_role,
        joined_at=timestamp,
        cookbook_access_from=upcoming.id if upcoming else None,
    )
    if upcoming is not None and upcoming.scheduled_for is not None:
        schedule_meetup_reminders(state, upcoming, user_ids=[user_id], now=timestamp)

    logger.info("User %s joined club %s as %s", user_id, club.id, parsed_role.value)
    return membership


def list_members(state: StateSnapshot) -> list[MemberWithUser]:
    club = require_club(state)
    return [
        MemberWithUser(**membership.model_dump(), user=require_user(state, membership.user_id))
        for membership in membership_repo.get_memberships_by_club(state, club.id)
    ]


def set_role(
    state: StateSnapshot, actor_user_id: str, user_id: str, role: Role | str
) -> Membership:
    """
    Change a member's role. Host/admin only.

    The host role is only ever assigned by transfer, and the current host's
    role cannot be changed before a transfer.
    """
    club = require_club(state)
    parsed_role = _assignable_role(role)
    if club.host_user_id == user_id:
        raise PreconditionFailedError("Use host transfer before changing the current host role.")
    assert_can_assign_roles(state, actor_user_id)

    membership = require_membership(state, user_id)
    membership.role = parsed_role
    return membership
