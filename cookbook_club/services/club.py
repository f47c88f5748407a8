import logging
from datetime import datetime

from cookbook_club.core.validation import optional_text, require_non_empty
from cookbook_club.domain.clock import resolve_now
from cookbook_club.domain.roles import ClubPolicy, Role, parse_club_policy
from cookbook_club.errors import PreconditionFailedError
import cookbook_club.repositories.club as club_repo
import cookbook_club.repositories.meetup as meetup_repo
import cookbook_club.repositories.membership as membership_repo
import cookbook_club.repositories.notification as notification_repo
import cookbook_club.repositories.recipe as recipe_repo
import cookbook_club.repositories.user as user_repo
from cookbook_club.schemas.club import (
    Club,
    ClubInitResult,
    ClubOverview,
    ClubSummary,
    HostSummary,
    StatusCounts,
    StatusReport,
    UpcomingMeetupSummary,
)
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.services.authorization import (
    assert_host,
    require_club,
    require_membership,
    require_user,
)

logger = logging.getLogger(__name__)


def init_club(
    state: StateSnapshot,
    club_name: str,
    host_name: str,
    host_email: str | None = None,
    host_phone: str | None = None,
    now: str | datetime | None = None,
) -> ClubInitResult:
    """
    Initialize the one and only club.

    - Fails if a club already exists
    - Creates the host user, the club (closed policy, default reminders),
      the host membership and the first upcoming meetup

    Every check runs before anything is created.
    """
    if club_repo.get_active_club(state) is not None:
        raise PreconditionFailedError(
            "Only a single club is supported. Club already initialized."
        )
    normalized_club_name = require_non_empty(club_name, "Club name")
    normalized_host_name = require_non_empty(host_name, "Host name")
    timestamp = resolve_now(now)

    host = user_repo.create_user(
        state,
        name=normalized_host_name,
        email=optional_text(host_email),
        phone=optional_text(host_phone),
        created_at=timestamp,
    )
    club = club_repo.create_club(
        state, name=normalized_club_name, host_user_id=host.id, created_at=timestamp
    )
    # Founders see every cookbook, hence no access boundary.
    membership_repo.create_membership(
        state,
        club_id=club.id,
        user_id=host.id,
        role=Role.HOST,
        joined_at=timestamp,
        cookbook_access_from=None,
    )
    meetup_repo.create_meetup(
        state, club_id=club.id, host_user_id=host.id, created_at=timestamp
    )
    logger.info("Initialized club %s (%s) hosted by %s", club.id, club.name, host.id)
    return ClubInitResult(club=club, host=host)


def show_club(state: StateSnapshot) -> ClubOverview:
    club = require_club(state)
    return ClubOverview(
        club=club,
        host=require_user(state, club.host_user_id),
        upcoming=meetup_repo.get_upcoming_meetup(state, club.id),
    )


def set_policy(state: StateSnapshot, actor_user_id: str, policy: ClubPolicy | str) -> Club:
    """Switch between open and closed membership. Host only."""
    parsed = parse_club_policy(policy)
    club = assert_host(state, actor_user_id)
    club.membership_policy = parsed
    return club


def set_host(state: StateSnapshot, actor_user_id: str, new_host_user_id: str) -> Club:
    """
    Transfer the host role.

    - Only the current host may transfer
    - The new host must already be a member
    - The old host becomes a plain member
    - The upcoming meetup's host follows the club host
    """
    club = assert_host(state, actor_user_id)
    new_host_membership = require_membership(state, new_host_user_id)
    old_host_membership = require_membership(state, club.host_user_id)

    old_host_membership.role = Role.MEMBER
    new_host_membership.role = Role.HOST
    club.host_user_id = new_host_user_id

    upcoming = meetup_repo.get_upcoming_meetup(state, club.id)
    if upcoming is not None:
        upcoming.host_user_id = new_host_user_id

    logger.info("Host of club %s transferred from %s to %s", club.id, actor_user_id, new_host_user_id)
    return club


def build_status(state: StateSnapshot) -> StatusReport:
    """Summary of the club for dashboards; works before initialization too."""
    pending = len(notification_repo.get_undelivered(state))
    club = club_repo.get_active_club(state)
    if club is None:
        return StatusReport(
            initialized=False,
            counts=StatusCounts(users=len(state.users), pending_notifications=pending),
        )

    host = require_user(state, club.host_user_id)
    upcoming = meetup_repo.get_upcoming_meetup(state, club.id)
    return StatusReport(
        initialized=True,
        club=ClubSummary(id=club.id, name=club.name, membership_policy=club.membership_policy),
        host=HostSummary(id=host.id, name=host.name),
        upcoming_meetup=(
            UpcomingMeetupSummary(
                id=upcoming.id,
                scheduled_for=upcoming.scheduled_for,
                theme=upcoming.theme,
                status=upcoming.status.value,
            )
            if upcoming
            else None
        ),
        counts=StatusCounts(
            users=len(state.users),
            members=len(membership_repo.get_memberships_by_club(state, club.id)),
            recipes=len(recipe_repo.get_recipes_by_club(state, club.id)),
            upcoming_meetup_recipes=(
                len(recipe_repo.get_recipes_by_meetup(state, upcoming.id)) if upcoming else 0
            ),
            pending_notifications=pending,
        ),
    )
