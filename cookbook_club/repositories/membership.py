from datetime import datetime

from cookbook_club.domain import ids
from cookbook_club.domain.roles import Role
from cookbook_club.schemas.membership import Membership
from cookbook_club.schemas.state import StateSnapshot


def get_membership(state: StateSnapshot, club_id: str, user_id: str) -> Membership | None:
    """Get the membership linking a user to the club."""
    return next(
        (m for m in state.memberships if m.club_id == club_id and m.user_id == user_id),
        None,
    )


def get_memberships_by_club(state: StateSnapshot, club_id: str) -> list[Membership]:
    return [m for m in state.memberships if m.club_id == club_id]


def get_member_user_ids(state: StateSnapshot, club_id: str) -> list[str]:
    return [m.user_id for m in get_memberships_by_club(state, club_id)]


def create_membership(
    state: StateSnapshot,
    club_id: str,
    user_id: str,
    role: Role,
    joined_at: datetime,
    cookbook_access_from: str | None = None,
) -> Membership:
    """Create a membership. Pure data access - no business logic."""
    membership = Membership(
        id=ids.next_id(state.counters, ids.MEMBERSHIP),
        club_id=club_id,
        user_id=user_id,
        role=role,
        joined_at=joined_at,
        cookbook_access_from=cookbook_access_from,
    )
    state.memberships.append(membership)
    return membership
