from datetime import datetime

from cookbook_club.domain import ids
from cookbook_club.domain.roles import ClubPolicy
from cookbook_club.schemas.club import Club, default_reminder_policy
from cookbook_club.schemas.state import StateSnapshot


def get_active_club(state: StateSnapshot) -> Club | None:
    """The single club, if one has been initialized."""
    return state.clubs[0] if state.clubs else None


def create_club(
    state: StateSnapshot,
    name: str,
    host_user_id: str,
    created_at: datetime,
) -> Club:
    """Create the club record. Pure data access - no business logic."""
    club = Club(
        id=ids.next_id(state.counters, ids.CLUB),
        name=name,
        host_user_id=host_user_id,
        membership_policy=ClubPolicy.CLOSED,
        reminder_policy=default_reminder_policy(),
        reminder_templates={},
        created_at=created_at,
    )
    state.clubs.append(club)
    return club

