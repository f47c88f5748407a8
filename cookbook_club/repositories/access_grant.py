from datetime import datetime

from cookbook_club.domain import ids
from cookbook_club.schemas.cookbook import CookbookAccessGrant
from cookbook_club.schemas.state import StateSnapshot


def get_grant(state: StateSnapshot, user_id: str, meetup_id: str) -> CookbookAccessGrant | None:
    return next(
        (
            g
            for g in state.cookbook_access_grants
            if g.user_id == user_id and g.meetup_id == meetup_id
        ),
        None,
    )


def get_granted_meetup_ids(state: StateSnapshot, user_id: str) -> frozenset[str]:
    return frozenset(g.meetup_id for g in state.cookbook_access_grants if g.user_id == user_id)


def create_grant(
    state: StateSnapshot,
    club_id: str,
    user_id: str,
    meetup_id: str,
    granted_by_user_id: str,
    created_at: datetime,
) -> CookbookAccessGrant:
    grant = CookbookAccessGrant(
        id=ids.next_id(state.counters, ids.ACCESS_GRANT),
        club_id=club_id,
        user_id=user_id,
        meetup_id=meetup_id,
        granted_by_user_id=granted_by_user_id,
        created_at=created_at,
    )
    state.cookbook_access_grants.append(grant)
    return grant
