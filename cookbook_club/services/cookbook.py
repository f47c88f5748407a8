import logging
from datetime import datetime

from cookbook_club.domain.clock import resolve_now
from cookbook_club.domain.cookbook_visibility import CookbookVisibilityPolicy
from cookbook_club.domain.ids import id_sequence
from cookbook_club.errors import NotFoundError
import cookbook_club.repositories.access_grant as grant_repo
import cookbook_club.repositories.meetup as meetup_repo
from cookbook_club.schemas.cookbook import CookbookAccessGrant
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.services.authorization import (
    assert_admin_or_co_admin,
    assert_member,
    require_membership,
)

logger = logging.getLogger(__name__)


def _meetup_sequence(state: StateSnapshot, meetup_id: str) -> int:
    meetup = meetup_repo.get_meetup_by_id(state, meetup_id)
    return meetup.sequence if meetup is not None else id_sequence(meetup_id)


def visibility_policy_for(state: StateSnapshot, user_id: str) -> CookbookVisibilityPolicy:
    membership = assert_member(state, user_id)
    access_from = membership.cookbook_access_from
    return CookbookVisibilityPolicy(
        access_from_sequence=_meetup_sequence(state, access_from) if access_from else None,
        granted_meetup_ids=grant_repo.get_granted_meetup_ids(state, user_id),
    )


def can_view_meetup_cookbook(state: StateSnapshot, user_id: str, meetup_id: str) -> bool:
    """
    Whether a member may see the recipes of a meetup.

    - Visible by default from the meetup that was upcoming when they joined
    - Earlier meetups only through an explicit access grant

    Raises:
        ForbiddenError: If the user is not a member
        NotFoundError: If the meetup does not exist
    """
    policy = visibility_policy_for(state, user_id)
    meetup = meetup_repo.get_meetup_by_id(state, meetup_id)
    if meetup is None:
        raise NotFoundError(f"Unknown meetup: {meetup_id}")
    return policy.can_view(meetup_id=meetup.id, meetup_sequence=meetup.sequence)


def grant_past_cookbook_access(
    state: StateSnapshot,
    actor_user_id: str,
    target_user_id: str,
    from_meetup_id: str | None = None,
    all_past: bool = False,
    now: str | datetime | None = None,
) -> list[CookbookAccessGrant]:
    """
    Grant a member access to past meetups' cookbooks. Host/admin/co_admin only.

    - ``all_past``: every past meetup
    - ``from_meetup_id``: past meetups from that one onwards
    - neither: every past meetup

    An unknown ``from_meetup_id`` is rejected even together with ``all_past``.

    Existing grants are left alone; only newly created grants are returned.
    """
    club = assert_admin_or_co_admin(state, actor_user_id)
    require_membership(state, target_user_id)

    past_meetups = meetup_repo.get_past_meetups(state, club.id)
    if not past_meetups:
        return []

    boundary = None
    if from_meetup_id:
        boundary = next((m for m in past_meetups if m.id == from_meetup_id), None)
        if boundary is None:
            raise NotFoundError(f"Unknown past meetup: {from_meetup_id}")

    if all_past or boundary is None:
        targets = past_meetups
    else:
        targets = [m for m in past_meetups if m.sequence >= boundary.sequence]

    timestamp = resolve_now(now)
    grants = []
    for meetup in targets:
        if grant_repo.get_grant(state, target_user_id, meetup.id) is not None:
            continue
        grants.append(
            grant_repo.create_grant(
                state,
                club_id=meetup.club_id,
                user_id=target_user_id,
                meetup_id=meetup.id,
                granted_by_user_id=actor_user_id,
                created_at=timestamp,
            )
        )
    if grants:
        logger.info(
            "User %s granted %s access to %d past cookbook(s)",
            actor_user_id,
            target_user_id,
            len(grants),
        )
    return grants

