"""Role checks shared by every club operation."""

from cookbook_club.domain.roles import Role, can_assign_roles, can_invite, is_privileged
from cookbook_club.errors import ForbiddenError, NotFoundError, PreconditionFailedError
import cookbook_club.repositories.club as club_repo
import cookbook_club.repositories.membership as membership_repo
import cookbook_club.repositories.user as user_repo
from cookbook_club.schemas.club import Club
from cookbook_club.schemas.membership import Membership
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.schemas.user import User


def require_club(state: StateSnapshot) -> Club:
    club = club_repo.get_active_club(state)
    if club is None:
        raise PreconditionFailedError("Club is not initialized. Run `club init`.")
    return club


def require_user(state: StateSnapshot, user_id: str) -> User:
    user = user_repo.get_user_by_id(state, user_id)
    if user is None:
        raise NotFoundError(f"Unknown user: {user_id}")
    return user


def user_role(state: StateSnapshot, club: Club, user_id: str) -> Role | None:
    membership = membership_repo.get_membership(state, club.id, user_id)
    return Role(membership.role) if membership else None


def assert_member(state: StateSnapshot, user_id: str) -> Membership:
    """The acting user must belong to the club."""
    club = require_club(state)
    membership = membership_repo.get_membership(state, club.id, user_id)
    if membership is None:
        raise ForbiddenError("User is not a member of this club.")
    return membership


def require_membership(state: StateSnapshot, user_id: str) -> Membership:
    """The target user must belong to the club."""
    club = require_club(state)
    membership = membership_repo.get_membership(state, club.id, user_id)
    if membership is None:
        raise NotFoundError(f"User {user_id} is not a member of this club.")
    return membership


def assert_host(state: StateSnapshot, actor_user_id: str) -> Club:
    club = require_club(state)
    if club.host_user_id != actor_user_id:
        raise ForbiddenError("Only current host can perform this action.")
    return club


def assert_admin_or_co_admin(state: StateSnapshot, actor_user_id: str) -> Club:
    club = require_club(state)
    if not is_privileged(user_role(state, club, actor_user_id)):
        raise ForbiddenError("Only host/admin/co_admin can perform this action.")
    return club


def assert_can_assign_roles(state: StateSnapshot, actor_user_id: str) -> Club:
    club = require_club(state)
    if not can_assign_roles(user_role(state, club, actor_user_id)):
        raise ForbiddenError("Only host/admin can set member roles.")
    return club


def assert_can_invite(state: StateSnapshot, actor_user_id: str) -> Club:
    """Open clubs: any member may invite. Closed clubs: host/admin/co_admin only."""
    club = require_club(state)
    role = user_role(state, club, actor_user_id)
    if role is None:
        raise ForbiddenError("Only club members can invite.")
    if not can_invite(club.membership_policy, role):
        raise ForbiddenError("Club is closed. Only host/admin/co_admin can invite members.")
    return club
