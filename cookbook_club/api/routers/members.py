from fastapi import APIRouter, Depends, status

from cookbook_club.api.deps import get_current_actor, get_state, save_state
from cookbook_club.schemas.membership import (
    MemberInvite,
    MemberWithUser,
    Membership,
    RoleUpdate,
)
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.schemas.user import User
from cookbook_club.services.membership import invite_member, list_members, set_role

router = APIRouter(prefix="/members", tags=["members"])


@router.get("", response_model=list[MemberWithUser])
def get_members(state: StateSnapshot = Depends(get_state)):
    return list_members(state)


@router.post(
    "",
    response_model=Membership,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(save_state)],
)
def invite(
    invite_data: MemberInvite,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    """
    Add a user to the club.
    - Closed club: host/admin/co_admin only
    - Open club: any member
    Inviting an existing member returns the existing membership.
    """
    return invite_member(state, actor.id, invite_data.user_id, invite_data.role)


@router.put(
    "/{user_id}/role", response_model=Membership, dependencies=[Depends(save_state)]
)
def update_role(
    user_id: str,
    role_data: RoleUpdate,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    """Change a member's role. Host/admin only; the host role moves by transfer."""
    return set_role(state, actor.id, user_id, role_data.role)
