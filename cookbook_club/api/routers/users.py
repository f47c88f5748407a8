from fastapi import APIRouter, Depends, status

from cookbook_club.api.deps import get_state, save_state
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.schemas.user import User, UserCreate
from cookbook_club.services.user import create_user, list_users

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(save_state)],
)
def create_new_user(user_data: UserCreate, state: StateSnapshot = Depends(get_state)):
    """
    Register a user. Joining the club is a separate invite.
    """
    return create_user(
        state,
        name=user_data.name,
        email=user_data.email,
        phone=user_data.phone,
    )


@router.get("", response_model=list[User])
def get_all_users(state: StateSnapshot = Depends(get_state)):
    return list_users(state)
