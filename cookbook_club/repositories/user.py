from datetime import datetime

from cookbook_club.domain import ids
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.schemas.user import User


def get_user_by_id(state: StateSnapshot, user_id: str) -> User | None:
    """Get a user by ID."""
    return next((user for user in state.users if user.id == user_id), None)


def get_all_users(state: StateSnapshot) -> list[User]:
    return list(state.users)


def create_user(
    state: StateSnapshot,
    name: str,
    created_at: datetime,
    email: str | None = None,
    phone: str | None = None,
) -> User:
    """Create a new user. Pure data access - no business logic."""
    user = User(
        id=ids.next_id(state.counters, ids.USER),
        name=name,
        email=email,
        phone=phone,
        created_at=created_at,
    )
    state.users.append(user)
    return user
