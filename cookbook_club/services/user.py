import logging
from datetime import datetime

from cookbook_club.core.validation import optional_text, require_non_empty
from cookbook_club.domain.clock import resolve_now
import cookbook_club.repositories.user as user_repo
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.schemas.user import User

logger = logging.getLogger(__name__)


def create_user(
    state: StateSnapshot,
    name: str,
    email: str | None = None,
    phone: str | None = None,
    now: str | datetime | None = None,
) -> User:
    """Register a user. Users exist independently of club membership."""
    normalized_name = require_non_empty(name, "User name")
    user = user_repo.create_user(
        state,
        name=normalized_name,
        email=optional_text(email),
        phone=optional_text(phone),
        created_at=resolve_now(now),
    )
    logger.info("Created user %s", user.id)
    return user


def list_users(state: StateSnapshot) -> list[User]:
    return user_repo.get_all_users(state)
