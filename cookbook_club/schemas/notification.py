from datetime import datetime
from enum import Enum

from pydantic import ConfigDict

from cookbook_club.schemas.base import CamelModel
from cookbook_club.schemas.user import User


class NotificationType(str, Enum):
    MEETUP_REMINDER = "meetup_reminder"
    RECIPE_PROMPT = "recipe_prompt"
    MEETUP_UPDATED = "meetup_updated"


class NotificationPayload(CamelModel):
    model_config = ConfigDict(extra="allow")

    meetup_id: str | None = None
    message: str = ""


class Notification(CamelModel):
    id: str
    club_id: str
    user_id: str
    type: NotificationType
    key: str | None = None
    payload: NotificationPayload
    # None means due immediately.
    due_at: datetime | None = None
    created_at: datetime
    delivered_at: datetime | None = None


class NotificationWithUser(Notification):
    user: User


class NotificationRun(CamelModel):
    now: str | None = None
