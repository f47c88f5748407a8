from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import model_validator

from cookbook_club.domain.ids import id_sequence
from cookbook_club.schemas.base import CamelModel
from cookbook_club.schemas.user import User

DEFAULT_THEME = "TBD"


class MeetupStatus(str, Enum):
    UPCOMING = "upcoming"
    PAST = "past"


class Meetup(CamelModel):
    id: str
    club_id: str
    host_user_id: str
    scheduled_for: datetime | None = None
    theme: str = DEFAULT_THEME
    status: MeetupStatus
    # Creation order within the club; equals the numeric suffix of the id.
    sequence: int
    created_at: datetime

    @model_validator(mode="before")
    @classmethod
    def derive_sequence(cls, data: Any) -> Any:
        """Snapshots written before the sequence field existed derive it from the id."""
        if isinstance(data, dict) and data.get("sequence") is None:
            return {**data, "sequence": id_sequence(data.get("id"))}
        return data


class MeetupWithHost(Meetup):
    host: User


class MeetupSchedule(CamelModel):
    iso_date_time: str


class MeetupThemeUpdate(CamelModel):
    theme: str


class MeetupAdvance(CamelModel):
    past: Meetup
    next: Meetup
