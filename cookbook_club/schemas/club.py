from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator

from cookbook_club.domain.reminder_policy import (
    Hours,
    ReminderWindows,
    is_valid_template_name,
    sanitize_reminder_policy,
)
from cookbook_club.domain.roles import ClubPolicy
from cookbook_club.schemas.base import CamelModel
from cookbook_club.schemas.meetup import Meetup
from cookbook_club.schemas.user import User

TemplateSource = Literal["builtin", "custom"]
SkipReason = Literal["invalid_name", "builtin_conflict", "already_exists"]


class ReminderPolicy(CamelModel):
    """Always normalized: validating any input runs it through the sanitizer."""

    meetup_window_hours: list[Hours]
    recipe_prompt_hours: Hours

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> dict[str, Any]:
        windows = sanitize_reminder_policy(data)
        return {
            "meetup_window_hours": list(windows.meetup_window_hours),
            "recipe_prompt_hours": windows.recipe_prompt_hours,
        }

    @classmethod
    def from_windows(cls, windows: ReminderWindows) -> "ReminderPolicy":
        return cls.model_validate(windows)


def default_reminder_policy() -> ReminderPolicy:
    return ReminderPolicy.model_validate(None)


class Club(CamelModel):
    id: str
    name: str
    host_user_id: str
    membership_policy: ClubPolicy = ClubPolicy.CLOSED
    reminder_policy: ReminderPolicy = Field(default_factory=default_reminder_policy)
    reminder_templates: dict[str, ReminderPolicy] = Field(default_factory=dict)
    created_at: datetime

    @field_validator("reminder_policy", mode="before")
    @classmethod
    def default_missing_policy(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("reminder_templates", mode="before")
    @classmethod
    def drop_invalid_templates(cls, v: Any) -> dict[str, Any]:
        """Custom templates with invalid names are discarded on load."""
        if not isinstance(v, Mapping):
            return {}
        return {
            name: ({} if policy is None else policy)
            for name, policy in v.items()
            if is_valid_template_name(name)
        }


class ClubCreate(CamelModel):
    club_name: str = Field(..., min_length=1, max_length=255)
    host_name: str = Field(..., min_length=1, max_length=255)
    host_email: str | None = None
    host_phone: str | None = None


class ClubInitResult(CamelModel):
    club: Club
    host: User


class ClubOverview(CamelModel):
    club: Club
    host: User
    upcoming: Meetup | None = None


class ClubPolicyUpdate(CamelModel):
    policy: ClubPolicy


class HostTransfer(CamelModel):
    user_id: str


class ReminderPolicyUpdate(CamelModel):
    meetup_window_hours: list[float] | None = None
    recipe_prompt_hours: float | None = None


class ReminderTemplateCreate(CamelModel):
    name: str
    meetup_window_hours: list[float]
    recipe_prompt_hours: float | None = None


class ReminderTemplateView(CamelModel):
    name: str
    source: TemplateSource
    policy: ReminderPolicy


class AppliedReminderTemplate(CamelModel):
    template: str
    source: TemplateSource
    policy: ReminderPolicy


class RemovedReminderTemplate(CamelModel):
    removed: str


class ReminderTemplateImport(CamelModel):
    templates: dict[str, Any]
    overwrite: bool = False
    prefix: str | None = None


class SkippedTemplate(CamelModel):
    name: str
    reason: SkipReason


class ReminderTemplateImportResult(CamelModel):
    imported: list[str]
    skipped: list[SkippedTemplate]
    overwrite: bool
    prefix: str | None = None


class ClubSummary(CamelModel):
    id: str
    name: str
    membership_policy: ClubPolicy


class HostSummary(CamelModel):
    id: str
    name: str


class UpcomingMeetupSummary(CamelModel):
    id: str
    scheduled_for: datetime | None = None
    theme: str
    status: str


class StatusCounts(CamelModel):
    users: int = 0
    members: int = 0
    recipes: int = 0
    upcoming_meetup_recipes: int = 0
    pending_notifications: int = 0


class StatusReport(CamelModel):
    initialized: bool
    club: ClubSummary | None = None
    host: HostSummary | None = None
    upcoming_meetup: UpcomingMeetupSummary | None = None
    counts: StatusCounts
