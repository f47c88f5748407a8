import logging
from datetime import datetime

from cookbook_club.core.validation import require_non_empty
from cookbook_club.domain.clock import format_timestamp, parse_timestamp, resolve_now
from cookbook_club.errors import NotFoundError, PreconditionFailedError
import cookbook_club.repositories.meetup as meetup_repo
from cookbook_club.schemas.meetup import Meetup, MeetupAdvance, MeetupStatus, MeetupWithHost
from cookbook_club.schemas.notification import NotificationPayload, NotificationType
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.services.authorization import assert_host, require_club, require_user
from cookbook_club.services.notification import queue_reminder, schedule_meetup_reminders

logger = logging.getLogger(__name__)


def get_upcoming_meetup(state: StateSnapshot) -> Meetup | None:
    club = require_club(state)
    return meetup_repo.get_upcoming_meetup(state, club.id)


def require_upcoming_meetup(state: StateSnapshot) -> Meetup:
    upcoming = get_upcoming_meetup(state)
    if upcoming is None:
        raise PreconditionFailedError("No upcoming meetup record exists.")
    return upcoming


def _with_host(state: StateSnapshot, meetup: Meetup) -> MeetupWithHost:
    return MeetupWithHost(**meetup.model_dump(), host=require_user(state, meetup.host_user_id))


def list_meetups(state: StateSnapshot) -> list[MeetupWithHost]:
    """Meetup history in creation order, each with its host."""
    club = require_club(state)
    return [_with_host(state, m) for m in meetup_repo.get_meetups_by_club(state, club.id)]


def get_meetup(state: StateSnapshot, meetup_id: str) -> MeetupWithHost:
    club = require_club(state)
    meetup = meetup_repo.get_meetup_by_id(state, meetup_id)
    if meetup is None or meetup.club_id != club.id:
        raise NotFoundError(f"Unknown meetup: {meetup_id}")
    return _with_host(state, meetup)


def schedule_upcoming_meetup(
    state: StateSnapshot,
    actor_user_id: str,
    iso_date_time: str | datetime,
    now: str | datetime | None = None,
) -> Meetup:
    """
    Set the upcoming meetup's date. Host only.

    Reminders for every member are recomputed in place and a one-off
    meetup_updated notification is queued.
    """
    assert_host(state, actor_user_id)
    upcoming = require_upcoming_meetup(state)
    scheduled_for = parse_timestamp(iso_date_time, "Invalid datetime. Use ISO format.")
    timestamp = resolve_now(now)

    upcoming.scheduled_for = scheduled_for
    schedule_meetup_reminders(state, upcoming, now=timestamp)
    queue_reminder(
        state,
        NotificationType.MEETUP_UPDATED,
        NotificationPayload(
            meetup_id=upcoming.id,
            message=f"Meetup scheduled for {format_timestamp(scheduled_for)}. Theme: {upcoming.theme}",
        ),
        now=timestamp,
    )
    logger.info("Meetup %s scheduled for %s", upcoming.id, format_timestamp(scheduled_for))
    return upcoming


def set_meetup_theme(
    state: StateSnapshot,
    actor_user_id: str,
    theme: str,
    now: str | datetime | None = None,
) -> Meetup:
    """Set the upcoming meetup's theme. Host only. Reminders pick up the new theme."""
    assert_host(state, actor_user_id)
    upcoming = require_upcoming_meetup(state)
    normalized_theme = require_non_empty(theme, "Theme")
    timestamp = resolve_now(now)

    upcoming.theme = normalized_theme
    schedule_meetup_reminders(state, upcoming, now=timestamp)
    queue_reminder(
        state,
        NotificationType.MEETUP_UPDATED,
        NotificationPayload(meetup_id=upcoming.id, message=f"Theme updated: {normalized_theme}"),
        now=timestamp,
    )
    return upcoming


def advance_meetup(
    state: StateSnapshot, actor_user_id: str, now: str | datetime | None = None
) -> MeetupAdvance:
    """
    Move the upcoming meetup to the past and open a fresh one. Host only.

    Exactly one meetup stays upcoming: the replacement is created in the
    same step, with theme "TBD" and no date.
    """
    club = assert_host(state, actor_user_id)
    upcoming = meetup_repo.get_upcoming_meetup(state, club.id)
    if upcoming is None:
        raise PreconditionFailedError("No upcoming meetup to advance.")
    timestamp = resolve_now(now)

    upcoming.status = MeetupStatus.PAST
    next_meetup = meetup_repo.create_meetup(
        state, club_id=club.id, host_user_id=club.host_user_id, created_at=timestamp
    )
    logger.info("Meetup %s is now past; %s is upcoming", upcoming.id, next_meetup.id)
    return MeetupAdvance(past=upcoming, next=next_meetup)
