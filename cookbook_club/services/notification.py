"""
Time-windowed reminder scheduling and delivery.

Reminders are upserted: a pending notification for the same
(user, type, key, meetup) is rescheduled in place instead of duplicated, so
repeated schedule or theme changes never multiply a member's reminders.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from cookbook_club.domain.clock import (
    format_timestamp,
    hours_before,
    parse_timestamp,
    utc_now,
)
from cookbook_club.domain.reminder_policy import (
    RECIPE_PROMPT_KEY,
    format_hours,
    meetup_reminder_key,
)
import cookbook_club.repositories.membership as membership_repo
import cookbook_club.repositories.notification as notification_repo
from cookbook_club.schemas.meetup import Meetup
from cookbook_club.schemas.notification import (
    Notification,
    NotificationPayload,
    NotificationType,
    NotificationWithUser,
)
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.services.authorization import require_club, require_user

logger = logging.getLogger(__name__)

INVALID_NOW_MESSAGE = "Invalid notification timestamp. Use ISO format."


def _unique(user_ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(user_ids))


def queue_reminder(
    state: StateSnapshot,
    notification_type: NotificationType,
    payload: NotificationPayload,
    due_at: datetime | None = None,
    user_ids: Iterable[str] | None = None,
    key: str | None = None,
    now: datetime | None = None,
) -> list[Notification]:
    """
    Create or reschedule one notification per target user.

    Targets are ``user_ids`` when given, otherwise every club member.
    ``due_at`` defaults to ``now`` (due immediately).
    """
    club = require_club(state)
    timestamp = now or utc_now()
    if due_at is None:
        due_at = timestamp
    targets = (
        _unique(user_ids)
        if user_ids is not None
        else _unique(membership_repo.get_member_user_ids(state, club.id))
    )

    queued = []
    for user_id in targets:
        existing = notification_repo.find_pending(
            state, user_id, notification_type, key, payload.meetup_id
        )
        if existing is not None:
            queued.append(
                notification_repo.update_pending(
                    existing, payload.model_copy(deep=True), due_at
                )
            )
            continue
        queued.append(
            notification_repo.create_notification(
                state,
                club_id=club.id,
                user_id=user_id,
                notification_type=notification_type,
                key=key,
                payload=payload.model_copy(deep=True),
                due_at=due_at,
                created_at=timestamp,
            )
        )
    return queued


def schedule_meetup_reminders(
    state: StateSnapshot,
    meetup: Meetup,
    user_ids: Iterable[str] | None = None,
    now: datetime | None = None,
) -> list[Notification]:
    """
    (Re)compute the reminder set for a scheduled meetup.

    - One meetup_reminder per window offset h, due h hours before the meetup
    - One recipe_prompt, due recipe_prompt_hours before the meetup
    - Due times already in the past are clamped to ``now``

    ``user_ids`` restricts the recomputation, e.g. to a member who joined
    after the meetup was scheduled.
    """
    if meetup.scheduled_for is None:
        return []

    club = require_club(state)
    timestamp = now or utc_now()
    policy = club.reminder_policy
    scheduled_label = format_timestamp(meetup.scheduled_for)
    targets = list(user_ids) if user_ids is not None else None

    plan: list[tuple[NotificationType, str, float, str]] = []
    for hours in policy.meetup_window_hours:
        if hours == 0:
            message = f"Meetup starting now. Theme: {meetup.theme}"
        else:
            message = f"Reminder: meetup in {format_hours(hours)} hour(s) ({scheduled_label})"
        plan.append((NotificationType.MEETUP_REMINDER, meetup_reminder_key(hours), hours, message))
    plan.append(
        (
            NotificationType.RECIPE_PROMPT,
            RECIPE_PROMPT_KEY,
            policy.recipe_prompt_hours,
            f'Prompt: add your recipe and image for theme "{meetup.theme}".',
        )
    )

    queued = []
    for notification_type, key, hours, message in plan:
        due_at = max(hours_before(meetup.scheduled_for, hours), timestamp)
        queued.extend(
            queue_reminder(
                state,
                notification_type,
                NotificationPayload(meetup_id=meetup.id, message=message),
                due_at=due_at,
                user_ids=targets,
                key=key,
                now=timestamp,
            )
        )
    return queued


def _with_user(state: StateSnapshot, notification: Notification) -> NotificationWithUser:
    return NotificationWithUser(
        **notification.model_dump(),
        user=require_user(state, notification.user_id),
    )


def run_notifications(
    state: StateSnapshot, now: str | datetime | None = None
) -> list[NotificationWithUser]:
    """
    Deliver every undelivered notification due at ``now``.

    Delivery is terminal: a delivered notification is never selected again.
    """
    timestamp = utc_now() if now is None else parse_timestamp(now, INVALID_NOW_MESSAGE)
    due = [
        n for n in notification_repo.get_undelivered(state) if notification_repo.is_due(n, timestamp)
    ]
    for notification in due:
        notification_repo.mark_delivered(notification, timestamp)
    notification_repo.reset_pending_index(state)

    if due:
        logger.info("Delivered %d notification(s) at %s", len(due), format_timestamp(timestamp))
    return [_with_user(state, n) for n in due]


def list_pending_notifications(
    state: StateSnapshot,
    now: str | datetime | None = None,
    user_id: str | None = None,
) -> list[NotificationWithUser]:
    """Read-only preview of undelivered notifications; never marks anything delivered."""
    pending = notification_repo.get_undelivered(state)
    if now is not None:
        timestamp = parse_timestamp(now, INVALID_NOW_MESSAGE)
        pending = [n for n in pending if notification_repo.is_due(n, timestamp)]
    if user_id:
        require_user(state, user_id)
        pending = [n for n in pending if n.user_id == user_id]
    return [_with_user(state, n) for n in pending]
