"""Notification data access, including the undelivered-notification upsert index."""

from datetime import datetime

from cookbook_club.domain import ids
from cookbook_club.schemas.notification import (
    Notification,
    NotificationPayload,
    NotificationType,
)
from cookbook_club.schemas.state import NotificationIndexKey, StateSnapshot


def index_key(notification: Notification) -> NotificationIndexKey:
    return (
        notification.user_id,
        NotificationType(notification.type).value,
        notification.key,
        notification.payload.meetup_id,
    )


def _pending_index(state: StateSnapshot) -> dict[NotificationIndexKey, Notification]:
    if state._pending_index is None:
        index: dict[NotificationIndexKey, Notification] = {}
        for notification in state.notifications:
            if notification.delivered_at is None:
                # First match in insertion order wins.
                index.setdefault(index_key(notification), notification)
        state._pending_index = index
    return state._pending_index


def find_pending(
    state: StateSnapshot,
    user_id: str,
    notification_type: NotificationType,
    key: str | None,
    meetup_id: str | None,
) -> Notification | None:
    """Undelivered notification matching (user, type, key, meetup), if any."""
    return _pending_index(state).get((user_id, notification_type.value, key, meetup_id))


def create_notification(
    state: StateSnapshot,
    club_id: str,
    user_id: str,
    notification_type: NotificationType,
    key: str | None,
    payload: NotificationPayload,
    due_at: datetime | None,
    created_at: datetime,
) -> Notification:
    notification = Notification(
        id=ids.next_id(state.counters, ids.NOTIFICATION),
        club_id=club_id,
        user_id=user_id,
        type=notification_type,
        key=key,
        payload=payload,
        due_at=due_at,
        created_at=created_at,
        delivered_at=None,
    )
    state.notifications.append(notification)
    _pending_index(state).setdefault(index_key(notification), notification)
    return notification


def update_pending(
    notification: Notification, payload: NotificationPayload, due_at: datetime | None
) -> Notification:
    """Reschedule in place; the index key (user, type, key, meetup) is unchanged."""
    notification.payload = payload
    notification.due_at = due_at
    return notification


def get_undelivered(state: StateSnapshot) -> list[Notification]:
    return [n for n in state.notifications if n.delivered_at is None]


def is_due(notification: Notification, now: datetime) -> bool:
    return notification.due_at is None or notification.due_at <= now


def mark_delivered(notification: Notification, delivered_at: datetime) -> None:
    """Delivery is terminal. Call reset_pending_index once a batch is done."""
    notification.delivered_at = delivered_at


def reset_pending_index(state: StateSnapshot) -> None:
    state._pending_index = None
