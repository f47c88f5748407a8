import pytest

from cookbook_club.domain.clock import format_timestamp
from cookbook_club.errors import DomainValidationError, NotFoundError
from cookbook_club.schemas.notification import NotificationType
from cookbook_club.services.meetup import schedule_upcoming_meetup, set_meetup_theme
from cookbook_club.services.membership import invite_member
from cookbook_club.services.notification import (
    list_pending_notifications,
    run_notifications,
)
from cookbook_club.services.reminder import set_reminder_policy
from cookbook_club.services.user import create_user
from helpers import MEETUP_AT, NOW, utc


def keyed(notifications, user_id):
    """Map reminder key to formatted due time for one user's keyed notifications."""
    return {
        n.key: format_timestamp(n.due_at)
        for n in notifications
        if n.user_id == user_id and n.key is not None
    }


@pytest.fixture(scope="function")
def scheduled(state, host_id, bob):
    """Meetup scheduled for MEETUP_AT with windows [72, 24, 0] and a 36h prompt."""
    set_reminder_policy(state, host_id, [72, 24, 0], 36)
    return schedule_upcoming_meetup(state, host_id, MEETUP_AT, now=NOW)


# ============================================================================
# SCHEDULING
# ============================================================================


def test_schedule_creates_reminders_per_member(state, host_id, bob, scheduled):
    """Test every member gets one reminder per window plus a recipe prompt."""
    expected = {
        "meetup_72h": "2026-03-31T18:30:00.000Z",
        "meetup_24h": "2026-04-02T18:30:00.000Z",
        "meetup_0h": "2026-04-03T18:30:00.000Z",
        "recipe_prompt": "2026-04-02T06:30:00.000Z",
    }
    assert keyed(state.notifications, host_id) == expected
    assert keyed(state.notifications, bob.id) == expected


def test_schedule_queues_one_update_per_member(state, host_id, bob, scheduled):
    """Test a meetup_updated notification is due immediately for each member."""
    updates = [n for n in state.notifications if n.type == NotificationType.MEETUP_UPDATED]
    assert sorted(n.user_id for n in updates) == sorted([host_id, bob.id])
    assert all(n.due_at == utc(2026, 1, 1) for n in updates)
    assert updates[0].payload.message == (
        "Meetup scheduled for 2026-04-03T18:30:00.000Z. Theme: TBD"
    )


def test_reminder_messages(state, host_id, scheduled):
    """Test reminder payloads describe the meetup."""
    messages = {
        n.key: n.payload.message
        for n in state.notifications
        if n.user_id == host_id and n.key is not None
    }
    assert messages["meetup_72h"] == "Reminder: meetup in 72 hour(s) (2026-04-03T18:30:00.000Z)"
    assert messages["meetup_0h"] == "Meetup starting now. Theme: TBD"
    assert messages["recipe_prompt"] == 'Prompt: add your recipe and image for theme "TBD".'
    assert all(
        n.payload.meetup_id == scheduled.id for n in state.notifications
    )


def test_reschedule_does_not_duplicate(state, host_id, bob, scheduled):
    """Test rescheduling moves pending reminders in place."""
    before = len(state.notifications)
    schedule_upcoming_meetup(state, host_id, "2026-04-10T18:30:00.000Z", now=NOW)

    assert len(state.notifications) == before
    assert keyed(state.notifications, bob.id)["meetup_24h"] == "2026-04-09T18:30:00.000Z"


def test_past_due_times_are_clamped_to_now(state, host_id, bob):
    """Test reminders whose window already passed are due immediately."""
    set_reminder_policy(state, host_id, [72, 0], 48)
    schedule_upcoming_meetup(state, host_id, "2026-01-02T00:00:00.000Z", now=NOW)

    due = keyed(state.notifications, bob.id)
    assert due["meetup_72h"] == NOW
    assert due["recipe_prompt"] == NOW
    assert due["meetup_0h"] == "2026-01-02T00:00:00.000Z"


def test_theme_update_refreshes_reminders(state, host_id, bob, scheduled):
    """Test a theme change rewrites payloads without adding reminders."""
    before = len(state.notifications)
    set_meetup_theme(state, host_id, "Street Food", now=NOW)

    assert len(state.notifications) == before
    prompt = next(
        n for n in state.notifications if n.user_id == bob.id and n.key == "recipe_prompt"
    )
    assert prompt.payload.message == 'Prompt: add your recipe and image for theme "Street Food".'
    update = next(
        n for n in state.notifications
        if n.user_id == bob.id and n.type == NotificationType.MEETUP_UPDATED
    )
    assert update.payload.message == "Theme updated: Street Food"


def test_late_member_gets_only_own_reminders(state, host_id, bob, scheduled):
    """Test a member invited after scheduling gets reminders without disturbing others."""
    before = {n.id: n.due_at for n in state.notifications}
    dave = create_user(state, name="Dave", now=NOW)
    invite_member(state, host_id, dave.id, now=NOW)

    added = [n for n in state.notifications if n.id not in before]
    assert {n.user_id for n in added} == {dave.id}
    assert keyed(state.notifications, dave.id) == keyed(state.notifications, bob.id)


# ============================================================================
# DELIVERY
# ============================================================================


def test_run_delivers_due_notifications(state, bob, scheduled):
    """Test only notifications due at the given instant are delivered."""
    delivered = run_notifications(state, "2026-04-01T00:00:00.000Z")

    kinds = sorted((n.user.name, n.key or n.type.value) for n in delivered)
    assert kinds == [
        ("Alice", "meetup_72h"),
        ("Alice", "meetup_updated"),
        ("Bob", "meetup_72h"),
        ("Bob", "meetup_updated"),
    ]
    assert all(n.delivered_at == utc(2026, 4, 1) for n in delivered)


def test_delivery_is_terminal(state, scheduled):
    """Test a second run at the same instant delivers nothing."""
    run_notifications(state, "2026-04-01T00:00:00.000Z")
    assert run_notifications(state, "2026-04-01T00:00:00.000Z") == []


def test_run_with_nothing_due(state, scheduled):
    """Test running before anything is due returns an empty batch."""
    assert run_notifications(state, "2025-12-31T00:00:00.000Z") == []
    assert all(n.delivered_at is None for n in state.notifications)


def test_reschedule_after_delivery_creates_new_reminder(state, host_id, bob, scheduled):
    """Test delivered reminders are history; rescheduling queues fresh ones."""
    run_notifications(state, "2026-04-01T00:00:00.000Z")
    before = len(state.notifications)

    schedule_upcoming_meetup(state, host_id, "2026-04-10T18:30:00.000Z", now="2026-04-01T00:00:00.000Z")

    new = state.notifications[before:]
    assert sorted((n.user_id, n.key or n.type.value) for n in new) == sorted(
        [
            (host_id, "meetup_72h"),
            (host_id, "meetup_updated"),
            (bob.id, "meetup_72h"),
            (bob.id, "meetup_updated"),
        ]
    )


@pytest.mark.parametrize("now", ["yesterday", "", "2026-13-01"])
def test_run_invalid_now_fails(state, scheduled, now):
    """Test the reference instant must be an ISO timestamp."""
    with pytest.raises(DomainValidationError, match="Invalid notification timestamp"):
        run_notifications(state, now)


# ============================================================================
# PREVIEW
# ============================================================================


def test_list_pending_is_read_only(state, scheduled):
    """Test listing never marks notifications delivered."""
    pending = list_pending_notifications(state)
    assert len(pending) == len(state.notifications) == 10
    assert all(n.delivered_at is None for n in state.notifications)


def test_list_pending_filters_by_now_and_user(state, bob, scheduled):
    """Test the preview narrows to due notifications for one user."""
    pending = list_pending_notifications(state, now="2026-04-02T12:00:00.000Z", user_id=bob.id)
    assert sorted(n.key or n.type.value for n in pending) == [
        "meetup_72h",
        "meetup_updated",
        "recipe_prompt",
    ]
    assert {n.user.id for n in pending} == {bob.id}


def test_list_pending_unknown_user_fails(state, scheduled):
    """Test filtering by an unknown user fails."""
    with pytest.raises(NotFoundError):
        list_pending_notifications(state, user_id="user_99")


def test_list_pending_excludes_delivered(state, scheduled):
    """Test delivered notifications drop out of the preview."""
    run_notifications(state, "2026-04-01T00:00:00.000Z")
    assert len(list_pending_notifications(state)) == 6


def test_window_beyond_calendar_range_is_due_now(state, host_id, bob):
    """Test an offset reaching before the earliest date clamps to now."""
    set_reminder_policy(state, host_id, [1e8, 0], 36)
    schedule_upcoming_meetup(state, host_id, MEETUP_AT, now=NOW)

    due = keyed(state.notifications, bob.id)
    assert due["meetup_100000000h"] == NOW
    assert due["meetup_0h"] == MEETUP_AT
