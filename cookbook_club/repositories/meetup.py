from datetime import datetime

from cookbook_club.domain import ids
from cookbook_club.schemas.meetup import DEFAULT_THEME, Meetup, MeetupStatus
from cookbook_club.schemas.state import StateSnapshot


def get_meetup_by_id(state: StateSnapshot, meetup_id: str) -> Meetup | None:
    """Get a meetup by ID."""
    return next((m for m in state.meetups if m.id == meetup_id), None)


def get_meetups_by_club(state: StateSnapshot, club_id: str) -> list[Meetup]:
    """All meetups of the club in creation order."""
    return sorted(
        (m for m in state.meetups if m.club_id == club_id),
        key=lambda m: m.sequence,
    )


def get_upcoming_meetup(state: StateSnapshot, club_id: str) -> Meetup | None:
    return next(
        (
            m
            for m in state.meetups
            if m.club_id == club_id and m.status == MeetupStatus.UPCOMING
        ),
        None,
    )


def get_past_meetups(state: StateSnapshot, club_id: str) -> list[Meetup]:
    return [m for m in get_meetups_by_club(state, club_id) if m.status == MeetupStatus.PAST]


def create_meetup(
    state: StateSnapshot,
    club_id: str,
    host_user_id: str,
    created_at: datetime,
    scheduled_for: datetime | None = None,
    theme: str = DEFAULT_THEME,
    status: MeetupStatus = MeetupStatus.UPCOMING,
) -> Meetup:
    """Create a meetup. Pure data access - no business logic."""
    sequence = ids.next_sequence(state.counters, ids.MEETUP)
    meetup = Meetup(
        id=ids.format_id(ids.MEETUP, sequence),
        club_id=club_id,
        host_user_id=host_user_id,
        scheduled_for=scheduled_for,
        theme=theme,
        status=status,
        sequence=sequence,
        created_at=created_at,
    )
    state.meetups.append(meetup)
    return meetup
