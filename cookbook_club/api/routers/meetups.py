from fastapi import APIRouter, Depends

from cookbook_club.api.deps import get_current_actor, get_state, save_state
from cookbook_club.schemas.meetup import (
    Meetup,
    MeetupAdvance,
    MeetupSchedule,
    MeetupThemeUpdate,
    MeetupWithHost,
)
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.schemas.user import User
from cookbook_club.services.meetup import (
    advance_meetup,
    get_meetup,
    get_upcoming_meetup,
    list_meetups,
    schedule_upcoming_meetup,
    set_meetup_theme,
)

router = APIRouter(prefix="/meetups", tags=["meetups"])


@router.get("", response_model=list[MeetupWithHost])
def get_all_meetups(state: StateSnapshot = Depends(get_state)):
    return list_meetups(state)


@router.get("/upcoming", response_model=Meetup | None)
def get_upcoming(state: StateSnapshot = Depends(get_state)):
    return get_upcoming_meetup(state)


@router.get("/{meetup_id}", response_model=MeetupWithHost)
def get_meetup_by_id(meetup_id: str, state: StateSnapshot = Depends(get_state)):
    return get_meetup(state, meetup_id)


@router.put(
    "/upcoming/schedule", response_model=Meetup, dependencies=[Depends(save_state)]
)
def schedule_upcoming(
    schedule: MeetupSchedule,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    """
    Date the upcoming meetup. Host only.

    Every member's reminders are rescheduled in place.
    """
    return schedule_upcoming_meetup(state, actor.id, schedule.iso_date_time)


@router.put("/upcoming/theme", response_model=Meetup, dependencies=[Depends(save_state)])
def update_theme(
    theme_data: MeetupThemeUpdate,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    return set_meetup_theme(state, actor.id, theme_data.theme)


@router.post(
    "/upcoming/advance", response_model=MeetupAdvance, dependencies=[Depends(save_state)]
)
def advance(
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    """Close the upcoming meetup and open the next one. Host only."""
    return advance_meetup(state, actor.id)
