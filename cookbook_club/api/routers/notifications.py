from fastapi import APIRouter, Depends, Query

from cookbook_club.api.deps import get_state, save_state
from cookbook_club.schemas.notification import NotificationRun, NotificationWithUser
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.services.notification import (
    list_pending_notifications,
    run_notifications,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationWithUser])
def get_pending(
    now: str | None = None,
    user_id: str | None = Query(None, alias="userId"),
    state: StateSnapshot = Depends(get_state),
):
    """Undelivered notifications; with `now`, only those already due."""
    return list_pending_notifications(state, now=now, user_id=user_id)


@router.post(
    "/run", response_model=list[NotificationWithUser], dependencies=[Depends(save_state)]
)
def deliver_due(
    run: NotificationRun | None = None,
    state: StateSnapshot = Depends(get_state),
):
    """Deliver everything due at `now` (default: the current time)."""
    return run_notifications(state, now=run.now if run else None)
