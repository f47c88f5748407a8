import asyncio
from functools import lru_cache

from fastapi import Depends, Header
from fastapi.concurrency import run_in_threadpool

from cookbook_club.errors import UnauthorizedError
import cookbook_club.repositories.user as user_repo
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.schemas.user import User
from cookbook_club.storage import StateStore, get_state_store

# Waiting requests poll the store lock instead of parking a worker thread.
LOCK_POLL_SECONDS = 0.005


@lru_cache
def get_store() -> StateStore:
    return get_state_store()


async def get_state(store: StateStore = Depends(get_store)):
    """
    The snapshot for this request; loaded once and shared by every dependency.

    The store lock is held until the request finishes, so requests never
    interleave their load -> operation -> save sequences.
    """
    while not store.lock.acquire(blocking=False):
        await asyncio.sleep(LOCK_POLL_SECONDS)
    try:
        yield await run_in_threadpool(store.load)
    finally:
        store.lock.release()


async def save_state(
    store: StateStore = Depends(get_store),
    state: StateSnapshot = Depends(get_state),
):
    """Persist the request's snapshot once the endpoint returns without raising."""
    yield
    await run_in_threadpool(store.save, state)


def get_current_actor(
    x_actor_id: str | None = Header(None),
    state: StateSnapshot = Depends(get_state),
) -> User:
    """Resolve the acting user from the X-Actor-Id header."""
    if not x_actor_id:
        raise UnauthorizedError("Missing X-Actor-Id header.")
    user = user_repo.get_user_by_id(state, x_actor_id.strip())
    if user is None:
        raise UnauthorizedError(f"Unknown actor: {x_actor_id}")
    return user
