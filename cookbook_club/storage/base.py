import threading
from typing import Protocol

from cookbook_club.schemas.state import StateSnapshot


class StateStore(Protocol):
    """Loads and saves the whole snapshot; the domain never sees storage.

    ``lock`` serializes load -> operation -> save sequences within a process.
    """

    lock: threading.Lock

    def load(self) -> StateSnapshot: ...

    def save(self, state: StateSnapshot) -> None: ...
