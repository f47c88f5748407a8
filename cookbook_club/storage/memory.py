import threading

from cookbook_club.schemas.state import StateSnapshot, create_default_state


class MemoryStateStore:
    def __init__(self, state: StateSnapshot | None = None):
        self._state = state if state is not None else create_default_state()
        self.lock = threading.Lock()

    def load(self) -> StateSnapshot:
        # Callers mutate what they load; hand out a copy.
        return self._state.model_copy(deep=True)

    def save(self, state: StateSnapshot) -> None:
        self._state = state.model_copy(deep=True)
