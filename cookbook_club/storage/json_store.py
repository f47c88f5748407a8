import logging
import threading
from pathlib import Path

from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.storage.snapshot import read_snapshot_file, write_snapshot_file

logger = logging.getLogger(__name__)


class JsonStateStore:
    """One pretty-printed JSON document holding the whole snapshot."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.lock = threading.Lock()

    def load(self) -> StateSnapshot:
        logger.debug("Loading snapshot from %s", self.path)
        return read_snapshot_file(self.path)

    def save(self, state: StateSnapshot) -> None:
        write_snapshot_file(self.path, state)
        logger.debug("Saved snapshot to %s", self.path)
