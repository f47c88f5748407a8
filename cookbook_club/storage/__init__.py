"""State stores: load and save the whole snapshot."""

from pathlib import Path

from cookbook_club.core.config import resolve_data_file, settings
from cookbook_club.errors import DomainValidationError
from cookbook_club.storage.base import StateStore
from cookbook_club.storage.json_store import JsonStateStore
from cookbook_club.storage.memory import MemoryStateStore
from cookbook_club.storage.sqlite_store import SqliteStateStore

STORAGE_BACKENDS = ("json", "sqlite")


def get_state_store(storage: str | None = None, data_path: str | Path | None = None) -> StateStore:
    """Build the configured store; arguments override settings."""
    storage = storage or settings.storage
    if storage not in STORAGE_BACKENDS:
        raise DomainValidationError(f"Invalid storage {storage!r}. Use `json` or `sqlite`.")
    path = resolve_data_file(str(data_path) if data_path else settings.data_path, storage)
    if storage == "sqlite":
        return SqliteStateStore(path)
    return JsonStateStore(path)


__all__ = [
    "StateStore",
    "MemoryStateStore",
    "JsonStateStore",
    "SqliteStateStore",
    "get_state_store",
]
