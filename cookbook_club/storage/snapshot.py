"""Snapshot files: JSON documents in the interchange shape.

Shared by the JSON store and by `data export` / `data import`, which work
on JSON files whatever the active storage backend is.
"""

import json
import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cookbook_club.errors import NotFoundError, SnapshotError
from cookbook_club.schemas.state import (
    ENTITY_COLLECTIONS,
    StateSnapshot,
    create_default_state,
)
from cookbook_club.schemas.storage import SnapshotCounts, SnapshotVerification

logger = logging.getLogger(__name__)


def load_snapshot_document(document: Any, source: str = "snapshot") -> StateSnapshot:
    """Validate a parsed document; missing collections default to empty."""
    if not isinstance(document, dict):
        raise SnapshotError(f"Invalid {source}: top-level value must be an object.")
    try:
        return StateSnapshot.model_validate(document)
    except ValidationError as exc:
        raise SnapshotError(
            f"Invalid {source}: {exc.error_count()} validation error(s).",
            issues=[_format_error(error) for error in exc.errors()],
        ) from exc


def read_snapshot_file(path: Path) -> StateSnapshot:
    """Read a snapshot file; a missing or blank file is a fresh state."""
    if not path.exists():
        return create_default_state()
    raw = path.read_text(encoding="utf-8").strip()
    if not raw:
        return create_default_state()
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"Invalid JSON in {path}: {exc}") from exc
    return load_snapshot_document(document, source=str(path))


def write_snapshot_file(path: Path, state: StateSnapshot) -> Path:
    """Write via a temp file in the same directory, then swap it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(state.to_document(), indent=2, ensure_ascii=False) + "\n"
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
    ) as handle:
        handle.write(content)
    try:
        os.replace(handle.name, path)
    except OSError:
        Path(handle.name).unlink(missing_ok=True)
        raise
    return path


def verify_snapshot_file(path: str | Path) -> SnapshotVerification:
    absolute = Path(path).expanduser().resolve()
    if not absolute.exists():
        raise NotFoundError(f"Snapshot file not found: {absolute}")

    raw = absolute.read_text(encoding="utf-8").strip()
    if not raw:
        return SnapshotVerification(
            file_path=str(absolute), ok=False, issues=["Snapshot file is empty."]
        )

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        return SnapshotVerification(
            file_path=str(absolute), ok=False, issues=[f"Invalid JSON: {exc}"]
        )

    issues = _shape_issues(document)
    counts = None
    if not issues:
        counts = SnapshotCounts(
            clubs=len(document["clubs"]),
            users=len(document["users"]),
            meetups=len(document["meetups"]),
            recipes=len(document["recipes"]),
            notifications=len(document["notifications"]),
        )
    return SnapshotVerification(
        file_path=str(absolute), ok=not issues, issues=issues, counts=counts
    )


def export_snapshot(path: str | Path, state: StateSnapshot) -> Path:
    absolute = Path(path).expanduser().resolve()
    write_snapshot_file(absolute, state)
    logger.info("Exported snapshot to %s", absolute)
    return absolute


def import_snapshot(path: str | Path) -> StateSnapshot:
    """Verify then load a snapshot file; nothing is written."""
    absolute = Path(path).expanduser().resolve()
    if not absolute.exists():
        raise NotFoundError(f"Import file not found: {absolute}")
    verification = verify_snapshot_file(absolute)
    if not verification.ok:
        raise SnapshotError(
            f"Invalid snapshot for import: {' '.join(verification.issues)}",
            issues=verification.issues,
        )
    return read_snapshot_file(absolute)


def _shape_issues(document: Any) -> list[str]:
    if not isinstance(document, dict):
        return ["Top-level value must be an object."]

    issues = [
        f"Field `{key}` must be an array."
        for key in ENTITY_COLLECTIONS
        if not isinstance(document.get(key), list)
    ]

    counters = document.get("counters")
    if not isinstance(counters, dict):
        issues.append("Field `counters` must be an object.")
    else:
        for key, value in counters.items():
            if not _is_non_negative_number(value):
                issues.append(f"Counter `{key}` must be a non-negative number.")
    return issues


def _is_non_negative_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number >= 0


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg', 'invalid value')}"
