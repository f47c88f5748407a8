from typing import Any

from cookbook_club.schemas.base import CamelModel


class SnapshotCounts(CamelModel):
    clubs: int
    users: int
    meetups: int
    recipes: int
    notifications: int


class SnapshotVerification(CamelModel):
    file_path: str
    ok: bool
    issues: list[str]
    counts: SnapshotCounts | None = None


class StorageInfo(CamelModel):
    file_path: str
    storage: str
    revision: str | None = None
    counts: dict[str, int] | None = None
    note: str | None = None


class JsonColumnIssue(CamelModel):
    table: str
    row_id: str
    column: str


class DoctorReport(CamelModel):
    file_path: str
    ok: bool
    integrity: list[str]
    foreign_key_issues: list[dict[str, Any]]
    missing_tables: list[str]
    revision: str | None = None
    json_issues: list[JsonColumnIssue]


class RepairReport(DoctorReport):
    repaired: bool = True
    backup_path: str | None = None
    repaired_json_fields: int = 0


class SnapshotExport(CamelModel):
    exported_to: str


class SnapshotImport(CamelModel):
    imported_from: str
    active_data_file: str
