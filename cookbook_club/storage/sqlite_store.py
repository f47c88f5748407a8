"""SQLite backend: one table per entity kind, schema managed by Alembic."""

import json
import logging
import shutil
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Any

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import delete, func, inspect, literal_column, select, text
from sqlalchemy.engine import Engine

from cookbook_club.db import models
from cookbook_club.db.base import create_sqlite_engine, session_factory, sqlite_url
from cookbook_club.errors import SnapshotError
from cookbook_club.schemas.club import Club
from cookbook_club.schemas.cookbook import (
    CollectionItem,
    CookbookAccessGrant,
    Favorite,
    PersonalCollection,
)
from cookbook_club.schemas.meetup import Meetup
from cookbook_club.schemas.membership import Membership
from cookbook_club.schemas.notification import Notification
from cookbook_club.schemas.recipe import Recipe
from cookbook_club.schemas.state import StateSnapshot, create_default_state
from cookbook_club.schemas.storage import (
    DoctorReport,
    JsonColumnIssue,
    RepairReport,
    StorageInfo,
)
from cookbook_club.schemas.user import User

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "db" / "migrations"

# (orm model, schema, snapshot attribute) in insert order.
ENTITY_TABLES = (
    (models.User, User, "users"),
    (models.Club, Club, "clubs"),
    (models.Membership, Membership, "memberships"),
    (models.Meetup, Meetup, "meetups"),
    (models.Recipe, Recipe, "recipes"),
    (models.Favorite, Favorite, "favorites"),
    (models.PersonalCollection, PersonalCollection, "personal_collections"),
    (models.CollectionItem, CollectionItem, "collection_items"),
    (models.CookbookAccessGrant, CookbookAccessGrant, "cookbook_access_grants"),
    (models.Notification, Notification, "notifications"),
)

TABLE_NAMES = tuple(model.__tablename__ for model, _, _ in ENTITY_TABLES)

# Rows are inserted in snapshot order, so rowid restores list order.
ROWID = literal_column("rowid")

# Text columns holding JSON documents, per table.
JSON_COLUMNS = {
    "clubs": ("reminder_policy_json", "reminder_templates_json"),
    "notifications": ("payload_json",),
}


class SqliteStateStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._engine: Engine | None = None
        self.lock = threading.Lock()

    @property
    def engine(self) -> Engine:
        """Engine for the database file, migrated to head on first use."""
        if self._engine is None:
            self._engine = create_sqlite_engine(self.path)
            self._upgrade()
        return self._engine

    def _alembic_config(self) -> Config:
        config = Config()
        config.set_main_option("script_location", str(MIGRATIONS_DIR))
        config.set_main_option("sqlalchemy.url", sqlite_url(self.path))
        return config

    def _upgrade(self) -> None:
        config = self._alembic_config()
        with self._engine.begin() as connection:
            config.attributes["connection"] = connection
            command.upgrade(config, "head")
        logger.debug("Schema of %s is at head", self.path)

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def load(self) -> StateSnapshot:
        state = create_default_state()
        with session_factory(self.engine)() as session:
            for counter in session.scalars(select(models.Counter)):
                state.counters[counter.key] = counter.value

            for model, schema, attribute in ENTITY_TABLES:
                rows = session.scalars(select(model).order_by(ROWID)).all()
                setattr(state, attribute, [_to_schema(schema, row) for row in rows])

        logger.debug("Loaded snapshot from %s", self.path)
        return state

    def save(self, state: StateSnapshot) -> None:
        """Rewrite every table in one transaction."""
        with session_factory(self.engine)() as session:
            try:
                session.execute(delete(models.Counter))
                for model, _, _ in reversed(ENTITY_TABLES):
                    session.execute(delete(model))

                session.add_all(
                    models.Counter(key=key, value=value)
                    for key, value in state.counters.items()
                )
                for model, _, attribute in ENTITY_TABLES:
                    session.add_all(_to_row(model, entity) for entity in getattr(state, attribute))
                    session.flush()
                session.commit()
            except Exception:
                session.rollback()
                raise
        logger.debug("Saved snapshot to %s", self.path)

    def current_revision(self) -> str | None:
        with self.engine.connect() as connection:
            return MigrationContext.configure(connection).get_current_revision()

    def info(self) -> StorageInfo:
        with session_factory(self.engine)() as session:
            counts = {
                model.__tablename__: session.scalar(select(func.count()).select_from(model))
                for model, _, _ in ENTITY_TABLES
            }
        return StorageInfo(
            file_path=str(self.path),
            storage="sqlite",
            revision=self.current_revision(),
            counts=counts,
        )

    def doctor(self) -> DoctorReport:
        engine = self.engine
        existing = set(inspect(engine).get_table_names())
        missing_tables = [name for name in TABLE_NAMES if name not in existing]

        with engine.connect() as connection:
            integrity = [
                str(row[0]) for row in connection.exec_driver_sql("PRAGMA integrity_check")
            ]
            foreign_key_issues = [
                dict(row._mapping)
                for row in connection.exec_driver_sql("PRAGMA foreign_key_check")
            ]
            json_issues = _find_json_issues(connection, existing)

        return DoctorReport(
            file_path=str(self.path),
            ok=(
                integrity == ["ok"]
                and not foreign_key_issues
                and not missing_tables
                and not json_issues
            ),
            integrity=integrity,
            foreign_key_issues=foreign_key_issues,
            missing_tables=missing_tables,
            revision=self.current_revision(),
            json_issues=json_issues,
        )

    def repair(self) -> RepairReport:
        """Back up the file, reset unparseable JSON columns to `{}` and compact."""
        backup_path = None
        if self.path.exists():
            backup_path = self.path.with_name(f"{self.path.name}.bak.{int(time.time() * 1000)}")
            shutil.copyfile(self.path, backup_path)
            logger.info("Backed up %s to %s", self.path, backup_path)

        engine = self.engine
        with engine.begin() as connection:
            issues = _find_json_issues(connection, set(inspect(connection).get_table_names()))
            for issue in issues:
                connection.execute(
                    text(f"UPDATE {issue.table} SET {issue.column} = '{{}}' WHERE id = :id"),
                    {"id": issue.row_id},
                )
                logger.warning(
                    "Reset %s.%s for row %s to an empty document",
                    issue.table,
                    issue.column,
                    issue.row_id,
                )

        # VACUUM cannot run inside a transaction.
        with engine.connect().execution_options(isolation_level="AUTOCOMMIT") as connection:
            connection.exec_driver_sql("PRAGMA optimize")
            connection.exec_driver_sql("VACUUM")

        report = self.doctor()
        return RepairReport(
            **report.model_dump(),
            repaired=True,
            backup_path=str(backup_path) if backup_path else None,
            repaired_json_fields=len(issues),
        )


def _find_json_issues(connection, existing_tables: set[str]) -> list[JsonColumnIssue]:
    issues = []
    for table, columns in JSON_COLUMNS.items():
        if table not in existing_tables:
            continue
        rows = connection.execute(text(f"SELECT id, {', '.join(columns)} FROM {table}"))
        for row in rows:
            for column in columns:
                try:
                    json.loads(row._mapping[column] or "{}")
                except json.JSONDecodeError:
                    issues.append(JsonColumnIssue(table=table, row_id=row.id, column=column))
    return issues


def _load_json(row: Any, column: str) -> Any:
    try:
        return json.loads(getattr(row, column) or "{}")
    except json.JSONDecodeError as exc:
        raise SnapshotError(
            f"Unreadable {row.__tablename__}.{column} for {row.id}; "
            "run `data doctor --repair`."
        ) from exc


def _to_schema(schema, row: Any):
    if isinstance(row, models.Club):
        return Club(
            id=row.id,
            name=row.name,
            host_user_id=row.host_user_id,
            membership_policy=row.membership_policy,
            reminder_policy=_load_json(row, "reminder_policy_json"),
            reminder_templates=_load_json(row, "reminder_templates_json"),
            created_at=row.created_at,
        )
    if isinstance(row, models.Notification):
        return Notification(
            id=row.id,
            club_id=row.club_id,
            user_id=row.user_id,
            type=row.type,
            key=row.key,
            payload=_load_json(row, "payload_json"),
            due_at=row.due_at,
            created_at=row.created_at,
            delivered_at=row.delivered_at,
        )
    return schema.model_validate(row)


def _column_values(entity) -> dict[str, Any]:
    values = entity.model_dump()
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in values.items()
    }


def _to_row(model, entity):
    if isinstance(entity, Club):
        return models.Club(
            id=entity.id,
            name=entity.name,
            host_user_id=entity.host_user_id,
            membership_policy=entity.membership_policy.value,
            reminder_policy_json=json.dumps(
                entity.reminder_policy.model_dump(mode="json", by_alias=True)
            ),
            reminder_templates_json=json.dumps(
                {
                    name: policy.model_dump(mode="json", by_alias=True)
                    for name, policy in entity.reminder_templates.items()
                }
            ),
            created_at=entity.created_at,
        )
    if isinstance(entity, Notification):
        return models.Notification(
            id=entity.id,
            club_id=entity.club_id,
            user_id=entity.user_id,
            type=entity.type.value,
            key=entity.key,
            payload_json=json.dumps(entity.payload.model_dump(mode="json", by_alias=True)),
            due_at=entity.due_at,
            created_at=entity.created_at,
            delivered_at=entity.delivered_at,
        )
    return model(**_column_values(entity))
