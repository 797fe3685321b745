"""
Schema registry — table declarations and versioned migrations.

Every table is declared once with its primary key, its secondary indexes and
the dataclass its rows map to. The physical layout is one SQLite table per
declaration: the primary key and each indexed field get their own column,
and the whole record is kept as JSON in ``data``.

The schema version lives in ``PRAGMA user_version``. Migrations are
registered per step (``v -> v+1``) and applied in order, each in its own
transaction. A database written by a newer build is never opened.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lifestyle.core.constants import LocalTable
from lifestyle.core.exceptions import SchemaVersionError
from lifestyle.core.store.models import Log, Notification, Setting, timestamp_sort_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableSchema:
    name: str
    primary_key: str
    indexes: tuple[str, ...] = ()
    model: type | None = None
    timestamp_indexes: tuple[str, ...] = ()

    @property
    def columns(self) -> tuple[str, ...]:
        """Physical key columns: primary key first, then indexed fields."""
        return (self.primary_key, *self.indexes)

    def column_values(self, record: dict[str, Any]) -> list[str | None]:
        """Key column values for *record*.

        Timestamp indexes hold a fixed-width UTC key so that ordering by the
        column is chronological; the original string stays in ``data``.
        """
        values: list[str | None] = []
        for col in self.columns:
            value = record.get(col)
            if col in self.timestamp_indexes:
                value = timestamp_sort_key(value)
            values.append(value if value is None or isinstance(value, str) else str(value))
        return values

    def create_statements(self) -> list[str]:
        cols = [f"{self.primary_key} TEXT PRIMARY KEY"]
        cols += [f"{idx} TEXT" for idx in self.indexes]
        cols.append("data TEXT NOT NULL")
        stmts = [f"CREATE TABLE IF NOT EXISTS {self.name} ({', '.join(cols)})"]
        for idx in self.indexes:
            stmts.append(
                f"CREATE INDEX IF NOT EXISTS idx_{self.name}_{idx} ON {self.name}({idx})"
            )
        return stmts


SCHEMA: tuple[TableSchema, ...] = (
    TableSchema(LocalTable.SETTINGS.value, "id", model=Setting),
    TableSchema(
        LocalTable.LOGS.value, "id", ("created_at",), model=Log, timestamp_indexes=("created_at",)
    ),
    TableSchema(
        LocalTable.NOTIFICATIONS.value,
        "id",
        ("created_at",),
        model=Notification,
        timestamp_indexes=("created_at",),
    ),
)

_BY_NAME: dict[str, TableSchema] = {t.name: t for t in SCHEMA}


def table_schema(name: str | LocalTable) -> TableSchema:
    key = name.value if isinstance(name, LocalTable) else name
    try:
        return _BY_NAME[key]
    except KeyError:
        raise KeyError(f"Unknown table: {key!r}") from None


# ---------------------------------------------------------------------------
# Migrations
# ---------------------------------------------------------------------------

LATEST_SCHEMA_VERSION = 2

_MIGRATIONS: dict[int, Callable[[sqlite3.Connection], None]] = {}


def _register(from_ver: int) -> Callable[..., Any]:
    """Decorator to register a migration step."""

    def decorator(
        fn: Callable[[sqlite3.Connection], None],
    ) -> Callable[[sqlite3.Connection], None]:
        _MIGRATIONS[from_ver] = fn
        return fn

    return decorator


@_register(0)
def _migrate_v0_to_v1(conn: sqlite3.Connection) -> None:
    """v0 -> v1: create the settings, logs and notifications tables."""
    for table in SCHEMA:
        for stmt in table.create_statements():
            conn.execute(stmt)


@_register(1)
def _migrate_v1_to_v2(conn: sqlite3.Connection) -> None:
    """v1 -> v2: rewrite timestamp index columns as sortable UTC keys."""
    for table in SCHEMA:
        if not table.timestamp_indexes:
            continue
        rows = conn.execute(
            f"SELECT {table.primary_key}, data FROM {table.name}"  # noqa: S608
        ).fetchall()
        for key, data in rows:
            record = json.loads(data)
            for col in table.timestamp_indexes:
                conn.execute(
                    f"UPDATE {table.name} SET {col} = ? WHERE {table.primary_key} = ?",  # noqa: S608
                    (timestamp_sort_key(record.get(col)), key),
                )


def get_user_version(conn: sqlite3.Connection) -> int:
    row = conn.execute("PRAGMA user_version").fetchone()
    return int(row[0]) if row else 0


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run a block in one explicit transaction on an autocommit connection."""
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
        conn.execute("COMMIT")
    except BaseException:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise


def run_migrations(conn: sqlite3.Connection, db_path: Path | str) -> int:
    """Bring *conn* up to LATEST_SCHEMA_VERSION and return the version applied.

    Raises :class:`SchemaVersionError` when the database is newer than this
    build or a step in the chain is missing. Nothing is written in either case.
    """
    current = get_user_version(conn)
    if current > LATEST_SCHEMA_VERSION:
        raise SchemaVersionError(
            f"Database {db_path} is at schema v{current}; "
            f"this build only supports up to v{LATEST_SCHEMA_VERSION}"
        )

    while current < LATEST_SCHEMA_VERSION:
        step = _MIGRATIONS.get(current)
        if step is None:
            raise SchemaVersionError(f"No migration path from schema v{current} to v{current + 1}")
        with transaction(conn):
            step(conn)
            conn.execute(f"PRAGMA user_version = {current + 1}")
        logger.info("Migrated %s: v%d -> v%d", db_path, current, current + 1)
        current += 1

    return current
