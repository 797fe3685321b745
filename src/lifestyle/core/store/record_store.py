"""
Record store — durable, versioned, table-oriented storage on SQLite.

Provides per-table get/put/delete/scan, where every put or delete batch is a
single transaction, and a change-subscription primitive (:meth:`watch`) fed
after each committed batch. Opening the store applies schema migrations and
refuses to open a database written by a newer schema.

The SQLite connection is shared by worker threads; a re-entrant lock
serializes all access, so readers observe either the state before a batch
or after it, never part of one.

Usage::

    store = RecordStore(path)
    store.connect()
    await store.put("settings", {"id": "Dark Mode", "value": True})
    rows = await store.scan_ordered("logs", "created_at", "desc")
    store.close()
"""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import threading
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from lifestyle.core.exceptions import StoreError
from lifestyle.core.store.changes import ChangeFeed, Watch
from lifestyle.core.store.schema import (
    SCHEMA,
    TableSchema,
    get_user_version,
    run_migrations,
    transaction,
)

logger = logging.getLogger(__name__)

Record = dict[str, Any]

# SQLite's default limit on host parameters per statement is 999 on older builds.
_DELETE_CHUNK = 500


class RecordStore:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._db: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._tables: dict[str, TableSchema] = {}
        self._feed = ChangeFeed()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> None:
        """Open the database, apply migrations, and open every declared table."""
        if self._db is not None:
            return
        if str(self.path) != ":memory:":
            self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(str(self.path), check_same_thread=False, isolation_level=None)
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open database {self.path}: {exc}") from exc
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            run_migrations(conn, self.path)
        except sqlite3.Error as exc:
            conn.close()
            raise StoreError(f"Cannot migrate database {self.path}: {exc}") from exc
        except BaseException:
            conn.close()
            raise
        self._db = conn
        for table in SCHEMA:
            self.open_table(table)
        logger.debug("Record store open: %s", self.path)

    def close(self) -> None:
        self._feed.close_all()
        with self._lock:
            if self._db is not None:
                self._db.close()
                self._db = None

    @property
    def connected(self) -> bool:
        return self._db is not None

    def open_table(self, schema: TableSchema) -> None:
        """Create *schema*'s table and indexes if missing and register it."""
        with self._guard("open_table", schema.name):
            for stmt in schema.create_statements():
                self._conn.execute(stmt)
            self._tables[schema.name] = schema

    # ------------------------------------------------------------------
    # Public async API
    # ------------------------------------------------------------------

    async def get(self, table: str, key: str) -> Record | None:
        return await asyncio.to_thread(self._get, table, key)

    async def put(self, table: str, record: Record) -> None:
        await asyncio.to_thread(self._bulk_put, table, [record])

    async def bulk_put(self, table: str, records: Iterable[Record]) -> int:
        return await asyncio.to_thread(self._bulk_put, table, list(records))

    async def bulk_delete(self, table: str, keys: Iterable[str]) -> int:
        return await asyncio.to_thread(self._bulk_delete, table, list(keys))

    async def clear(self, table: str) -> int:
        return await asyncio.to_thread(self._clear, table)

    async def scan_all(self, table: str) -> list[Record]:
        return await asyncio.to_thread(self._scan, table, None, "asc")

    async def scan_ordered(
        self, table: str, index_field: str, direction: str = "asc"
    ) -> list[Record]:
        return await asyncio.to_thread(self._scan, table, index_field, direction)

    async def count(self, table: str) -> int:
        return await asyncio.to_thread(self._count, table)

    def watch(self, table: str) -> Watch:
        """Subscribe to committed mutations of *table* (call from a running loop)."""
        self._schema(table)
        return self._feed.watch(table)

    def watcher_count(self, table: str) -> int:
        return self._feed.watcher_count(table)

    def schema_version(self) -> int:
        with self._guard("schema_version", "user_version"):
            return get_user_version(self._conn)

    # ------------------------------------------------------------------
    # Internals (run on worker threads)
    # ------------------------------------------------------------------

    @property
    def _conn(self) -> sqlite3.Connection:
        if self._db is None:
            raise StoreError(f"Record store is not connected: {self.path}")
        return self._db

    def _schema(self, table: str) -> TableSchema:
        try:
            return self._tables[table]
        except KeyError:
            raise StoreError(f"Table is not open: {table!r}") from None

    @contextmanager
    def _guard(self, op: str, table: str) -> Iterator[None]:
        with self._lock:
            try:
                yield
            except sqlite3.Error as exc:
                raise StoreError(f"{op} on {table!r} failed: {exc}") from exc

    def _get(self, table: str, key: str) -> Record | None:
        schema = self._schema(table)
        with self._guard("get", table):
            row = self._conn.execute(
                f"SELECT data FROM {schema.name} WHERE {schema.primary_key} = ?",  # noqa: S608
                (key,),
            ).fetchone()
        return json.loads(row[0]) if row else None

    def _bulk_put(self, table: str, records: Sequence[Record]) -> int:
        schema = self._schema(table)
        if not records:
            return 0
        rows = [self._to_row(schema, r) for r in records]
        cols = (*schema.columns, "data")
        placeholders = ", ".join("?" for _ in cols)
        sql = f"INSERT OR REPLACE INTO {schema.name} ({', '.join(cols)}) VALUES ({placeholders})"  # noqa: S608
        with self._guard("bulk_put", table):
            with transaction(self._conn):
                self._conn.executemany(sql, rows)
            keys = tuple(str(row[0]) for row in rows)
            self._feed.publish(table, "put", keys)
        return len(rows)

    def _bulk_delete(self, table: str, keys: Sequence[str]) -> int:
        schema = self._schema(table)
        if not keys:
            return 0
        deleted = 0
        with self._guard("bulk_delete", table):
            with transaction(self._conn):
                for start in range(0, len(keys), _DELETE_CHUNK):
                    chunk = keys[start : start + _DELETE_CHUNK]
                    placeholders = ", ".join("?" for _ in chunk)
                    cur = self._conn.execute(
                        f"DELETE FROM {schema.name} WHERE {schema.primary_key} IN ({placeholders})",  # noqa: S608
                        tuple(chunk),
                    )
                    deleted += cur.rowcount
            if deleted:
                self._feed.publish(table, "delete", tuple(keys))
        return deleted

    def _clear(self, table: str) -> int:
        schema = self._schema(table)
        with self._guard("clear", table):
            with transaction(self._conn):
                cur = self._conn.execute(f"DELETE FROM {schema.name}")  # noqa: S608
            if cur.rowcount:
                self._feed.publish(table, "delete", ())
        return cur.rowcount

    def _scan(self, table: str, index_field: str | None, direction: str) -> list[Record]:
        schema = self._schema(table)
        direction = direction.lower()
        if direction not in ("asc", "desc"):
            raise ValueError(f"direction must be 'asc' or 'desc', got {direction!r}")
        if index_field is None:
            order = "rowid ASC"
        elif index_field in schema.columns:
            order = f"{index_field} {direction.upper()}, {schema.primary_key} {direction.upper()}"
        else:
            raise StoreError(f"{index_field!r} is not indexed on {table!r}")
        with self._guard("scan", table):
            rows = self._conn.execute(
                f"SELECT data FROM {schema.name} ORDER BY {order}"  # noqa: S608
            ).fetchall()
        return [json.loads(r[0]) for r in rows]

    def _count(self, table: str) -> int:
        schema = self._schema(table)
        with self._guard("count", table):
            row = self._conn.execute(f"SELECT count(*) FROM {schema.name}").fetchone()  # noqa: S608
        return row[0] if row else 0

    @staticmethod
    def _to_row(schema: TableSchema, record: Record) -> tuple[Any, ...]:
        if not record.get(schema.primary_key):
            raise StoreError(f"Record for {schema.name!r} has no {schema.primary_key!r}")
        return (*schema.column_values(record), json.dumps(record, ensure_ascii=False))
