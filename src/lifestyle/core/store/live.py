"""
Live queries — snapshots of a table that re-emit after every mutation.

Iterating a :class:`LiveQuery` opens a new subscription: it watches the table
first, yields the current snapshot, then yields a fresh snapshot each time a
write is committed to that table. Every ``async for`` gets its own watch, so
any number of subscribers can share one LiveQuery object.

Snapshots are read after the change that triggered them, so a subscriber
never receives an older snapshot after a newer one. Changes that pile up
while a snapshot is being read are folded into the next one; a burst of
writes may therefore surface as a single snapshot showing all of them.

Leaving the loop (``break``, ``aclose()``, or cancelling the task) releases
the watch. If a snapshot cannot be read, the stream ends with
:class:`LiveQueryError`.

Usage::

    async with aclosing(aiter(db.live_logs())) as logs:
        async for snapshot in logs:
            render(snapshot)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Generic, TypeVar

from lifestyle.core.exceptions import LiveQueryError, StoreError
from lifestyle.core.store.record_store import Record, RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LiveQuery(Generic[T]):
    def __init__(
        self,
        store: RecordStore,
        table: str,
        query: Callable[[], Awaitable[list[Record]]],
        model: Callable[[Record], T],
    ) -> None:
        self._store = store
        self._table = table
        self._query = query
        self._model = model

    @property
    def table(self) -> str:
        return self._table

    def __aiter__(self) -> AsyncIterator[list[T]]:
        return self._subscribe()

    async def _subscribe(self) -> AsyncIterator[list[T]]:
        watch = self._store.watch(self._table)
        logger.debug("Live query subscribed: %s", self._table)
        try:
            yield await self._snapshot()
            async for _change in watch:
                watch.drain()
                yield await self._snapshot()
        finally:
            watch.close()
            logger.debug("Live query released: %s", self._table)

    async def _snapshot(self) -> list[T]:
        try:
            records = await self._query()
        except StoreError as exc:
            raise LiveQueryError(f"Live query on {self._table!r} failed: {exc}") from exc
        return [self._model(r) for r in records]


def ordered(
    store: RecordStore, table: str, index_field: str, direction: str = "asc"
) -> Callable[[], Awaitable[list[Record]]]:
    async def _query() -> list[Record]:
        return await store.scan_ordered(table, index_field, direction)

    return _query


def unordered(store: RecordStore, table: str) -> Callable[[], Awaitable[list[Record]]]:
    async def _query() -> list[Record]:
        return await store.scan_all(table)

    return _query


__all__ = ["LiveQuery", "ordered", "unordered"]
