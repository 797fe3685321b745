"""
Change feed — per-table fan-out of committed mutations.

The record store publishes one :class:`TableChange` after every committed
write batch. Each call to :meth:`ChangeFeed.watch` creates an independent
:class:`Watch` with its own queue, bound to the event loop it was created
on; events published from worker threads are handed to that loop with
``call_soon_threadsafe``, so a watcher sees its table's changes in commit
order.

Usage::

    async with feed.watch("logs") as changes:
        async for change in changes:
            ...
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableChange:
    table: str
    kind: str  # "put" | "delete"
    keys: tuple[str, ...]
    sequence: int


class Watch:
    """One subscriber's stream of change events for a single table."""

    def __init__(self, feed: ChangeFeed, table: str, loop: asyncio.AbstractEventLoop) -> None:
        self.table = table
        self._feed = feed
        self._loop = loop
        self._queue: asyncio.Queue[TableChange | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _deliver(self, change: TableChange | None) -> None:
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, change)
        except RuntimeError:
            # Subscriber's loop is gone; nobody is left to read this watch.
            logger.debug("Dropping watch on %s: event loop closed", self.table)
            self._feed._remove(self)
            self._closed = True

    def drain(self) -> list[TableChange]:
        """Return every change already queued, without waiting."""
        pending: list[TableChange] = []
        while True:
            try:
                item = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return pending
            if item is None:
                # Keep the close marker for the next __anext__.
                self._queue.put_nowait(None)
                return pending
            pending.append(item)

    def close(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._feed._remove(self)
        self._deliver(None)

    def __aiter__(self) -> Watch:
        return self

    async def __anext__(self) -> TableChange:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is None:
            raise StopAsyncIteration
        return item

    async def __aenter__(self) -> Watch:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()


class ChangeFeed:
    """Registry of active watches, keyed by table name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._watches: dict[str, set[Watch]] = defaultdict(set)
        self._sequence: dict[str, int] = defaultdict(int)

    def watch(self, table: str) -> Watch:
        """Register a new watch on *table*. Must be called from a running loop."""
        w = Watch(self, table, asyncio.get_running_loop())
        with self._lock:
            self._watches[table].add(w)
        return w

    def publish(self, table: str, kind: str, keys: tuple[str, ...]) -> TableChange:
        with self._lock:
            self._sequence[table] += 1
            change = TableChange(table, kind, keys, self._sequence[table])
            watchers = list(self._watches.get(table, ()))
        for w in watchers:
            w._deliver(change)
        return change

    def watcher_count(self, table: str) -> int:
        with self._lock:
            return len(self._watches.get(table, ()))

    def close_all(self) -> None:
        with self._lock:
            watchers = [w for ws in self._watches.values() for w in ws]
        for w in watchers:
            w.close()

    def _remove(self, watch: Watch) -> None:
        with self._lock:
            self._watches.get(watch.table, set()).discard(watch)
