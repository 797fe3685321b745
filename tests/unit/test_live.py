"""Unit tests for live queries — initial snapshot, ordering, fan-out, cancellation."""

from __future__ import annotations

import asyncio
from contextlib import aclosing
from datetime import datetime, timedelta

import pytest

from lifestyle.core.constants import DEFAULT_SETTINGS, SettingId
from lifestyle.core.exceptions import LiveQueryError, StoreError
from lifestyle.core.store.database import LocalDatabase
from lifestyle.core.store.live import LiveQuery
from lifestyle.core.store.models import Log, Notification

_TIMEOUT = 2.0


async def _next(stream):
    return await asyncio.wait_for(anext(stream), _TIMEOUT)


def _later(created_at: str, seconds: int = 1) -> str:
    return (datetime.fromisoformat(created_at) + timedelta(seconds=seconds)).isoformat()


class TestLiveLogs:
    @pytest.mark.asyncio
    async def test_empty_then_one_then_two_newest_first(self, db: LocalDatabase) -> None:
        async with aclosing(aiter(db.live_logs())) as logs:
            assert await _next(logs) == []

            first = await db.add_log("first")
            snapshot = await _next(logs)
            assert [log.id for log in snapshot] == [first.id]

            second = Log(log_level="INFO", label="second", created_at=_later(first.created_at))
            await db.put_logs([second])
            snapshot = await _next(logs)
            assert [log.id for log in snapshot] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_newest_first_across_offsets(self, db: LocalDatabase) -> None:
        await db.put_logs(
            [
                Log(id="utc", log_level="INFO", label="utc", created_at="2024-05-01T10:00:00Z"),
                Log(
                    id="east",
                    log_level="INFO",
                    label="east",
                    created_at="2024-05-01T12:30:00+03:00",
                ),
            ]
        )
        async with aclosing(aiter(db.live_logs())) as logs:
            snapshot = await _next(logs)
        assert [log.id for log in snapshot] == ["utc", "east"]

    @pytest.mark.asyncio
    async def test_initial_snapshot_reflects_existing_rows(self, db: LocalDatabase) -> None:
        log = await db.add_log("existing")
        async with aclosing(aiter(db.live_logs())) as logs:
            snapshot = await _next(logs)
        assert snapshot == [log]

    @pytest.mark.asyncio
    async def test_delete_emits_snapshot(self, db: LocalDatabase) -> None:
        log = await db.add_log("doomed")
        async with aclosing(aiter(db.live_logs())) as logs:
            assert len(await _next(logs)) == 1
            await db.delete_logs([log.id])
            assert await _next(logs) == []

    @pytest.mark.asyncio
    async def test_sweep_emits_snapshot(self, db: LocalDatabase) -> None:
        await db.set_setting(SettingId.LOG_RETENTION_DURATION, "One Second")
        old = Log(log_level="INFO", label="old", created_at="2000-01-01T00:00:00.000+00:00")
        await db.put_logs([old])
        async with aclosing(aiter(db.live_logs())) as logs:
            assert await _next(logs) == [old]
            assert await db.delete_expired_logs() == 1
            assert await _next(logs) == []

    @pytest.mark.asyncio
    async def test_burst_of_writes_never_goes_backwards(self, db: LocalDatabase) -> None:
        async with aclosing(aiter(db.live_logs())) as logs:
            assert await _next(logs) == []
            for i in range(5):
                await db.add_log(f"log-{i}")

            sizes: list[int] = []
            while not sizes or sizes[-1] < 5:
                sizes.append(len(await _next(logs)))

        assert sizes == sorted(sizes)
        assert sizes[-1] == 5


class TestFanOut:
    @pytest.mark.asyncio
    async def test_each_subscriber_gets_its_own_stream(self, db: LocalDatabase) -> None:
        query = db.live_logs()
        async with aclosing(aiter(query)) as a, aclosing(aiter(query)) as b:
            assert await _next(a) == []
            assert await _next(b) == []
            assert db.store.watcher_count("logs") == 2

            log = await db.add_log("shared")
            assert await _next(a) == [log]
            assert await _next(b) == [log]

    @pytest.mark.asyncio
    async def test_other_table_writes_do_not_emit(self, db: LocalDatabase) -> None:
        async with aclosing(aiter(db.live_logs())) as logs:
            assert await _next(logs) == []
            await db.set_setting(SettingId.DARK_MODE, False)
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(anext(logs), 0.2)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_aclose_releases_watch(self, db: LocalDatabase) -> None:
        logs = aiter(db.live_logs())
        await _next(logs)
        assert db.store.watcher_count("logs") == 1
        await logs.aclose()
        assert db.store.watcher_count("logs") == 0

    @pytest.mark.asyncio
    async def test_task_cancellation_releases_watch(self, db: LocalDatabase) -> None:
        started = asyncio.Event()

        async def consume() -> None:
            async for _ in db.live_logs():
                started.set()

        task = asyncio.create_task(consume())
        await asyncio.wait_for(started.wait(), _TIMEOUT)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert db.store.watcher_count("logs") == 0

    @pytest.mark.asyncio
    async def test_store_close_ends_stream(self, db: LocalDatabase) -> None:
        logs = aiter(db.live_logs())
        await _next(logs)
        db.close()
        with pytest.raises(StopAsyncIteration):
            await _next(logs)

    @pytest.mark.asyncio
    async def test_failed_reevaluation_raises_live_query_error(self, db: LocalDatabase) -> None:
        calls = 0

        async def flaky() -> list[dict]:
            nonlocal calls
            calls += 1
            if calls > 1:
                raise StoreError("disk I/O error")
            return []

        query = LiveQuery(db.store, "logs", flaky, Log.from_record)
        async with aclosing(aiter(query)) as logs:
            assert await _next(logs) == []
            await db.add_log("trigger")
            with pytest.raises(LiveQueryError, match="disk I/O error"):
                await _next(logs)
        assert db.store.watcher_count("logs") == 0


class TestLiveSettings:
    @pytest.mark.asyncio
    async def test_after_initialization_yields_every_default(self, db: LocalDatabase) -> None:
        await db.initialize_settings()
        async with aclosing(aiter(db.live_settings())) as settings:
            snapshot = await _next(settings)
        assert {s.id: s.value for s in snapshot} == {
            k.value: v for k, v in DEFAULT_SETTINGS.items()
        }

    @pytest.mark.asyncio
    async def test_update_emits_new_value(self, db: LocalDatabase) -> None:
        await db.initialize_settings()
        async with aclosing(aiter(db.live_settings())) as settings:
            await _next(settings)
            await db.set_setting(SettingId.DARK_MODE, False)
            snapshot = await _next(settings)
        assert {s.id: s.value for s in snapshot}[SettingId.DARK_MODE.value] is False


class TestLiveNotifications:
    @pytest.mark.asyncio
    async def test_newest_first(self, db: LocalDatabase) -> None:
        older = Notification(app_title="Lifestyle", heading="A", message="first")
        newer = Notification(
            app_title="Lifestyle", heading="B", message="second", created_at=_later(older.created_at)
        )
        await db.add_notification(older)
        await db.add_notification(newer)
        async with aclosing(aiter(db.live_notifications())) as notes:
            snapshot = await _next(notes)
        assert [n.id for n in snapshot] == [newer.id, older.id]
        assert snapshot[0].icon == "info"
        assert snapshot[0].color == "primary"
