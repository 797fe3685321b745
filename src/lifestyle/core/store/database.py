"""
LocalDatabase — the application's entry point to on-device storage.

Owns one :class:`RecordStore` and exposes the operations the rest of the
application uses: settings seeding, the log retention sweep, live views,
and plain reads and writes on each table.

Lifecycle::

    async with LocalDatabase(path) as db:
        await db.initialize_settings()
        await db.delete_expired_logs()
        async for logs in db.live_logs():
            ...
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from lifestyle.core.constants import (
    DEFAULT_SETTINGS,
    LocalTable,
    LogLevel,
    SettingId,
    SettingValue,
)
from lifestyle.core.exceptions import SettingError
from lifestyle.core.store.live import LiveQuery, ordered, unordered
from lifestyle.core.store.models import Log, Notification, Setting
from lifestyle.core.store.record_store import RecordStore
from lifestyle.core.store.retention import delete_expired_logs
from lifestyle.core.store.seeding import initialize_settings

logger = logging.getLogger(__name__)

_SETTINGS = LocalTable.SETTINGS.value
_LOGS = LocalTable.LOGS.value
_NOTIFICATIONS = LocalTable.NOTIFICATIONS.value


class LocalDatabase:
    def __init__(
        self,
        path: Path | str,
        defaults: Mapping[SettingId | str, SettingValue] = DEFAULT_SETTINGS,
    ) -> None:
        self.store = RecordStore(path)
        self._defaults = defaults

    @property
    def path(self) -> Path:
        return self.store.path

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Open the store. Raises SchemaVersionError for a newer on-disk schema."""
        self.store.connect()
        logger.info("Database opened: %s", self.path)

    def close(self) -> None:
        self.store.close()

    async def __aenter__(self) -> LocalDatabase:
        self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Startup operations
    # ------------------------------------------------------------------

    async def initialize_settings(self) -> list[Setting]:
        """Seed missing settings with their defaults. Existing values are kept.

        Must run before the rest of the application reads settings.
        """
        return await initialize_settings(self.store, self._defaults)

    async def delete_expired_logs(self, now: datetime | None = None) -> int:
        """Delete logs older than the retention setting; returns the count deleted."""
        return await delete_expired_logs(self.store, now=now)

    # ------------------------------------------------------------------
    # Live views
    # ------------------------------------------------------------------

    def live_logs(self) -> LiveQuery[Log]:
        """Logs, newest ``created_at`` first, re-emitted on every change."""
        return LiveQuery(
            self.store, _LOGS, ordered(self.store, _LOGS, "created_at", "desc"), Log.from_record
        )

    def live_settings(self) -> LiveQuery[Setting]:
        """All settings, in no particular order, re-emitted on every change."""
        return LiveQuery(
            self.store, _SETTINGS, unordered(self.store, _SETTINGS), Setting.from_record
        )

    def live_notifications(self) -> LiveQuery[Notification]:
        return LiveQuery(
            self.store,
            _NOTIFICATIONS,
            ordered(self.store, _NOTIFICATIONS, "created_at", "desc"),
            Notification.from_record,
        )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_setting(self, setting_id: SettingId | str) -> Setting | None:
        record = await self.store.get(_SETTINGS, _setting_key(setting_id))
        return Setting.from_record(record) if record else None

    async def list_settings(self) -> list[Setting]:
        return [Setting.from_record(r) for r in await self.store.scan_all(_SETTINGS)]

    async def set_setting(self, setting_id: SettingId | str, value: SettingValue) -> Setting:
        key = _setting_key(setting_id)
        if key not in {_setting_key(k) for k in self._defaults}:
            raise SettingError(f"Unknown setting: {key!r}")
        setting = Setting(id=key, value=value)
        await self.store.put(_SETTINGS, setting.to_record())
        return setting

    # ------------------------------------------------------------------
    # Logs
    # ------------------------------------------------------------------

    async def add_log(
        self,
        label: str,
        log_level: LogLevel | str = LogLevel.INFO,
        details: dict[str, Any] | None = None,
    ) -> Log:
        log = Log(log_level=log_level, label=label, details=details)
        await self.store.put(_LOGS, log.to_record())
        return log

    async def put_logs(self, logs: Iterable[Log]) -> int:
        return await self.store.bulk_put(_LOGS, (log.to_record() for log in logs))

    async def list_logs(self) -> list[Log]:
        """Logs, newest first."""
        records = await self.store.scan_ordered(_LOGS, "created_at", "desc")
        return [Log.from_record(r) for r in records]

    async def delete_logs(self, ids: Iterable[str]) -> int:
        return await self.store.bulk_delete(_LOGS, ids)

    async def clear_logs(self) -> int:
        return await self.store.clear(_LOGS)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def add_notification(self, notification: Notification) -> Notification:
        await self.store.put(_NOTIFICATIONS, notification.to_record())
        return notification

    async def list_notifications(self) -> list[Notification]:
        """Notifications, newest first."""
        records = await self.store.scan_ordered(_NOTIFICATIONS, "created_at", "desc")
        return [Notification.from_record(r) for r in records]

    async def delete_notifications(self, ids: Iterable[str]) -> int:
        return await self.store.bulk_delete(_NOTIFICATIONS, ids)


def _setting_key(setting_id: SettingId | str) -> str:
    return setting_id.value if isinstance(setting_id, SettingId) else setting_id
