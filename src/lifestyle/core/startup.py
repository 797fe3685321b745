"""
Startup sequence for the local store.

Run once when the application starts, after the database is open:
  1. Seed default settings (existing values are kept)
  2. Delete logs past the retention window

A failure in one phase is logged and reported; it does not stop the other
phase, and it is never retried here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from lifestyle.core.exceptions import LifestyleError
from lifestyle.core.store.database import LocalDatabase

logger = logging.getLogger(__name__)


@dataclass
class StartupReport:
    settings_initialized: int = 0
    logs_deleted: int = 0
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


async def run_startup(db: LocalDatabase, now: datetime | None = None) -> StartupReport:
    report = StartupReport()

    try:
        report.settings_initialized = len(await db.initialize_settings())
    except LifestyleError as exc:
        logger.error("Settings initialization failed: %s", exc)
        report.errors["initialize_settings"] = str(exc)

    try:
        report.logs_deleted = await db.delete_expired_logs(now=now)
    except LifestyleError as exc:
        logger.error("Log retention sweep failed: %s", exc)
        report.errors["delete_expired_logs"] = str(exc)

    logger.info(
        "Startup complete: %d setting(s), %d expired log(s) deleted",
        report.settings_initialized,
        report.logs_deleted,
    )
    return report
