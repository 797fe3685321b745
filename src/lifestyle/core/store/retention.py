"""
Retention sweeper — delete logs older than the configured retention window.

The retention setting names a :class:`DurationLabel`; each label maps to a
fixed threshold in milliseconds. ``Forever`` maps to the largest threshold,
so ``age > threshold`` never holds for it, and an absent setting behaves the
same way. A log is removed when ``now - created_at`` is strictly greater than
the threshold.

A ``created_at`` that does not parse as an offset-aware ISO-8601 timestamp
never makes a row eligible; the row is kept and the sweep carries on.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from lifestyle.core.constants import DURATION_MS, DurationLabel, LocalTable, SettingId
from lifestyle.core.store.models import parse_timestamp
from lifestyle.core.store.record_store import RecordStore

logger = logging.getLogger(__name__)


def threshold_ms(label: DurationLabel | str) -> int:
    """Return the retention threshold in milliseconds for *label*."""
    return DURATION_MS[DurationLabel(label)]


def older_than(created_at: datetime, threshold: int, now: datetime) -> bool:
    """True when *now* - *created_at* exceeds *threshold* ms, to the microsecond."""
    return now - created_at > timedelta(milliseconds=threshold)


def is_expired(created_at: Any, threshold: int, now: datetime) -> bool:
    """True when *created_at* parses and is strictly older than *threshold* ms."""
    parsed = parse_timestamp(created_at)
    if parsed is None:
        return False
    return older_than(parsed, threshold, now)


def _retention_label(value: Any) -> DurationLabel | None:
    try:
        return DurationLabel(value)
    except ValueError:
        return None


async def delete_expired_logs(store: RecordStore, now: datetime | None = None) -> int:
    """
    Delete every log older than the stored retention duration.

    Returns the number of logs deleted. Retention unset or ``Forever``
    returns 0 without scanning the logs table.
    """
    setting = await store.get(LocalTable.SETTINGS.value, SettingId.LOG_RETENTION_DURATION.value)
    if setting is None or not setting.get("value"):
        return 0

    label = _retention_label(setting["value"])
    if label is None:
        logger.warning("Unrecognized log retention duration %r; keeping all logs", setting["value"])
        return 0
    if label is DurationLabel.FOREVER:
        return 0

    threshold = threshold_ms(label)
    now = now or datetime.now(UTC)

    removable: list[str] = []
    skipped = 0
    for log in await store.scan_all(LocalTable.LOGS.value):
        created_at = parse_timestamp(log.get("created_at"))
        if created_at is None:
            skipped += 1
            continue
        if older_than(created_at, threshold, now):
            removable.append(log["id"])

    if skipped:
        logger.debug("Retention sweep skipped %d log(s) with unparsable created_at", skipped)

    if not removable:
        return 0
    deleted = await store.bulk_delete(LocalTable.LOGS.value, removable)
    logger.info("Deleted %d expired log(s) (retention: %s)", deleted, label.value)
    return deleted
