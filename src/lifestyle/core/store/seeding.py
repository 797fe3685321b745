"""Settings initializer — seed defaults without overwriting stored values."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from lifestyle.core.constants import DEFAULT_SETTINGS, LocalTable, SettingId, SettingValue
from lifestyle.core.store.models import Setting
from lifestyle.core.store.record_store import RecordStore

logger = logging.getLogger(__name__)


async def initialize_settings(
    store: RecordStore,
    defaults: Mapping[SettingId | str, SettingValue] = DEFAULT_SETTINGS,
) -> list[Setting]:
    """
    Ensure every recognized setting has a stored row.

    A row that already exists is kept as-is, even when its default has
    changed since it was written. Missing rows get their default. All rows,
    old and new, are then written back in one batch, so running this any
    number of times leaves the table exactly as one run does.

    Returns the settings that were written.
    """
    table = LocalTable.SETTINGS.value
    keys = [k.value if isinstance(k, SettingId) else k for k in defaults]

    existing = await asyncio.gather(*(store.get(table, key) for key in keys))

    settings: list[Setting] = []
    seeded = 0
    for key, default, record in zip(keys, defaults.values(), existing, strict=True):
        if record is not None:
            settings.append(Setting.from_record(record))
        else:
            settings.append(Setting(id=key, value=default))
            seeded += 1

    await store.bulk_put(table, (s.to_record() for s in settings))
    if seeded:
        logger.info("Seeded %d default setting(s)", seeded)
    return settings
