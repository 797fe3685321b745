"""
lifestyle.core.store — on-device persistence.

Modules:
    schema          Table declarations and versioned migrations
    record_store    SQLite table store with per-table change notification
    changes         Change feed fan-out used by watches
    models          Typed dataclasses for all stored entities
    seeding         Default settings initializer
    retention       Log retention sweep
    live            Live (auto-updating) queries
    database        LocalDatabase facade
"""

from lifestyle.core.store.database import LocalDatabase
from lifestyle.core.store.live import LiveQuery
from lifestyle.core.store.models import Log, Notification, Setting
from lifestyle.core.store.record_store import RecordStore

__all__ = [
    "LiveQuery",
    "LocalDatabase",
    "Log",
    "Notification",
    "RecordStore",
    "Setting",
]
