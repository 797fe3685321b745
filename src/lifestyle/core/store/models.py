"""Typed dataclasses for every stored entity.

Each model round-trips through a plain dict (``to_record`` / ``from_record``),
which is the shape the record store persists as JSON.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

from lifestyle.core.constants import (
    DEFAULT_NOTIFICATION_COLOR,
    DEFAULT_NOTIFICATION_ICON,
    LogLevel,
    SettingId,
    SettingValue,
)


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an offset-aware ISO-8601 string, or return None."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None or parsed.utcoffset() is None:
        return None
    return parsed


def timestamp_sort_key(value: Any) -> str | None:
    """Fixed-width UTC form of *value* that sorts chronologically as text.

    Values that do not parse are returned as-is (stringified).
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return value if value is None or isinstance(value, str) else str(value)
    try:
        utc = parsed.astimezone(UTC)
    except OverflowError:
        return value
    return utc.replace(tzinfo=None).isoformat(timespec="microseconds") + "Z"


@dataclass
class Setting:
    id: str
    value: SettingValue

    def __post_init__(self) -> None:
        if isinstance(self.id, SettingId):
            self.id = self.id.value

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "value": self.value}

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Setting:
        return cls(id=record["id"], value=record["value"])


@dataclass
class Log:
    log_level: str
    label: str
    details: dict[str, Any] | None = None
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=utc_now_iso)

    def __post_init__(self) -> None:
        if isinstance(self.log_level, LogLevel):
            self.log_level = self.log_level.value

    def to_record(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Log:
        return cls(
            id=record["id"],
            created_at=record.get("created_at", ""),
            log_level=record.get("log_level", LogLevel.INFO.value),
            label=record.get("label", ""),
            details=record.get("details"),
        )


@dataclass
class Notification:
    app_title: str
    heading: str
    message: str
    icon: str = DEFAULT_NOTIFICATION_ICON
    color: str = DEFAULT_NOTIFICATION_COLOR
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=utc_now_iso)

    def to_record(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Notification:
        return cls(
            id=record["id"],
            created_at=record.get("created_at", ""),
            app_title=record.get("app_title", ""),
            heading=record.get("heading", ""),
            message=record.get("message", ""),
            icon=record.get("icon") or DEFAULT_NOTIFICATION_ICON,
            color=record.get("color") or DEFAULT_NOTIFICATION_COLOR,
        )
