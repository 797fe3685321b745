"""Lifestyle constants: filesystem layout, tables, setting keys, and durations."""

from __future__ import annotations

from enum import Enum, IntEnum

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    STORE_ERROR = 3


# ---------------------------------------------------------------------------
# Filesystem layout
# ---------------------------------------------------------------------------

APP_TITLE = "Lifestyle"
LIFESTYLE_DIR_NAME = ".lifestyle"
CONFIG_FILENAME = "config.toml"
DB_FILENAME = "lifestyle.db"

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


class LocalTable(str, Enum):
    SETTINGS = "settings"
    LOGS = "logs"
    NOTIFICATIONS = "notifications"


# ---------------------------------------------------------------------------
# Durations
# ---------------------------------------------------------------------------

# Largest integer a double represents exactly; the stored thresholds stay
# comparable with values written by other clients of the same database.
MAX_SAFE_INTEGER = 2**53 - 1


class DurationLabel(str, Enum):
    NOW = "Now"
    ONE_SECOND = "One Second"
    ONE_MINUTE = "One Minute"
    ONE_HOUR = "One Hour"
    ONE_DAY = "One Day"
    ONE_WEEK = "One Week"
    ONE_MONTH = "One Month"
    THREE_MONTHS = "Three Months"
    SIX_MONTHS = "Six Months"
    ONE_YEAR = "One Year"
    TWO_YEARS = "Two Years"
    THREE_YEARS = "Three Years"
    ALL_TIME = "All Time"
    FOREVER = "Forever"


DURATION_MS: dict[DurationLabel, int] = {
    DurationLabel.NOW: 1,
    DurationLabel.ONE_SECOND: 1_000,
    DurationLabel.ONE_MINUTE: 60_000,
    DurationLabel.ONE_HOUR: 3_600_000,
    DurationLabel.ONE_DAY: 86_400_000,
    DurationLabel.ONE_WEEK: 604_800_000,
    DurationLabel.ONE_MONTH: 2_592_000_000,
    DurationLabel.THREE_MONTHS: 7_776_000_000,
    DurationLabel.SIX_MONTHS: 15_552_000_000,
    DurationLabel.ONE_YEAR: 31_536_000_000,
    DurationLabel.TWO_YEARS: 63_072_000_000,
    DurationLabel.THREE_YEARS: 94_608_000_000,
    DurationLabel.ALL_TIME: MAX_SAFE_INTEGER - 1,  # one below Forever so the two stay distinct
    DurationLabel.FOREVER: MAX_SAFE_INTEGER,
}

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class SettingId(str, Enum):
    """The only valid setting ids."""

    LOGIN_DIALOG = "Login Dialog"
    USER_EMAIL = "User Email"
    PROJECT_URL = "Project URL"
    PROJECT_API_KEY = "Project API Key"
    DARK_MODE = "Dark Mode"
    CONSOLE_LOGS = "Console Logs"
    INFO_POPUPS = "Info Popups"
    # Stored key keeps its historical spelling; renaming it would orphan existing rows.
    LOG_RETENTION_DURATION = "Log Rentention Duration"


SettingValue = bool | str

DEFAULT_SETTINGS: dict[SettingId, SettingValue] = {
    SettingId.LOGIN_DIALOG: False,
    SettingId.USER_EMAIL: "",
    SettingId.PROJECT_URL: "",
    SettingId.PROJECT_API_KEY: "",
    SettingId.DARK_MODE: True,
    SettingId.CONSOLE_LOGS: False,
    SettingId.INFO_POPUPS: False,
    SettingId.LOG_RETENTION_DURATION: DurationLabel.SIX_MONTHS.value,
}

# ---------------------------------------------------------------------------
# Logs and notifications
# ---------------------------------------------------------------------------


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


DEFAULT_NOTIFICATION_ICON = "info"
DEFAULT_NOTIFICATION_COLOR = "primary"
