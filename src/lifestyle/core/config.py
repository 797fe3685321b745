"""Lifestyle configuration: Pydantic model, load, and save."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from lifestyle.core.constants import APP_TITLE, CONFIG_FILENAME, DB_FILENAME, LIFESTYLE_DIR_NAME
from lifestyle.core.exceptions import ConfigError, ConfigNotFoundError


def lifestyle_dir() -> Path:
    """Return the Lifestyle data directory (~/.lifestyle), creating it if needed."""
    d = Path.home() / LIFESTYLE_DIR_NAME
    d.mkdir(mode=0o700, parents=True, exist_ok=True)
    return d


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "text"  # "text" | "json"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v.lower() not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v.lower()


class DatabaseConfig(BaseModel):
    path: str = ""  # empty → use default


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


class LifestyleConfig(BaseModel):
    """Root Lifestyle configuration model."""

    app_title: str = APP_TITLE
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @property
    def db_path(self) -> Path:
        if self.database.path:
            return Path(self.database.path).expanduser()
        return lifestyle_dir() / DB_FILENAME


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def _config_file_path() -> Path:
    if env_path := os.environ.get("LIFESTYLE_CONFIG"):
        return Path(env_path)
    return lifestyle_dir() / CONFIG_FILENAME


def load_config(path: Path | None = None) -> LifestyleConfig:
    """
    Load LifestyleConfig from a TOML file, overlaid with environment variables.

    Priority (highest to lowest):
      1. Environment variables (LIFESTYLE_*)
      2. Config file (~/.lifestyle/config.toml)
      3. Model defaults

    The default config file is optional. An explicitly given *path* (or
    ``LIFESTYLE_CONFIG``) that does not exist raises ConfigNotFoundError.
    """
    import tomllib

    explicit = path is not None or "LIFESTYLE_CONFIG" in os.environ
    cfg_path = path or _config_file_path()

    data: dict[str, Any] = {}
    if cfg_path.exists():
        try:
            with open(cfg_path, "rb") as f:
                data = tomllib.load(f)
        except Exception as exc:
            raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc
    elif explicit:
        raise ConfigNotFoundError(f"Config file not found: {cfg_path}")

    _apply_env_overrides(data)

    try:
        return LifestyleConfig.model_validate(data)
    except Exception as exc:
        raise ConfigError(f"Invalid config at {cfg_path}: {exc}") from exc


def _apply_env_overrides(data: dict[str, Any]) -> None:
    """Overlay LIFESTYLE_* environment variables onto the parsed TOML data."""
    if db := os.environ.get("LIFESTYLE_DB_PATH"):
        data.setdefault("database", {})["path"] = db
    if level := os.environ.get("LIFESTYLE_LOG_LEVEL"):
        data.setdefault("logging", {})["level"] = level
    if fmt := os.environ.get("LIFESTYLE_LOG_FORMAT"):
        data.setdefault("logging", {})["format"] = fmt


def save_config(config_data: dict[str, Any], path: Path | None = None) -> Path:
    """Write config dict to TOML file with secure permissions (0600)."""
    import tomli_w

    cfg_path = path or _config_file_path()
    cfg_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    # Write atomically
    tmp_path = cfg_path.with_suffix(".tmp")
    try:
        with open(tmp_path, "wb") as f:
            tomli_w.dump(config_data, f)
        tmp_path.replace(cfg_path)
    except Exception as exc:
        tmp_path.unlink(missing_ok=True)
        raise ConfigError(f"Cannot write config to {cfg_path}: {exc}") from exc

    cfg_path.chmod(0o600)
    return cfg_path
