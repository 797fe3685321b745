"""Lifestyle exception hierarchy."""

from __future__ import annotations


class LifestyleError(Exception):
    """Base exception for all Lifestyle errors."""


class ConfigError(LifestyleError):
    """Raised when the configuration is invalid or cannot be read."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file does not exist."""


class StoreError(LifestyleError):
    """Raised when the underlying record store fails."""


class SchemaVersionError(StoreError):
    """Raised when the on-disk schema cannot be opened at this version."""


class LiveQueryError(StoreError):
    """Raised into a live view when re-evaluating its snapshot fails."""


class SettingError(LifestyleError):
    """Raised when a setting key is not recognized."""
