"""
Lifestyle — local persistence layer for the Lifestyle client application.

Stores settings, activity logs and notifications in an on-device SQLite
database, seeds default settings once, purges logs past their retention
window, and serves live views that re-emit whenever a table changes.

Package layout (src/lifestyle/):
  core/         — constants, config, logging, startup sequence
  core/store/   — schema registry, record store, seeding, retention, live views
  cli/          — Click CLI entry point
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
