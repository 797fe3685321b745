from __future__ import annotations

import logging
from pathlib import Path

import pytest

from lifestyle.core.store.database import LocalDatabase


@pytest.fixture
def db(tmp_path: Path) -> LocalDatabase:
    d = LocalDatabase(tmp_path / "test.db")
    d.open()
    yield d
    d.close()


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ~ at a temp dir and clear LIFESTYLE_* overrides."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "LIFESTYLE_CONFIG",
        "LIFESTYLE_DB_PATH",
        "LIFESTYLE_LOG_LEVEL",
        "LIFESTYLE_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture(autouse=True)
def _reset_lifestyle_logger():
    """Drop handlers configure_logging() installed so they don't outlive captured streams."""
    yield
    root = logging.getLogger("lifestyle")
    for handler in list(root.handlers):
        if handler.get_name() == "lifestyle":
            root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
