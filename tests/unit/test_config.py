"""Unit tests for lifestyle.core.config and lifestyle.core.logging."""

from __future__ import annotations

import json
import logging
import stat
from pathlib import Path

import pytest

from lifestyle.core.config import LifestyleConfig, LoggingConfig, load_config, save_config
from lifestyle.core.exceptions import ConfigError, ConfigNotFoundError
from lifestyle.core.logging import configure_logging


class TestLoadConfig:
    def test_defaults_without_file(self, isolated_home: Path) -> None:
        cfg = load_config()
        assert cfg.app_title == "Lifestyle"
        assert cfg.logging.level == "INFO"
        assert cfg.db_path == isolated_home / ".lifestyle" / "lifestyle.db"

    def test_explicit_missing_path_raises(self, isolated_home: Path) -> None:
        with pytest.raises(ConfigNotFoundError):
            load_config(isolated_home / "nope.toml")

    def test_reads_toml(self, isolated_home: Path) -> None:
        path = isolated_home / "config.toml"
        path.write_text('[database]\npath = "/tmp/x.db"\n\n[logging]\nlevel = "debug"\n')
        cfg = load_config(path)
        assert cfg.db_path == Path("/tmp/x.db")
        assert cfg.logging.level == "DEBUG"

    def test_env_overrides_file(self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = isolated_home / "config.toml"
        path.write_text('[logging]\nlevel = "ERROR"\n')
        monkeypatch.setenv("LIFESTYLE_CONFIG", str(path))
        monkeypatch.setenv("LIFESTYLE_LOG_LEVEL", "warning")
        monkeypatch.setenv("LIFESTYLE_DB_PATH", str(isolated_home / "env.db"))
        cfg = load_config()
        assert cfg.logging.level == "WARNING"
        assert cfg.db_path == isolated_home / "env.db"

    def test_invalid_level(self, isolated_home: Path) -> None:
        path = isolated_home / "config.toml"
        path.write_text('[logging]\nlevel = "LOUD"\n')
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path)

    def test_malformed_toml(self, isolated_home: Path) -> None:
        path = isolated_home / "config.toml"
        path.write_text("[logging\n")
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(path)


class TestSaveConfig:
    def test_round_trip_and_permissions(self, isolated_home: Path) -> None:
        data = LifestyleConfig(logging=LoggingConfig(format="json")).model_dump()
        path = save_config(data, isolated_home / "cfg" / "config.toml")
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert load_config(path).logging.format == "json"


class TestConfigureLogging:
    def test_json_lines(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(level="INFO", format="json"))
        logging.getLogger("lifestyle.test").info("hello %s", "world")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["message"] == "hello world"
        assert payload["level"] == "info"
        assert "timestamp" in payload
        assert payload["logger"] == "lifestyle.test"

    def test_json_includes_traceback(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(format="json"))
        try:
            raise ValueError("bad row")
        except ValueError:
            logging.getLogger("lifestyle.test").exception("sweep failed")
        payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert payload["message"] == "sweep failed"
        assert "ValueError: bad row" in payload["exception"]

    def test_text_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(format="text"))
        logging.getLogger("lifestyle.test").warning("disk %d%% full", 90)
        line = capsys.readouterr().err.strip().splitlines()[-1]
        assert "disk 90% full" in line
        assert "lifestyle.test" in line
        assert "warning" in line

    def test_reconfigure_replaces_handler(self) -> None:
        configure_logging()
        logger = configure_logging(LoggingConfig(level="DEBUG"))
        named = [h for h in logger.handlers if h.get_name() == "lifestyle"]
        assert len(named) == 1
        assert logger.level == logging.DEBUG
