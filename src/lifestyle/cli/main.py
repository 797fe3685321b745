"""
Lifestyle CLI entry point.

Commands:
  lifestyle init                 — seed settings and sweep expired logs
  lifestyle settings show        — list stored settings
  lifestyle settings set K V     — change one setting
  lifestyle logs list            — show recent logs, newest first
  lifestyle logs add LABEL       — append a log entry
  lifestyle logs sweep           — delete logs past the retention window
  lifestyle logs watch           — follow the live log view
  lifestyle db info              — database path, schema version, row counts
  lifestyle config init          — write a default config file
  lifestyle config show          — show the effective configuration
  lifestyle version              — show version
"""

from __future__ import annotations

import click
from rich.console import Console

from lifestyle import __version__

console = Console()


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", message="lifestyle %(version)s")
def cli() -> None:
    """Lifestyle — local settings, logs and notifications store."""
    from lifestyle.core.config import load_config
    from lifestyle.core.exceptions import ConfigError
    from lifestyle.core.logging import configure_logging

    # A broken config is reported by the commands that read it; `config init
    # --force` must still be able to replace it.
    try:
        log_config = load_config().logging
    except ConfigError:
        log_config = None
    configure_logging(log_config)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--json", "as_json", is_flag=True, default=False)
def init(as_json: bool) -> None:
    """Run the startup sequence: seed settings, then sweep expired logs."""
    from lifestyle.cli._store import cmd_init

    cmd_init(as_json=as_json, console=console)


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command()
def version() -> None:
    """Show version information."""
    console.print(f"lifestyle [bold]{__version__}[/bold]")


# ---------------------------------------------------------------------------
# Sub-groups
# ---------------------------------------------------------------------------

from lifestyle.cli._config_cmd import config_group  # noqa: E402
from lifestyle.cli._db import db_group  # noqa: E402
from lifestyle.cli._logs import logs_group  # noqa: E402
from lifestyle.cli._settings import settings_group  # noqa: E402

cli.add_command(config_group)
cli.add_command(db_group, "db")
cli.add_command(logs_group, "logs")
cli.add_command(settings_group, "settings")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
