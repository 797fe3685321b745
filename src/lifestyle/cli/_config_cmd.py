"""CLI commands: lifestyle config init | show."""

from __future__ import annotations

import json
import sys

import click
from rich.console import Console

console = Console()


@click.group("config")
def config_group() -> None:
    """View and create the Lifestyle configuration file."""


@config_group.command("init")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file")
def config_init(force: bool) -> None:
    """Write a config file populated with the defaults."""
    from lifestyle.core.config import LifestyleConfig, _config_file_path, save_config
    from lifestyle.core.constants import ExitCode
    from lifestyle.core.exceptions import ConfigError

    cfg_path = _config_file_path()
    if cfg_path.exists() and not force:
        console.print(f"[yellow]Config already exists:[/yellow] {cfg_path}")
        console.print("Use --force to overwrite.")
        sys.exit(1)

    try:
        written = save_config(LifestyleConfig().model_dump(), cfg_path)
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(ExitCode.CONFIG_ERROR)
    console.print(f"[green]Config written:[/green] {written}")


@config_group.command("show")
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON")
def config_show(as_json: bool) -> None:
    """Display the effective configuration (file plus environment overrides)."""
    from lifestyle.cli._store import load_cli_config

    cfg = load_cli_config(console)
    data = cfg.model_dump()
    data["db_path"] = str(cfg.db_path)

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    console.print(f"[bold]App title[/bold]: {data['app_title']}")
    console.print(f"[bold]Database[/bold]:  {data['db_path']}")
    console.print(
        f"[bold]Logging[/bold]:   level={data['logging']['level']} "
        f"format={data['logging']['format']}"
    )
