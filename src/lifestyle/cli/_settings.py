"""CLI commands: lifestyle settings show | set."""

from __future__ import annotations

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from lifestyle.core.constants import (
    DEFAULT_SETTINGS,
    DurationLabel,
    ExitCode,
    SettingId,
    SettingValue,
)

console = Console()

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_setting_value(setting_id: SettingId, raw: str) -> SettingValue:
    """Coerce a command-line string to the type of *setting_id*'s default."""
    if setting_id is SettingId.LOG_RETENTION_DURATION:
        try:
            return DurationLabel(raw).value
        except ValueError:
            choices = ", ".join(d.value for d in DurationLabel)
            raise click.BadParameter(f"expected one of: {choices}") from None
    if isinstance(DEFAULT_SETTINGS[setting_id], bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise click.BadParameter(f"expected a boolean, got {raw!r}")
    return raw


@click.group("settings")
def settings_group() -> None:
    """Show and change stored settings."""


@settings_group.command("show")
@click.option("--json", "as_json", is_flag=True, default=False)
def settings_show(as_json: bool) -> None:
    """List every stored setting."""
    from lifestyle.cli._store import run_with_db

    async def _list(db):
        return await db.list_settings()

    settings = sorted(run_with_db(_list, console), key=lambda s: s.id)

    if as_json:
        click.echo(json.dumps({s.id: s.value for s in settings}, indent=2))
        return

    if not settings:
        console.print("No settings stored. Run [cyan]lifestyle init[/cyan] first.")
        return

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for s in settings:
        table.add_row(s.id, str(s.value))
    console.print(table)


@settings_group.command("set")
@click.argument("key", type=click.Choice([s.value for s in SettingId]))
@click.argument("value")
def settings_set(key: str, value: str) -> None:
    """Change the value of one setting."""
    from lifestyle.cli._store import run_with_db

    setting_id = SettingId(key)
    try:
        parsed = parse_setting_value(setting_id, value)
    except click.BadParameter as exc:
        console.print(f"[red]Invalid value for {key}:[/red] {exc.message}")
        sys.exit(ExitCode.ERROR)

    async def _set(db):
        return await db.set_setting(setting_id, parsed)

    setting = run_with_db(_set, console)
    console.print(f"[green]{setting.id}[/green] = {setting.value}")
