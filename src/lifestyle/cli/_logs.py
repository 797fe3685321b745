"""CLI commands: lifestyle logs list | add | sweep | watch."""

from __future__ import annotations

import asyncio
import json

import click
from rich.console import Console
from rich.table import Table

from lifestyle.core.constants import LogLevel

console = Console()

_LEVEL_STYLES = {
    LogLevel.DEBUG.value: "dim",
    LogLevel.INFO.value: "cyan",
    LogLevel.WARN.value: "yellow",
    LogLevel.ERROR.value: "red",
}


def _logs_table(logs, limit: int) -> Table:
    table = Table(title=f"Logs ({len(logs)})")
    table.add_column("Created", style="dim")
    table.add_column("Level")
    table.add_column("Label")
    for log in logs[:limit]:
        style = _LEVEL_STYLES.get(log.log_level)
        level = f"[{style}]{log.log_level}[/{style}]" if style else log.log_level
        table.add_row(log.created_at, level, log.label)
    return table


@click.group("logs")
def logs_group() -> None:
    """Inspect, add, and purge activity logs."""


@logs_group.command("list")
@click.option("--limit", default=50, show_default=True, help="Maximum logs to show")
@click.option("--json", "as_json", is_flag=True, default=False)
def logs_list(limit: int, as_json: bool) -> None:
    """Show logs, newest first."""
    from lifestyle.cli._store import run_with_db

    async def _list(db):
        return await db.list_logs()

    logs = run_with_db(_list, console)

    if as_json:
        click.echo(json.dumps([log.to_record() for log in logs[:limit]], indent=2))
        return
    if not logs:
        console.print("No logs.")
        return
    console.print(_logs_table(logs, limit))


@logs_group.command("add")
@click.argument("label")
@click.option(
    "--level",
    type=click.Choice([lvl.value for lvl in LogLevel]),
    default=LogLevel.INFO.value,
    show_default=True,
)
def logs_add(label: str, level: str) -> None:
    """Append one log entry."""
    from lifestyle.cli._store import run_with_db

    async def _add(db):
        return await db.add_log(label, level)

    log = run_with_db(_add, console)
    console.print(f"Added log [cyan]{log.id}[/cyan]")


@logs_group.command("sweep")
def logs_sweep() -> None:
    """Delete logs older than the retention setting."""
    from lifestyle.cli._store import run_with_db

    async def _sweep(db):
        return await db.delete_expired_logs()

    deleted = run_with_db(_sweep, console)
    console.print(f"Deleted {deleted} expired log(s).")


@logs_group.command("watch")
@click.option("--limit", default=20, show_default=True, help="Maximum logs per snapshot")
def logs_watch(limit: int) -> None:
    """Print the live log view until interrupted (Ctrl+C)."""
    from lifestyle.cli._store import run_with_db

    async def _watch(db):
        async for logs in db.live_logs():
            console.clear()
            console.print(_logs_table(logs, limit))

    try:
        run_with_db(_watch, console)
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\nStopped.")
