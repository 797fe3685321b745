"""CLI commands: lifestyle db info."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

console = Console()


@click.group()
def db_group() -> None:
    """Inspect the local database."""


@db_group.command("info")
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON")
def db_info(as_json: bool) -> None:
    """Show the database file, its schema version and row counts per table.

    Opening the database applies any pending migrations; a database written
    by a newer build is reported and exits non-zero.
    """
    from lifestyle.cli._store import load_cli_config, run_with_db
    from lifestyle.core.store.database import LocalDatabase
    from lifestyle.core.store.schema import LATEST_SCHEMA_VERSION, SCHEMA

    db_path = load_cli_config(console).db_path
    if not db_path.exists():
        if as_json:
            click.echo(json.dumps({"exists": False, "path": str(db_path)}))
        else:
            console.print(f"No database at {db_path}")
            console.print("Run [cyan]lifestyle init[/cyan] to create it.")
        return

    async def _inspect(db: LocalDatabase) -> tuple[int, dict[str, int]]:
        counts = {table.name: await db.store.count(table.name) for table in SCHEMA}
        return db.store.schema_version(), counts

    version, counts = run_with_db(_inspect, console)
    size_kb = round(db_path.stat().st_size / 1024, 1)

    if as_json:
        payload = {
            "exists": True,
            "path": str(db_path),
            "schema_version": version,
            "latest_version": LATEST_SCHEMA_VERSION,
            "size_kb": size_kb,
            "tables": counts,
        }
        click.echo(json.dumps(payload, indent=2))
        return

    console.print(f"[bold]Database[/bold]: {db_path} ({size_kb} KB)")
    console.print(f"Schema: v{version}")
    table = Table("Table", "Rows")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)
