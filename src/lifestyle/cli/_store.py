"""Shared helpers for commands that open the local database."""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click
from rich.console import Console

from lifestyle.core.constants import ExitCode
from lifestyle.core.config import LifestyleConfig, load_config
from lifestyle.core.exceptions import ConfigError, LifestyleError
from lifestyle.core.store.database import LocalDatabase

T = TypeVar("T")


def load_cli_config(console: Console) -> LifestyleConfig:
    """Load the config for a command that needs it. A bad config exits with CONFIG_ERROR."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(ExitCode.CONFIG_ERROR)


def run_with_db(fn: Callable[[LocalDatabase], Awaitable[T]], console: Console) -> T:
    """Open the database, run *fn* on it, close it. Store errors exit non-zero."""
    db_path = load_cli_config(console).db_path

    async def _run() -> T:
        async with LocalDatabase(db_path) as db:
            return await fn(db)

    try:
        return asyncio.run(_run())
    except LifestyleError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(ExitCode.STORE_ERROR)


def cmd_init(as_json: bool, console: Console) -> None:
    from lifestyle.core.startup import run_startup

    report = run_with_db(run_startup, console)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "settings_initialized": report.settings_initialized,
                    "logs_deleted": report.logs_deleted,
                    "errors": report.errors,
                },
                indent=2,
            )
        )
    else:
        console.print(f"Settings initialized: {report.settings_initialized}")
        console.print(f"Expired logs deleted: {report.logs_deleted}")
        for phase, error in report.errors.items():
            console.print(f"[red]{phase} failed:[/red] {error}")

    if not report.ok:
        sys.exit(ExitCode.STORE_ERROR)
