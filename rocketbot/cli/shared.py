"""Shared utilities for rocketbot CLI commands."""

import sys

import click
from rich.console import Console

from rocketbot.config import BotSettings, ConfigError, load_settings

console = Console()


def settings_or_exit() -> BotSettings:
    """Load settings; print the problem and exit when they are incomplete."""
    try:
        return load_settings()
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        console.print("[dim]Set the variables in the environment or in .env[/dim]")
        sys.exit(1)


def fail(message: str):
    console.print(f"[red]{message}[/red]")
    raise click.exceptions.Exit(1)
