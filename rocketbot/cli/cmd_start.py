"""Start command."""

import asyncio
import click

from . import cli
from .shared import console, settings_or_exit


@cli.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def start(debug):
    """Start the bot."""
    from rocketbot.main import run, setup_logging

    settings = settings_or_exit()
    setup_logging(settings.log_path, debug=debug or settings.debug)

    console.print(f"[bold blue]Starting rocketbot as {settings.rocketchat_user}@{settings.rocketchat_url}...[/bold blue]")
    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        console.print("[dim]Interrupted.[/dim]")
