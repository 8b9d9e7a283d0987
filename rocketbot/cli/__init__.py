"""rocketbot CLI — command line interface."""

import click
from rocketbot import __version__
from .shared import console


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="rocketbot")
@click.pass_context
def cli(ctx):
    """rocketbot: Ollama chat bot for Rocket.Chat"""
    if ctx.invoked_subcommand is None:
        _show_help()


def _show_help():
    """Show all available commands."""
    console.print(f"[bold]rocketbot v{__version__}[/bold] - Ollama chat bot for Rocket.Chat\n")

    commands = [
        ("start", "Connect to Rocket.Chat and answer direct messages"),
        ("models", "List models available on the Ollama server"),
    ]
    for name, desc in commands:
        console.print(f"    [bold]rocketbot {name:10s}[/bold] {desc}")
    console.print()
    console.print("[dim]Run 'rocketbot <command> --help' for details on a specific command.[/dim]")


# Import all command modules (registers commands onto cli group)
from . import cmd_start  # noqa: E402, F401
from . import cmd_models  # noqa: E402, F401
