"""Allow `python -m rocketbot`."""

from rocketbot.cli import cli

cli()
