"""Models command."""

import asyncio

import httpx
from rich.table import Table

from . import cli
from .shared import console, fail, settings_or_exit


@cli.command()
def models():
    """List available and running models on the Ollama server."""
    from rocketbot.llm.ollama import LLMError, OllamaClient

    settings = settings_or_exit()
    client = OllamaClient(settings.ollama_url)

    async def _fetch():
        return await client.list_models(), await client.running_models()

    try:
        available, running = asyncio.run(_fetch())
    except (httpx.HTTPError, LLMError) as e:
        fail(f"Cannot reach Ollama at {settings.ollama_url}: {e}")

    sizes = {m.name: m.size_gb for m in running}

    table = Table(title=f"Ollama models ({settings.ollama_url})")
    table.add_column("Model", style="bold")
    table.add_column("Default")
    table.add_column("Loaded")

    for name in available:
        default = "[green]yes[/green]" if name == settings.default_model else ""
        loaded = f"{sizes[name]:.1f} GB" if name in sizes else ""
        table.add_row(name, default, loaded)

    console.print(table)
    if settings.default_model not in available:
        console.print(f"[yellow]Default model {settings.default_model} is not available on the server.[/yellow]")
