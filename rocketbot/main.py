"""rocketbot — Main entry point."""

import asyncio
import logging
from typing import Optional

from .channels.rocketchat import RocketChatChannel
from .commands import CommandRegistry, register_builtin_commands
from .config import BotSettings, load_settings
from .context import ContextStore
from .dispatcher import Dispatcher
from .llm.ollama import OllamaClient, check_ollama_available
from .state import Bot, BotState

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("rocketbot")


def setup_logging(log_file: Optional[str] = None, debug: bool = False):
    """Console plus file logging, configured once per process."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]   # stderr (console)
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=logging.INFO, format=_log_format, handlers=handlers)
    if debug:
        logging.getLogger("rocketbot").setLevel(logging.DEBUG)


def build_bot(settings: BotSettings, channel) -> Bot:
    """Wire state, backend and commands around a channel."""
    registry = CommandRegistry()
    register_builtin_commands(registry)
    state = BotState(
        admins=settings.admins,
        contexts=ContextStore(default_model=settings.default_model),
    )
    backend = OllamaClient(settings.ollama_url, timeout=settings.ollama_timeout)
    return Bot(state=state, channel=channel, backend=backend, registry=registry)


async def serve(bot: Bot, dispatcher: Dispatcher):
    """Feed every inbound message to the dispatcher until the channel closes."""
    async for message in bot.channel.listen():
        dispatcher.submit(message)
    await dispatcher.drain()


async def run(settings: Optional[BotSettings] = None):
    """Start the bot and serve until the connection drops."""
    settings = settings or load_settings()

    channel = RocketChatChannel(
        base_url=settings.rocketchat_base_url,
        ws_url=settings.rocketchat_ws_url,
        username=settings.rocketchat_user,
        password=settings.rocketchat_password,
    )
    bot = build_bot(settings, channel)
    dispatcher = Dispatcher(bot)

    if not await check_ollama_available(settings.ollama_url):
        logger.warning(f"Ollama is not reachable at {settings.ollama_url}, chat turns will fail until it is.")

    try:
        await channel.login()
        await channel.connect()
        await channel.set_status("online", bot.state.status_message)
        logger.info(
            f"Connected and waiting for messages "
            f"({len(bot.registry)} commands, admins: {', '.join(sorted(bot.state.admins)) or 'none'})"
        )
        await serve(bot, dispatcher)
    finally:
        await channel.close()
        logger.info("rocketbot stopped.")


def main():
    """Entry point without the CLI wrapper."""
    settings = load_settings()
    setup_logging(settings.log_path, debug=settings.debug)
    asyncio.run(run(settings))


if __name__ == "__main__":
    main()
