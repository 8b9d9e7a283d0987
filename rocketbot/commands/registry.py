"""Command registry — `!name` commands and their handlers."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

if TYPE_CHECKING:
    from ..channels.base import IncomingMessage
    from ..state import Bot

logger = logging.getLogger("rocketbot.commands.registry")

COMMAND_PREFIX = "!"
ADMIN_ONLY_SUFFIX = " _(admin only)_"
ADMIN_ONLY_NOTICE = "This command can be used only by admins user"

# handler(bot, message, args); args[0] is the command key itself
Handler = Callable[["Bot", "IncomingMessage", list[str]], Awaitable[None]]
Predicate = Callable[["Bot", "IncomingMessage"], bool]


def is_admin(bot: "Bot", message: "IncomingMessage") -> bool:
    return bot.state.is_admin(message.username)


def require_admin(handler: Handler, is_allowed: Predicate = is_admin) -> Handler:
    """Wrap `handler` so it only runs when `is_allowed` says so.

    Rejected callers get a notice in the room; the handler is not called.
    """
    async def guarded(bot: "Bot", message: "IncomingMessage", args: list[str]):
        if not is_allowed(bot, message):
            logger.info(f"Rejected {args[0] if args else '?'} from non-admin {message.username}")
            await bot.reply(message.room_id, ADMIN_ONLY_NOTICE)
            return
        await handler(bot, message, args)

    guarded.__name__ = getattr(handler, "__name__", "guarded")
    guarded.__doc__ = getattr(handler, "__doc__", None)
    return guarded


@dataclass
class Command:
    key: str                # '!' + name
    name: str
    description: str        # as shown by !help
    handler: Handler        # composed handler, what the dispatcher calls
    original: Handler       # handler as registered, before any wrapping
    admin: bool = False
    exclusive: bool = False # run while no conversation turn is in flight


class CommandRegistry:
    """Manages the commands available to the dispatcher.

    Registration happens once at startup. Registering a name twice
    overwrites the earlier entry.
    """

    def __init__(self, prefix: str = COMMAND_PREFIX):
        self.prefix = prefix
        self._commands: dict[str, Command] = {}

    def register(
        self,
        name: str,
        description: str,
        handler: Handler,
        admin: bool = False,
        exclusive: bool = False,
    ) -> Command:
        """Register a command handler under `prefix + name`."""
        key = self.prefix + name
        if key in self._commands:
            logger.warning(f"Command {key} registered twice, overwriting")

        composed = require_admin(handler) if admin else handler
        command = Command(
            key=key,
            name=name,
            description=description + (ADMIN_ONLY_SUFFIX if admin else ""),
            handler=composed,
            original=handler,
            admin=admin,
            exclusive=exclusive,
        )
        self._commands[key] = command
        logger.debug(f"Registered command: {name}")
        return command

    def lookup(self, key: str) -> Optional[Command]:
        """Get a command by key (including the prefix)."""
        return self._commands.get(key)

    def list(self) -> list[tuple[str, str]]:
        """(key, description) pairs in registration order."""
        return [(c.key, c.description) for c in self._commands.values()]

    def __contains__(self, key: str) -> bool:
        return key in self._commands

    def __len__(self) -> int:
        return len(self._commands)
