"""Dispatcher — routes each inbound message to a command or a chat turn.

For every message:

1. messages written by the bot itself are ignored;
2. only direct (one-to-one) rooms are processed;
3. text starting with `!` is tokenized and looked up in the registry;
4. anything else is an ordinary chat turn.

Turns in the same room run one at a time, in arrival order. Commands
flagged `exclusive` (enable/disable) wait until no turn is running in
any room. Handler failures are logged and turned into a notice in the
room; they never reach the event loop.
"""

import asyncio
import logging
from typing import Optional

from . import chat
from .channels.base import IncomingMessage
from .communication.errors import classify_error
from .state import Bot
from .tokenizer import tokenize

logger = logging.getLogger("rocketbot.dispatcher")


class Dispatcher:

    def __init__(self, bot: Bot):
        self.bot = bot
        self._tasks: set[asyncio.Task] = set()

    def accepts(self, message: IncomingMessage) -> bool:
        """Whether this message is for us at all."""
        if message.user_id == self.bot.channel.user_id:
            return False
        if not message.is_direct:
            logger.debug(f"Ignoring message in non-direct room {message.room_id} ({message.room_type})")
            return False
        return True

    def submit(self, message: IncomingMessage) -> Optional[asyncio.Task]:
        """Schedule handling of `message` without waiting for it.

        Tasks are created in arrival order, so the per-room lock hands
        turns out in that same order.
        """
        if not self.accepts(message):
            return None
        task = asyncio.create_task(self._handle(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def handle(self, message: IncomingMessage):
        """Process `message` and wait until it is done."""
        if not self.accepts(message):
            return
        await self._handle(message)

    async def drain(self):
        """Wait for every submitted message to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _handle(self, message: IncomingMessage):
        logger.info(f"[{message.room_type}] {message.username} ({message.room_id}): {message.text[:100]}")

        if not message.is_command:
            async with self.bot.locks.conversation(message.room_id):
                await self._guarded(message, chat.chat, self.bot, message)
            return

        args = tokenize(message.text)
        key = args[0] if args else message.text
        command = self.bot.registry.lookup(key)
        if command is None:
            await self._guarded(message, self.bot.reply, message.room_id, f"Command not found: {key}")
            return

        logger.debug(f"Command {args}")
        if command.exclusive:
            async with self.bot.locks.exclusive():
                await self._guarded(message, command.handler, self.bot, message, args)
        else:
            async with self.bot.locks.conversation(message.room_id):
                await self._guarded(message, command.handler, self.bot, message, args)

    async def _guarded(self, message: IncomingMessage, fn, *args):
        try:
            await fn(*args)
        except Exception as e:
            logger.error(f"Error handling message in room {message.room_id}: {e}", exc_info=True)
            try:
                await self.bot.reply(message.room_id, classify_error(e))
            except Exception as send_error:
                logger.error(f"Could not report error to room {message.room_id}: {send_error}")
