"""Application state — built once at startup and handed to every handler."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .context import ContextStore
from .locks import TurnLocks

if TYPE_CHECKING:
    from .channels.base import ChatChannel
    from .commands.registry import CommandRegistry
    from .llm.ollama import OllamaClient

logger = logging.getLogger("rocketbot.state")

DEFAULT_STATUS_MESSAGE = "Available"


@dataclass
class BotState:
    """Process-wide switches plus the conversation store.

    Only admin commands mutate `enabled` and `status_message`. Disabling
    drops every conversation context.
    """
    admins: frozenset[str] = frozenset()
    enabled: bool = True
    status_message: str = DEFAULT_STATUS_MESSAGE
    contexts: ContextStore = field(default_factory=ContextStore)

    def is_admin(self, username: Optional[str]) -> bool:
        return bool(username) and username in self.admins

    def enable(self, status_message: Optional[str] = None):
        self.enabled = True
        if status_message is not None:
            self.status_message = status_message
        logger.info(f"Bot enabled (status: {self.status_message})")

    def disable(self, status_message: Optional[str] = None):
        self.enabled = False
        if status_message is not None:
            self.status_message = status_message
        self.contexts.reset()
        logger.info(f"Bot disabled (status: {self.status_message})")


@dataclass
class Bot:
    """Everything a command handler or chat turn needs."""
    state: BotState
    channel: "ChatChannel"
    backend: "OllamaClient"
    registry: "CommandRegistry"
    locks: TurnLocks = field(default_factory=TurnLocks)

    @property
    def contexts(self) -> ContextStore:
        return self.state.contexts

    async def reply(self, room_id: str, text: str):
        await self.channel.send_message(room_id, text)
