"""Transport-neutral chat channel interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

DIRECT_ROOM = "d"


@dataclass
class Attachment:
    image_type: Optional[str]       # media type, e.g. 'image/png'
    image_url: Optional[str]        # server-relative download path
    description: str = ""


@dataclass
class IncomingMessage:
    id: str
    room_id: str
    text: str
    user_id: str
    username: str
    room_type: str = DIRECT_ROOM
    attachments: list[Attachment] = field(default_factory=list)

    @property
    def is_direct(self) -> bool:
        return self.room_type == DIRECT_ROOM

    @property
    def is_command(self) -> bool:
        return len(self.text) >= 1 and self.text[0] == "!"


class ChatChannel(ABC):
    """Abstract base class for chat backends."""

    @property
    @abstractmethod
    def user_id(self) -> Optional[str]:
        """The bot's own user id, known after login."""
        ...

    @abstractmethod
    async def send_message(self, room_id: str, text: str):
        """Post a text message to a room."""
        ...

    @abstractmethod
    async def set_typing(self, room_id: str, typing: bool):
        """Show or hide the 'composing' indicator."""
        ...

    @abstractmethod
    async def fetch_attachment(self, url: str) -> bytes:
        """Download an attachment payload."""
        ...

    @abstractmethod
    async def set_status(self, status: str, message: Optional[str] = None):
        """Update the bot's presence ('online', 'offline', ...)."""
        ...

    @abstractmethod
    def listen(self) -> AsyncIterator[IncomingMessage]:
        """Yield inbound messages until the connection closes."""
        ...
