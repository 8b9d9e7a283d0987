"""Fakes shared by the test modules."""

import asyncio
from typing import Optional

from rocketbot.channels.base import ChatChannel, IncomingMessage
from rocketbot.context import MessageRecord
from rocketbot.llm.ollama import RunningModel

BOT_USER_ID = "bot-id"


class FakeChannel(ChatChannel):
    """In-memory channel that records everything the bot does."""

    def __init__(self, inbound: Optional[list[IncomingMessage]] = None):
        self.sent: list[tuple[str, str]] = []
        self.typing: list[tuple[str, bool]] = []
        self.statuses: list[tuple[str, Optional[str]]] = []
        self.attachments: dict[str, bytes] = {}
        self.inbound = inbound or []

    @property
    def user_id(self) -> Optional[str]:
        return BOT_USER_ID

    async def send_message(self, room_id: str, text: str):
        self.sent.append((room_id, text))

    async def set_typing(self, room_id: str, typing: bool):
        self.typing.append((room_id, typing))

    async def fetch_attachment(self, url: str) -> bytes:
        if url not in self.attachments:
            raise FileNotFoundError(url)
        return self.attachments[url]

    async def set_status(self, status: str, message: Optional[str] = None):
        self.statuses.append((status, message))

    async def listen(self):
        for message in self.inbound:
            yield message

    def texts(self, room_id: Optional[str] = None) -> list[str]:
        return [t for r, t in self.sent if room_id is None or r == room_id]


class FakeBackend:
    """Stands in for OllamaClient; replies are scripted per call."""

    def __init__(self, models=None, running=None):
        self.models = models if models is not None else ["llama3.1:latest", "mistral:7b"]
        self.running = running if running is not None else []
        self.calls: list[tuple[str, list[MessageRecord]]] = []
        self.replies: list = []
        self.gate: Optional[asyncio.Event] = None

    async def chat(self, model: str, messages: list[MessageRecord]) -> MessageRecord:
        self.calls.append((model, list(messages)))
        if self.gate is not None:
            await self.gate.wait()
        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply
        return MessageRecord(role="assistant", content=f"reply {len(self.calls)}")

    async def list_models(self) -> list[str]:
        return list(self.models)

    async def running_models(self) -> list[RunningModel]:
        return list(self.running)

    async def has_model(self, name: str) -> bool:
        return name in self.models


def make_message(
    text: str,
    room_id: str = "room-1",
    username: str = "alice",
    user_id: str = "alice-id",
    room_type: str = "d",
    attachments=None,
) -> IncomingMessage:
    return IncomingMessage(
        id=f"msg-{text[:10]}",
        room_id=room_id,
        text=text,
        user_id=user_id,
        username=username,
        room_type=room_type,
        attachments=attachments or [],
    )


