"""Per-conversation context — selected model and message history."""

import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger("rocketbot.context")

DEFAULT_MODEL = "llama3.1:latest"


@dataclass
class MessageRecord:
    role: str           # 'user' or 'assistant'
    content: str
    images: list[str] = field(default_factory=list)  # base64 payloads

    def to_dict(self) -> dict:
        """Ollama wire shape; `images` is omitted when empty."""
        data = {"role": self.role, "content": self.content}
        if self.images:
            data["images"] = list(self.images)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "MessageRecord":
        return cls(
            role=data["role"],
            content=data.get("content") or "",
            images=list(data.get("images") or []),
        )


class ConversationContext:
    """State of a single conversation (one direct-message room).

    History is replayed in full to the inference backend on every turn;
    nothing here bounds its length.
    """

    def __init__(self, room_id: str, model: str = DEFAULT_MODEL):
        self.room_id = room_id
        self.model = model
        self.messages: list[MessageRecord] = []

    def push(self, record: MessageRecord):
        self.messages.append(record)

    def pop(self) -> Optional[MessageRecord]:
        """Remove and return the last record, None if history is empty."""
        if not self.messages:
            return None
        return self.messages.pop()

    def clear(self):
        """Drop the history, keep the model selection."""
        self.messages = []

    def set_model(self, model: str):
        self.model = model

    def to_payload(self) -> list[dict]:
        return [m.to_dict() for m in self.messages]

    def __repr__(self) -> str:
        return f"ConversationContext(room_id={self.room_id!r}, model={self.model!r}, messages={len(self.messages)})"


class ContextStore:
    """Keyed store of conversation contexts with explicit get-or-insert."""

    def __init__(self, default_model: str = DEFAULT_MODEL):
        self.default_model = default_model
        self._contexts: dict[str, ConversationContext] = {}

    def get(self, room_id: str) -> ConversationContext:
        """Return the context for `room_id`, creating a fresh one if absent."""
        ctx = self._contexts.get(room_id)
        if ctx is None:
            ctx = ConversationContext(room_id, model=self.default_model)
            self._contexts[room_id] = ctx
            logger.debug(f"Created context for room {room_id} (model={ctx.model})")
        return ctx

    def reset(self):
        """Drop every context."""
        count = len(self._contexts)
        self._contexts = {}
        logger.info(f"Context store reset ({count} conversations dropped)")

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._contexts

    def __len__(self) -> int:
        return len(self._contexts)
