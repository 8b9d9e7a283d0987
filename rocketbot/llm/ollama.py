"""Ollama client — chat completion and model listing over the REST API.

Connects to Ollama's REST API (default: http://localhost:11434).
Chat requests are non-streaming: one request, one complete reply.
Failed calls are raised to the caller, never retried here.
"""

import httpx
import logging
from dataclasses import dataclass
from typing import Optional

from ..context import MessageRecord

logger = logging.getLogger("rocketbot.llm.ollama")


# ════════════════════════════════════════════════════════
# LLM Exception Hierarchy. HTTP failures surface as
# httpx errors, everything else as LLMError.
# ════════════════════════════════════════════════════════

class LLMError(Exception):
    """Base class for inference backend errors."""
    pass

class LLMBadResponseError(LLMError):
    """Backend answered 2xx but the payload is not what we expect."""
    pass


@dataclass
class RunningModel:
    name: str
    size: int = 0       # bytes

    @property
    def size_gb(self) -> float:
        return self.size / 1_000_000_000


class OllamaClient:
    """Thin async client for the endpoints the bot uses."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout  # None = wait for the model as long as it takes

    async def chat(self, model: str, messages: list[MessageRecord]) -> MessageRecord:
        """Send the full history and return the assistant reply."""
        payload = {
            "model": model,
            "stream": False,
            "messages": [m.to_dict() for m in messages],
        }
        logger.debug(f"POST /api/chat model={model} messages={len(messages)}")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(f"{self.base_url}/api/chat", json=payload)
            resp.raise_for_status()
            data = _json(resp)

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict) or "role" not in message:
            raise LLMBadResponseError(f"No message in /api/chat response: {str(data)[:200]}")
        return MessageRecord.from_dict(message)

    async def list_models(self) -> list[str]:
        """Names of the models pulled on the server (/api/tags)."""
        async with httpx.AsyncClient(timeout=30) as client:
            resp = await client.get(f"{self.base_url}/api/tags")
            resp.raise_for_status()
            data = _json(resp)
        return [m.get("name", "") for m in _models(data)]

    async def running_models(self) -> list[RunningModel]:
        """Models currently loaded in memory (/api/ps)."""
        async with httpx.AsyncClient(timeout=30) as client:
            resp = await client.get(f"{self.base_url}/api/ps")
            resp.raise_for_status()
            data = _json(resp)
        return [
            RunningModel(name=m.get("name", ""), size=int(m.get("size") or 0))
            for m in _models(data)
        ]

    async def has_model(self, name: str) -> bool:
        return name in await self.list_models()


def _json(resp: httpx.Response):
    try:
        return resp.json()
    except ValueError as e:
        raise LLMBadResponseError(f"Invalid JSON from {resp.request.url}: {e}") from e


def _models(data) -> list[dict]:
    if not isinstance(data, dict) or not isinstance(data.get("models"), list):
        raise LLMBadResponseError(f"No model list in response: {str(data)[:200]}")
    return [m for m in data["models"] if isinstance(m, dict)]


async def check_ollama_available(base_url: str = "http://localhost:11434") -> bool:
    """Check if Ollama server is running and reachable."""
    try:
        async with httpx.AsyncClient(timeout=5) as client:
            resp = await client.get(f"{base_url.rstrip('/')}/api/tags")
            return resp.status_code == 200
    except httpx.HTTPError:
        return False
