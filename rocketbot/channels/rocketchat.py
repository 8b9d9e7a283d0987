"""Rocket.Chat channel adapter.

REST (httpx) for login, posting messages, presence and attachment
downloads; the realtime DDP websocket for receiving messages and the
typing indicator.
"""

import itertools
import json
import logging
from typing import AsyncIterator, Optional

import httpx
import websockets

from .base import Attachment, ChatChannel, IncomingMessage

logger = logging.getLogger("rocketbot.rocketchat")

MY_MESSAGES = "__my_messages__"


class RocketChatError(Exception):
    """Login or realtime protocol failure."""
    pass


def parse_stream_message(fields: dict) -> Optional[IncomingMessage]:
    """Build an IncomingMessage from a `stream-room-messages` event.

    Returns None for system messages (joins, topic changes, ...) and for
    events that do not carry a message document.
    """
    args = fields.get("args") or []
    if not args or not isinstance(args[0], dict):
        return None
    doc = args[0]
    meta = args[1] if len(args) > 1 and isinstance(args[1], dict) else {}

    if doc.get("t"):
        return None

    user = doc.get("u") or {}
    attachments = [
        Attachment(
            image_type=a.get("image_type"),
            image_url=a.get("image_url"),
            description=a.get("description") or "",
        )
        for a in (doc.get("attachments") or [])
        if isinstance(a, dict)
    ]
    return IncomingMessage(
        id=doc.get("_id", ""),
        room_id=doc.get("rid", ""),
        text=doc.get("msg") or "",
        user_id=user.get("_id", ""),
        username=user.get("username", ""),
        room_type=meta.get("roomType", ""),
        attachments=attachments,
    )


class RocketChatChannel(ChatChannel):
    """Rocket.Chat bot account."""

    def __init__(self, base_url: str, ws_url: str, username: str, password: str):
        self.base_url = base_url.rstrip("/")
        self.ws_url = ws_url
        self.username = username
        self._password = password
        self._http: Optional[httpx.AsyncClient] = None
        self._ws = None
        self._user_id: Optional[str] = None
        self._auth_token: Optional[str] = None
        self._ids = itertools.count(1)

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    # ── Connection ─────────────────────────────────────────────

    async def login(self):
        """Log in over REST and keep the auth headers for later calls."""
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=30)
        resp = await self._http.post(
            "/api/v1/login",
            json={"user": self.username, "password": self._password},
        )
        resp.raise_for_status()
        data = resp.json().get("data") or {}
        if "authToken" not in data or "userId" not in data:
            raise RocketChatError(f"Login response without credentials: {resp.text[:200]}")

        self._auth_token = data["authToken"]
        self._user_id = data["userId"]
        self._http.headers.update({
            "X-Auth-Token": self._auth_token,
            "X-User-Id": self._user_id,
        })
        logger.info(f"Logged in to {self.base_url} as {self.username} (userId: {self._user_id})")

    async def connect(self):
        """Open the realtime socket and subscribe to our messages."""
        if not self._auth_token:
            await self.login()

        self._ws = await websockets.connect(self.ws_url)
        await self._send_ddp({"msg": "connect", "version": "1", "support": ["1"]})
        await self._send_ddp({
            "msg": "method",
            "method": "login",
            "id": self._next_id(),
            "params": [{"resume": self._auth_token}],
        })
        await self._send_ddp({
            "msg": "sub",
            "id": self._next_id(),
            "name": "stream-room-messages",
            "params": [MY_MESSAGES, False],
        })
        logger.info("Subscribed to room messages")

    async def close(self):
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def _next_id(self) -> str:
        return str(next(self._ids))

    async def _send_ddp(self, frame: dict):
        if self._ws is None:
            raise RocketChatError("Realtime connection is not open")
        await self._ws.send(json.dumps(frame))

    async def listen(self) -> AsyncIterator[IncomingMessage]:
        if self._ws is None:
            await self.connect()

        async for raw in self._ws:
            try:
                frame = json.loads(raw)
            except ValueError:
                logger.warning(f"Ignoring non-JSON frame: {str(raw)[:100]}")
                continue

            kind = frame.get("msg")
            if kind == "ping":
                await self._send_ddp({"msg": "pong"})
            elif kind == "changed" and frame.get("collection") == "stream-room-messages":
                message = parse_stream_message(frame.get("fields") or {})
                if message is not None:
                    yield message
            elif kind == "result" and frame.get("error"):
                logger.error(f"DDP method {frame.get('id')} failed: {frame['error']}")
            elif kind in ("nosub", "failed"):
                raise RocketChatError(f"Realtime subscription failed: {frame}")

    # ── Outbound ───────────────────────────────────────────────

    async def send_message(self, room_id: str, text: str):
        try:
            resp = await self._http.post(
                "/api/v1/chat.sendMessage",
                json={"message": {"rid": room_id, "msg": text}},
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Error sending message to {room_id}: {e}")

    async def set_typing(self, room_id: str, typing: bool):
        try:
            await self._send_ddp({
                "msg": "method",
                "method": "stream-notify-room",
                "id": self._next_id(),
                "params": [f"{room_id}/typing", self.username, typing],
            })
        except (RocketChatError, websockets.ConnectionClosed) as e:
            logger.debug(f"Typing indicator failed for {room_id}: {e}")

    async def set_status(self, status: str, message: Optional[str] = None):
        body = {"status": status, "userId": self._user_id}
        if message is not None:
            body["message"] = message
        try:
            resp = await self._http.post("/api/v1/users.setStatus", json=body)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Error setting status {status}: {e}")

    async def fetch_attachment(self, url: str) -> bytes:
        resp = await self._http.get(url)
        resp.raise_for_status()
        return resp.content
