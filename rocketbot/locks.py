"""Turn serialization — one turn at a time per conversation.

Chat turns suspend while waiting for the inference backend. Without a
lock, two quick messages in the same room would interleave their history
pushes. `TurnLocks.conversation()` serializes turns per room while rooms
run concurrently; `TurnLocks.exclusive()` waits for every running turn to
finish and holds new ones back, for commands that reset shared state.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

logger = logging.getLogger("rocketbot.locks")


class TurnLocks:

    def __init__(self):
        self._rooms: dict[str, asyncio.Lock] = {}
        self._gate = asyncio.Condition()
        self._active = 0
        self._exclusive = False

    def _room_lock(self, room_id: str) -> asyncio.Lock:
        lock = self._rooms.get(room_id)
        if lock is None:
            lock = asyncio.Lock()
            self._rooms[room_id] = lock
        return lock

    @property
    def active(self) -> int:
        """Number of turns currently holding a conversation lock."""
        return self._active

    @asynccontextmanager
    async def conversation(self, room_id: str):
        """Hold the turn lock of one room."""
        async with self._room_lock(room_id):
            async with self._gate:
                await self._gate.wait_for(lambda: not self._exclusive)
                self._active += 1
            try:
                yield
            finally:
                async with self._gate:
                    self._active -= 1
                    self._gate.notify_all()

    @asynccontextmanager
    async def exclusive(self):
        """Hold every room at once."""
        async with self._gate:
            await self._gate.wait_for(lambda: not self._exclusive)
            self._exclusive = True
            await self._gate.wait_for(lambda: self._active == 0)
        logger.debug("Exclusive turn lock acquired")
        try:
            yield
        finally:
            async with self._gate:
                self._exclusive = False
                self._gate.notify_all()
