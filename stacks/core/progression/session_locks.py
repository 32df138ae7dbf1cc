"""
Per-session mutual exclusion.

Two concurrent answers (or an answer racing an edit) on the same session
must not interleave their read-modify-write of the cursor and transcript.
Locks are keyed by session id and dropped once nobody holds or waits on them.

Dependencies: asyncio
System role: In-process serialization of progression operations
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Hashable


class SessionLockRegistry:
    """Keyed asyncio locks with reference counting."""

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._waiters: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """
        Hold the lock for ``key`` for the duration of the block.

        Usage:
            async with session_locks.hold(session_id):
                ...
        """
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


session_locks = SessionLockRegistry()
