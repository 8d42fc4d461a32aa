"""
Per-key asyncio locks

A lock exists only while some task holds it or waits for it, so the table
never outgrows the number of in-flight requests.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional


class LockWaitTimeout(Exception):
    """The lock for a key was still taken when the wait timed out"""


class KeyedLocks:
    """One asyncio.Lock per key, dropped when the last user leaves"""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def hold(self, key: str, timeout: Optional[float] = None) -> AsyncIterator[None]:
        """
        Hold the lock for a key.

        Args:
            key: Lock key
            timeout: Seconds to wait when the lock is taken; None waits forever

        Raises:
            LockWaitTimeout: The lock was still taken after timeout seconds
        """
        lock = self._lock_for(key)
        self._users[key] = self._users.get(key, 0) + 1
        try:
            if timeout is None or not lock.locked():
                await lock.acquire()
            else:
                try:
                    await asyncio.wait_for(lock.acquire(), timeout)
                except asyncio.TimeoutError:
                    raise LockWaitTimeout(key) from None
            try:
                yield
            finally:
                lock.release()
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
