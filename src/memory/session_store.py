"""
Session store - maps caller-supplied session ids to remote thread ids.

State lives for the process lifetime only. A restart drops every mapping and
the next message for a session silently starts a fresh thread.

Thread creation is serialized per session key: two concurrent first messages
for the same session share one thread instead of racing to create two.
Different sessions never wait on each other.
"""

from typing import Awaitable, Callable, Dict, Optional

from loguru import logger

from src.memory.locks import KeyedLocks


class SessionStore:
    """Process-local session → thread mapping"""

    def __init__(self, create_thread: Callable[[], Awaitable[str]]):
        """
        Args:
            create_thread: Coroutine function creating a remote thread and
                returning its id
        """
        self._create_thread = create_thread
        self._threads: Dict[str, str] = {}
        self._locks = KeyedLocks()

    def get(self, session_id: str) -> Optional[str]:
        """Cached thread id for a session, without creating one."""
        return self._threads.get(session_id)

    async def resolve(self, session_id: str) -> str:
        """
        Get the thread for a session, creating it on first use.

        Args:
            session_id: Opaque caller-supplied session id

        Returns:
            Remote thread id (identical across calls until clear())
        """
        thread_id = self._threads.get(session_id)
        if thread_id is not None:
            return thread_id

        async with self._locks.hold(session_id):
            # Another request may have created it while we waited
            thread_id = self._threads.get(session_id)
            if thread_id is None:
                thread_id = await self._create_thread()
                self._threads[session_id] = thread_id
                logger.info(f"🧵 Created new thread: {thread_id} for session: {session_id}")
            return thread_id

    async def reset(self, session_id: str) -> str:
        """
        Replace the session's thread with a freshly created one.

        Returns:
            The new thread id
        """
        async with self._locks.hold(session_id):
            thread_id = await self._create_thread()
            self._threads[session_id] = thread_id
            logger.info(f"🧵 Created new thread: {thread_id} for session: {session_id}")
            return thread_id

    def clear(self, session_id: str) -> bool:
        """
        Drop the session's mapping.

        Returns:
            True if a mapping existed
        """
        existed = self._threads.pop(session_id, None) is not None
        if existed:
            logger.debug(f"Cleared thread mapping for session: {session_id}")
        return existed

    def count(self) -> int:
        """Number of live session mappings"""
        return len(self._threads)

    def __len__(self) -> int:
        return self.count()
