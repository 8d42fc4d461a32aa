"""
Conversation Orchestrator - one user message in, one assistant reply out

converse() runs these steps strictly in order:
    resolve session → first-turn check → enrich → append user turn →
    start run → poll to completion → read newest message

A failure at any step aborts the call. Nothing is rolled back: a user turn
already appended stays in the thread even if the run then fails.
"""

import asyncio
from typing import List, Optional

from loguru import logger

from src.agents.enrichment import MessageEnricher, PassThroughEnricher
from src.agents.poller import RunPoller
from src.config.constants import TURN_WAIT_TIMEOUT_MESSAGE
from src.llm.threads import ThreadsClient
from src.memory.locks import KeyedLocks, LockWaitTimeout
from src.memory.session_store import SessionStore
from src.models.conversation import ConversationReply, ThreadMessage
from src.utils.errors import RunTimeoutError


USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


class ConversationOrchestrator:
    """
    Drives conversations for one assistant.

    Composition instead of per-assistant subclasses: the only thing that
    varies between assistants is the enricher and the poll ceiling.
    """

    def __init__(
        self,
        threads: ThreadsClient,
        poller: RunPoller,
        enricher: Optional[MessageEnricher] = None,
        sessions: Optional[SessionStore] = None,
        history_limit: int = 100,
        turn_wait_timeout: Optional[float] = None,
    ):
        """
        Args:
            turn_wait_timeout: Seconds a message waits for the previous turn
                of its session to finish (defaults to the poll budget,
                max_attempts × interval)
        """
        self.threads = threads
        self.poller = poller
        self.enricher = enricher or PassThroughEnricher()
        self.sessions = sessions or SessionStore(threads.create_thread)
        self.history_limit = history_limit
        if turn_wait_timeout is None:
            turn_wait_timeout = poller.max_attempts * poller.interval
        self.turn_wait_timeout = turn_wait_timeout
        self._turn_locks = KeyedLocks()

    async def converse(self, assistant_id: str, session_id: str, message: str) -> ConversationReply:
        """
        Send a message to an assistant within a session and wait for its reply.

        Calls for the same session are serialized so turns and runs of two
        requests never interleave in one thread. A call that finds the session
        busy waits at most turn_wait_timeout, and the time it waited is taken
        off its own poll attempts, so it stays within one poll budget overall.

        Args:
            assistant_id: Remote assistant id
            session_id: Caller-supplied session id
            message: Raw user message

        Returns:
            ConversationReply (response is "" when the newest message is not
            from the assistant)

        Raises:
            RunTimeoutError: Previous turn still running after the wait, or
                this run still pending after the poll budget
        """
        if self._turn_locks.locked(session_id):
            logger.info(f"⏳ Session {session_id} busy, waiting up to {self.turn_wait_timeout}s")
        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            async with self._turn_locks.hold(session_id, timeout=self.turn_wait_timeout):
                max_attempts = self._remaining_attempts(loop.time() - started)
                return await self._converse(assistant_id, session_id, message, max_attempts)
        except LockWaitTimeout:
            logger.error(f"Session {session_id} still busy after {self.turn_wait_timeout}s")
            raise RunTimeoutError(TURN_WAIT_TIMEOUT_MESSAGE) from None

    def _remaining_attempts(self, waited: float) -> int:
        """Poll attempts left after spending `waited` seconds on the session lock"""
        if waited <= 0 or self.poller.interval <= 0:
            return self.poller.max_attempts
        return max(1, self.poller.max_attempts - int(waited // self.poller.interval))

    async def _converse(self, assistant_id: str, session_id: str, message: str, max_attempts: int) -> ConversationReply:
        thread_id = await self.sessions.resolve(session_id)

        is_first_turn = not await self.threads.has_messages(thread_id)
        content = await self.enricher.enrich(message, is_first_turn)

        await self.threads.append_message(thread_id, USER_ROLE, content)

        run_id = await self.threads.create_run(thread_id, assistant_id)
        logger.info(f"🏃 Started run: {run_id} for thread: {thread_id}")

        await self.poller.wait_for_run(thread_id, run_id, max_attempts=max_attempts)

        messages = await self.threads.list_messages(thread_id, order="desc")
        return ConversationReply(response=_reply_text(messages), thread_id=thread_id, run_id=run_id)

    async def new_thread(self, session_id: str) -> str:
        """Start a fresh thread for a session, replacing any existing one."""
        return await self.sessions.reset(session_id)

    async def get_thread_messages(self, thread_id: str, limit: Optional[int] = None) -> List[ThreadMessage]:
        """Messages of a thread, oldest first."""
        # Newest page first, then flipped, so long threads show their latest turns
        messages = await self.threads.list_messages(
            thread_id,
            limit=limit or self.history_limit,
            order="desc",
        )
        return list(reversed(messages))

    def clear_session(self, session_id: str) -> bool:
        return self.sessions.clear(session_id)

    def active_thread_count(self) -> int:
        return self.sessions.count()


def _reply_text(messages_newest_first: List[ThreadMessage]) -> str:
    """Text of the newest message if the assistant wrote it, else ""."""
    if not messages_newest_first:
        return ""
    newest = messages_newest_first[0]
    if newest.role != ASSISTANT_ROLE:
        return ""
    return newest.text
