"""
Threads client - the remote completion-run service

Thin async wrapper over the OpenAI Assistants thread/message/run endpoints.
It converts SDK objects into the plain models in src.models.conversation so
the orchestration layer never touches SDK types.
"""

from typing import Callable, List, Optional

from openai import AsyncOpenAI

from src.llm.client import get_openai_client
from src.models.conversation import RunState, ThreadMessage


def _text_segments(message) -> List[str]:
    """Extract text segments of an SDK message, in order."""
    segments = []
    for block in message.content or []:
        if getattr(block, "type", None) == "text":
            segments.append(block.text.value)
    return segments


class ThreadsClient:
    """Remote thread/run operations used by the conversation orchestrator."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        client_factory: Callable[[], AsyncOpenAI] = get_openai_client,
    ):
        """
        Args:
            client: Pre-built client; when omitted the factory is called lazily
                so a missing API key surfaces per request, not at startup
            client_factory: Callable returning an AsyncOpenAI client
        """
        self._client = client
        self._client_factory = client_factory

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    async def create_thread(self) -> str:
        thread = await self.client.beta.threads.create()
        return thread.id

    async def append_message(self, thread_id: str, role: str, content: str) -> None:
        await self.client.beta.threads.messages.create(
            thread_id=thread_id,
            role=role,
            content=content,
        )

    async def create_run(self, thread_id: str, assistant_id: str) -> str:
        run = await self.client.beta.threads.runs.create(
            thread_id=thread_id,
            assistant_id=assistant_id,
        )
        return run.id

    async def retrieve_run(self, thread_id: str, run_id: str) -> RunState:
        run = await self.client.beta.threads.runs.retrieve(run_id=run_id, thread_id=thread_id)
        last_error = getattr(run, "last_error", None)
        return RunState(
            run_id=run.id,
            status=run.status,
            error_message=getattr(last_error, "message", None) if last_error else None,
        )

    async def list_messages(
        self,
        thread_id: str,
        limit: Optional[int] = None,
        order: str = "desc",
    ) -> List[ThreadMessage]:
        """
        List messages of a thread.

        Args:
            thread_id: Remote thread id
            limit: Page size (remote default when omitted)
            order: "desc" for newest first, "asc" for oldest first

        Returns:
            Messages in the requested order
        """
        kwargs = {"order": order}
        if limit is not None:
            kwargs["limit"] = limit
        page = await self.client.beta.threads.messages.list(thread_id=thread_id, **kwargs)
        return [
            ThreadMessage(
                role=message.role,
                content=_text_segments(message),
                created_at=message.created_at,
            )
            for message in page.data
        ]

    async def has_messages(self, thread_id: str) -> bool:
        """True when the thread holds at least one message."""
        messages = await self.list_messages(thread_id, limit=1)
        return len(messages) > 0
