"""
Test doubles for the remote thread/run service and helpers wiring them
into orchestrators and registries.
"""

import asyncio
from typing import Dict, List, Optional

from src.agents.enrichment import PassThroughEnricher, SoxContextEnricher
from src.agents.orchestrator import ConversationOrchestrator
from src.agents.poller import RunPoller
from src.assistants.definitions import AssistantDefinition
from src.assistants.registry import AssistantRegistry
from src.models.conversation import RunState, ThreadMessage


class FakeThreadsClient:
    """
    In-memory thread/run service.

    Every run walks through `run_statuses`; when it reaches "completed" an
    assistant message made of `reply_segments` is appended to the thread.
    """

    def __init__(self, run_statuses: Optional[List[str]] = None, reply_segments: Optional[List[str]] = None):
        self.run_statuses = run_statuses or ["queued", "in_progress", "completed"]
        self.reply_segments = reply_segments if reply_segments is not None else ["Audit ", "complete."]
        self.threads: Dict[str, List[ThreadMessage]] = {}
        self.runs: Dict[str, dict] = {}
        self.create_thread_calls = 0
        self.retrieve_calls = 0
        self.run_error_message: Optional[str] = None
        self.fail_on: Dict[str, Exception] = {}

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise self.fail_on[operation]

    async def create_thread(self) -> str:
        self._maybe_fail("create_thread")
        self.create_thread_calls += 1
        thread_id = f"thread_{self.create_thread_calls}"
        self.threads[thread_id] = []
        # Yield like a real network call so concurrent callers interleave
        await asyncio.sleep(0)
        return thread_id

    async def append_message(self, thread_id: str, role: str, content: str) -> None:
        self._maybe_fail("append_message")
        messages = self.threads[thread_id]
        messages.append(ThreadMessage(role=role, content=[content], created_at=len(messages) + 1))

    async def create_run(self, thread_id: str, assistant_id: str) -> str:
        self._maybe_fail("create_run")
        run_id = f"run_{len(self.runs) + 1}"
        self.runs[run_id] = {
            "thread_id": thread_id,
            "assistant_id": assistant_id,
            "statuses": list(self.run_statuses),
            "replied": False,
        }
        return run_id

    async def retrieve_run(self, thread_id: str, run_id: str) -> RunState:
        self._maybe_fail("retrieve_run")
        self.retrieve_calls += 1
        run = self.runs[run_id]
        statuses = run["statuses"]
        status = statuses.pop(0) if len(statuses) > 1 else statuses[0]
        if status == "completed" and not run["replied"]:
            run["replied"] = True
            if self.reply_segments:
                messages = self.threads[thread_id]
                messages.append(
                    ThreadMessage(role="assistant", content=list(self.reply_segments), created_at=len(messages) + 1)
                )
        return RunState(run_id=run_id, status=status, error_message=self.run_error_message)

    async def list_messages(self, thread_id: str, limit: Optional[int] = None, order: str = "desc") -> List[ThreadMessage]:
        self._maybe_fail("list_messages")
        messages = list(self.threads[thread_id])
        if order == "desc":
            messages.reverse()
        if limit is not None:
            messages = messages[:limit]
        return messages

    async def has_messages(self, thread_id: str) -> bool:
        return bool(self.threads[thread_id])


async def no_sleep(seconds: float) -> None:
    return None


def make_orchestrator(threads, enricher=None, max_attempts=5, turn_wait_timeout=5.0) -> ConversationOrchestrator:
    poller = RunPoller(retrieve_run=threads.retrieve_run, max_attempts=max_attempts, interval=0, sleep=no_sleep)
    return ConversationOrchestrator(
        threads=threads,
        poller=poller,
        enricher=enricher,
        turn_wait_timeout=turn_wait_timeout,
    )


SOX_DEFINITION = AssistantDefinition(
    name="SOX Compliance Auditor",
    description="Senior internal auditor specializing in SOX compliance and control testing",
    model="gpt-4-turbo-preview",
    temperature=0.1,
    tools=[{"type": "code_interpreter"}],
    endpoints={
        "base": "/api/assistants/sox-auditor",
        "chat": "/api/assistants/sox-auditor/chat",
        "health": "/api/assistants/sox-auditor/health",
    },
)

BIG4_DEFINITION = AssistantDefinition(
    name="Big 4 External Auditor",
    description="Big 4 external auditor specializing in SOX workpaper review and risk assessment",
    model="gpt-4-turbo-preview",
    endpoints={
        "base": "/api/assistants/big4-reviewer",
        "chat": "/api/assistants/big4-reviewer/chat",
    },
)


def build_test_registry(threads, data_dir, sox_id="asst_sox", big4_id=None) -> AssistantRegistry:
    registry = AssistantRegistry()

    async def register_all():
        async def sox_provision():
            return sox_id

        async def big4_provision():
            return big4_id

        await registry.register(
            "sox-auditor",
            definition=SOX_DEFINITION,
            orchestrator=make_orchestrator(threads, SoxContextEnricher(data_dir)),
            provision=sox_provision,
        )
        await registry.register(
            "big4-reviewer",
            definition=BIG4_DEFINITION,
            orchestrator=make_orchestrator(threads, PassThroughEnricher()),
            provision=big4_provision,
        )

    asyncio.run(register_all())
    return registry
