"""
Conversation models shared by the session, polling and orchestration layers.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ThreadMessage:
    """One turn in a remote thread."""
    role: str
    content: List[str] = field(default_factory=list)
    created_at: Optional[int] = None

    @property
    def text(self) -> str:
        """All text segments concatenated in order."""
        return "".join(self.content)


@dataclass
class RunState:
    """Status snapshot of a remote run."""
    run_id: str
    status: str
    error_message: Optional[str] = None


@dataclass
class ConversationReply:
    """Result of one converse() call."""
    response: str
    thread_id: str
    run_id: str
