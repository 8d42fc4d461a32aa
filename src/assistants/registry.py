"""
Assistant registry - configured assistants keyed by short name

Each entry couples the assistant's definition, its remote id (None when not
configured) and a dedicated ConversationOrchestrator, so session tables are
never shared between assistants.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterator, List, Optional

from loguru import logger

from src.agents.orchestrator import ConversationOrchestrator
from src.assistants.definitions import AssistantDefinition
from src.utils.errors import ConfigurationError, NotFoundError


@dataclass
class AssistantHandle:
    """One registered assistant"""
    key: str
    definition: AssistantDefinition
    orchestrator: ConversationOrchestrator
    assistant_id: Optional[str] = None

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def configured(self) -> bool:
        return bool(self.assistant_id)

    def require_assistant_id(self) -> str:
        if not self.assistant_id:
            raise ConfigurationError(f"{self.name} Assistant ID not configured")
        return self.assistant_id

    def public_metadata(self) -> Dict:
        """Listing fields; never includes credentials or instructions"""
        return {
            "key": self.key,
            "name": self.definition.name,
            "description": self.definition.description,
            "model": self.definition.model,
            "endpoints": dict(self.definition.endpoints),
        }


class AssistantRegistry:
    """Registered assistants in registration order"""

    def __init__(self):
        self._handles: Dict[str, AssistantHandle] = {}

    async def register(
        self,
        key: str,
        definition: AssistantDefinition,
        orchestrator: ConversationOrchestrator,
        provision: Callable[[], Awaitable[Optional[str]]],
    ) -> AssistantHandle:
        """
        Register an assistant.

        Args:
            key: Short name used in URLs
            definition: Static definition
            orchestrator: Orchestrator dedicated to this assistant
            provision: Idempotent find-or-create returning the remote id,
                or None when the assistant is not configured

        Returns:
            AssistantHandle
        """
        assistant_id = await provision()
        handle = AssistantHandle(
            key=key,
            definition=definition,
            orchestrator=orchestrator,
            assistant_id=assistant_id,
        )
        self._handles[key] = handle

        if handle.configured:
            logger.info(f"📦 Loaded assistant: {key} - {definition.name} ({assistant_id})")
        else:
            logger.warning(f"⚠️  Assistant {key} registered without a remote id - chat requests will fail")
        return handle

    def lookup(self, key: str) -> Optional[AssistantHandle]:
        return self._handles.get(key)

    def get(self, key: str) -> AssistantHandle:
        """Like lookup() but raises NotFoundError on a miss"""
        handle = self._handles.get(key)
        if handle is None:
            raise NotFoundError("Assistant not found")
        return handle

    def lookup_by_path_prefix(self, path: str) -> Optional[AssistantHandle]:
        """Find the assistant whose endpoints.base is a prefix of path"""
        for handle in self._handles.values():
            base = handle.definition.endpoints.get("base")
            if base and (path == base or path.startswith(base.rstrip("/") + "/")):
                return handle
        return None

    def list(self, configured_only: bool = True) -> List[Dict]:
        """Public metadata of registered assistants"""
        return [
            handle.public_metadata()
            for handle in self._handles.values()
            if handle.configured or not configured_only
        ]

    def handles(self) -> List[AssistantHandle]:
        return list(self._handles.values())

    def __iter__(self) -> Iterator[AssistantHandle]:
        return iter(self.handles())

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, key: str) -> bool:
        return key in self._handles
