"""
Conversation core - enrichment, run polling and orchestration.
"""

from src.agents.enrichment import MessageEnricher, PassThroughEnricher, SoxContextEnricher, inject_context
from src.agents.poller import RunPoller
from src.agents.orchestrator import ConversationOrchestrator

__all__ = [
    "MessageEnricher",
    "PassThroughEnricher",
    "SoxContextEnricher",
    "inject_context",
    "RunPoller",
    "ConversationOrchestrator",
]
