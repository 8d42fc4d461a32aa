"""
Assistants - definitions, provisioning and the runtime registry
"""

from src.assistants.definitions import AssistantDefinition, load_definition
from src.assistants.registry import AssistantHandle, AssistantRegistry
from src.assistants.bootstrap import build_registry

__all__ = [
    "AssistantDefinition",
    "load_definition",
    "AssistantHandle",
    "AssistantRegistry",
    "build_registry",
]
