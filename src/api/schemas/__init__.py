"""
API schemas for request/response models
"""

from src.api.schemas.assistants import (
    AssistantHealthResponse,
    AssistantHealthSummary,
    AssistantInfoResponse,
    AssistantListResponse,
    AssistantSummary,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    MessageItem,
    MessagesResponse,
    NewThreadRequest,
    NewThreadResponse,
)

__all__ = [
    "AssistantHealthResponse",
    "AssistantHealthSummary",
    "AssistantInfoResponse",
    "AssistantListResponse",
    "AssistantSummary",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageItem",
    "MessagesResponse",
    "NewThreadRequest",
    "NewThreadResponse",
]
