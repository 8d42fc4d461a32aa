"""
Request/response models for the assistant endpoints

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(CamelModel):
    """
    Chat request from the browser client

    Both fields are optional at the schema level so a missing message is
    reported as 400 "Message is required" instead of a 422.
    """
    message: Optional[str] = None
    session_id: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"message": "Audit u1001 and u1002", "sessionId": "session-123"}
            ]
        },
    )


class ChatResponse(CamelModel):
    response: str
    thread_id: str
    run_id: str
    assistant_name: str


class NewThreadRequest(CamelModel):
    session_id: Optional[str] = None


class NewThreadResponse(CamelModel):
    thread_id: str
    session_id: str


class MessageItem(CamelModel):
    role: str
    content: str
    created_at: Optional[int] = None


class MessagesResponse(CamelModel):
    messages: List[MessageItem]


class AssistantSummary(CamelModel):
    key: str
    name: str
    description: str
    model: str
    endpoints: Dict[str, str] = Field(default_factory=dict)


class AssistantListResponse(CamelModel):
    assistants: List[AssistantSummary]


class AssistantInfoResponse(CamelModel):
    id: Optional[str] = None
    name: str
    description: str
    model: str
    temperature: Optional[float] = None
    tools: List[Dict[str, Any]] = Field(default_factory=list)
    endpoints: Dict[str, str] = Field(default_factory=dict)


class AssistantHealthResponse(CamelModel):
    status: str
    assistant_name: str
    assistant_id: Optional[str] = None
    model: str
    active_threads: int
    timestamp: str


class AssistantHealthSummary(CamelModel):
    key: str
    name: str
    configured: bool
    active_threads: int


class HealthResponse(CamelModel):
    """
    Global health check response

    Attributes:
        status: Service health status
        api_key_configured: Whether an OpenAI API key is present
        assistants_configured: Assistants with a remote id
        assistants_loaded: Assistants registered
        assistants: Per-assistant summary
        timestamp: ISO-8601 time of the check
    """
    status: str
    api_key_configured: bool
    assistants_configured: int
    assistants_loaded: int
    assistants: List[AssistantHealthSummary]
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
