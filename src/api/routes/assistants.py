"""
Assistant endpoints

One set of handlers serves every registered assistant; the {name} path
segment selects the assistant and its orchestrator.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from loguru import logger

from src.api.deps import get_registry, utc_timestamp
from src.api.schemas import (
    AssistantHealthResponse,
    AssistantInfoResponse,
    AssistantListResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    MessageItem,
    MessagesResponse,
    NewThreadRequest,
    NewThreadResponse,
)
from src.assistants.registry import AssistantRegistry
from src.utils.errors import AssistantServiceError, ValidationError, classify_upstream_error


router = APIRouter(prefix="/api/assistants", tags=["assistants"])

# Session used when the client does not send a sessionId
DEFAULT_SESSION_ID = "default"

ERROR_DESCRIPTIONS = {
    400: "Missing or invalid request field",
    401: "Upstream rejected the API key",
    404: "Assistant not found",
    429: "Upstream rate limit",
    500: "Run failure, timeout, missing configuration or other upstream error",
}


def error_responses(*status_codes: int) -> dict:
    """OpenAPI entries documenting the {"error": ...} body for the given statuses"""
    return {
        code: {"model": ErrorResponse, "description": ERROR_DESCRIPTIONS[code]}
        for code in status_codes
    }


@router.get("", response_model=AssistantListResponse)
async def list_assistants(registry: AssistantRegistry = Depends(get_registry)):
    """List assistants that have a remote id configured."""
    return {"assistants": registry.list(configured_only=True)}


@router.get("/{name}/info", response_model=AssistantInfoResponse, responses=error_responses(404))
async def assistant_info(name: str, registry: AssistantRegistry = Depends(get_registry)):
    handle = registry.get(name)
    definition = handle.definition
    return AssistantInfoResponse(
        id=handle.assistant_id,
        name=definition.name,
        description=definition.description,
        model=definition.model,
        temperature=definition.temperature,
        tools=definition.tools,
        endpoints=definition.endpoints,
    )


@router.post(
    "/{name}/chat",
    response_model=ChatResponse,
    responses=error_responses(400, 401, 404, 429, 500),
)
async def chat(
    name: str,
    body: Optional[ChatRequest] = None,
    registry: AssistantRegistry = Depends(get_registry),
):
    """
    Send a message to an assistant and wait for its reply.

    **Request:**
    ```json
    {"message": "Audit u1001 and u1002", "sessionId": "session-123"}
    ```

    **Errors:** 400 missing message, 404 unknown assistant, 401 invalid API
    key, 429 rate limited, 500 anything else (run failure, timeout, missing
    configuration).
    """
    if body is None or not body.message:
        raise ValidationError("Message is required")

    handle = registry.get(name)
    session_id = body.session_id or DEFAULT_SESSION_ID

    try:
        assistant_id = handle.require_assistant_id()
        reply = await handle.orchestrator.converse(assistant_id, session_id, body.message)
    except Exception as e:
        logger.exception(f"Error in {name} chat")
        raise classify_upstream_error(e) from e

    return ChatResponse(
        response=reply.response,
        thread_id=reply.thread_id,
        run_id=reply.run_id,
        assistant_name=handle.name,
    )


@router.get("/{name}/health", response_model=AssistantHealthResponse, responses=error_responses(404))
async def assistant_health(name: str, registry: AssistantRegistry = Depends(get_registry)):
    handle = registry.get(name)
    return AssistantHealthResponse(
        status="ok",
        assistant_name=handle.name,
        assistant_id=handle.assistant_id,
        model=handle.definition.model,
        active_threads=handle.orchestrator.active_thread_count(),
        timestamp=utc_timestamp(),
    )


@router.post(
    "/{name}/threads/new",
    response_model=NewThreadResponse,
    responses=error_responses(400, 404, 500),
)
async def new_thread(
    name: str,
    body: Optional[NewThreadRequest] = None,
    registry: AssistantRegistry = Depends(get_registry),
):
    """Start a fresh thread for a session, replacing its current one."""
    if body is None or not body.session_id:
        raise ValidationError("Session ID is required")

    handle = registry.get(name)

    try:
        thread_id = await handle.orchestrator.new_thread(body.session_id)
    except Exception as e:
        logger.exception("Error creating thread")
        raise AssistantServiceError("Failed to create new thread") from e

    return NewThreadResponse(thread_id=thread_id, session_id=body.session_id)


@router.get(
    "/{name}/threads/{thread_id}/messages",
    response_model=MessagesResponse,
    responses=error_responses(404, 500),
)
async def thread_messages(name: str, thread_id: str, registry: AssistantRegistry = Depends(get_registry)):
    """Messages of a thread, oldest first."""
    handle = registry.get(name)

    try:
        messages = await handle.orchestrator.get_thread_messages(thread_id)
    except Exception as e:
        logger.exception("Error fetching messages")
        raise AssistantServiceError("Failed to fetch messages") from e

    return MessagesResponse(
        messages=[
            MessageItem(role=message.role, content=message.text, created_at=message.created_at)
            for message in messages
        ]
    )
