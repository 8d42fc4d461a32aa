"""
Global health check
"""

from fastapi import APIRouter, Depends, Request

from src.api.deps import get_registry, utc_timestamp
from src.api.schemas import AssistantHealthSummary, HealthResponse
from src.assistants.registry import AssistantRegistry


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request, registry: AssistantRegistry = Depends(get_registry)):
    """
    Health check endpoint

    Reports whether the API key is present and, per assistant, whether it
    has a remote id and how many sessions it is tracking.
    """
    handles = registry.handles()
    return HealthResponse(
        status="ok",
        api_key_configured=bool(request.app.state.settings.openai_api_key),
        assistants_configured=sum(1 for handle in handles if handle.configured),
        assistants_loaded=len(handles),
        assistants=[
            AssistantHealthSummary(
                key=handle.key,
                name=handle.name,
                configured=handle.configured,
                active_threads=handle.orchestrator.active_thread_count(),
            )
            for handle in handles
        ],
        timestamp=utc_timestamp(),
    )
