"""
Shared FastAPI dependencies and helpers for the route modules
"""

from datetime import datetime, timezone

from fastapi import Request

from src.assistants.registry import AssistantRegistry


def get_registry(request: Request) -> AssistantRegistry:
    return request.app.state.registry


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2025-01-01T12:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
