"""
Assistant provisioning against the remote service

find_or_create_assistant() is idempotent: it reuses the assistant recorded in
runtime.json while it still exists remotely and only creates a new one when
there is no record or the recorded assistant is gone.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List

import openai
from openai import AsyncOpenAI
from loguru import logger

from src.assistants.definitions import (
    AssistantDefinition,
    load_definition,
    read_runtime_record,
    read_static_config,
    write_runtime_record,
)
from src.utils.errors import ConfigurationError


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def find_or_create_assistant(client: AsyncOpenAI, assistants_dir: Path, key: str) -> AssistantDefinition:
    """
    Find the recorded remote assistant or create it from the static definition.

    Args:
        client: AsyncOpenAI client
        assistants_dir: Root directory of assistant definitions
        key: Assistant key

    Returns:
        Definition with assistant_id set
    """
    config = read_static_config(assistants_dir, key)
    runtime = read_runtime_record(assistants_dir, key)

    if runtime and runtime.get("assistantId"):
        try:
            assistant = await client.beta.assistants.retrieve(runtime["assistantId"])
            logger.info(f"✅ Found existing assistant: {assistant.name} ({assistant.id})")
            return load_definition(assistants_dir, key)
        except openai.NotFoundError:
            logger.warning("⚠️  Previous assistant not found, creating new one...")

    definition = AssistantDefinition.model_validate(config)
    assistant = await client.beta.assistants.create(**definition.remote_params())

    record = {
        "assistantId": assistant.id,
        "createdAt": _now_iso(),
        **config,
    }
    path = write_runtime_record(assistants_dir, key, record)

    logger.info(f"✅ Created assistant: {assistant.name} ({assistant.id}), runtime record saved to {path}")
    return load_definition(assistants_dir, key)


async def update_assistant(client: AsyncOpenAI, assistants_dir: Path, key: str) -> AssistantDefinition:
    """
    Push the current static definition to the already provisioned assistant.

    Raises:
        ConfigurationError: If the assistant was never provisioned
    """
    config = read_static_config(assistants_dir, key)
    runtime = read_runtime_record(assistants_dir, key) or {}
    assistant_id = runtime.get("assistantId")
    if not assistant_id:
        raise ConfigurationError(f"Assistant '{key}' has not been provisioned yet. Run setup first.")

    definition = AssistantDefinition.model_validate(config)
    assistant = await client.beta.assistants.update(assistant_id, **definition.remote_params())

    record = {
        **runtime,
        **config,
        "assistantId": assistant.id,
        "updatedAt": _now_iso(),
    }
    write_runtime_record(assistants_dir, key, record)

    logger.info(f"✅ Updated assistant: {assistant.name} ({assistant.id})")
    return load_definition(assistants_dir, key)


async def list_remote_assistants(client: AsyncOpenAI, limit: int = 100) -> List[Any]:
    """All assistants visible to the API key (first page)."""
    page = await client.beta.assistants.list(limit=limit)
    return list(page.data)


async def delete_assistant(client: AsyncOpenAI, assistant_id: str) -> bool:
    """Delete a remote assistant. Returns whether the service confirmed it."""
    result = await client.beta.assistants.delete(assistant_id)
    deleted = bool(getattr(result, "deleted", False))
    if deleted:
        logger.info(f"🗑️  Deleted assistant {assistant_id}")
    else:
        logger.warning(f"Assistant {assistant_id} was not deleted")
    return deleted
