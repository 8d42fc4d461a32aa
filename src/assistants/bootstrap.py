"""
Registry bootstrap - wires every configured assistant at startup

Per assistant this picks the enrichment strategy and the poll ceiling:
    sox-auditor    audit data injection, data-heavy ceiling
    big4-reviewer  no enrichment, interactive ceiling

Missing API key or assistant ids never stop the server; the affected
assistants are registered unconfigured and report a 500 per request.
"""

from typing import Optional

import openai
from loguru import logger

from src.agents.enrichment import MessageEnricher, PassThroughEnricher, SoxContextEnricher
from src.agents.orchestrator import ConversationOrchestrator
from src.agents.poller import RunPoller
from src.assistants.definitions import AssistantDefinition, load_definition
from src.assistants.provisioning import find_or_create_assistant
from src.assistants.registry import AssistantRegistry
from src.config.constants import ASSISTANT_KEYS, SOX_AUDITOR
from src.config.settings import Settings, settings as default_settings
from src.llm.client import get_openai_client
from src.llm.threads import ThreadsClient
from src.utils.errors import AssistantServiceError


def build_enricher(key: str, config: Settings) -> MessageEnricher:
    if key == SOX_AUDITOR:
        return SoxContextEnricher(config.data_path)
    return PassThroughEnricher()


def poll_ceiling(key: str, config: Settings) -> int:
    if key == SOX_AUDITOR:
        return config.data_heavy_max_poll_attempts
    return config.interactive_max_poll_attempts


def build_orchestrator(key: str, threads: ThreadsClient, config: Settings) -> ConversationOrchestrator:
    poller = RunPoller(
        retrieve_run=threads.retrieve_run,
        max_attempts=poll_ceiling(key, config),
        interval=config.run_poll_interval_seconds,
        retry_transport_errors=config.retry_transport_errors,
    )
    return ConversationOrchestrator(
        threads=threads,
        poller=poller,
        enricher=build_enricher(key, config),
        history_limit=config.message_history_limit,
    )


def make_provisioner(key: str, definition: AssistantDefinition, config: Settings):
    """Provision function resolving an assistant's remote id."""

    async def provision() -> Optional[str]:
        env_id = config.assistant_id_for(key)
        if env_id:
            return env_id

        if config.provision_on_startup:
            if not config.openai_api_key:
                logger.warning(f"⚠️  Cannot provision {key}: OPENAI_API_KEY not set")
                return None
            try:
                provisioned = await find_or_create_assistant(get_openai_client(), config.assistants_path, key)
                return provisioned.assistant_id
            except (AssistantServiceError, openai.OpenAIError) as e:
                logger.error(f"❌ Failed to provision assistant {key}: {e}")
                return None

        # Reuse an id recorded by an earlier provisioning run
        return definition.assistant_id

    return provision


async def build_registry(
    config: Settings = default_settings,
    threads: Optional[ThreadsClient] = None,
) -> AssistantRegistry:
    """
    Build the registry for all known assistants.

    Args:
        config: Application settings
        threads: Shared threads client (a lazy OpenAI-backed one by default)

    Returns:
        AssistantRegistry
    """
    logger.info("🚀 Initializing assistants...")
    threads = threads or ThreadsClient()
    registry = AssistantRegistry()

    for key in ASSISTANT_KEYS:
        try:
            definition = load_definition(config.assistants_path, key)
        except AssistantServiceError as e:
            logger.error(f"❌ Failed to load assistant {key}: {e}")
            continue

        await registry.register(
            key,
            definition=definition,
            orchestrator=build_orchestrator(key, threads, config),
            provision=make_provisioner(key, definition, config),
        )

    configured = sum(1 for handle in registry if handle.configured)
    logger.info(f"🤖 Assistants: {len(registry)} loaded, {configured} configured")
    return registry
