"""
Assistant provisioning CLI

Creates, inspects, updates and deletes the remote OpenAI assistants defined
under assistants/<key>/config.json.

Usage:
    python scripts/manage_assistants.py setup sox-auditor
    python scripts/manage_assistants.py list
    python scripts/manage_assistants.py update sox-auditor
    python scripts/manage_assistants.py delete asst_abc123

Exits non-zero on any failure.
"""

import argparse
import asyncio
import sys
import os
from datetime import datetime, timezone
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
os.chdir(project_root)

import openai
from loguru import logger

from src.assistants.provisioning import (
    delete_assistant,
    find_or_create_assistant,
    list_remote_assistants,
    update_assistant,
)
from src.config.constants import ASSISTANT_ID_SETTINGS, ASSISTANT_KEYS
from src.config.settings import settings
from src.llm.client import create_openai_client
from src.utils.errors import AssistantServiceError


def _print_definition(definition) -> None:
    tools = ", ".join(tool.get("type", "?") for tool in definition.tools) or "None"
    logger.info("📊 Assistant Details:")
    logger.info(f"   ID: {definition.assistant_id}")
    logger.info(f"   Name: {definition.name}")
    logger.info(f"   Model: {definition.model}")
    logger.info(f"   Temperature: {definition.temperature}")
    logger.info(f"   Tools: {tools}")


async def cmd_setup(client, args) -> None:
    definition = await find_or_create_assistant(client, settings.assistants_path, args.key)
    _print_definition(definition)
    env_var = ASSISTANT_ID_SETTINGS[args.key].upper()
    logger.info(f"\n🎉 {definition.name} is ready! Set {env_var}={definition.assistant_id} to serve it.")


async def cmd_list(client, args) -> None:
    logger.info("📋 Fetching all assistants...")
    assistants = await list_remote_assistants(client, limit=args.limit)
    if not assistants:
        logger.info("No assistants found.")
        return

    logger.info(f"Found {len(assistants)} assistant(s):\n")
    for index, assistant in enumerate(assistants, 1):
        created = datetime.fromtimestamp(assistant.created_at, tz=timezone.utc).isoformat()
        tools = ", ".join(tool.type for tool in (assistant.tools or [])) or "None"
        logger.info(f"{index}. {assistant.name or 'Unnamed Assistant'}")
        logger.info(f"   ID: {assistant.id}")
        logger.info(f"   Model: {assistant.model}")
        logger.info(f"   Created: {created}")
        logger.info(f"   Tools: {tools}")


async def cmd_update(client, args) -> None:
    definition = await update_assistant(client, settings.assistants_path, args.key)
    _print_definition(definition)
    logger.info("⚠️  Please restart the server to use the updated assistant")


async def cmd_delete(client, args) -> None:
    if not await delete_assistant(client, args.assistant_id):
        raise AssistantServiceError(f"Assistant {args.assistant_id} was not deleted")


COMMANDS = {
    "setup": cmd_setup,
    "list": cmd_list,
    "update": cmd_update,
    "delete": cmd_delete,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage remote OpenAI assistants")
    sub = parser.add_subparsers(dest="command", required=True)

    setup = sub.add_parser("setup", help="Find or create an assistant from its definition")
    setup.add_argument("key", choices=ASSISTANT_KEYS)

    listing = sub.add_parser("list", help="List assistants visible to the API key")
    listing.add_argument("--limit", type=int, default=100)

    update = sub.add_parser("update", help="Push the current definition to the provisioned assistant")
    update.add_argument("key", choices=ASSISTANT_KEYS)

    delete = sub.add_parser("delete", help="Delete a remote assistant by id")
    delete.add_argument("assistant_id")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        client = create_openai_client()
        asyncio.run(COMMANDS[args.command](client, args))
    except (AssistantServiceError, openai.OpenAIError) as e:
        logger.error(f"❌ {args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
