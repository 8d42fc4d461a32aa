"""
OpenAI client factory

Creates the async OpenAI client used for threads, runs and assistants.
"""

from typing import Optional

from openai import AsyncOpenAI
from loguru import logger

from src.config.settings import settings
from src.utils.errors import ConfigurationError


_shared_client: Optional[AsyncOpenAI] = None


def create_openai_client(api_key: Optional[str] = None) -> AsyncOpenAI:
    """
    Factory function for the async OpenAI client.

    Args:
        api_key: API key (defaults to settings.openai_api_key)

    Returns:
        AsyncOpenAI instance

    Raises:
        ConfigurationError: If no API key is configured
    """
    key = api_key or settings.openai_api_key
    if not key:
        raise ConfigurationError("OpenAI API key not configured")
    return AsyncOpenAI(api_key=key)


def get_openai_client() -> AsyncOpenAI:
    """Get shared OpenAI client instance (singleton)."""
    global _shared_client
    if _shared_client is None:
        _shared_client = create_openai_client()
        logger.debug("Created shared AsyncOpenAI client")
    return _shared_client
