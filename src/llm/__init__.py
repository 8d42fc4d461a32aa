"""
Remote service layer - OpenAI client and thread/run operations
"""

from src.llm.client import create_openai_client, get_openai_client
from src.llm.threads import ThreadsClient

__all__ = [
    "create_openai_client",
    "get_openai_client",
    "ThreadsClient",
]
