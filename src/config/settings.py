"""
Configuration management for the application.
Loads settings from environment variables and the project .env file.
"""

from pathlib import Path
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from loguru import logger

from src.config.constants import ASSISTANT_ID_SETTINGS

# Find project root (where .env, assistants/ and data/ live)
# This file is at src/config/settings.py, so project root is 3 levels up
_project_root = Path(__file__).resolve().parent.parent.parent

PROJECT_ROOT = _project_root

# Load environment variables from project root
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(dotenv_path=_env_file, override=True)
    logger.debug(f"Loaded .env from: {_env_file}")
else:
    logger.debug(f".env file not found at: {_env_file}, using process environment")
    load_dotenv(override=False)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # API Keys
    openai_api_key: str = Field(default="")

    # Remote assistant identifiers (one per configured assistant)
    sox_assistant_id: str = Field(default="")
    big4_assistant_id: str = Field(default="")

    # Run polling
    run_poll_interval_seconds: float = Field(default=1.0)
    interactive_max_poll_attempts: int = Field(default=30)
    data_heavy_max_poll_attempts: int = Field(default=55)  # Stays under a 60s upstream request limit
    retry_transport_errors: bool = Field(default=True)  # Transport errors during a poll consume one attempt

    # Threads
    message_history_limit: int = Field(default=100)

    # Paths (relative paths are resolved against the project root)
    data_dir: str = Field(default="data")
    assistants_dir: str = Field(default="assistants")

    # Provision assistants against the remote service at startup instead of
    # relying only on the *_ASSISTANT_ID environment variables
    provision_on_startup: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    cors_allow_origins: List[str] = Field(default=["*"])
    log_level: str = Field(default="INFO")

    class Config:
        env_file = str(_project_root / ".env")
        env_file_encoding = "utf-8"
        extra = "allow"  # Allow extra fields from .env

    def resolve_path(self, value: str) -> Path:
        """Resolve a configured path against the project root."""
        path = Path(value)
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return path

    @property
    def data_path(self) -> Path:
        return self.resolve_path(self.data_dir)

    @property
    def assistants_path(self) -> Path:
        return self.resolve_path(self.assistants_dir)

    def assistant_id_for(self, key: str) -> Optional[str]:
        """Remote assistant id configured in the environment for an assistant key."""
        field_name = ASSISTANT_ID_SETTINGS.get(key)
        if field_name is None:
            return None
        value = getattr(self, field_name, "") or ""
        return value.strip() or None


# Create global settings instance
settings = Settings()


if settings.openai_api_key:
    masked_key = settings.openai_api_key[:8] + "..." + settings.openai_api_key[-4:] if len(settings.openai_api_key) > 12 else "***"
    logger.info(f"✅ OpenAI API key loaded: {masked_key}")
else:
    logger.warning("⚠️  OPENAI_API_KEY not set - chat requests will fail with a configuration error")
