"""
Assistant definitions

Each assistant lives in assistants/<key>/:
    config.json   static definition (name, instructions, model, tools, endpoints)
    runtime.json  written by provisioning: remote assistantId, createdAt and a
                  copy of the definition

load_definition() merges both, runtime keys winning on collision.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from src.config.constants import DEFINITION_FILE, RUNTIME_FILE
from src.utils.errors import ConfigurationError


class AssistantDefinition(BaseModel):
    """Static per-assistant configuration, optionally merged with its runtime record"""
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    name: str
    description: str = ""
    instructions: str = ""
    model: str
    temperature: Optional[float] = None
    tools: List[Dict[str, Any]] = Field(default_factory=list)
    endpoints: Dict[str, str] = Field(default_factory=dict)
    assistant_id: Optional[str] = Field(default=None, alias="assistantId")
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    def remote_params(self) -> Dict[str, Any]:
        """Keyword arguments for assistants.create / assistants.update"""
        params = {
            "name": self.name,
            "instructions": self.instructions,
            "model": self.model,
            "tools": self.tools,
        }
        if self.temperature is not None:
            params["temperature"] = self.temperature
        return params


def assistant_dir(assistants_dir: Path, key: str) -> Path:
    return Path(assistants_dir) / key


def read_static_config(assistants_dir: Path, key: str) -> Dict[str, Any]:
    """Read assistants/<key>/config.json"""
    path = assistant_dir(assistants_dir, key) / DEFINITION_FILE
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Assistant definition not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Invalid assistant definition {path}: {e}") from e


def read_runtime_record(assistants_dir: Path, key: str) -> Optional[Dict[str, Any]]:
    """Read assistants/<key>/runtime.json, None if absent or unreadable"""
    path = assistant_dir(assistants_dir, key) / RUNTIME_FILE
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable runtime record {path}: {e}")
        return None


def write_runtime_record(assistants_dir: Path, key: str, record: Dict[str, Any]) -> Path:
    """Persist a runtime record as 2-space indented JSON"""
    path = assistant_dir(assistants_dir, key) / RUNTIME_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(record, f, indent=2)
    return path


def load_definition(assistants_dir: Path, key: str) -> AssistantDefinition:
    """
    Load an assistant's definition.

    Args:
        assistants_dir: Root directory holding one folder per assistant
        key: Assistant key (folder name)

    Returns:
        AssistantDefinition with runtime fields merged over the static config

    Raises:
        ConfigurationError: If config.json is missing or invalid
    """
    config = read_static_config(assistants_dir, key)
    runtime = read_runtime_record(assistants_dir, key) or {}
    try:
        return AssistantDefinition.model_validate({**config, **runtime})
    except ValueError as e:
        raise ConfigurationError(f"Invalid assistant definition for '{key}': {e}") from e
