"""
Tests for assistant definitions, provisioning, the registry and bootstrap
"""

import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from src.assistants.bootstrap import build_registry, poll_ceiling
from src.assistants.definitions import load_definition, read_runtime_record
from src.assistants.provisioning import (
    delete_assistant,
    find_or_create_assistant,
    list_remote_assistants,
    update_assistant,
)
from src.agents.enrichment import PassThroughEnricher, SoxContextEnricher
from src.config.settings import Settings
from src.utils.errors import ConfigurationError, NotFoundError
from tests.fakes import FakeThreadsClient


SOX_CONFIG = {
    "name": "SOX Compliance Auditor",
    "description": "Internal SOX auditor",
    "instructions": "You are a senior internal auditor.",
    "model": "gpt-4-turbo-preview",
    "temperature": 0.1,
    "tools": [{"type": "code_interpreter"}],
    "endpoints": {"base": "/api/assistants/sox-auditor", "chat": "/api/assistants/sox-auditor/chat"},
}

BIG4_CONFIG = {
    "name": "Big 4 External Auditor",
    "description": "External auditor",
    "instructions": "You review SOX workpapers.",
    "model": "gpt-4-turbo-preview",
    "endpoints": {"base": "/api/assistants/big4-reviewer", "chat": "/api/assistants/big4-reviewer/chat"},
}


def _write_config(assistants_dir, key, config, runtime=None):
    folder = assistants_dir / key
    folder.mkdir(parents=True, exist_ok=True)
    (folder / "config.json").write_text(json.dumps(config), encoding="utf-8")
    if runtime is not None:
        (folder / "runtime.json").write_text(json.dumps(runtime), encoding="utf-8")


def _not_found():
    request = httpx.Request("GET", "https://api.openai.com/v1/assistants/asst_gone")
    return openai.NotFoundError("No assistant found", response=httpx.Response(404, request=request), body=None)


class FakeAssistantsAPI:
    """Stands in for AsyncOpenAI().beta.assistants"""

    def __init__(self, existing=None):
        self.existing = dict(existing or {})
        self.created = []
        self.updated = []
        self.deleted = []

    async def retrieve(self, assistant_id):
        if assistant_id not in self.existing:
            raise _not_found()
        return SimpleNamespace(id=assistant_id, name=self.existing[assistant_id])

    async def create(self, **params):
        assistant_id = f"asst_new_{len(self.created) + 1}"
        self.created.append(params)
        self.existing[assistant_id] = params["name"]
        return SimpleNamespace(id=assistant_id, name=params["name"])

    async def update(self, assistant_id, **params):
        self.updated.append((assistant_id, params))
        return SimpleNamespace(id=assistant_id, name=params["name"])

    async def list(self, limit=100):
        data = [SimpleNamespace(id=i, name=n) for i, n in self.existing.items()]
        return SimpleNamespace(data=data[:limit])

    async def delete(self, assistant_id):
        self.deleted.append(assistant_id)
        return SimpleNamespace(id=assistant_id, deleted=self.existing.pop(assistant_id, None) is not None)


def _client(assistants_api):
    return SimpleNamespace(beta=SimpleNamespace(assistants=assistants_api))


# Definitions

def test_load_definition_reads_static_config(tmp_path):
    _write_config(tmp_path, "sox-auditor", SOX_CONFIG)

    definition = load_definition(tmp_path, "sox-auditor")

    assert definition.name == "SOX Compliance Auditor"
    assert definition.assistant_id is None
    assert definition.endpoints["base"] == "/api/assistants/sox-auditor"


def test_runtime_record_overrides_static_config(tmp_path):
    _write_config(
        tmp_path,
        "sox-auditor",
        SOX_CONFIG,
        runtime={"assistantId": "asst_123", "createdAt": "2024-01-01T00:00:00Z", "model": "gpt-4o"},
    )

    definition = load_definition(tmp_path, "sox-auditor")

    assert definition.assistant_id == "asst_123"
    assert definition.created_at == "2024-01-01T00:00:00Z"
    assert definition.model == "gpt-4o"
    assert definition.instructions == SOX_CONFIG["instructions"]


def test_missing_definition_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        load_definition(tmp_path, "sox-auditor")


def test_invalid_definition_json_is_configuration_error(tmp_path):
    folder = tmp_path / "sox-auditor"
    folder.mkdir()
    (folder / "config.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_definition(tmp_path, "sox-auditor")


def test_remote_params_omit_unset_temperature(tmp_path):
    _write_config(tmp_path, "big4-reviewer", BIG4_CONFIG)

    params = load_definition(tmp_path, "big4-reviewer").remote_params()

    assert "temperature" not in params
    assert params["name"] == "Big 4 External Auditor"
    assert params["tools"] == []


# Provisioning

@pytest.mark.asyncio
async def test_find_or_create_creates_and_records_runtime(tmp_path):
    _write_config(tmp_path, "sox-auditor", SOX_CONFIG)
    api = FakeAssistantsAPI()

    definition = await find_or_create_assistant(_client(api), tmp_path, "sox-auditor")

    assert definition.assistant_id == "asst_new_1"
    assert api.created[0]["temperature"] == 0.1
    record = read_runtime_record(tmp_path, "sox-auditor")
    assert record["assistantId"] == "asst_new_1"
    assert record["name"] == SOX_CONFIG["name"]
    assert "createdAt" in record
    assert (tmp_path / "sox-auditor" / "runtime.json").read_text(encoding="utf-8").startswith("{\n  ")


@pytest.mark.asyncio
async def test_find_or_create_reuses_existing_assistant(tmp_path):
    _write_config(tmp_path, "sox-auditor", SOX_CONFIG, runtime={"assistantId": "asst_live"})
    api = FakeAssistantsAPI(existing={"asst_live": "SOX Compliance Auditor"})

    definition = await find_or_create_assistant(_client(api), tmp_path, "sox-auditor")

    assert definition.assistant_id == "asst_live"
    assert api.created == []


@pytest.mark.asyncio
async def test_find_or_create_replaces_vanished_assistant(tmp_path):
    _write_config(tmp_path, "sox-auditor", SOX_CONFIG, runtime={"assistantId": "asst_gone"})
    api = FakeAssistantsAPI()

    definition = await find_or_create_assistant(_client(api), tmp_path, "sox-auditor")

    assert definition.assistant_id == "asst_new_1"
    assert read_runtime_record(tmp_path, "sox-auditor")["assistantId"] == "asst_new_1"


@pytest.mark.asyncio
async def test_update_requires_prior_provisioning(tmp_path):
    _write_config(tmp_path, "big4-reviewer", BIG4_CONFIG)

    with pytest.raises(ConfigurationError):
        await update_assistant(_client(FakeAssistantsAPI()), tmp_path, "big4-reviewer")


@pytest.mark.asyncio
async def test_update_pushes_static_definition(tmp_path):
    _write_config(tmp_path, "big4-reviewer", BIG4_CONFIG, runtime={"assistantId": "asst_b4"})
    api = FakeAssistantsAPI(existing={"asst_b4": "Big 4 External Auditor"})

    definition = await update_assistant(_client(api), tmp_path, "big4-reviewer")

    assert api.updated[0][0] == "asst_b4"
    assert definition.assistant_id == "asst_b4"
    assert "updatedAt" in read_runtime_record(tmp_path, "big4-reviewer")


@pytest.mark.asyncio
async def test_list_and_delete_remote_assistants():
    api = FakeAssistantsAPI(existing={"asst_a": "A", "asst_b": "B"})
    client = _client(api)

    listed = await list_remote_assistants(client)
    assert [a.id for a in listed] == ["asst_a", "asst_b"]

    assert await delete_assistant(client, "asst_a") is True
    assert await delete_assistant(client, "asst_a") is False


# Registry

def test_registry_get_unknown_raises_not_found(registry):
    with pytest.raises(NotFoundError, match="Assistant not found"):
        registry.get("payroll-bot")
    assert registry.lookup("payroll-bot") is None


def test_registry_lists_only_configured_by_default(registry):
    assert [a["key"] for a in registry.list()] == ["sox-auditor"]
    assert [a["key"] for a in registry.list(configured_only=False)] == ["sox-auditor", "big4-reviewer"]
    assert "instructions" not in registry.list()[0]


def test_registry_lookup_by_path_prefix(registry):
    assert registry.lookup_by_path_prefix("/api/assistants/sox-auditor/chat").key == "sox-auditor"
    assert registry.lookup_by_path_prefix("/api/assistants/big4-reviewer").key == "big4-reviewer"
    assert registry.lookup_by_path_prefix("/api/assistants/sox-auditor-v2/chat") is None
    assert registry.lookup_by_path_prefix("/api/health") is None


def test_unconfigured_handle_requires_id(registry):
    handle = registry.get("big4-reviewer")

    assert not handle.configured
    with pytest.raises(ConfigurationError, match="Big 4 External Auditor Assistant ID not configured"):
        handle.require_assistant_id()
    assert registry.get("sox-auditor").require_assistant_id() == "asst_sox"


def test_registry_container_protocol(registry):
    assert len(registry) == 2
    assert "sox-auditor" in registry
    assert [h.key for h in registry] == ["sox-auditor", "big4-reviewer"]


def test_orchestrators_are_not_shared(registry):
    sox = registry.get("sox-auditor").orchestrator
    big4 = registry.get("big4-reviewer").orchestrator
    assert sox is not big4
    assert sox.sessions is not big4.sessions


# Bootstrap

@pytest.fixture
def assistants_settings(tmp_path):
    assistants_dir = tmp_path / "assistants"
    _write_config(assistants_dir, "sox-auditor", SOX_CONFIG)
    _write_config(assistants_dir, "big4-reviewer", BIG4_CONFIG, runtime={"assistantId": "asst_recorded"})
    return Settings(
        openai_api_key="sk-test-key",
        sox_assistant_id="asst_from_env",
        big4_assistant_id="",
        assistants_dir=str(assistants_dir),
        data_dir=str(tmp_path),
        provision_on_startup=False,
    )


@pytest.mark.asyncio
async def test_build_registry_resolves_ids_and_strategies(assistants_settings):
    registry = await build_registry(assistants_settings, threads=FakeThreadsClient())

    sox = registry.get("sox-auditor")
    big4 = registry.get("big4-reviewer")

    assert sox.assistant_id == "asst_from_env"
    assert big4.assistant_id == "asst_recorded"
    assert isinstance(sox.orchestrator.enricher, SoxContextEnricher)
    assert isinstance(big4.orchestrator.enricher, PassThroughEnricher)
    assert sox.orchestrator.poller.max_attempts == 55
    assert big4.orchestrator.poller.max_attempts == 30


@pytest.mark.asyncio
async def test_build_registry_skips_assistants_without_definition(tmp_path):
    assistants_dir = tmp_path / "assistants"
    _write_config(assistants_dir, "big4-reviewer", BIG4_CONFIG)
    config = Settings(
        openai_api_key="",
        sox_assistant_id="",
        big4_assistant_id="",
        assistants_dir=str(assistants_dir),
        data_dir=str(tmp_path),
    )

    registry = await build_registry(config, threads=FakeThreadsClient())

    assert "sox-auditor" not in registry
    assert not registry.get("big4-reviewer").configured


def test_poll_ceiling_per_assistant():
    config = Settings(interactive_max_poll_attempts=12, data_heavy_max_poll_attempts=40)
    assert poll_ceiling("sox-auditor", config) == 40
    assert poll_ceiling("big4-reviewer", config) == 12
