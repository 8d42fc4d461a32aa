"""
Pre-turn enrichment - prepends audit reference data to a session's first message

The SOX auditor needs the Active Directory and HR termination records in its
thread before it can answer. They are injected once, ahead of the first user
turn of a session, narrowed to the user ids the message mentions.

Output is deterministic: records keep source order and JSON is rendered with
a 2-space indent, so the same inputs always produce the same string.
"""

import json
from pathlib import Path
from typing import Any, Callable, List, Optional, Protocol

from loguru import logger

from src.config.constants import USER_ID_PATTERN
from src.services.audit_data import AuditDatasets, load_audit_datasets
from src.utils.errors import DataLoadError


# The 10 minute window is the control under test; the model is instructed on it verbatim
FILTERED_CONTEXT_TEMPLATE = """I need you to audit the following terminated users for SOX compliance.

The requirement is that user accounts must be disabled within 10 minutes of termination.

RELEVANT ACTIVE DIRECTORY DATA:
{active_directory}

RELEVANT HR TERMINATION DATA:
{hr_terminations}

USER REQUEST:
{message}

Please analyze if each user's account was disabled within 10 minutes of termination and provide a compliance report."""

FULL_CONTEXT_TEMPLATE = """Here is the complete audit reference data for this session.

ACTIVE DIRECTORY DATA:
{active_directory}

HR TERMINATION DATA:
{hr_terminations}

{message}"""


class MessageEnricher(Protocol):
    """Strategy applied to every user message before it is appended to a thread"""

    async def enrich(self, message: str, is_first_turn: bool) -> str:
        ...


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def extract_user_ids(message: str) -> List[str]:
    """
    Find user ids ("u" + 4 digits) in a message.

    Returns:
        Lower-cased ids, deduplicated, in first-seen order
    """
    seen = []
    for match in USER_ID_PATTERN.findall(message):
        user_id = match.lower()
        if user_id not in seen:
            seen.append(user_id)
    return seen


def inject_context(message: str, is_first_turn: bool, datasets: Optional[AuditDatasets]) -> str:
    """
    Compose the message actually sent to the assistant.

    Args:
        message: Raw user message
        is_first_turn: Whether the session's thread has no messages yet
        datasets: Audit datasets, or None when they could not be loaded

    Returns:
        The original message, or the message prefixed with reference data
    """
    if not is_first_turn or datasets is None:
        return message

    user_ids = extract_user_ids(message)
    if not user_ids:
        logger.debug("No user ids in first message, injecting full audit datasets")
        return FULL_CONTEXT_TEMPLATE.format(
            active_directory=_to_json(datasets.active_directory),
            hr_terminations=_to_json(datasets.hr_terminations),
            message=message,
        )

    filtered = datasets.filter_users(user_ids)
    logger.info(f"📊 Filtered data to {len(user_ids)} users for SOX audit")
    return FILTERED_CONTEXT_TEMPLATE.format(
        active_directory=_to_json(filtered.active_directory),
        hr_terminations=_to_json(filtered.hr_terminations),
        message=message,
    )


class PassThroughEnricher:
    """Sends messages unchanged"""

    async def enrich(self, message: str, is_first_turn: bool) -> str:
        return message


class SoxContextEnricher:
    """
    Injects audit datasets into the first message of each session.

    Datasets are loaded on first use and cached once loaded. A load failure
    is logged and the message goes out unenriched; the next first turn tries
    loading again.
    """

    def __init__(
        self,
        data_dir: Path,
        loader: Callable[[Path], AuditDatasets] = load_audit_datasets,
    ):
        self.data_dir = Path(data_dir)
        self._loader = loader
        self._datasets: Optional[AuditDatasets] = None

    def datasets(self) -> Optional[AuditDatasets]:
        if self._datasets is None:
            try:
                self._datasets = self._loader(self.data_dir)
            except DataLoadError as e:
                logger.warning(f"⚠️  Could not load data files: {e}")
                return None
        return self._datasets

    async def enrich(self, message: str, is_first_turn: bool) -> str:
        if not is_first_turn:
            return message
        return inject_context(message, is_first_turn, self.datasets())
