"""
Audit reference data - Active Directory export and HR termination report

Both files are JSON objects holding one list of records keyed by `user_id`:

    active_directory.json        {"users": [{"user_id": "u1001", ...}, ...], ...}
    hr_termination_report.json   {"terminations": [{"user_id": "u1001", ...}, ...], ...}
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List

from loguru import logger

from src.config.constants import ACTIVE_DIRECTORY_FILE, HR_TERMINATION_FILE
from src.utils.errors import DataLoadError


USERS_KEY = "users"
TERMINATIONS_KEY = "terminations"
USER_ID_FIELD = "user_id"


@dataclass(frozen=True)
class AuditDatasets:
    """Active Directory and HR termination datasets"""
    active_directory: Dict[str, Any]
    hr_terminations: Dict[str, Any]

    def filter_users(self, user_ids: Iterable[str]) -> "AuditDatasets":
        """
        Narrow both datasets to the given user ids.

        Matching is on the lower-cased `user_id`. Every other top-level key and
        every field of a kept record is carried over untouched, and records
        keep their source order.
        """
        wanted = {user_id.lower() for user_id in user_ids}
        return AuditDatasets(
            active_directory=_filter_records(self.active_directory, USERS_KEY, wanted),
            hr_terminations=_filter_records(self.hr_terminations, TERMINATIONS_KEY, wanted),
        )


def _filter_records(dataset: Dict[str, Any], records_key: str, wanted: set) -> Dict[str, Any]:
    records = dataset.get(records_key, [])
    return {
        **dataset,
        records_key: [
            record for record in records
            if str(record.get(USER_ID_FIELD, "")).lower() in wanted
        ],
    }


def _read_json(path: Path, records_key: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DataLoadError(f"Could not load {path.name}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get(records_key), list):
        raise DataLoadError(f"{path.name} must be an object with a '{records_key}' list")

    records: List[Any] = data[records_key]
    if not all(isinstance(record, dict) for record in records):
        raise DataLoadError(f"{path.name}: every '{records_key}' entry must be an object")
    return data


def load_audit_datasets(data_dir: Path) -> AuditDatasets:
    """
    Load both audit datasets from a data directory.

    Args:
        data_dir: Directory containing the JSON data files

    Returns:
        AuditDatasets

    Raises:
        DataLoadError: If either file is missing, unreadable or malformed
    """
    data_dir = Path(data_dir)
    active_directory = _read_json(data_dir / ACTIVE_DIRECTORY_FILE, USERS_KEY)
    hr_terminations = _read_json(data_dir / HR_TERMINATION_FILE, TERMINATIONS_KEY)

    logger.info(
        f"✅ Loaded SOX audit data files: {len(active_directory[USERS_KEY])} AD users, "
        f"{len(hr_terminations[TERMINATIONS_KEY])} terminations"
    )
    return AuditDatasets(active_directory=active_directory, hr_terminations=hr_terminations)
