"""
Shared fixtures: fake remote service, sample audit datasets and a
ready-to-use registry.
"""

import json

import pytest

from src.config.constants import ACTIVE_DIRECTORY_FILE, HR_TERMINATION_FILE
from src.config.settings import Settings
from src.services.audit_data import AuditDatasets
from tests.fakes import FakeThreadsClient, build_test_registry


@pytest.fixture
def fake_threads():
    return FakeThreadsClient()


@pytest.fixture
def audit_datasets():
    return AuditDatasets(
        active_directory={
            "source": "Active Directory export",
            "users": [
                {"user_id": "u1001", "username": "jsmith", "account_status": "disabled", "disabled_at": "2024-03-04T17:06:00Z"},
                {"user_id": "U1002", "username": "alee", "account_status": "disabled", "disabled_at": "2024-03-11T09:47:00Z"},
                {"user_id": "u1003", "username": "mgarcia", "account_status": "active", "disabled_at": None},
            ],
        },
        hr_terminations={
            "report_name": "HR Termination Report",
            "terminations": [
                {"user_id": "u1001", "termination_datetime": "2024-03-04T17:00:00Z"},
                {"user_id": "u1002", "termination_datetime": "2024-03-11T09:15:00Z"},
                {"user_id": "u1004", "termination_datetime": "2024-03-18T12:00:00Z"},
            ],
        },
    )


@pytest.fixture
def data_dir(tmp_path, audit_datasets):
    (tmp_path / ACTIVE_DIRECTORY_FILE).write_text(json.dumps(audit_datasets.active_directory), encoding="utf-8")
    (tmp_path / HR_TERMINATION_FILE).write_text(json.dumps(audit_datasets.hr_terminations), encoding="utf-8")
    return tmp_path


@pytest.fixture
def registry(fake_threads, data_dir):
    return build_test_registry(fake_threads, data_dir)


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        openai_api_key="sk-test-key",
        assistants_dir=str(tmp_path / "assistants"),
        data_dir=str(tmp_path),
    )
