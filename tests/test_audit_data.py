"""
Tests for loading the audit reference datasets
"""

import json

import pytest

from src.config.constants import ACTIVE_DIRECTORY_FILE, HR_TERMINATION_FILE
from src.config.settings import PROJECT_ROOT
from src.services.audit_data import load_audit_datasets
from src.utils.errors import DataLoadError


def test_load_audit_datasets(data_dir):
    datasets = load_audit_datasets(data_dir)

    assert len(datasets.active_directory["users"]) == 3
    assert datasets.hr_terminations["report_name"] == "HR Termination Report"


def test_bundled_sample_data_loads():
    datasets = load_audit_datasets(PROJECT_ROOT / "data")

    assert datasets.active_directory["users"]
    assert datasets.hr_terminations["terminations"]


def test_missing_file_raises_data_load_error(tmp_path):
    (tmp_path / ACTIVE_DIRECTORY_FILE).write_text(json.dumps({"users": []}), encoding="utf-8")

    with pytest.raises(DataLoadError, match=HR_TERMINATION_FILE):
        load_audit_datasets(tmp_path)


def test_malformed_json_raises_data_load_error(data_dir):
    (data_dir / ACTIVE_DIRECTORY_FILE).write_text("{\"users\": [", encoding="utf-8")

    with pytest.raises(DataLoadError):
        load_audit_datasets(data_dir)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"users": "u1001"},
        {"accounts": []},
        {"users": ["u1001"]},
    ],
)
def test_wrong_shape_raises_data_load_error(data_dir, payload):
    (data_dir / ACTIVE_DIRECTORY_FILE).write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(DataLoadError):
        load_audit_datasets(data_dir)


def test_filter_users_keeps_source_order(data_dir):
    datasets = load_audit_datasets(data_dir)

    filtered = datasets.filter_users(["u1003", "u1001"])

    assert [u["username"] for u in filtered.active_directory["users"]] == ["jsmith", "mgarcia"]
    assert [t["user_id"] for t in filtered.hr_terminations["terminations"]] == ["u1001"]
