"""
Application constants

Centralized constants used across the application.
"""

import re
from typing import Dict, FrozenSet

# ============================================================================
# Assistants
# ============================================================================

SOX_AUDITOR = "sox-auditor"
BIG4_REVIEWER = "big4-reviewer"

# Registration order is also the listing order
ASSISTANT_KEYS = (SOX_AUDITOR, BIG4_REVIEWER)

# Settings field holding each assistant's remote identifier
ASSISTANT_ID_SETTINGS: Dict[str, str] = {
    SOX_AUDITOR: "sox_assistant_id",
    BIG4_REVIEWER: "big4_assistant_id",
}

DEFINITION_FILE = "config.json"
RUNTIME_FILE = "runtime.json"


# ============================================================================
# Runs
# ============================================================================

RUN_STATUS_COMPLETED = "completed"

# Terminal statuses that mean the run produced no usable output
RUN_FAILURE_STATUSES: FrozenSet[str] = frozenset({"failed", "cancelled", "expired", "incomplete"})

RUN_TIMEOUT_MESSAGE = "Run timeout - took too long to complete"
TURN_WAIT_TIMEOUT_MESSAGE = "Previous message in this session is still being processed"


# ============================================================================
# Audit data
# ============================================================================

# Lowercase "u" followed by exactly four digits, matched case-insensitively
USER_ID_PATTERN = re.compile(r"u\d{4}", re.IGNORECASE)

ACTIVE_DIRECTORY_FILE = "active_directory.json"
HR_TERMINATION_FILE = "hr_termination_report.json"
