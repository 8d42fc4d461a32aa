"""
Memory layer - Session to thread mapping
"""

from src.memory.locks import KeyedLocks, LockWaitTimeout
from src.memory.session_store import SessionStore

__all__ = [
    "KeyedLocks",
    "LockWaitTimeout",
    "SessionStore",
]
