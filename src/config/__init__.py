"""
Configuration layer - Settings and constants
"""

from src.config.settings import settings, Settings, PROJECT_ROOT

__all__ = [
    "settings",
    "Settings",
    "PROJECT_ROOT",
]
