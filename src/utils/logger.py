"""
Logging utility with loguru.
Provides structured logging with file rotation.
"""

import sys
from pathlib import Path

from loguru import logger


def setup_logger(level: str = "INFO", log_dir: Path = None):
    """
    Configure loguru logger with file and console outputs.

    Args:
        level: Console log level
        log_dir: Directory for the rotating file sink (defaults to data/logs)
    """
    # Remove default handler
    logger.remove()

    # Console handler with colors
    logger.add(
        sys.stdout,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level.upper(),
    )

    # File handler with rotation
    if log_dir is None:
        log_dir = Path(__file__).parent.parent.parent / "data" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_dir / "app.log",
        rotation="10 MB",
        retention="1 week",
        compression="zip",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level="DEBUG",
    )

    logger.info("Logger initialized")
    return logger
