"""Logging configuration for processes embedding the ledger services.

Provides dual output (stdout + file) with configurable level via LOG_LEVEL env var
or the ``log_level`` setting. Default: INFO.
"""

import logging
import os
import sys
from pathlib import Path

# Map string level names to logging constants
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level(level_name: str | None = None) -> int:
    """Resolve a logging level.

    Args:
        level_name: Explicit level name; falls back to LOG_LEVEL env var

    Returns:
        Logging level constant (default: INFO)
    """
    level_str = (level_name or os.getenv("LOG_LEVEL", "INFO")).upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


def setup_logging(log_file: str = "logs/condoledger.log", level: str | None = None) -> None:
    """
    Configure root logger for the ledger services.

    Args:
        log_file: Path to log file (default: logs/condoledger.log)
        level: Level name overriding LOG_LEVEL

    Behavior:
        - Sets up all loggers to output to both stdout and file
        - ISO format timestamps for consistency
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # ISO format: [YYYY-MM-DD HH:MM:SS]
    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    log_level = get_log_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    file_handler = logging.FileHandler(log_path)
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)


__all__ = ["LOG_LEVEL_MAP", "get_log_level", "setup_logging"]
