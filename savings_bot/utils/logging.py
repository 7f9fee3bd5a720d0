"""Logging utilities."""
import logging
from pathlib import Path

from savings_bot.config.logging_config import setup_logging


def init_logging(log_file: Path | None = None) -> logging.Logger:
    """Initialize logging and return module logger.

    Args:
        log_file: Optional override for the rotating log file location.

    Returns:
        logging.Logger: Configured logger instance.
    """

    setup_logging(log_file)
    return logging.getLogger(__name__)
