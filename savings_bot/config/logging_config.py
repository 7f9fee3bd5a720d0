"""Logging configuration for the bot and the goals API."""
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
LOG_FILE = Path(__file__).resolve().parents[2] / "savings_goals.log"


def setup_logging(log_file: Path | None = None) -> None:
    """Configure root logging with a rotating file and the console."""

    target = log_file or LOG_FILE
    target.touch(exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(target, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    file_handler.setLevel(LOG_LEVEL)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(LOG_LEVEL)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(LOG_LEVEL)
    root_logger.handlers.clear()
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # aiohttp access lines are noise at INFO
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
