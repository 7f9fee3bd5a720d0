"""Bot and API settings module."""
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

BOT_TOKEN: str = os.getenv("BOT_TOKEN", "")
TIMEZONE = ZoneInfo(os.getenv("TIMEZONE", "Asia/Kolkata"))

GOALS_API_URL: str = os.getenv("GOALS_API_URL", "http://127.0.0.1:8000/api")
# Shared with the backend; empty secret means the bot runs in offline mode.
GOALS_API_SECRET: str = os.getenv("GOALS_API_SECRET", "")
GOALS_API_TIMEOUT: float = float(os.getenv("GOALS_API_TIMEOUT", "30"))
GOALS_API_RETRIES: int = int(os.getenv("GOALS_API_RETRIES", "2"))
TOKEN_MAX_AGE: int = int(os.getenv("TOKEN_MAX_AGE", "86400"))
GOALS_DB_PATH = Path(
    os.getenv("GOALS_DB_PATH", str(Path(__file__).resolve().parents[2] / "goals.db"))
)


@dataclass
class Settings:
    """Container for application settings."""

    bot_token: str = BOT_TOKEN
    timezone: ZoneInfo = TIMEZONE
    api_base_url: str = GOALS_API_URL
    api_secret: str = GOALS_API_SECRET
    api_timeout: float = GOALS_API_TIMEOUT
    api_retries: int = GOALS_API_RETRIES
    token_max_age: int = TOKEN_MAX_AGE
    db_path: Path = GOALS_DB_PATH


def get_settings() -> Settings:
    """Get current settings.

    Returns:
        Settings: Dataclass with bot and API settings.
    """

    return Settings()
