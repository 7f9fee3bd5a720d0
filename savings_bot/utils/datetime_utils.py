"""Datetime utilities for the bot and the goals API."""
from datetime import date, datetime

from savings_bot.config import settings


def now_tz() -> datetime:
    """Return current datetime in configured timezone."""

    return datetime.now(tz=settings.TIMEZONE)


def today_tz(now: datetime | None = None) -> date:
    """Return today's date in configured timezone."""

    return (now or now_tz()).date()


def parse_iso_date(value: str | None) -> date | None:
    """Parse a date or datetime ISO string into a date, None when unparsable."""

    if not value:
        return None
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None
