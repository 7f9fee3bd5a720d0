"""Utilities for normalizing goal form input."""

from __future__ import annotations

import re
from datetime import date, datetime

MAX_GOAL_NAME_LENGTH = 50

_DEADLINE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y")


def parse_goal_name(text: str | None) -> str | None:
    """Return the trimmed goal name, or None when empty or too long."""

    value = re.sub(r"\s+", " ", (text or "").strip())
    if not value or len(value) > MAX_GOAL_NAME_LENGTH:
        return None
    return value


def parse_deadline(text: str | None, today: date | None = None) -> date | None:
    """Parse a deadline in YYYY-MM-DD, DD.MM.YYYY or DD/MM/YYYY form.

    When ``today`` is given, dates in the past are rejected.
    """

    value = (text or "").strip()
    if not value:
        return None
    for fmt in _DEADLINE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt).date()
        except ValueError:
            continue
        if today is not None and parsed < today:
            return None
        return parsed
    return None
