"""Goal progress helpers: percentages, money and deadline labels."""
from __future__ import annotations

import math
from datetime import date
from typing import Any, Iterable

from savings_bot.utils.datetime_utils import parse_iso_date

CURRENCY_SIGN = "₹"


def progress_percent(current: float, target: float) -> int:
    """Return progress rounded half up and clamped to 0..100."""

    if not target or target <= 0:
        return 0
    value = math.floor(current / target * 100 + 0.5)
    return max(0, min(value, 100))


def format_amount(amount: float) -> str:
    """Format money as whole rupees with thousands separators."""

    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SIGN}{abs(amount):,.0f}"


def progress_bar(percent: int, width: int = 10) -> str:
    filled = max(0, min(width, round(percent / 100 * width)))
    return "▓" * filled + "░" * (width - filled)


def status_emoji(current: float, target: float) -> str:
    progress = current / target * 100 if target > 0 else 0
    if progress >= 100:
        return "🎉"
    if progress >= 75:
        return "🚀"
    if progress >= 50:
        return "💪"
    return "🎯"


def days_remaining_label(target_date: str | None, today: date) -> str:
    """Describe time left until the deadline in coarse units."""

    if not target_date:
        return "No deadline"
    deadline = parse_iso_date(target_date)
    if deadline is None:
        return "Invalid date"

    days = (deadline - today).days
    if days < 0:
        return "Overdue"
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    if days < 7:
        return f"{days} days"
    if days < 30:
        return f"{math.ceil(days / 7)} weeks"
    if days < 365:
        return f"{math.ceil(days / 30)} months"
    return f"{math.ceil(days / 365)} years"


def format_deadline(target_date: str | None) -> str:
    if not target_date:
        return "No deadline set"
    deadline = parse_iso_date(target_date)
    if deadline is None:
        return "Invalid date"
    return f"{deadline.strftime('%b')} {deadline.day}, {deadline.year}"


def summarize_goals(goals: Iterable[Any]) -> dict[str, Any]:
    """Aggregate goals the same way the API summary endpoint does."""

    items = list(goals)
    total_target = sum(goal.target_amount for goal in items)
    total_current = sum(goal.current_amount for goal in items)
    completed = [goal for goal in items if goal.status == "completed"]
    progress = total_current / total_target * 100 if total_target > 0 else 0.0
    return {
        "total_goals": len(items),
        "active_goals": sum(1 for goal in items if goal.status == "active"),
        "completed_goals": len(completed),
        "paused_goals": sum(1 for goal in items if goal.status == "paused"),
        "total_target_amount": total_target,
        "total_current_amount": total_current,
        "completed_target_amount": sum(goal.target_amount for goal in completed),
        "completed_current_amount": sum(goal.current_amount for goal in completed),
        "total_progress_percentage": round(progress, 2),
        "total_remaining_amount": round(total_target - total_current, 2),
    }
