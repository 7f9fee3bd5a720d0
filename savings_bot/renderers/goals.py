"""Renderers for savings goals UI."""
from __future__ import annotations

import html
from datetime import date
from typing import Any

from savings_bot.services.types import Goal
from savings_bot.utils.goal_progress import (
    days_remaining_label,
    format_amount,
    format_deadline,
    progress_bar,
    progress_percent,
    status_emoji,
)
from savings_bot.utils.messages import MSG_NO_GOALS, MSG_OFFLINE_BANNER, PROMPT_AMOUNT


def render_goal_card(goal: Goal, today: date) -> str:
    """Render one goal as a block of HTML text."""

    percent = progress_percent(goal.current_amount, goal.target_amount)
    emoji = status_emoji(goal.current_amount, goal.target_amount)
    lines = [
        f"{emoji} <b>{html.escape(goal.name)}</b>",
        f"{format_amount(goal.current_amount)} of {format_amount(goal.target_amount)}",
        f"{progress_bar(percent)} {percent}%",
        f"⏳ {days_remaining_label(goal.target_date, today)} · {format_deadline(goal.target_date)}",
    ]
    if goal.description:
        lines.append(f"<i>{html.escape(goal.description)}</i>")
    if goal.status == "completed":
        lines.append("✅ Completed")
    elif goal.status == "paused":
        lines.append("⏸ Paused")
    return "\n".join(lines)


def render_goals_list(goals: list[Goal], offline: bool, today: date) -> str:
    blocks: list[str] = []
    if offline:
        blocks.append(MSG_OFFLINE_BANNER)
    if not goals:
        blocks.append(MSG_NO_GOALS)
        return "\n\n".join(blocks)
    blocks.append("<b>🎯 Savings goals</b>")
    blocks.extend(render_goal_card(goal, today) for goal in goals)
    return "\n\n".join(blocks)


def render_progress_prompt(goal: dict[str, Any], operation: str) -> str:
    """Header for the amount entry screen built from the stored goal snapshot."""

    name = html.escape(str(goal.get("name", "")))
    current = float(goal.get("current_amount") or 0)
    target = float(goal.get("target_amount") or 0)
    percent = progress_percent(current, target)
    verb = "add" if operation == "add" else "withdraw"
    return (
        f"Current: {format_amount(current)} of {format_amount(target)} ({percent}%)\n\n"
        + PROMPT_AMOUNT.format(operation=verb, name=name)
    )


def render_summary(summary: dict[str, Any], offline: bool) -> str:
    total_target = float(summary.get("total_target_amount") or 0)
    total_current = float(summary.get("total_current_amount") or 0)
    percent = progress_percent(total_current, total_target)
    lines = []
    if offline:
        lines.extend([MSG_OFFLINE_BANNER, ""])
    lines.extend(
        [
            "<b>📊 Savings summary</b>",
            f"Goals: {summary.get('total_goals', 0)} "
            f"(active {summary.get('active_goals', 0)}, "
            f"completed {summary.get('completed_goals', 0)})",
            f"Saved: {format_amount(total_current)} of {format_amount(total_target)}",
            f"{progress_bar(percent)} {percent}%",
            f"Remaining: {format_amount(max(total_target - total_current, 0))}",
        ]
    )
    return "\n".join(lines)
