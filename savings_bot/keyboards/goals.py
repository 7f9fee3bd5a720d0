"""Inline keyboards for the savings goals screens."""
from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from savings_bot.constants.ui_labels import (
    EDIT_FIELD_LABELS,
    GOAL_ADD_MONEY,
    GOAL_DELETE,
    GOAL_EDIT,
    GOAL_PROGRESS,
    GOAL_TYPE_LABELS,
    GOAL_WITHDRAW,
    NAV_BACK,
)
from savings_bot.services.types import OPERATION_ADD, OPERATION_WITHDRAW, Goal

CB_PROGRESS = "goal_progress"
CB_OPERATION = "goal_op"
CB_EDIT = "goal_edit"
CB_EDIT_FIELD = "goal_edit_field"
CB_DELETE = "goal_delete"
CB_DELETE_CONFIRM = "goal_delete_yes"
CB_DELETE_CANCEL = "goal_delete_no"
CB_GOAL_TYPE = "goal_type"
CB_CANCEL = "goal_cancel"


def goal_actions_keyboard(goals: list[Goal]) -> InlineKeyboardMarkup:
    """One row of actions per goal."""

    rows: list[list[InlineKeyboardButton]] = []
    for goal in goals:
        rows.append(
            [
                InlineKeyboardButton(
                    text=GOAL_PROGRESS.format(name=goal.name[:24]),
                    callback_data=f"{CB_PROGRESS}:{goal.id}",
                ),
                InlineKeyboardButton(text=GOAL_EDIT, callback_data=f"{CB_EDIT}:{goal.id}"),
                InlineKeyboardButton(text=GOAL_DELETE, callback_data=f"{CB_DELETE}:{goal.id}"),
            ]
        )
    return InlineKeyboardMarkup(inline_keyboard=rows)


def progress_operation_keyboard(selected: str = OPERATION_ADD) -> InlineKeyboardMarkup:
    """Add / withdraw toggle; the selected operation is marked."""

    def label(operation: str, text: str) -> str:
        return f"● {text}" if operation == selected else text

    buttons = [
        [
            InlineKeyboardButton(
                text=label(OPERATION_ADD, GOAL_ADD_MONEY),
                callback_data=f"{CB_OPERATION}:{OPERATION_ADD}",
            ),
            InlineKeyboardButton(
                text=label(OPERATION_WITHDRAW, GOAL_WITHDRAW),
                callback_data=f"{CB_OPERATION}:{OPERATION_WITHDRAW}",
            ),
        ],
        [InlineKeyboardButton(text=NAV_BACK, callback_data=CB_CANCEL)],
    ]
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def goal_type_keyboard() -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(text=text, callback_data=f"{CB_GOAL_TYPE}:{code}")]
        for code, text in GOAL_TYPE_LABELS.items()
    ]
    return InlineKeyboardMarkup(inline_keyboard=rows)


def edit_field_keyboard() -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(text=text, callback_data=f"{CB_EDIT_FIELD}:{field}")]
        for field, text in EDIT_FIELD_LABELS.items()
    ]
    rows.append([InlineKeyboardButton(text=NAV_BACK, callback_data=CB_CANCEL)])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def parse_goal_callback(data: str | None) -> int | None:
    """Extract the goal id from ``<prefix>:<id>`` callback data."""

    _, _, raw = (data or "").partition(":")
    try:
        return int(raw)
    except ValueError:
        return None
