"""Keyboard definitions."""
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup, KeyboardButton, ReplyKeyboardMarkup

from savings_bot.constants.ui_labels import (
    CONFIRM_NO,
    CONFIRM_YES,
    MENU_GOALS,
    MENU_NEW_GOAL,
    MENU_SUMMARY,
    NAV_BACK,
    NAV_HOME,
)


def main_menu_keyboard() -> ReplyKeyboardMarkup:
    """Create main menu keyboard."""

    buttons = [
        [KeyboardButton(text=MENU_GOALS)],
        [KeyboardButton(text=MENU_NEW_GOAL), KeyboardButton(text=MENU_SUMMARY)],
    ]
    return ReplyKeyboardMarkup(keyboard=buttons, resize_keyboard=True)


def back_only_keyboard() -> ReplyKeyboardMarkup:
    """Keyboard with back and home options for form steps."""

    buttons = [[KeyboardButton(text=NAV_BACK), KeyboardButton(text=NAV_HOME)]]
    return ReplyKeyboardMarkup(keyboard=buttons, resize_keyboard=True)


def yes_no_inline_keyboard(yes_cb: str, no_cb: str) -> InlineKeyboardMarkup:
    """Inline keyboard with Yes/No options to avoid opening system keyboard."""

    buttons = [
        [
            InlineKeyboardButton(text=CONFIRM_YES, callback_data=yes_cb),
            InlineKeyboardButton(text=CONFIRM_NO, callback_data=no_cb),
        ]
    ]
    return InlineKeyboardMarkup(inline_keyboard=buttons)
