"""Handlers for start and cancel commands."""
import logging

from aiogram import F, Router
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from savings_bot.constants.ui_labels import NAV_BACK, NAV_HOME
from savings_bot.keyboards.main import main_menu_keyboard
from savings_bot.utils.messages import MSG_CANCELLED, MSG_MAIN_MENU, MSG_WELCOME

LOGGER = logging.getLogger(__name__)

router = Router()


@router.message(Command("start"))
async def cmd_start(message: Message, state: FSMContext) -> None:
    """Handle /start command."""

    await state.clear()
    await message.answer(MSG_WELCOME, reply_markup=main_menu_keyboard())
    LOGGER.info(
        "User %s started bot", message.from_user.id if message.from_user else "unknown"
    )


@router.message(Command("cancel"))
async def cmd_cancel(message: Message, state: FSMContext) -> None:
    """Handle /cancel command."""

    await state.clear()
    await message.answer(MSG_CANCELLED, reply_markup=main_menu_keyboard())
    LOGGER.info(
        "User %s cancelled current operation",
        message.from_user.id if message.from_user else "unknown",
    )


@router.message(F.text == NAV_HOME)
@router.message(StateFilter(None), F.text == NAV_BACK)
async def back_to_main(message: Message, state: FSMContext) -> None:
    """Return user to main menu."""

    await state.clear()
    await message.answer(MSG_MAIN_MENU, reply_markup=main_menu_keyboard())
    LOGGER.info(
        "User %s returned to main menu",
        message.from_user.id if message.from_user else "unknown",
    )
