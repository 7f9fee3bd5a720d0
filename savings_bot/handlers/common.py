"""Common handlers and fallbacks."""
import logging

from aiogram import Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from savings_bot.keyboards.main import main_menu_keyboard
from savings_bot.utils.messages import ERR_UNKNOWN_INPUT

LOGGER = logging.getLogger(__name__)

router = Router()


@router.message()
async def fallback_handler(message: Message, state: FSMContext) -> None:
    """Handle unmatched messages."""

    current_state = await state.get_state()
    LOGGER.debug(
        "Fallback triggered. User: %s State: %s Text: %s",
        message.from_user.id if message.from_user else "unknown",
        current_state,
        message.text,
    )
    await message.answer(ERR_UNKNOWN_INPUT, reply_markup=main_menu_keyboard())


@router.callback_query()
async def fallback_callback(callback: CallbackQuery) -> None:
    """Answer stale inline buttons so the client stops waiting."""

    LOGGER.debug("Unhandled callback %r from user %s", callback.data, callback.from_user.id)
    await callback.answer()
