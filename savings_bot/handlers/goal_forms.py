"""Handlers for creating, editing and deleting goals."""
from __future__ import annotations

import html
import logging

from aiogram import F, Router
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State
from aiogram.types import CallbackQuery, Message

from savings_bot.constants.ui_labels import EDIT_FIELD_LABELS, MENU_NEW_GOAL, NAV_BACK
from savings_bot.handlers.goals import load_goal_snapshot, send_goals_list
from savings_bot.keyboards.goals import (
    CB_DELETE,
    CB_DELETE_CANCEL,
    CB_DELETE_CONFIRM,
    CB_EDIT,
    CB_EDIT_FIELD,
    CB_GOAL_TYPE,
    edit_field_keyboard,
    goal_type_keyboard,
    parse_goal_callback,
)
from savings_bot.keyboards.main import back_only_keyboard, main_menu_keyboard, yes_no_inline_keyboard
from savings_bot.services.goal_form_service import (
    EDITABLE_FIELDS,
    build_goal_draft,
    validate_deadline,
    validate_field_value,
    validate_goal_name,
    validate_target_amount,
)
from savings_bot.services.goal_service import goal_service_for
from savings_bot.services.progress_service import failure_message
from savings_bot.services.types import GOAL_TYPES, ServiceError
from savings_bot.states.goal_states import AddGoalState, DeleteGoalState, EditGoalState
from savings_bot.utils.datetime_utils import today_tz
from savings_bot.utils.messages import (
    ERR_CREATE_FAILED,
    ERR_DELETE_FAILED,
    ERR_GOAL_GONE,
    ERR_INVALID_GOAL,
    ERR_UPDATE_FAILED,
    MSG_CANCELLED,
    MSG_GOAL_CREATED,
    MSG_GOAL_DELETED,
    MSG_GOAL_UPDATED,
    PROMPT_DEADLINE,
    PROMPT_DELETE_CONFIRM,
    PROMPT_EDIT_FIELD,
    PROMPT_EDIT_VALUE,
    PROMPT_GOAL_NAME,
    PROMPT_GOAL_TYPE,
    PROMPT_TARGET_AMOUNT,
)

LOGGER = logging.getLogger(__name__)

router = Router()

ADD_GOAL_STEPS: list[tuple[State, str]] = [
    (AddGoalState.waiting_for_name, PROMPT_GOAL_NAME),
    (AddGoalState.waiting_for_target, PROMPT_TARGET_AMOUNT),
    (AddGoalState.waiting_for_deadline, PROMPT_DEADLINE),
    (AddGoalState.waiting_for_type, PROMPT_GOAL_TYPE),
]


async def _ask_add_step(message: Message, state: FSMContext, index: int) -> None:
    step, prompt = ADD_GOAL_STEPS[index]
    await state.set_state(step)
    if step is AddGoalState.waiting_for_type:
        await message.answer(prompt, reply_markup=goal_type_keyboard())
    else:
        await message.answer(prompt, reply_markup=back_only_keyboard())


@router.message(Command("newgoal"))
@router.message(F.text == MENU_NEW_GOAL)
async def start_add_goal(message: Message, state: FSMContext) -> None:
    await state.clear()
    await _ask_add_step(message, state, 0)
    LOGGER.info("User %s started goal creation", message.from_user.id)


@router.message(StateFilter(AddGoalState), F.text == NAV_BACK)
async def add_goal_back(message: Message, state: FSMContext) -> None:
    """Step back in the add goal form; leaving the first step cancels it."""

    current = await state.get_state()
    index = next(
        (position for position, (step, _) in enumerate(ADD_GOAL_STEPS) if step.state == current),
        0,
    )
    if index == 0:
        await state.clear()
        await message.answer(MSG_CANCELLED, reply_markup=main_menu_keyboard())
        return
    await _ask_add_step(message, state, index - 1)


@router.message(AddGoalState.waiting_for_name, F.text)
async def add_goal_name(message: Message, state: FSMContext) -> None:
    name = validate_goal_name(message.text)
    if isinstance(name, ServiceError):
        await message.answer(name.message)
        return
    await state.update_data(name=name)
    await _ask_add_step(message, state, 1)


@router.message(AddGoalState.waiting_for_target, F.text)
async def add_goal_target(message: Message, state: FSMContext) -> None:
    amount = validate_target_amount(message.text)
    if isinstance(amount, ServiceError):
        await message.answer(amount.message)
        return
    await state.update_data(target_amount=amount)
    await _ask_add_step(message, state, 2)


@router.message(AddGoalState.waiting_for_deadline, F.text)
async def add_goal_deadline(message: Message, state: FSMContext) -> None:
    deadline = validate_deadline(message.text, today_tz())
    if isinstance(deadline, ServiceError):
        await message.answer(deadline.message)
        return
    await state.update_data(target_date=deadline)
    await _ask_add_step(message, state, 3)


@router.callback_query(AddGoalState.waiting_for_type, F.data.startswith(f"{CB_GOAL_TYPE}:"))
async def add_goal_type(callback: CallbackQuery, state: FSMContext) -> None:
    """Last step: pick the type and create the goal."""

    _, _, goal_type = (callback.data or "").partition(":")
    if goal_type not in GOAL_TYPES:
        await callback.answer(ERR_INVALID_GOAL, show_alert=True)
        return
    await state.update_data(goal_type=goal_type)
    draft = build_goal_draft(await state.get_data())
    if isinstance(draft, ServiceError):
        await callback.answer(draft.message, show_alert=True)
        return

    service = await goal_service_for(callback.from_user.id)
    result = await service.create_goal(draft)
    if not result.ok:
        await callback.answer(failure_message(result, ERR_CREATE_FAILED), show_alert=True)
        return

    await state.clear()
    await callback.answer()
    LOGGER.info("User %s created goal %s", callback.from_user.id, result.value.id)
    if callback.message:
        await callback.message.answer(MSG_GOAL_CREATED, reply_markup=main_menu_keyboard())
        await send_goals_list(callback.message, callback.from_user.id, state)


@router.callback_query(F.data.startswith(f"{CB_EDIT}:"))
async def start_edit_goal(callback: CallbackQuery, state: FSMContext) -> None:
    goal_id = parse_goal_callback(callback.data)
    if goal_id is None:
        await callback.answer(ERR_INVALID_GOAL, show_alert=True)
        return
    snapshot = await load_goal_snapshot(state, callback.from_user.id, goal_id)
    if isinstance(snapshot, ServiceError):
        await callback.answer(failure_message(snapshot, ERR_GOAL_GONE), show_alert=True)
        return

    await state.set_state(EditGoalState.choosing_field)
    await state.update_data(edit_goal=snapshot)
    await callback.answer()
    if callback.message:
        await callback.message.answer(
            f"<b>{html.escape(snapshot['name'])}</b>\n{PROMPT_EDIT_FIELD}",
            reply_markup=edit_field_keyboard(),
        )


@router.callback_query(EditGoalState.choosing_field, F.data.startswith(f"{CB_EDIT_FIELD}:"))
async def choose_edit_field(callback: CallbackQuery, state: FSMContext) -> None:
    _, _, field = (callback.data or "").partition(":")
    if field not in EDITABLE_FIELDS:
        await callback.answer(ERR_INVALID_GOAL, show_alert=True)
        return
    await state.update_data(edit_field=field)
    await state.set_state(EditGoalState.waiting_for_value)
    await callback.answer()
    if callback.message:
        prompt = PROMPT_EDIT_VALUE.format(field=EDIT_FIELD_LABELS[field])
        if field == "target_date":
            prompt = f"{prompt}\n{PROMPT_DEADLINE}"
        await callback.message.answer(prompt, reply_markup=back_only_keyboard())


@router.message(EditGoalState.waiting_for_value, F.text == NAV_BACK)
async def edit_goal_back(message: Message, state: FSMContext) -> None:
    await state.set_state(EditGoalState.choosing_field)
    await message.answer(PROMPT_EDIT_FIELD, reply_markup=edit_field_keyboard())


@router.message(EditGoalState.waiting_for_value, F.text)
async def edit_goal_value(message: Message, state: FSMContext) -> None:
    """Send the single changed field to the API."""

    data = await state.get_data()
    snapshot = data.get("edit_goal") or {}
    field = data.get("edit_field")
    if not snapshot or field not in EDITABLE_FIELDS:
        await state.clear()
        await message.answer(ERR_GOAL_GONE, reply_markup=main_menu_keyboard())
        return

    value = validate_field_value(field, message.text, today_tz())
    if isinstance(value, ServiceError):
        await message.answer(value.message)
        return

    service = await goal_service_for(message.from_user.id)
    result = await service.update_goal(snapshot["id"], {field: value})
    if not result.ok:
        await message.answer(failure_message(result, ERR_UPDATE_FAILED))
        return

    await state.clear()
    LOGGER.info("User %s updated %s of goal %s", message.from_user.id, field, snapshot["id"])
    await message.answer(MSG_GOAL_UPDATED, reply_markup=main_menu_keyboard())
    await send_goals_list(message, message.from_user.id, state)


@router.callback_query(F.data.startswith(f"{CB_DELETE}:"))
async def start_delete_goal(callback: CallbackQuery, state: FSMContext) -> None:
    goal_id = parse_goal_callback(callback.data)
    if goal_id is None:
        await callback.answer(ERR_INVALID_GOAL, show_alert=True)
        return
    snapshot = await load_goal_snapshot(state, callback.from_user.id, goal_id)
    if isinstance(snapshot, ServiceError):
        await callback.answer(failure_message(snapshot, ERR_GOAL_GONE), show_alert=True)
        return

    await state.set_state(DeleteGoalState.waiting_for_confirmation)
    await state.update_data(delete_goal=snapshot)
    await callback.answer()
    if callback.message:
        await callback.message.answer(
            PROMPT_DELETE_CONFIRM.format(name=html.escape(snapshot["name"])),
            reply_markup=yes_no_inline_keyboard(CB_DELETE_CONFIRM, CB_DELETE_CANCEL),
        )


@router.callback_query(DeleteGoalState.waiting_for_confirmation, F.data == CB_DELETE_CONFIRM)
async def confirm_delete_goal(callback: CallbackQuery, state: FSMContext) -> None:
    """Delete the goal; a refusal from the server is shown as is."""

    data = await state.get_data()
    snapshot = data.get("delete_goal") or {}
    await state.clear()
    if not snapshot:
        await callback.answer(ERR_GOAL_GONE, show_alert=True)
        return

    service = await goal_service_for(callback.from_user.id)
    result = await service.delete_goal(snapshot["id"])
    if not result.ok:
        await callback.answer(failure_message(result, ERR_DELETE_FAILED), show_alert=True)
        return

    await callback.answer()
    LOGGER.info("User %s deleted goal %s", callback.from_user.id, snapshot["id"])
    if callback.message:
        await callback.message.answer(MSG_GOAL_DELETED, reply_markup=main_menu_keyboard())
        await send_goals_list(callback.message, callback.from_user.id, state)


@router.callback_query(DeleteGoalState.waiting_for_confirmation, F.data == CB_DELETE_CANCEL)
async def cancel_delete_goal(callback: CallbackQuery, state: FSMContext) -> None:
    await state.clear()
    await callback.answer()
    if callback.message:
        await callback.message.answer(MSG_CANCELLED, reply_markup=main_menu_keyboard())
