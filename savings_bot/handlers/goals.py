"""Handlers for the goal list, summary and the add / withdraw flow."""
from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from savings_bot.constants.ui_labels import MENU_GOALS, MENU_NEW_GOAL, MENU_SUMMARY, NAV_BACK
from savings_bot.keyboards.goals import (
    CB_CANCEL,
    CB_OPERATION,
    CB_PROGRESS,
    goal_actions_keyboard,
    parse_goal_callback,
    progress_operation_keyboard,
)
from savings_bot.keyboards.main import main_menu_keyboard
from savings_bot.renderers.goals import render_goals_list, render_progress_prompt, render_summary
from savings_bot.services.goal_service import goal_service_for
from savings_bot.services.progress_service import (
    failure_message,
    submit_progress,
    validate_progress_amount,
)
from savings_bot.services.types import (
    OPERATION_ADD,
    PROGRESS_OPERATIONS,
    Goal,
    ServiceError,
)
from savings_bot.states.goal_states import GoalProgressState
from savings_bot.utils.datetime_utils import today_tz
from savings_bot.utils.messages import (
    ERR_GOAL_GONE,
    ERR_INVALID_GOAL,
    ERR_SUMMARY_FAILED,
    MSG_CANCELLED,
    MSG_SUBMITTING,
)

LOGGER = logging.getLogger(__name__)

router = Router()

PROGRESS_INPUT_STATES = StateFilter(
    GoalProgressState.choosing_operation, GoalProgressState.waiting_for_amount
)


def goal_snapshot(goal: Goal) -> dict[str, Any]:
    """Fields of a goal kept in FSM data between steps."""

    return {
        "id": goal.id,
        "name": goal.name,
        "current_amount": goal.current_amount,
        "target_amount": goal.target_amount,
        "target_date": goal.target_date,
    }


async def send_goals_list(message: Message, user_id: int, state: FSMContext) -> None:
    """Fetch goals for the user and render the list with action buttons."""

    service = await goal_service_for(user_id)
    goals = await service.get_goals()
    await state.update_data(goals={str(goal.id): goal_snapshot(goal) for goal in goals})
    text = render_goals_list(goals, offline=service.serving_mock, today=today_tz())
    markup = goal_actions_keyboard(goals) if goals else None
    await message.answer(text, reply_markup=markup)
    LOGGER.info(
        "Rendered %s goals for user %s (mock=%s)", len(goals), user_id, service.serving_mock
    )


async def load_goal_snapshot(
    state: FSMContext, user_id: int, goal_id: int
) -> dict[str, Any] | ServiceError:
    """Return the goal from the last rendered list, fetching it when missing."""

    data = await state.get_data()
    snapshot = (data.get("goals") or {}).get(str(goal_id))
    if snapshot:
        return snapshot
    service = await goal_service_for(user_id)
    result = await service.get_goal(goal_id)
    if not result.ok:
        return result
    return goal_snapshot(result.value)


async def _safe_edit_text(message: Message, text: str, reply_markup=None) -> None:
    try:
        await message.edit_text(text, reply_markup=reply_markup)
    except TelegramBadRequest as exc:
        LOGGER.warning(
            "Failed to edit message (chat_id=%s, message_id=%s): %s",
            message.chat.id,
            message.message_id,
            exc,
        )


@router.message(Command("goals"))
@router.message(F.text == MENU_GOALS)
async def show_goals(message: Message, state: FSMContext) -> None:
    """Show the goal list."""

    await state.set_state(None)
    await send_goals_list(message, message.from_user.id, state)


@router.message(Command("summary"))
@router.message(F.text == MENU_SUMMARY)
async def show_summary(message: Message, state: FSMContext) -> None:
    service = await goal_service_for(message.from_user.id)
    result = await service.get_summary()
    if not result.ok:
        await message.answer(failure_message(result, ERR_SUMMARY_FAILED))
        return
    await message.answer(render_summary(result.value, offline=result.offline))


@router.callback_query(F.data.startswith(f"{CB_PROGRESS}:"))
async def open_goal_progress(callback: CallbackQuery, state: FSMContext) -> None:
    """Open the add / withdraw dialog for a goal."""

    goal_id = parse_goal_callback(callback.data)
    if goal_id is None:
        await callback.answer(ERR_INVALID_GOAL, show_alert=True)
        return

    snapshot = await load_goal_snapshot(state, callback.from_user.id, goal_id)
    if isinstance(snapshot, ServiceError):
        await callback.answer(failure_message(snapshot, ERR_GOAL_GONE), show_alert=True)
        return

    await state.set_state(GoalProgressState.choosing_operation)
    await state.update_data(
        progress_goal=snapshot,
        operation=OPERATION_ADD,
        operation_id=uuid4().hex,
        attempt_amount=None,
    )
    await callback.answer()
    if callback.message:
        await callback.message.answer(
            render_progress_prompt(snapshot, OPERATION_ADD),
            reply_markup=progress_operation_keyboard(OPERATION_ADD),
        )
    LOGGER.info("User %s opened progress for goal %s", callback.from_user.id, goal_id)


@router.callback_query(PROGRESS_INPUT_STATES, F.data.startswith(f"{CB_OPERATION}:"))
async def choose_operation(callback: CallbackQuery, state: FSMContext) -> None:
    """Switch between add and withdraw; a new operation gets a new operation id."""

    _, _, operation = (callback.data or "").partition(":")
    if operation not in PROGRESS_OPERATIONS:
        await callback.answer(ERR_INVALID_GOAL, show_alert=True)
        return

    data = await state.get_data()
    if operation != data.get("operation"):
        await state.update_data(operation=operation, operation_id=uuid4().hex, attempt_amount=None)
    await state.set_state(GoalProgressState.waiting_for_amount)
    await callback.answer()
    if callback.message:
        await _safe_edit_text(
            callback.message,
            render_progress_prompt(data.get("progress_goal") or {}, operation),
            reply_markup=progress_operation_keyboard(operation),
        )


@router.callback_query(F.data == CB_CANCEL)
async def cancel_goal_dialog(callback: CallbackQuery, state: FSMContext) -> None:
    """Close any goal dialog without changes."""

    await state.set_state(None)
    await callback.answer()
    if callback.message:
        await _safe_edit_text(callback.message, MSG_CANCELLED)
        await callback.message.answer(MSG_CANCELLED, reply_markup=main_menu_keyboard())


async def _close_progress_dialog(state: FSMContext) -> None:
    await state.set_state(None)
    await state.update_data(
        progress_goal=None, operation=None, operation_id=None, attempt_amount=None
    )


@router.message(PROGRESS_INPUT_STATES, F.text == NAV_BACK)
async def leave_goal_progress(message: Message, state: FSMContext) -> None:
    await _close_progress_dialog(state)
    await message.answer(MSG_CANCELLED, reply_markup=main_menu_keyboard())


@router.message(
    PROGRESS_INPUT_STATES,
    F.text,
    ~F.text.startswith("/"),
    ~F.text.in_({MENU_NEW_GOAL}),
)
async def handle_progress_amount(message: Message, state: FSMContext) -> None:
    """Validate the typed amount and submit it.

    A retry of the same amount reuses the operation id so the server applies
    it at most once; a different amount is a new operation.
    """

    data = await state.get_data()
    snapshot = data.get("progress_goal")
    if not snapshot:
        await state.set_state(None)
        await message.answer(ERR_GOAL_GONE, reply_markup=main_menu_keyboard())
        return

    operation = data.get("operation") or OPERATION_ADD
    current_amount = float(snapshot.get("current_amount") or 0)
    checked = validate_progress_amount(message.text, operation, current_amount)
    if isinstance(checked, ServiceError):
        await message.answer(checked.message)
        return

    operation_id = data.get("operation_id")
    attempted = data.get("attempt_amount")
    if not operation_id or (attempted is not None and attempted != checked):
        operation_id = uuid4().hex
    await state.update_data(operation_id=operation_id, attempt_amount=checked)

    previous_state = await state.get_state()
    await state.set_state(GoalProgressState.submitting)
    closed = False
    try:
        service = await goal_service_for(message.from_user.id)
        outcome = await submit_progress(
            service,
            snapshot["id"],
            operation,
            message.text,
            current_amount,
            operation_id=operation_id,
        )

        if outcome.ok:
            closed = True
            await _close_progress_dialog(state)
            await message.answer(outcome.message, reply_markup=main_menu_keyboard())
            await send_goals_list(message, message.from_user.id, state)
            return

        if outcome.error is not None and outcome.error.status == 409:
            await state.update_data(operation_id=uuid4().hex, attempt_amount=None)
        if outcome.reload:
            closed = True
            await _close_progress_dialog(state)
            await message.answer(outcome.message)
            await send_goals_list(message, message.from_user.id, state)
            return
        await message.answer(outcome.message)
    finally:
        if not closed:
            await state.set_state(previous_state)


@router.message(GoalProgressState.submitting)
async def handle_while_submitting(message: Message) -> None:
    await message.answer(MSG_SUBMITTING)
