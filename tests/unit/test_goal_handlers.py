"""Tests for the goal list, progress and form handlers."""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

pytest.importorskip("aiogram")

from aiogram.fsm.context import FSMContext  # noqa: E402
from aiogram.fsm.storage.base import StorageKey  # noqa: E402
from aiogram.fsm.storage.memory import MemoryStorage  # noqa: E402

from savings_bot.constants.ui_labels import MENU_NEW_GOAL, NAV_BACK  # noqa: E402
from savings_bot.handlers import goal_forms, goals  # noqa: E402
from savings_bot.services.types import Goal, ServiceError, ServiceOk  # noqa: E402
from savings_bot.states.goal_states import AddGoalState, GoalProgressState  # noqa: E402
from savings_bot.utils.messages import (  # noqa: E402
    ERR_PROGRESS_FAILED,
    ERR_WITHDRAW_TOO_MUCH,
    MSG_CANCELLED,
    MSG_GOAL_CREATED,
    MSG_OFFLINE_BANNER,
    MSG_PROGRESS_UPDATED,
)

USER_ID = 7


def _state() -> FSMContext:
    key = StorageKey(bot_id=1, chat_id=USER_ID, user_id=USER_ID)
    return FSMContext(storage=MemoryStorage(), key=key)


def _message(text: str | None = None) -> SimpleNamespace:
    return SimpleNamespace(
        text=text,
        message_id=100,
        chat=SimpleNamespace(id=USER_ID),
        from_user=SimpleNamespace(id=USER_ID),
        answer=AsyncMock(return_value=None),
        edit_text=AsyncMock(return_value=None),
    )


def _callback(data: str) -> SimpleNamespace:
    return SimpleNamespace(
        data=data,
        from_user=SimpleNamespace(id=USER_ID),
        message=_message(),
        answer=AsyncMock(return_value=None),
    )


def _goal(current: float = 400.0) -> Goal:
    return Goal(id=11, name="Laptop", target_amount=1000.0, current_amount=current, target_date="2099-01-01")


def _service(**overrides) -> SimpleNamespace:
    service = SimpleNamespace(
        serving_mock=False,
        get_goals=AsyncMock(return_value=[_goal()]),
        get_goal=AsyncMock(return_value=ServiceOk(_goal())),
        add_to_goal=AsyncMock(return_value=ServiceOk(_goal(650.0))),
        withdraw_from_goal=AsyncMock(return_value=ServiceOk(_goal(300.0))),
        create_goal=AsyncMock(return_value=ServiceOk(_goal(0.0))),
        update_goal=AsyncMock(return_value=ServiceOk(_goal())),
        delete_goal=AsyncMock(return_value=ServiceOk(None)),
        get_summary=AsyncMock(return_value=ServiceOk({})),
    )
    for name, value in overrides.items():
        setattr(service, name, value)
    return service


@pytest.fixture
def service(monkeypatch) -> SimpleNamespace:
    stub = _service()

    async def _factory(user_id: int) -> SimpleNamespace:
        return stub

    monkeypatch.setattr("savings_bot.handlers.goals.goal_service_for", _factory)
    monkeypatch.setattr("savings_bot.handlers.goal_forms.goal_service_for", _factory)
    return stub


def _answers(message: SimpleNamespace) -> list[str]:
    return [call.args[0] for call in message.answer.await_args_list]


async def _open_progress(state: FSMContext) -> None:
    await goals.show_goals(_message("/goals"), state)
    await goals.open_goal_progress(_callback("goal_progress:11"), state)


@pytest.mark.asyncio
async def test_show_goals_marks_offline_list(service) -> None:
    service.serving_mock = True
    message = _message("/goals")

    await goals.show_goals(message, _state())

    text = message.answer.await_args.args[0]
    assert MSG_OFFLINE_BANNER in text
    assert "Laptop" in text
    assert message.answer.await_args.kwargs["reply_markup"] is not None


@pytest.mark.asyncio
async def test_open_progress_stores_snapshot(service) -> None:
    state = _state()

    await _open_progress(state)

    data = await state.get_data()
    assert await state.get_state() == GoalProgressState.choosing_operation.state
    assert data["progress_goal"]["current_amount"] == 400.0
    assert data["operation"] == "add"
    assert data["operation_id"]
    service.get_goal.assert_not_awaited()


@pytest.mark.asyncio
async def test_open_progress_fetches_unknown_goal(service) -> None:
    state = _state()

    await goals.open_goal_progress(_callback("goal_progress:11"), state)

    service.get_goal.assert_awaited_once_with(11)
    assert (await state.get_data())["progress_goal"]["name"] == "Laptop"


@pytest.mark.asyncio
async def test_withdraw_more_than_saved_shows_alert_without_call(service) -> None:
    state = _state()
    await _open_progress(state)
    await goals.choose_operation(_callback("goal_op:withdraw"), state)

    message = _message("500")
    await goals.handle_progress_amount(message, state)

    assert _answers(message) == [ERR_WITHDRAW_TOO_MUCH]
    service.withdraw_from_goal.assert_not_awaited()
    assert await state.get_state() == GoalProgressState.waiting_for_amount.state


@pytest.mark.asyncio
async def test_add_amount_submits_and_reloads(service) -> None:
    state = _state()
    await _open_progress(state)
    operation_id = (await state.get_data())["operation_id"]
    service.get_goals.reset_mock()

    message = _message("250")
    await goals.handle_progress_amount(message, state)

    service.add_to_goal.assert_awaited_once_with(11, 250, operation_id=operation_id)
    assert _answers(message)[0] == MSG_PROGRESS_UPDATED
    service.get_goals.assert_awaited_once()
    assert await state.get_state() is None


@pytest.mark.asyncio
async def test_failed_submit_keeps_dialog_open(service) -> None:
    service.add_to_goal = AsyncMock(return_value=ServiceError(code="server", message="boom", status=500))
    state = _state()
    await _open_progress(state)
    operation_id = (await state.get_data())["operation_id"]

    message = _message("100")
    await goals.handle_progress_amount(message, state)

    assert _answers(message) == [ERR_PROGRESS_FAILED]
    assert await state.get_state() == GoalProgressState.choosing_operation.state
    assert (await state.get_data())["operation_id"] == operation_id


@pytest.mark.asyncio
async def test_add_goal_flow_creates_goal(service) -> None:
    state = _state()

    await goal_forms.start_add_goal(_message("➕ New goal"), state)
    await goal_forms.add_goal_name(_message("  New   bike "), state)
    await goal_forms.add_goal_target(_message("1 500"), state)
    await goal_forms.add_goal_deadline(_message("2099-05-01"), state)
    assert await state.get_state() == AddGoalState.waiting_for_type.state

    callback = _callback("goal_type:purchase")
    await goal_forms.add_goal_type(callback, state)

    service.create_goal.assert_awaited_once()
    draft = service.create_goal.await_args.args[0]
    assert draft.to_payload()["name"] == "New bike"
    assert draft.target_amount == 1500
    assert draft.target_date == "2099-05-01"
    assert draft.goal_type == "purchase"
    assert _answers(callback.message)[0] == MSG_GOAL_CREATED
    assert await state.get_state() is None


@pytest.mark.asyncio
async def test_add_goal_back_returns_to_previous_step(service) -> None:
    state = _state()
    await goal_forms.start_add_goal(_message("➕ New goal"), state)
    await goal_forms.add_goal_name(_message("Bike"), state)

    await goal_forms.add_goal_back(_message("⏪ Back"), state)

    assert await state.get_state() == AddGoalState.waiting_for_name.state


@pytest.mark.asyncio
async def test_edit_goal_sends_single_field(service) -> None:
    state = _state()
    await goals.show_goals(_message("/goals"), state)
    await goal_forms.start_edit_goal(_callback("goal_edit:11"), state)
    await goal_forms.choose_edit_field(_callback("goal_edit_field:target_amount"), state)

    await goal_forms.edit_goal_value(_message("2,000"), state)

    service.update_goal.assert_awaited_once_with(11, {"target_amount": 2000})
    assert await state.get_state() is None


@pytest.mark.asyncio
async def test_delete_refusal_is_shown_verbatim(service) -> None:
    refusal = 'Cannot delete goal "Laptop" with ₹400.00 saved. Please withdraw all money first, then delete the empty goal.'
    service.delete_goal = AsyncMock(
        return_value=ServiceError(code="validation", message=refusal, status=400)
    )
    state = _state()
    await goals.show_goals(_message("/goals"), state)
    await goal_forms.start_delete_goal(_callback("goal_delete:11"), state)

    callback = _callback("goal_delete_yes")
    await goal_forms.confirm_delete_goal(callback, state)

    service.delete_goal.assert_awaited_once_with(11)
    callback.answer.assert_awaited_once_with(refusal, show_alert=True)


@pytest.mark.asyncio
async def test_switching_operation_after_failure_gets_new_operation_id(service) -> None:
    service.add_to_goal = AsyncMock(return_value=ServiceError(code="network", message="timeout"))
    state = _state()
    await _open_progress(state)
    await goals.handle_progress_amount(_message("100"), state)
    add_id = service.add_to_goal.await_args.kwargs["operation_id"]

    await goals.choose_operation(_callback("goal_op:withdraw"), state)
    await goals.handle_progress_amount(_message("50"), state)

    withdraw_id = service.withdraw_from_goal.await_args.kwargs["operation_id"]
    service.withdraw_from_goal.assert_awaited_once_with(11, 50, operation_id=withdraw_id)
    assert withdraw_id != add_id


@pytest.mark.asyncio
async def test_retry_with_other_amount_gets_new_operation_id(service) -> None:
    service.add_to_goal = AsyncMock(return_value=ServiceError(code="network", message="timeout"))
    state = _state()
    await _open_progress(state)

    await goals.handle_progress_amount(_message("100"), state)
    await goals.handle_progress_amount(_message("100"), state)
    await goals.handle_progress_amount(_message("120"), state)

    first, retry, changed = [call.kwargs["operation_id"] for call in service.add_to_goal.await_args_list]
    assert first == retry
    assert changed != first


@pytest.mark.asyncio
async def test_conflicting_operation_id_is_replaced(service) -> None:
    conflict = "This operation was already submitted with different details. Please try again."
    service.add_to_goal = AsyncMock(
        return_value=ServiceError(code="validation", message=conflict, status=409)
    )
    state = _state()
    await _open_progress(state)

    message = _message("100")
    await goals.handle_progress_amount(message, state)
    await goals.handle_progress_amount(_message("100"), state)

    first, second = [call.kwargs["operation_id"] for call in service.add_to_goal.await_args_list]
    assert _answers(message) == [conflict]
    assert first != second
    assert await state.get_state() == GoalProgressState.choosing_operation.state


@pytest.mark.asyncio
async def test_unexpected_submit_error_does_not_leave_dialog_submitting(service) -> None:
    service.add_to_goal = AsyncMock(side_effect=RuntimeError("session closed"))
    state = _state()
    await _open_progress(state)
    await goals.choose_operation(_callback("goal_op:add"), state)

    with pytest.raises(RuntimeError):
        await goals.handle_progress_amount(_message("100"), state)

    assert await state.get_state() == GoalProgressState.waiting_for_amount.state


@pytest.mark.asyncio
async def test_failed_reply_does_not_leave_dialog_submitting(service) -> None:
    service.add_to_goal = AsyncMock(return_value=ServiceError(code="server", message="boom", status=500))
    state = _state()
    await _open_progress(state)
    message = _message("100")
    message.answer = AsyncMock(side_effect=RuntimeError("chat not found"))

    with pytest.raises(RuntimeError):
        await goals.handle_progress_amount(message, state)

    assert await state.get_state() == GoalProgressState.choosing_operation.state


def _progress_amount_handler():
    return next(
        handler
        for handler in goals.router.message.handlers
        if handler.callback is goals.handle_progress_amount
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "text, accepted",
    [("250", True), (MENU_NEW_GOAL, False), ("/newgoal", False)],
)
async def test_amount_handler_leaves_menu_buttons_and_commands_alone(text, accepted) -> None:
    handler = _progress_amount_handler()

    matched, _ = await handler.check(
        _message(text), raw_state=GoalProgressState.waiting_for_amount.state
    )

    assert matched is accepted


@pytest.mark.asyncio
async def test_back_leaves_progress_dialog(service) -> None:
    state = _state()
    await _open_progress(state)

    message = _message(NAV_BACK)
    await goals.leave_goal_progress(message, state)

    assert _answers(message) == [MSG_CANCELLED]
    assert await state.get_state() is None
    assert (await state.get_data())["progress_goal"] is None
    service.add_to_goal.assert_not_awaited()
