"""Tests for goal progress validation and submission."""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from savings_bot.services.progress_service import (
    failure_message,
    submit_progress,
    validate_progress_amount,
)
from savings_bot.services.types import Goal, ServiceError, ServiceOk
from savings_bot.utils.messages import (
    ERR_AUTH,
    ERR_ENTER_AMOUNT,
    ERR_GOAL_GONE,
    ERR_INVALID_AMOUNT,
    ERR_PROGRESS_FAILED,
    ERR_WITHDRAW_TOO_MUCH,
    MSG_PROGRESS_UPDATED,
)


def _service(result=None) -> SimpleNamespace:
    result = result or ServiceOk(Goal(id=1, name="Laptop", target_amount=1000, current_amount=650))
    return SimpleNamespace(
        add_to_goal=AsyncMock(return_value=result),
        withdraw_from_goal=AsyncMock(return_value=result),
    )


def test_validate_progress_amount_guards() -> None:
    assert validate_progress_amount("", "add", 0).message == ERR_ENTER_AMOUNT
    assert validate_progress_amount("abc", "add", 0).message == ERR_INVALID_AMOUNT
    assert validate_progress_amount("-5", "add", 0).message == ERR_INVALID_AMOUNT
    assert validate_progress_amount("500", "withdraw", 400).message == ERR_WITHDRAW_TOO_MUCH
    assert validate_progress_amount("400", "withdraw", 400) == 400
    assert validate_progress_amount("500", "add", 400) == 500


@pytest.mark.asyncio
async def test_withdraw_more_than_saved_makes_no_call() -> None:
    service = _service()

    outcome = await submit_progress(service, 1, "withdraw", "500", current_amount=400)

    assert not outcome.ok
    assert not outcome.submitted
    assert outcome.message == ERR_WITHDRAW_TOO_MUCH
    service.withdraw_from_goal.assert_not_awaited()
    service.add_to_goal.assert_not_awaited()


@pytest.mark.asyncio
async def test_add_submits_amount_and_requests_reload() -> None:
    service = _service()

    outcome = await submit_progress(service, 1, "add", "250", current_amount=400, operation_id="op-1")

    service.add_to_goal.assert_awaited_once_with(1, 250, operation_id="op-1")
    assert outcome.ok
    assert outcome.reload
    assert outcome.message == MSG_PROGRESS_UPDATED
    assert outcome.goal.current_amount == 650


@pytest.mark.asyncio
async def test_failed_submit_uses_generic_message() -> None:
    service = _service(ServiceError(code="network", message="Cannot connect"))

    outcome = await submit_progress(service, 1, "add", "10", current_amount=0)

    assert not outcome.ok
    assert outcome.submitted
    assert not outcome.reload
    assert outcome.message == ERR_PROGRESS_FAILED


@pytest.mark.asyncio
async def test_missing_goal_requests_reload() -> None:
    service = _service(ServiceError(code="not_found", message="Goal not found", status=404))

    outcome = await submit_progress(service, 1, "withdraw", "10", current_amount=100)

    assert outcome.reload
    assert outcome.message == ERR_GOAL_GONE


def test_failure_message_mapping() -> None:
    assert failure_message(ServiceError(code="auth", message="x", status=401), "d") == ERR_AUTH
    assert failure_message(ServiceError(code="validation", message="From server", status=400), "d") == "From server"
    assert failure_message(ServiceError(code="validation", message="local"), "d") == "d"
    assert failure_message(ServiceError(code="server", message="x", status=500), "d") == "d"
