"""Goal progress (add / withdraw) service layer."""
from __future__ import annotations

import logging

from savings_bot.services.types import (
    ERROR_AUTH,
    ERROR_NOT_FOUND,
    ERROR_VALIDATION,
    OPERATION_ADD,
    OPERATION_WITHDRAW,
    ProgressOutcome,
    ServiceError,
)
from savings_bot.utils.messages import (
    ERR_AUTH,
    ERR_ENTER_AMOUNT,
    ERR_GOAL_GONE,
    ERR_INVALID_AMOUNT,
    ERR_PROGRESS_FAILED,
    ERR_WITHDRAW_TOO_MUCH,
    MSG_PROGRESS_UPDATED,
)
from savings_bot.utils.number_input import parse_positive_amount

LOGGER = logging.getLogger(__name__)


def failure_message(error: ServiceError, default: str) -> str:
    """Pick the user-facing text for a failed API call."""

    if error.code == ERROR_AUTH:
        return ERR_AUTH
    if error.code == ERROR_NOT_FOUND:
        return ERR_GOAL_GONE
    if error.code == ERROR_VALIDATION and error.status is not None:
        return error.message
    return default


def validate_progress_amount(
    text: str | None, operation: str, current_amount: float
) -> float | ServiceError:
    """Check the amount typed for an add or withdraw operation."""

    if not (text or "").strip():
        return ServiceError(code=ERROR_VALIDATION, message=ERR_ENTER_AMOUNT)
    amount = parse_positive_amount(text or "")
    if amount is None:
        return ServiceError(code=ERROR_VALIDATION, message=ERR_INVALID_AMOUNT)
    if operation == OPERATION_WITHDRAW and amount > current_amount:
        return ServiceError(code=ERROR_VALIDATION, message=ERR_WITHDRAW_TOO_MUCH)
    return amount


async def submit_progress(
    service,
    goal_id: int,
    operation: str,
    text: str | None,
    current_amount: float,
    operation_id: str | None = None,
) -> ProgressOutcome:
    """Validate the amount and send it to the goals API.

    Nothing is sent when validation fails. On success the caller reloads the
    whole goal list.
    """

    checked = validate_progress_amount(text, operation, current_amount)
    if isinstance(checked, ServiceError):
        return ProgressOutcome(ok=False, message=checked.message, submitted=False, error=checked)

    if operation == OPERATION_ADD:
        result = await service.add_to_goal(goal_id, checked, operation_id=operation_id)
    elif operation == OPERATION_WITHDRAW:
        result = await service.withdraw_from_goal(goal_id, checked, operation_id=operation_id)
    else:
        error = ServiceError(code=ERROR_VALIDATION, message=f"Unknown operation {operation!r}")
        LOGGER.error("Progress submit with unknown operation (goal_id=%s, operation=%s)", goal_id, operation)
        return ProgressOutcome(ok=False, message=ERR_PROGRESS_FAILED, submitted=False, error=error)

    if result.ok:
        return ProgressOutcome(
            ok=True,
            message=MSG_PROGRESS_UPDATED,
            submitted=True,
            reload=True,
            goal=result.value,
        )

    LOGGER.warning(
        "Goal progress %s failed (goal_id=%s, code=%s): %s",
        operation,
        goal_id,
        result.code,
        result.message,
    )
    return ProgressOutcome(
        ok=False,
        message=failure_message(result, ERR_PROGRESS_FAILED),
        submitted=True,
        reload=result.code == ERROR_NOT_FOUND,
        error=result,
    )
