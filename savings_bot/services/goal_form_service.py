"""Add / edit goal form service layer."""
from __future__ import annotations

from datetime import date
from typing import Any

from savings_bot.services.types import (
    ERROR_VALIDATION,
    GOAL_TYPES,
    GoalDraft,
    ServiceError,
)
from savings_bot.utils.goal_input import MAX_GOAL_NAME_LENGTH, parse_deadline, parse_goal_name
from savings_bot.utils.messages import (
    ERR_DEADLINE,
    ERR_DEADLINE_FORMAT,
    ERR_GOAL_NAME,
    ERR_GOAL_NAME_TOO_LONG,
    ERR_TARGET_AMOUNT,
)
from savings_bot.utils.number_input import parse_positive_amount

EDITABLE_FIELDS = ("name", "target_amount", "target_date")


def validate_goal_name(text: str | None) -> str | ServiceError:
    if not (text or "").strip():
        return ServiceError(code=ERROR_VALIDATION, message=ERR_GOAL_NAME)
    name = parse_goal_name(text)
    if name is None:
        return ServiceError(code=ERROR_VALIDATION, message=ERR_GOAL_NAME_TOO_LONG)
    return name


def validate_target_amount(text: str | None) -> float | ServiceError:
    amount = parse_positive_amount(text or "")
    if amount is None:
        return ServiceError(code=ERROR_VALIDATION, message=ERR_TARGET_AMOUNT)
    return amount


def validate_deadline(text: str | None, today: date) -> str | ServiceError:
    """Return the deadline as an ISO date string."""

    if not (text or "").strip():
        return ServiceError(code=ERROR_VALIDATION, message=ERR_DEADLINE)
    deadline = parse_deadline(text, today=today)
    if deadline is None:
        return ServiceError(code=ERROR_VALIDATION, message=ERR_DEADLINE_FORMAT)
    return deadline.isoformat()


def build_goal_draft(data: dict[str, Any]) -> GoalDraft | ServiceError:
    """Assemble a draft from collected form data, re-checking every field."""

    name = str(data.get("name") or "").strip()
    if not name:
        return ServiceError(code=ERROR_VALIDATION, message=ERR_GOAL_NAME)
    if len(name) > MAX_GOAL_NAME_LENGTH:
        return ServiceError(code=ERROR_VALIDATION, message=ERR_GOAL_NAME_TOO_LONG)
    try:
        target = float(data.get("target_amount") or 0)
    except (TypeError, ValueError):
        target = 0.0
    if target <= 0:
        return ServiceError(code=ERROR_VALIDATION, message=ERR_TARGET_AMOUNT)
    deadline = data.get("target_date")
    if not deadline:
        return ServiceError(code=ERROR_VALIDATION, message=ERR_DEADLINE)
    goal_type = data.get("goal_type") or "other"
    if goal_type not in GOAL_TYPES:
        goal_type = "other"
    return GoalDraft(name=name, target_amount=target, target_date=str(deadline), goal_type=goal_type)


def validate_field_value(field: str, text: str | None, today: date) -> Any | ServiceError:
    """Validate a single edited field, returning the API value."""

    if field == "name":
        return validate_goal_name(text)
    if field == "target_amount":
        return validate_target_amount(text)
    if field == "target_date":
        return validate_deadline(text, today)
    return ServiceError(code=ERROR_VALIDATION, message=f"Field {field!r} cannot be edited")
