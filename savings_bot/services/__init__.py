"""Service layer package."""

from savings_bot.services.goal_form_service import build_goal_draft, validate_field_value
from savings_bot.services.goal_service import GoalService, goal_service_for
from savings_bot.services.progress_service import submit_progress, validate_progress_amount
from savings_bot.services.types import (
    Goal,
    GoalDraft,
    GoalSession,
    ProgressOutcome,
    ServiceError,
    ServiceOk,
)

__all__ = [
    "Goal",
    "GoalDraft",
    "GoalService",
    "GoalSession",
    "ProgressOutcome",
    "ServiceError",
    "ServiceOk",
    "build_goal_draft",
    "goal_service_for",
    "submit_progress",
    "validate_field_value",
    "validate_progress_amount",
]
