"""Service layer shared types."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

GOAL_TYPES = ("savings", "debt_payoff", "purchase", "emergency_fund", "other")

OPERATION_ADD = "add"
OPERATION_WITHDRAW = "withdraw"
PROGRESS_OPERATIONS = (OPERATION_ADD, OPERATION_WITHDRAW)

ERROR_NETWORK = "network"
ERROR_AUTH = "auth"
ERROR_VALIDATION = "validation"
ERROR_NOT_FOUND = "not_found"
ERROR_SERVER = "server"

DEFAULT_ICON = "target"
DEFAULT_COLOR = "#007AFF"


def _to_float(value: Any) -> float:
    """Safely convert a value to float, returning 0.0 on failure."""

    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def _pick(payload: dict, *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


@dataclass
class Goal:
    id: int
    name: str
    target_amount: float
    current_amount: float = 0.0
    target_date: str | None = None
    description: str | None = None
    status: str = "active"
    goal_type: str = "savings"
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def remaining_amount(self) -> float:
        return max(self.target_amount - self.current_amount, 0.0)

    @classmethod
    def from_api(cls, payload: dict) -> "Goal":
        """Build a goal from an API payload.

        Accepts snake_case keys as served by the goals API and the camelCase
        keys older servers returned; ``title`` is accepted for ``name``.
        """

        goal_id = _pick(payload, "id")
        try:
            goal_id = int(goal_id)
        except (TypeError, ValueError):
            pass
        return cls(
            id=goal_id,
            name=str(_pick(payload, "name", "title") or ""),
            description=_pick(payload, "description"),
            target_amount=_to_float(_pick(payload, "target_amount", "targetAmount")),
            current_amount=_to_float(_pick(payload, "current_amount", "currentAmount")),
            target_date=_pick(payload, "target_date", "targetDate", "deadline"),
            status=_pick(payload, "status") or "active",
            goal_type=_pick(payload, "goal_type", "goalType") or "savings",
            icon=_pick(payload, "icon") or DEFAULT_ICON,
            color=_pick(payload, "color") or DEFAULT_COLOR,
            created_at=_pick(payload, "created_at", "createdAt"),
            updated_at=_pick(payload, "updated_at", "updatedAt"),
        )


@dataclass
class GoalDraft:
    """Fields collected by the add goal flow."""

    name: str
    target_amount: float
    target_date: str
    description: str | None = None
    goal_type: str = "other"
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "target_amount": self.target_amount,
            "target_date": self.target_date,
            "goal_type": self.goal_type,
            "icon": self.icon,
            "color": self.color,
        }


@dataclass(frozen=True)
class GoalSession:
    """Connection details for one user of the goals API.

    A session without a token is in offline mode: the client serves mock data
    and acknowledges mutations locally instead of calling the server.
    """

    base_url: str
    token: str | None = None
    timeout: float = 30.0
    retries: int = 2

    @property
    def offline(self) -> bool:
        return not self.token

    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


@dataclass
class ServiceOk:
    value: Any = None
    offline: bool = False
    ok: bool = field(default=True, init=False)


@dataclass
class ServiceError:
    code: str
    message: str
    status: int | None = None
    ok: bool = field(default=False, init=False)


@dataclass
class ProgressOutcome:
    """Result of one submit in the goal progress flow."""

    ok: bool
    message: str
    submitted: bool
    reload: bool = False
    goal: Goal | None = None
    error: ServiceError | None = None
