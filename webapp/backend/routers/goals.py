"""Savings goals REST API endpoints."""
from __future__ import annotations

import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from savings_bot.utils.goal_input import MAX_GOAL_NAME_LENGTH
from webapp.backend.database.get_db import get_db
from webapp.backend.dependencies import get_current_user

LOGGER = logging.getLogger(__name__)

router = APIRouter()

GoalStatus = Literal["active", "completed", "paused"]
GoalType = Literal["savings", "debt_payoff", "purchase", "emergency_fund", "other"]


# ── Schemas ───────────────────────────────────────────

class GoalCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=MAX_GOAL_NAME_LENGTH)
    description: Optional[str] = None
    target_amount: float = Field(..., gt=0)
    target_date: date
    goal_type: GoalType = "savings"
    icon: Optional[str] = None
    color: Optional[str] = None


class GoalUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=MAX_GOAL_NAME_LENGTH)
    description: Optional[str] = None
    target_amount: Optional[float] = Field(None, gt=0)
    target_date: Optional[date] = None
    goal_type: Optional[GoalType] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    status: Optional[GoalStatus] = None


class ProgressUpdate(BaseModel):
    amount: float = Field(..., gt=0)
    operation: Literal["add", "withdraw"] = "add"
    operation_id: Optional[str] = Field(None, min_length=1, max_length=64)


class GoalOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    target_amount: float
    current_amount: float
    target_date: Optional[str] = None
    status: str
    goal_type: str
    icon: Optional[str] = None
    color: Optional[str] = None
    progress: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ContributionOut(BaseModel):
    id: int
    goal_id: int
    operation: str
    amount: float
    balance_before: float
    balance_after: float
    operation_id: Optional[str] = None
    created_at: Optional[str] = None


def _goal_out(goal: dict) -> dict:
    target = goal["target_amount"]
    progress = round(goal["current_amount"] / target * 100) if target > 0 else 0
    return GoalOut(
        id=goal["id"],
        name=goal["name"],
        description=goal.get("description"),
        target_amount=target,
        current_amount=goal["current_amount"],
        target_date=goal.get("target_date"),
        status=goal.get("status") or "active",
        goal_type=goal.get("goal_type") or "savings",
        icon=goal.get("icon"),
        color=goal.get("color"),
        progress=progress,
        created_at=goal.get("created_at"),
        updated_at=goal.get("updated_at"),
    ).model_dump()


# ── Endpoints ─────────────────────────────────────────

@router.get("")
async def list_goals(user: dict = Depends(get_current_user)):
    """Get all goals for the user, newest first."""
    db = get_db()
    goals = db.list_goals(user["id"])
    return {"success": True, "data": [_goal_out(goal) for goal in goals]}


@router.get("/stats/summary")
async def goals_summary(user: dict = Depends(get_current_user)):
    """Get goal counts and totals for the user."""
    db = get_db()
    summary = db.goals_summary(user["id"])
    if not summary:
        raise HTTPException(status_code=500, detail="Failed to fetch goals summary")
    return {"success": True, "data": summary}


@router.get("/{goal_id}")
async def get_goal(goal_id: int, user: dict = Depends(get_current_user)):
    """Get a single goal."""
    db = get_db()
    goal = db.get_goal(user["id"], goal_id)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return {"success": True, "data": _goal_out(goal)}


@router.post("", status_code=201)
async def create_goal(body: GoalCreate, user: dict = Depends(get_current_user)):
    """Create a goal with zero balance."""
    db = get_db()
    goal = db.create_goal(
        user["id"],
        name=body.name,
        target_amount=body.target_amount,
        target_date=body.target_date.isoformat(),
        description=body.description,
        goal_type=body.goal_type,
        icon=body.icon,
        color=body.color,
    )
    if goal is None:
        raise HTTPException(status_code=500, detail="Failed to create goal")
    return {"success": True, "data": _goal_out(goal)}


@router.put("/{goal_id}")
async def update_goal(goal_id: int, body: GoalUpdate, user: dict = Depends(get_current_user)):
    """Partially update a goal."""
    fields = body.model_dump(exclude_unset=True)
    updates = {
        key: value
        for key, value in fields.items()
        if value is not None or key == "description"
    }
    if "target_date" in updates:
        updates["target_date"] = updates["target_date"].isoformat()
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    db = get_db()
    goal = db.update_goal(user["id"], goal_id, updates)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return {"success": True, "data": _goal_out(goal)}


@router.patch("/{goal_id}/progress")
async def update_progress(goal_id: int, body: ProgressUpdate, user: dict = Depends(get_current_user)):
    """Add to or withdraw from a goal balance."""
    db = get_db()
    result = db.apply_progress(
        user["id"],
        goal_id,
        body.operation,
        body.amount,
        operation_id=body.operation_id,
    )
    status = result.get("status")
    if status == "not_found":
        raise HTTPException(status_code=404, detail="Goal not found")
    if status == "insufficient":
        raise HTTPException(
            status_code=400,
            detail=f"Cannot withdraw more than the current amount saved ({result.get('available', 0)})",
        )
    if status == "conflict":
        raise HTTPException(
            status_code=409,
            detail="This operation was already submitted with different details. Please try again.",
        )
    if status == "invalid_operation":
        raise HTTPException(status_code=400, detail='Invalid operation. Use "add" or "withdraw"')
    if status in {"applied", "duplicate"}:
        return {
            "success": True,
            "data": _goal_out(result["goal"]),
            "duplicate": status == "duplicate",
        }
    LOGGER.error("Unexpected progress status (user_id=%s, goal_id=%s, status=%s)", user["id"], goal_id, status)
    raise HTTPException(status_code=500, detail="Failed to update goal progress")


@router.get("/{goal_id}/contributions")
async def list_contributions(goal_id: int, user: dict = Depends(get_current_user)):
    """Get the progress ledger of a goal."""
    db = get_db()
    if db.get_goal(user["id"], goal_id) is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    rows = db.list_contributions(user["id"], goal_id)
    return {"success": True, "data": [ContributionOut(**row).model_dump() for row in rows]}


@router.delete("/{goal_id}")
async def delete_goal(goal_id: int, user: dict = Depends(get_current_user)):
    """Delete an empty goal."""
    db = get_db()
    result = db.delete_goal(user["id"], goal_id)
    status = result.get("status")
    if status == "not_found":
        raise HTTPException(status_code=404, detail="Goal not found")
    if status == "has_balance":
        goal = result["goal"]
        raise HTTPException(
            status_code=400,
            detail=(
                f'Cannot delete goal "{goal["name"]}" with ₹{goal["current_amount"]:,.2f} saved. '
                "Please withdraw all money first, then delete the empty goal."
            ),
        )
    if status != "deleted":
        raise HTTPException(status_code=500, detail="Failed to delete goal")
    return {"success": True, "message": "Goal deleted successfully"}
