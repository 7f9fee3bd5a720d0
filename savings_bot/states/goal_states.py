"""FSM states for savings goals."""
from aiogram.fsm.state import State, StatesGroup


class GoalProgressState(StatesGroup):
    """State machine for adding to or withdrawing from a goal."""

    choosing_operation = State()
    waiting_for_amount = State()
    submitting = State()


class AddGoalState(StatesGroup):
    """State machine for creating a goal."""

    waiting_for_name = State()
    waiting_for_target = State()
    waiting_for_deadline = State()
    waiting_for_type = State()


class EditGoalState(StatesGroup):
    """State machine for editing one goal field."""

    choosing_field = State()
    waiting_for_value = State()


class DeleteGoalState(StatesGroup):
    waiting_for_confirmation = State()
