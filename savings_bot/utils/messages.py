"""Message constants for user-facing prompts and errors."""

ERR_ENTER_AMOUNT = "Please enter an amount."
ERR_INVALID_AMOUNT = "Please enter a valid amount greater than 0."
ERR_WITHDRAW_TOO_MUCH = "Cannot withdraw more than the current amount saved."
ERR_PROGRESS_FAILED = "Failed to update goal progress. Please try again."
ERR_GOAL_NAME = "Please enter a goal name"
ERR_GOAL_NAME_TOO_LONG = "Goal name must be at most 50 characters"
ERR_TARGET_AMOUNT = "Please enter a valid target amount"
ERR_DEADLINE = "Please select a deadline"
ERR_DEADLINE_FORMAT = "Please enter a future date as YYYY-MM-DD or DD.MM.YYYY"
ERR_CREATE_FAILED = "Failed to create savings goal. Please try again."
ERR_UPDATE_FAILED = "Failed to update goal. Please try again."
ERR_DELETE_FAILED = "Failed to delete goal. Please try again."
ERR_AUTH = "Could not sign in to the goals server. Please try again later."
ERR_GOAL_GONE = "This goal no longer exists."
ERR_UNKNOWN_INPUT = "I did not understand that. Please use the buttons or /goals."

MSG_PROGRESS_UPDATED = "Goal progress updated successfully!"
MSG_GOAL_CREATED = "Your savings goal has been created successfully!"
MSG_GOAL_UPDATED = "Goal updated successfully!"
MSG_GOAL_DELETED = "Goal deleted successfully!"
MSG_OFFLINE_BANNER = (
    "⚠️ Offline mode: showing demo goals. Your savings goals are stored safely "
    "in the cloud; connect to track your progress."
)
MSG_NO_GOALS = "You have no savings goals yet. Tap ➕ New goal to create one."

PROMPT_AMOUNT = "Enter the amount to {operation} for <b>{name}</b>:"
PROMPT_GOAL_NAME = "Enter the goal name (up to 50 characters)."
PROMPT_TARGET_AMOUNT = "Enter the target amount."
PROMPT_DEADLINE = "Enter the deadline (YYYY-MM-DD or DD.MM.YYYY)."
PROMPT_GOAL_TYPE = "Choose the goal type."
PROMPT_EDIT_FIELD = "What do you want to change?"
PROMPT_DELETE_CONFIRM = "Delete goal <b>{name}</b>?"
ERR_SUMMARY_FAILED = "Failed to load the savings summary. Please try again."
ERR_INVALID_GOAL = "Unknown goal."

MSG_WELCOME = "Hi! I will help you reach your savings goals."
MSG_MAIN_MENU = "Main menu"
MSG_CANCELLED = "Operation cancelled. You are in the main menu."
MSG_SUBMITTING = "Saving, please wait..."

PROMPT_EDIT_VALUE = "Enter the new value for <b>{field}</b>:"
