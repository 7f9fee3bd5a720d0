"""UI label constants."""

NAV_BACK = "⏪ Back"
NAV_HOME = "⏪ Main menu"

MENU_GOALS = "🎯 Savings goals"
MENU_NEW_GOAL = "➕ New goal"
MENU_SUMMARY = "📊 Summary"

GOAL_ADD_MONEY = "➕ Add"
GOAL_WITHDRAW = "➖ Withdraw"
GOAL_PROGRESS = "💰 {name}"
GOAL_EDIT = "✏️"
GOAL_DELETE = "🗑"

CONFIRM_YES = "Yes"
CONFIRM_NO = "No"

EDIT_FIELD_LABELS = {
    "name": "Name",
    "target_amount": "Target amount",
    "target_date": "Deadline",
}

GOAL_TYPE_LABELS = {
    "savings": "💰 Savings",
    "debt_payoff": "💳 Debt payoff",
    "purchase": "🛍 Purchase",
    "emergency_fund": "🛟 Emergency fund",
    "other": "✨ Other",
}
