"""Tests for goal service types."""

from savings_bot.services import Goal, GoalSession


def test_goal_from_api_snake_case() -> None:
    goal = Goal.from_api(
        {
            "id": "7",
            "name": "Car",
            "target_amount": "5000",
            "current_amount": 1250.5,
            "target_date": "2025-12-31",
            "status": "active",
            "goal_type": "purchase",
        }
    )
    assert goal.id == 7
    assert goal.target_amount == 5000.0
    assert goal.current_amount == 1250.5
    assert goal.goal_type == "purchase"
    assert goal.remaining_amount == 3749.5


def test_goal_from_api_camel_case_and_title() -> None:
    goal = Goal.from_api(
        {"id": 3, "title": "Trip", "targetAmount": 900, "currentAmount": None, "targetDate": "2025-08-01"}
    )
    assert goal.name == "Trip"
    assert goal.target_amount == 900.0
    assert goal.current_amount == 0.0
    assert goal.target_date == "2025-08-01"
    assert goal.icon == "target"
    assert goal.color == "#007AFF"


def test_remaining_amount_never_negative() -> None:
    goal = Goal(id=1, name="Done", target_amount=100, current_amount=150)
    assert goal.remaining_amount == 0.0


def test_session_headers() -> None:
    offline = GoalSession(base_url="http://api")
    assert offline.offline
    assert "Authorization" not in offline.headers()

    online = GoalSession(base_url="http://api", token="abc")
    assert not online.offline
    assert online.headers()["Authorization"] == "Bearer abc"
