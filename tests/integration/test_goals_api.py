"""Integration tests for the goals REST API."""
import pytest
from fastapi.testclient import TestClient

from savings_bot.config.settings import Settings
from savings_bot.services.goal_form_service import validate_goal_name
from savings_bot.utils.goal_input import MAX_GOAL_NAME_LENGTH
from webapp.backend.auth import issue_token
from webapp.backend.database import crud
from webapp.backend.main import app

SECRET = "integration-secret"


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(crud, "DB_PATH", tmp_path / "goals.db")
    monkeypatch.setattr(
        "webapp.backend.dependencies.get_settings", lambda: Settings(api_secret=SECRET)
    )
    crud.GoalsDatabase._instance = None
    with TestClient(app) as test_client:
        yield test_client
    crud.GoalsDatabase._instance = None


def _auth(user_id: int = 1) -> dict:
    return {"Authorization": f"Bearer {issue_token(user_id, SECRET)}"}


def _create(client: TestClient, **overrides) -> dict:
    body = {"name": "Laptop", "target_amount": 1000, "target_date": "2030-01-01", "goal_type": "purchase"}
    body.update(overrides)
    response = client.post("/api/goals", json=body, headers=_auth())
    assert response.status_code == 201
    return response.json()["data"]


def test_requests_without_token_are_rejected(client) -> None:
    response = client.get("/api/goals")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "User not authenticated"}

    response = client.get("/api/goals", headers={"Authorization": "Bearer 1.2.bad"})
    assert response.status_code == 401


def test_create_and_list(client) -> None:
    goal = _create(client)
    assert goal["current_amount"] == 0
    assert goal["progress"] == 0

    response = client.get("/api/goals", headers=_auth())
    assert response.json()["data"][0]["id"] == goal["id"]

    other_user = client.get("/api/goals", headers=_auth(2))
    assert other_user.json()["data"] == []


def test_create_validation_error_envelope(client) -> None:
    response = client.post("/api/goals", json={"name": "", "target_amount": 10}, headers=_auth())
    assert response.status_code == 422
    assert response.json()["success"] is False


def test_add_progress_shows_in_list(client) -> None:
    goal = _create(client)

    response = client.patch(
        f"/api/goals/{goal['id']}/progress",
        json={"amount": 100, "operation": "add"},
        headers=_auth(),
    )
    assert response.status_code == 200
    assert response.json()["data"]["current_amount"] == 100

    listed = client.get("/api/goals", headers=_auth()).json()["data"]
    assert listed[0]["current_amount"] == goal["current_amount"] + 100


def test_withdraw_more_than_saved_returns_400(client) -> None:
    goal = _create(client)
    client.patch(f"/api/goals/{goal['id']}/progress", json={"amount": 400}, headers=_auth())

    response = client.patch(
        f"/api/goals/{goal['id']}/progress",
        json={"amount": 500, "operation": "withdraw"},
        headers=_auth(),
    )
    assert response.status_code == 400
    assert "Cannot withdraw more" in response.json()["message"]


def test_duplicate_operation_is_flagged(client) -> None:
    goal = _create(client)
    body = {"amount": 50, "operation": "add", "operation_id": "retry-1"}
    first = client.patch(f"/api/goals/{goal['id']}/progress", json=body, headers=_auth())
    second = client.patch(f"/api/goals/{goal['id']}/progress", json=body, headers=_auth())

    assert first.json()["duplicate"] is False
    assert second.json()["duplicate"] is True
    assert second.json()["data"]["current_amount"] == 50

    ledger = client.get(f"/api/goals/{goal['id']}/contributions", headers=_auth()).json()["data"]
    assert len(ledger) == 1


def test_update_goal(client) -> None:
    goal = _create(client)

    response = client.put(f"/api/goals/{goal['id']}", json={"name": "Gaming laptop"}, headers=_auth())
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Gaming laptop"

    empty = client.put(f"/api/goals/{goal['id']}", json={}, headers=_auth())
    assert empty.status_code == 400

    missing = client.put("/api/goals/999", json={"name": "x"}, headers=_auth())
    assert missing.status_code == 404


def test_delete_refused_while_money_saved(client) -> None:
    goal = _create(client)
    client.patch(f"/api/goals/{goal['id']}/progress", json={"amount": 10}, headers=_auth())

    refused = client.delete(f"/api/goals/{goal['id']}", headers=_auth())
    assert refused.status_code == 400
    assert "withdraw all money first" in refused.json()["message"]

    client.patch(
        f"/api/goals/{goal['id']}/progress",
        json={"amount": 10, "operation": "withdraw"},
        headers=_auth(),
    )
    deleted = client.delete(f"/api/goals/{goal['id']}", headers=_auth())
    assert deleted.status_code == 200
    assert client.get(f"/api/goals/{goal['id']}", headers=_auth()).status_code == 404


def test_summary_and_health(client) -> None:
    goal = _create(client, target_amount=200)
    client.patch(f"/api/goals/{goal['id']}/progress", json={"amount": 200}, headers=_auth())

    summary = client.get("/api/goals/stats/summary", headers=_auth()).json()["data"]
    assert summary["completed_goals"] == 1
    assert summary["total_progress_percentage"] == 100

    assert client.get("/api/health").json() == {"status": "ok"}


def test_reused_operation_id_with_other_details_returns_409(client) -> None:
    goal = _create(client)
    client.patch(
        f"/api/goals/{goal['id']}/progress",
        json={"amount": 100, "operation": "add", "operation_id": "op-1"},
        headers=_auth(),
    )

    response = client.patch(
        f"/api/goals/{goal['id']}/progress",
        json={"amount": 50, "operation": "withdraw", "operation_id": "op-1"},
        headers=_auth(),
    )

    assert response.status_code == 409
    assert response.json()["success"] is False
    current = client.get(f"/api/goals/{goal['id']}", headers=_auth()).json()["data"]["current_amount"]
    assert current == 100


def test_api_and_bot_share_goal_name_limit(client) -> None:
    longest = "x" * MAX_GOAL_NAME_LENGTH
    too_long = longest + "x"

    assert _create(client, name=longest)["name"] == longest
    response = client.post(
        "/api/goals",
        json={"name": too_long, "target_amount": 1000, "target_date": "2030-01-01"},
        headers=_auth(),
    )

    assert response.status_code == 422
    assert validate_goal_name(longest) == longest
    assert validate_goal_name(too_long).code == "validation"
