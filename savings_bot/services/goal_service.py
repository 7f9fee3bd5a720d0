"""Goals API client.

Every call returns a tagged result: ``ServiceOk`` on success or
``ServiceError`` with a ``code`` telling network, auth, validation,
not-found and server failures apart. ``get_goals`` is the one exception: it
always returns a list and falls back to demo goals when the API cannot be
used.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import aiohttp

from savings_bot.config.settings import get_settings
from savings_bot.services.http import get_http_session
from savings_bot.services.mock_goals import build_mock_goals
from savings_bot.services.types import (
    ERROR_AUTH,
    ERROR_NETWORK,
    ERROR_NOT_FOUND,
    ERROR_SERVER,
    ERROR_VALIDATION,
    OPERATION_ADD,
    OPERATION_WITHDRAW,
    Goal,
    GoalDraft,
    GoalSession,
    ServiceError,
    ServiceOk,
)
from savings_bot.utils.goal_progress import summarize_goals
from webapp.backend.auth import issue_token

LOGGER = logging.getLogger(__name__)

RETRY_BASE_DELAY = 0.3


def _error_code_for_status(status: int) -> str:
    if status in (401, 403):
        return ERROR_AUTH
    if status in (400, 409, 422):
        return ERROR_VALIDATION
    if status == 404:
        return ERROR_NOT_FOUND
    return ERROR_SERVER


def _error_message(body: Any, status: int) -> str:
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if message:
            return str(message)
    return f"HTTP error! status: {status}"


def _response_data(result: ServiceOk) -> Any:
    if isinstance(result.value, dict):
        return result.value.get("data")
    return None


class GoalService:
    """Client for the ``/goals`` REST endpoints of one user session."""

    def __init__(
        self,
        session: GoalSession,
        http: aiohttp.ClientSession,
        retry_delay: float = RETRY_BASE_DELAY,
    ) -> None:
        self.session = session
        self._http = http
        self._retry_delay = retry_delay
        self.serving_mock = False

    def _url(self, path: str) -> str:
        return f"{self.session.base_url.rstrip('/')}{path}"

    async def _request(
        self, method: str, path: str, payload: dict | None = None
    ) -> ServiceOk | ServiceError:
        """Send one request; only GET is retried on network errors."""

        attempts = self.session.retries + 1 if method == "GET" else 1
        timeout = aiohttp.ClientTimeout(total=self.session.timeout)
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                async with self._http.request(
                    method,
                    self._url(path),
                    json=payload,
                    headers=self.session.headers(),
                    timeout=timeout,
                ) as response:
                    try:
                        body = await response.json(content_type=None)
                    except ValueError:
                        LOGGER.error(
                            "Invalid JSON from goals API (%s %s, status=%s)",
                            method,
                            path,
                            response.status,
                        )
                        return ServiceError(
                            code=ERROR_SERVER,
                            message="Invalid response from server",
                            status=response.status,
                        )
                    if 200 <= response.status < 300:
                        return ServiceOk(body)
                    LOGGER.error(
                        "Goals API error (%s %s, status=%s): %s",
                        method,
                        path,
                        response.status,
                        body,
                    )
                    return ServiceError(
                        code=_error_code_for_status(response.status),
                        message=_error_message(body, response.status),
                        status=response.status,
                    )
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                last_error = exc
                LOGGER.warning(
                    "NETWORK_RETRY action=%s %s attempt=%s/%s error=%r",
                    method,
                    path,
                    attempt,
                    attempts,
                    exc,
                )
                if attempt < attempts:
                    await asyncio.sleep(self._retry_delay * attempt)
        return ServiceError(code=ERROR_NETWORK, message=str(last_error) or "Network error")

    async def fetch_goals(self) -> ServiceOk | ServiceError:
        """Fetch the goal list without any fallback."""

        if self.session.offline:
            LOGGER.info("No auth token, serving mock goals")
            return ServiceOk(build_mock_goals(), offline=True)

        result = await self._request("GET", "/goals")
        if not result.ok:
            return result
        data = _response_data(result)
        if not isinstance(data, list):
            return ServiceError(code=ERROR_SERVER, message="Malformed goals response")
        goals = [Goal.from_api(item) for item in data if isinstance(item, dict)]
        LOGGER.info("Fetched %s goals", len(goals))
        return ServiceOk(goals)

    async def get_goals(self) -> list[Goal]:
        """Return the goal list, substituting demo goals on any failure."""

        result = await self.fetch_goals()
        if result.ok:
            self.serving_mock = result.offline
            return result.value
        LOGGER.warning(
            "Falling back to mock goals (code=%s, status=%s): %s",
            result.code,
            result.status,
            result.message,
        )
        self.serving_mock = True
        return build_mock_goals()

    async def get_goal(self, goal_id: int) -> ServiceOk | ServiceError:
        if self.session.offline:
            for goal in build_mock_goals():
                if goal.id == goal_id:
                    return ServiceOk(goal, offline=True)
            return ServiceError(code=ERROR_NOT_FOUND, message="Goal not found")

        result = await self._request("GET", f"/goals/{goal_id}")
        if not result.ok:
            return result
        data = _response_data(result)
        if not isinstance(data, dict):
            return ServiceError(code=ERROR_SERVER, message="Malformed goal response")
        return ServiceOk(Goal.from_api(data))

    async def create_goal(self, draft: GoalDraft) -> ServiceOk | ServiceError:
        """Create a goal; the result value is the created goal."""

        if self.session.offline:
            LOGGER.info("No auth token, acknowledging goal %r locally", draft.name)
            goal = Goal(
                id=int(time.time() * 1000),
                name=draft.name,
                description=draft.description,
                target_amount=draft.target_amount,
                current_amount=0.0,
                target_date=draft.target_date,
                goal_type=draft.goal_type,
                icon=draft.icon,
                color=draft.color,
            )
            return ServiceOk(goal, offline=True)

        result = await self._request("POST", "/goals", draft.to_payload())
        if not result.ok:
            return result
        data = _response_data(result)
        if not isinstance(data, dict):
            return ServiceError(code=ERROR_SERVER, message="Malformed goal response")
        goal = Goal.from_api(data)
        LOGGER.info("Created goal %s", goal.id)
        return ServiceOk(goal)

    async def update_goal(self, goal_id: int, changes: dict[str, Any]) -> ServiceOk | ServiceError:
        """Send a partial update; ``changes`` uses API field names."""

        payload = {key: value for key, value in changes.items() if value is not None}
        if not payload:
            return ServiceError(code=ERROR_VALIDATION, message="No fields to update")
        if self.session.offline:
            return ServiceOk(None, offline=True)

        result = await self._request("PUT", f"/goals/{goal_id}", payload)
        if not result.ok:
            return result
        data = _response_data(result)
        LOGGER.info("Updated goal %s (fields=%s)", goal_id, sorted(payload))
        return ServiceOk(Goal.from_api(data) if isinstance(data, dict) else None)

    async def _change_progress(
        self, goal_id: int, amount: float, operation: str, operation_id: str | None
    ) -> ServiceOk | ServiceError:
        if self.session.offline:
            LOGGER.info("No auth token, acknowledging %s of %s locally", operation, amount)
            return ServiceOk(None, offline=True)

        payload: dict[str, Any] = {"amount": amount, "operation": operation}
        if operation_id:
            payload["operation_id"] = operation_id
        result = await self._request("PATCH", f"/goals/{goal_id}/progress", payload)
        if not result.ok:
            return result
        data = _response_data(result)
        LOGGER.info("Goal %s progress %s %s applied", goal_id, operation, amount)
        return ServiceOk(Goal.from_api(data) if isinstance(data, dict) else None)

    async def add_to_goal(
        self, goal_id: int, amount: float, operation_id: str | None = None
    ) -> ServiceOk | ServiceError:
        return await self._change_progress(goal_id, amount, OPERATION_ADD, operation_id)

    async def withdraw_from_goal(
        self, goal_id: int, amount: float, operation_id: str | None = None
    ) -> ServiceOk | ServiceError:
        return await self._change_progress(goal_id, amount, OPERATION_WITHDRAW, operation_id)

    async def delete_goal(self, goal_id: int) -> ServiceOk | ServiceError:
        if self.session.offline:
            return ServiceOk(None, offline=True)
        result = await self._request("DELETE", f"/goals/{goal_id}")
        if result.ok:
            LOGGER.info("Deleted goal %s", goal_id)
        return result

    async def get_summary(self) -> ServiceOk | ServiceError:
        if self.session.offline:
            return ServiceOk(summarize_goals(build_mock_goals()), offline=True)
        result = await self._request("GET", "/goals/stats/summary")
        if not result.ok:
            return result
        data = _response_data(result)
        if not isinstance(data, dict):
            return ServiceError(code=ERROR_SERVER, message="Malformed summary response")
        return ServiceOk(data)


async def goal_service_for(user_id: int) -> GoalService:
    """Build a client session for a Telegram user.

    Without a configured API secret no token can be minted and the returned
    service runs in offline mode.
    """

    settings = get_settings()
    token = issue_token(user_id, settings.api_secret) if settings.api_secret else None
    session = GoalSession(
        base_url=settings.api_base_url,
        token=token,
        timeout=settings.api_timeout,
        retries=settings.api_retries,
    )
    return GoalService(session, await get_http_session())
