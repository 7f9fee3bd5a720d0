"""Shared FastAPI dependencies."""
from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request

from savings_bot.config.settings import get_settings
from webapp.backend.auth import validate_token


def get_current_user(request: Request) -> dict[str, Any]:
    """Extract and validate the user from the Bearer Authorization header."""
    settings = get_settings()
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="User not authenticated")
    token = auth[len("Bearer "):].strip()
    try:
        user = validate_token(token, settings.api_secret, settings.token_max_age)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    return user
