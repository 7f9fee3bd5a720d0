"""Bearer token authentication for the goals API.

Tokens have the form ``<user_id>.<issued_at>.<signature>`` where the signature
is HMAC-SHA256 over ``<user_id>.<issued_at>`` keyed with the shared API
secret. The bot mints tokens for the Telegram users it serves.
"""
from __future__ import annotations

import hashlib
import hmac
import time


def _sign(payload: str, secret: str) -> str:
    secret_key = hmac.new(b"GoalsApi", secret.encode(), hashlib.sha256).digest()
    return hmac.new(secret_key, payload.encode(), hashlib.sha256).hexdigest()


def issue_token(user_id: int, secret: str, issued_at: int | None = None) -> str:
    """Return a signed bearer token for ``user_id``.

    Raises:
        ValueError: If the secret is empty.
    """
    if not secret:
        raise ValueError("Empty API secret")
    stamp = int(time.time()) if issued_at is None else int(issued_at)
    payload = f"{int(user_id)}.{stamp}"
    return f"{payload}.{_sign(payload, secret)}"


def validate_token(token: str, secret: str, max_age_seconds: int = 86400) -> dict[str, int]:
    """Validate a bearer token and return the user it was issued for.

    Args:
        token: Raw token taken from the Authorization header.
        secret: Shared API secret used to compute the signature.
        max_age_seconds: Max allowed token age (default 24h).

    Returns:
        Dict with ``id`` and ``issued_at``.

    Raises:
        ValueError: If validation fails.
    """
    if not token:
        raise ValueError("Empty token")
    if not secret:
        raise ValueError("API secret is not configured")

    parts = token.split(".")
    if len(parts) != 3:
        raise ValueError("Malformed token")
    user_raw, issued_raw, signature = parts

    expected = _sign(f"{user_raw}.{issued_raw}", secret)
    if not hmac.compare_digest(expected, signature):
        raise ValueError("Invalid token signature")

    try:
        user_id = int(user_raw)
        issued_at = int(issued_raw)
    except (TypeError, ValueError) as exc:
        raise ValueError("Malformed token") from exc

    if time.time() - issued_at > max_age_seconds:
        raise ValueError("Token expired")

    return {"id": user_id, "issued_at": issued_at}
