"""Shared aiohttp session for calls to the goals API."""
from __future__ import annotations

import logging

import aiohttp

LOGGER = logging.getLogger(__name__)

_HTTP_SESSION: aiohttp.ClientSession | None = None


async def get_http_session() -> aiohttp.ClientSession:
    """Return the process-wide client session, creating it on first use."""

    global _HTTP_SESSION
    if _HTTP_SESSION is None or _HTTP_SESSION.closed:
        _HTTP_SESSION = aiohttp.ClientSession()
        LOGGER.info("Goals API HTTP session opened")
    return _HTTP_SESSION


async def close_http_session() -> None:
    global _HTTP_SESSION
    if _HTTP_SESSION is not None and not _HTTP_SESSION.closed:
        await _HTTP_SESSION.close()
        LOGGER.info("Goals API HTTP session closed")
    _HTTP_SESSION = None
