"""Database accessor for a shared GoalsDatabase instance."""
from __future__ import annotations

from webapp.backend.database.crud import GoalsDatabase

_DB_INSTANCE: GoalsDatabase | None = None


def get_db() -> GoalsDatabase:
    global _DB_INSTANCE
    if _DB_INSTANCE is None or GoalsDatabase._instance is not _DB_INSTANCE:
        _DB_INSTANCE = GoalsDatabase()
    return _DB_INSTANCE
