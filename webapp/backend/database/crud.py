"""Database CRUD operations for savings goals."""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from threading import Lock
from typing import Any, Dict, List, Optional

from savings_bot.config.settings import get_settings
from savings_bot.utils.datetime_utils import now_tz


LOGGER = logging.getLogger(__name__)
DB_PATH = get_settings().db_path

GOAL_COLUMNS = (
    "id",
    "user_id",
    "name",
    "description",
    "target_amount",
    "current_amount",
    "target_date",
    "status",
    "goal_type",
    "icon",
    "color",
    "created_at",
    "updated_at",
)
UPDATABLE_COLUMNS = {
    "name",
    "description",
    "target_amount",
    "target_date",
    "status",
    "goal_type",
    "icon",
    "color",
}


def status_after_progress(status: str, current_amount: float, target_amount: float) -> str:
    """Return goal status after its balance changed.

    Reaching the target completes the goal; falling below it reopens a
    completed goal. Paused goals stay paused until the target is reached.
    """

    if target_amount > 0 and current_amount / target_amount * 100 >= 100:
        return "completed"
    if status == "completed":
        return "active"
    return status


class GoalsDatabase:
    """Singleton class handling all goal storage."""

    _instance: Optional["GoalsDatabase"] = None
    _lock: Lock = Lock()

    def __new__(cls) -> "GoalsDatabase":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialize_connection()
        return cls._instance

    def _initialize_connection(self) -> None:
        """Initialize SQLite connection and create tables."""

        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        DB_PATH.touch(exist_ok=True)
        self.connection = sqlite3.connect(DB_PATH, check_same_thread=False)
        self.connection.row_factory = sqlite3.Row
        self._write_lock = Lock()
        self.init_db()
        LOGGER.info("Goals database initialized at %s", DB_PATH)

    @staticmethod
    def _to_float(value: Any) -> float:
        """Safely convert a value to float, returning 0.0 on failure."""

        try:
            return float(value) if value is not None else 0.0
        except (TypeError, ValueError):
            return 0.0

    @staticmethod
    def _money(value: Any) -> float:
        return round(GoalsDatabase._to_float(value), 2)

    def init_db(self) -> None:
        """Create required tables if they do not exist."""

        cursor = self.connection.cursor()
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS goals (
                id INTEGER PRIMARY KEY,
                user_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                description TEXT,
                target_amount REAL NOT NULL,
                current_amount REAL NOT NULL DEFAULT 0,
                target_date TEXT,
                status TEXT NOT NULL DEFAULT 'active',
                goal_type TEXT NOT NULL DEFAULT 'savings',
                icon TEXT,
                color TEXT,
                created_at TEXT,
                updated_at TEXT
            )
            """
        )
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS goal_contributions (
                id INTEGER PRIMARY KEY,
                goal_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                operation TEXT NOT NULL,
                amount REAL NOT NULL,
                balance_before REAL NOT NULL,
                balance_after REAL NOT NULL,
                operation_id TEXT,
                created_at TEXT,
                UNIQUE(user_id, operation_id)
            )
            """
        )
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_goals_user ON goals(user_id)")
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_goal_contributions_goal ON goal_contributions(goal_id)"
        )
        self.connection.commit()

    def _row_to_goal(self, row: sqlite3.Row) -> Dict[str, Any]:
        goal = {key: row[key] for key in GOAL_COLUMNS}
        goal["target_amount"] = self._to_float(goal["target_amount"])
        goal["current_amount"] = self._to_float(goal["current_amount"])
        return goal

    def _fetch_goal(self, cursor: sqlite3.Cursor, user_id: int, goal_id: int) -> Optional[Dict[str, Any]]:
        cursor.execute(
            f"SELECT {', '.join(GOAL_COLUMNS)} FROM goals WHERE id = ? AND user_id = ?",
            (goal_id, user_id),
        )
        row = cursor.fetchone()
        return self._row_to_goal(row) if row else None

    def list_goals(self, user_id: int) -> List[Dict[str, Any]]:
        """Return all goals for a user, newest first."""

        try:
            cursor = self.connection.cursor()
            cursor.execute(
                f"""
                SELECT {', '.join(GOAL_COLUMNS)}
                FROM goals
                WHERE user_id = ?
                ORDER BY created_at DESC, id DESC
                """,
                (user_id,),
            )
            goals = [self._row_to_goal(row) for row in cursor.fetchall()]
            LOGGER.info("Fetched %s goals for user %s", len(goals), user_id)
            return goals
        except sqlite3.Error as error:
            LOGGER.error("Failed to fetch goals for user %s: %s", user_id, error)
            return []

    def get_goal(self, user_id: int, goal_id: int) -> Optional[Dict[str, Any]]:
        """Return one goal owned by the user."""

        try:
            return self._fetch_goal(self.connection.cursor(), user_id, goal_id)
        except sqlite3.Error as error:
            LOGGER.error("Failed to fetch goal %s for user %s: %s", goal_id, user_id, error)
            return None

    def create_goal(
        self,
        user_id: int,
        name: str,
        target_amount: float,
        target_date: str,
        description: str | None = None,
        goal_type: str = "savings",
        icon: str | None = None,
        color: str | None = None,
        now: datetime | None = None,
    ) -> Optional[Dict[str, Any]]:
        """Insert a goal with zero balance and return it."""

        stamp = (now or now_tz()).isoformat()
        try:
            with self._write_lock:
                cursor = self.connection.cursor()
                cursor.execute(
                    """
                    INSERT INTO goals (
                        user_id, name, description, target_amount, current_amount,
                        target_date, status, goal_type, icon, color, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, 0, ?, 'active', ?, ?, ?, ?, ?)
                    """,
                    (
                        user_id,
                        name,
                        description,
                        self._money(target_amount),
                        target_date,
                        goal_type,
                        icon or "target",
                        color or "#10B981",
                        stamp,
                        stamp,
                    ),
                )
                self.connection.commit()
                goal_id = cursor.lastrowid
            LOGGER.info("Created goal %s for user %s", goal_id, user_id)
            return self.get_goal(user_id, goal_id)
        except sqlite3.Error as error:
            LOGGER.error("Failed to create goal for user %s: %s", user_id, error)
            return None

    def update_goal(
        self,
        user_id: int,
        goal_id: int,
        fields: Dict[str, Any],
        now: datetime | None = None,
    ) -> Optional[Dict[str, Any]]:
        """Apply a partial update and return the updated goal.

        Unknown columns are ignored. Returns None when the goal does not exist.
        """

        updates = {key: value for key, value in fields.items() if key in UPDATABLE_COLUMNS}
        if "target_amount" in updates:
            updates["target_amount"] = self._money(updates["target_amount"])
        updates["updated_at"] = (now or now_tz()).isoformat()
        assignments = ", ".join(f"{column} = ?" for column in updates)
        try:
            with self._write_lock:
                cursor = self.connection.cursor()
                cursor.execute(
                    f"UPDATE goals SET {assignments} WHERE id = ? AND user_id = ?",
                    (*updates.values(), goal_id, user_id),
                )
                self.connection.commit()
                if cursor.rowcount == 0:
                    return None
            LOGGER.info("Updated goal %s for user %s (fields=%s)", goal_id, user_id, sorted(updates))
            return self.get_goal(user_id, goal_id)
        except sqlite3.Error as error:
            LOGGER.error("Failed to update goal %s for user %s: %s", goal_id, user_id, error)
            return None

    def apply_progress(
        self,
        user_id: int,
        goal_id: int,
        operation: str,
        amount: float,
        operation_id: str | None = None,
        now: datetime | None = None,
    ) -> Dict[str, Any]:
        """Add to or withdraw from a goal balance in one transaction.

        Returns a dict with ``status``:
        ``applied`` (with ``goal``), ``duplicate`` (with ``goal``),
        ``conflict`` when ``operation_id`` was already used for another goal,
        operation or amount, ``not_found``, ``insufficient`` (with ``available``),
        ``invalid_operation`` or ``error``.
        """

        if operation not in {"add", "withdraw"}:
            return {"status": "invalid_operation"}

        delta = self._money(amount)
        stamp = (now or now_tz()).isoformat()
        with self._write_lock:
            try:
                cursor = self.connection.cursor()
                cursor.execute("BEGIN IMMEDIATE")
                goal = self._fetch_goal(cursor, user_id, goal_id)
                if goal is None:
                    self.connection.rollback()
                    return {"status": "not_found"}

                if operation_id:
                    cursor.execute(
                        """
                        SELECT goal_id, operation, amount
                        FROM goal_contributions
                        WHERE user_id = ? AND operation_id = ?
                        """,
                        (user_id, operation_id),
                    )
                    previous = cursor.fetchone()
                    if previous is not None:
                        self.connection.rollback()
                        if (
                            previous["goal_id"] != goal_id
                            or previous["operation"] != operation
                            or self._money(previous["amount"]) != delta
                        ):
                            LOGGER.warning(
                                "Progress operation %s reused for a different request "
                                "(user_id=%s, goal_id=%s, operation=%s, amount=%s)",
                                operation_id,
                                user_id,
                                goal_id,
                                operation,
                                delta,
                            )
                            return {"status": "conflict"}
                        LOGGER.info(
                            "Skipped duplicate progress operation %s (user_id=%s, goal_id=%s)",
                            operation_id,
                            user_id,
                            goal_id,
                        )
                        return {"status": "duplicate", "goal": goal}

                before = goal["current_amount"]
                if operation == "withdraw":
                    if delta > before:
                        self.connection.rollback()
                        return {"status": "insufficient", "available": before}
                    after = self._money(before - delta)
                else:
                    after = self._money(before + delta)

                new_status = status_after_progress(goal["status"], after, goal["target_amount"])
                cursor.execute(
                    """
                    UPDATE goals
                    SET current_amount = ?, status = ?, updated_at = ?
                    WHERE id = ? AND user_id = ?
                    """,
                    (after, new_status, stamp, goal_id, user_id),
                )
                cursor.execute(
                    """
                    INSERT INTO goal_contributions (
                        goal_id, user_id, operation, amount, balance_before,
                        balance_after, operation_id, created_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (goal_id, user_id, operation, delta, before, after, operation_id, stamp),
                )
                updated = self._fetch_goal(cursor, user_id, goal_id)
                self.connection.commit()
            except sqlite3.Error as error:
                self.connection.rollback()
                LOGGER.error(
                    "Failed to apply %s of %s to goal %s for user %s: %s",
                    operation,
                    amount,
                    goal_id,
                    user_id,
                    error,
                )
                return {"status": "error"}

        LOGGER.info(
            "Goal %s progress %s %s for user %s: %s -> %s (status=%s)",
            goal_id,
            operation,
            delta,
            user_id,
            before,
            after,
            new_status,
        )
        return {"status": "applied", "goal": updated}

    def list_contributions(self, user_id: int, goal_id: int) -> List[Dict[str, Any]]:
        """Return the ledger of progress operations for a goal, oldest first."""

        try:
            cursor = self.connection.cursor()
            cursor.execute(
                """
                SELECT id, goal_id, operation, amount, balance_before, balance_after,
                       operation_id, created_at
                FROM goal_contributions
                WHERE user_id = ? AND goal_id = ?
                ORDER BY id
                """,
                (user_id, goal_id),
            )
            return [dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as error:
            LOGGER.error("Failed to fetch contributions for goal %s: %s", goal_id, error)
            return []

    def delete_goal(self, user_id: int, goal_id: int) -> Dict[str, Any]:
        """Delete an empty goal.

        Returns a dict with ``status``: ``deleted``, ``not_found``,
        ``has_balance`` (with ``goal``) or ``error``.
        """

        with self._write_lock:
            try:
                cursor = self.connection.cursor()
                goal = self._fetch_goal(cursor, user_id, goal_id)
                if goal is None:
                    return {"status": "not_found"}
                if goal["current_amount"] > 0:
                    return {"status": "has_balance", "goal": goal}
                cursor.execute("DELETE FROM goals WHERE id = ? AND user_id = ?", (goal_id, user_id))
                self.connection.commit()
            except sqlite3.Error as error:
                self.connection.rollback()
                LOGGER.error("Failed to delete goal %s for user %s: %s", goal_id, user_id, error)
                return {"status": "error"}
        LOGGER.info("Deleted goal %s for user %s", goal_id, user_id)
        return {"status": "deleted"}

    def goals_summary(self, user_id: int) -> Dict[str, Any]:
        """Aggregate goal counts and amounts for a user."""

        try:
            cursor = self.connection.cursor()
            cursor.execute(
                """
                SELECT
                    COUNT(*) AS total_goals,
                    COUNT(CASE WHEN status = 'active' THEN 1 END) AS active_goals,
                    COUNT(CASE WHEN status = 'completed' THEN 1 END) AS completed_goals,
                    COUNT(CASE WHEN status = 'paused' THEN 1 END) AS paused_goals,
                    COALESCE(SUM(target_amount), 0) AS total_target_amount,
                    COALESCE(SUM(current_amount), 0) AS total_current_amount,
                    COALESCE(SUM(CASE WHEN status = 'completed' THEN target_amount ELSE 0 END), 0)
                        AS completed_target_amount,
                    COALESCE(SUM(CASE WHEN status = 'completed' THEN current_amount ELSE 0 END), 0)
                        AS completed_current_amount
                FROM goals
                WHERE user_id = ?
                """,
                (user_id,),
            )
            summary = dict(cursor.fetchone())
        except sqlite3.Error as error:
            LOGGER.error("Failed to build goals summary for user %s: %s", user_id, error)
            return {}

        total_target = self._to_float(summary["total_target_amount"])
        total_current = self._to_float(summary["total_current_amount"])
        progress = total_current / total_target * 100 if total_target > 0 else 0.0
        summary["total_progress_percentage"] = round(progress, 2)
        summary["total_remaining_amount"] = self._money(total_target - total_current)
        return summary

    def close(self) -> None:
        """Close database connection."""

        try:
            self.connection.close()
            LOGGER.info("Database connection closed")
        except sqlite3.Error as error:
            LOGGER.error("Failed to close database connection: %s", error)
