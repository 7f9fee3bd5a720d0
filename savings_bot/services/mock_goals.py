"""Demo goals served in offline mode or when the API is unreachable."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from savings_bot.services.types import Goal


def build_mock_goals(now: datetime | None = None) -> list[Goal]:
    """Return a fresh list of demo goals relative to ``now``."""

    current = now or datetime.now(tz=timezone.utc)
    stamp = current.isoformat()
    return [
        Goal(
            id=1,
            name="Emergency Fund",
            description="Build an emergency fund for unexpected expenses",
            target_amount=10000.0,
            current_amount=3500.0,
            target_date=(current + timedelta(days=180)).date().isoformat(),
            status="active",
            goal_type="emergency_fund",
            icon="shield",
            color="#FF6B6B",
            created_at=stamp,
            updated_at=stamp,
        ),
        Goal(
            id=2,
            name="Vacation Fund",
            description="Save for a dream vacation",
            target_amount=5000.0,
            current_amount=1200.0,
            target_date=(current + timedelta(days=90)).date().isoformat(),
            status="active",
            goal_type="savings",
            icon="airplane",
            color="#4ECDC4",
            created_at=stamp,
            updated_at=stamp,
        ),
    ]
