"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

import pytest

from habitcore.analytics.models import Habit, WeightManagerState

# Fixed clock: every time-sensitive test injects this instead of "now"
NOW = datetime(2026, 2, 15, 12, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


@pytest.fixture(autouse=True)
def utc_local_zone(monkeypatch):
    """Pin "local" to UTC regardless of the environment."""
    from habitcore.config import settings

    monkeypatch.setattr(settings, "default_tz", "UTC")


def days(start: date, *offsets: int) -> list[date]:
    return [start + timedelta(days=o) for o in offsets]


def make_habit(
    completed: list[Any] | None = None,
    goal_period: str = "day",
    streak: int = 0,
    end_date: date | None = None,
    habit_id: str = "h1",
) -> Habit:
    return Habit(
        id=habit_id,
        title=f"Habit {habit_id}",
        goal_period=goal_period,
        streak=streak,
        completed_dates=completed or [],
        end_date=end_date,
    )


def make_state(**overrides: Any) -> WeightManagerState:
    defaults: dict[str, Any] = dict(
        current_weight=80.0,
        target_weight=72.0,
        weight_unit="kg",
        current_body_type="muscular",
        target_body_type="lean",
    )
    defaults.update(overrides)
    return WeightManagerState(**defaults)
