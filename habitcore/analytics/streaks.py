"""Best-streak computation over completion dates. Pure, never raises."""

from __future__ import annotations

from typing import Iterable, Sequence

from habitcore.analytics.dates import get_streak_period_index, to_utc_day_number
from habitcore.analytics.models import GoalPeriod, Habit


def compute_best_run_from_indices(indices: Sequence[int]) -> int:
    """Longest run of +1 steps in a sorted, de-duplicated index sequence.

    Empty input yields 0, a single index yields 1.
    """
    if not indices:
        return 0
    best = 1
    current = 1
    for previous, index in zip(indices, indices[1:]):
        if index - previous == 1:
            current += 1
            if current > best:
                best = current
        else:
            current = 1
    return best


def collect_period_indices(
    values: Iterable[object],
    goal_period: GoalPeriod | str = GoalPeriod.day,
    tz_name: str | None = None,
) -> list[int]:
    """Sorted unique period indices; unparseable values are skipped."""
    indices = {get_streak_period_index(v, goal_period, tz_name) for v in values or ()}
    indices.discard(None)
    return sorted(indices)


def compute_best_streak_from_date_keys(
    dates: Iterable[object],
    goal_period: GoalPeriod | str = GoalPeriod.day,
    tz_name: str | None = None,
) -> int:
    """Best streak ever for one habit, counted in its own goal period."""
    return compute_best_run_from_indices(collect_period_indices(dates, goal_period, tz_name))


def compute_longest_global_completion_streak(
    habits: Iterable[Habit],
    tz_name: str | None = None,
) -> int:
    """Most consecutive days with at least one completion of any habit.

    Always day granularity, whatever each habit's goal period is.
    """
    day_numbers: set[int] = set()
    for habit in habits or ():
        for value in habit.completed_dates:
            day_number = to_utc_day_number(value, tz_name)
            if day_number is not None:
                day_numbers.add(day_number)
    return compute_best_run_from_indices(sorted(day_numbers))
