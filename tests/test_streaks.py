"""Tests for best-streak computation."""

from datetime import date

from habitcore.analytics.dates import from_utc_day_number
from habitcore.analytics.streaks import (
    collect_period_indices,
    compute_best_run_from_indices,
    compute_best_streak_from_date_keys,
    compute_longest_global_completion_streak,
)
from tests.conftest import days, make_habit

START = date(2026, 1, 1)


class TestBestRunFromIndices:
    def test_empty(self):
        assert compute_best_run_from_indices([]) == 0

    def test_single(self):
        assert compute_best_run_from_indices([42]) == 1

    def test_all_consecutive(self):
        assert compute_best_run_from_indices([3, 4, 5, 6]) == 4

    def test_gap_resets(self):
        assert compute_best_run_from_indices([1, 2, 3, 5, 6, 7, 8]) == 4

    def test_best_run_first(self):
        assert compute_best_run_from_indices([1, 2, 3, 4, 10, 11]) == 4

    def test_result_within_bounds(self):
        samples = [[5], [1, 3, 5], [1, 2, 4, 5, 6], list(range(10)), [0, 7, 8, 20, 21, 22]]
        for indices in samples:
            result = compute_best_run_from_indices(indices)
            assert 1 <= result <= len(indices)

    def test_appending_next_index_never_decreases(self):
        samples = [[1, 2, 3, 7], [4], [1, 3, 5, 6], [10, 11, 12, 13]]
        for indices in samples:
            before = compute_best_run_from_indices(indices)
            after = compute_best_run_from_indices(indices + [indices[-1] + 1])
            assert after >= before


class TestBestStreakFromDateKeys:
    def test_day_scenario(self):
        completed = [from_utc_day_number(n) for n in (1, 2, 3, 5, 6, 7, 8)]
        assert compute_best_streak_from_date_keys(completed, "day") == 4

    def test_duplicates_collapse(self):
        completed = days(START, 0, 0, 1, 1, 2)
        assert compute_best_streak_from_date_keys(completed) == 3

    def test_unsorted_and_mixed_types(self):
        completed = ["2026-01-03", date(2026, 1, 1), "2026-01-02T22:00:00Z"]
        assert compute_best_streak_from_date_keys(completed) == 3

    def test_unparseable_skipped(self):
        assert compute_best_streak_from_date_keys(["2026-01-01", "junk", None, "2026-01-02"]) == 2

    def test_empty(self):
        assert compute_best_streak_from_date_keys([]) == 0
        assert compute_best_streak_from_date_keys(None) == 0

    def test_weekly_period(self):
        # Mondays 2026-01-05, 01-12, 01-19 and a Sunday 01-25 (same week as 01-19)
        completed = ["2026-01-05", "2026-01-12", "2026-01-19", "2026-01-25", "2026-02-09"]
        assert compute_best_streak_from_date_keys(completed, "week") == 3

    def test_weekly_ignores_daily_gaps(self):
        completed = ["2026-01-05", "2026-01-16"]  # Mon and the following Fri
        assert compute_best_streak_from_date_keys(completed, "day") == 1
        assert compute_best_streak_from_date_keys(completed, "week") == 2

    def test_monthly_period(self):
        completed = ["2025-11-30", "2025-12-01", "2026-01-31", "2026-03-01"]
        assert compute_best_streak_from_date_keys(completed, "month") == 3


class TestCollectPeriodIndices:
    def test_sorted_unique(self):
        indices = collect_period_indices(["2026-01-03", "2026-01-01", "2026-01-03"])
        assert indices == sorted(set(indices))
        assert len(indices) == 2


class TestGlobalCompletionStreak:
    def test_union_across_habits(self):
        a = make_habit(days(START, 0, 2), habit_id="a")
        b = make_habit(days(START, 1, 3), habit_id="b")
        assert compute_longest_global_completion_streak([a, b]) == 4

    def test_always_daily(self):
        weekly = make_habit(["2026-01-05", "2026-01-12", "2026-01-19"], goal_period="week")
        assert compute_longest_global_completion_streak([weekly]) == 1

    def test_no_habits(self):
        assert compute_longest_global_completion_streak([]) == 0

    def test_habits_without_completions(self):
        assert compute_longest_global_completion_streak([make_habit([])]) == 0
