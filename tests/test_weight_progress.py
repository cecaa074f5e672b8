"""Tests for the daily weight progress list and storage keys."""

from datetime import date, timedelta

from habitcore.analytics.models import ProgressEntry
from habitcore.analytics.storage_keys import (
    resolve_user_id,
    weight_journey_history_key,
    weight_manager_state_key,
    weight_progress_key,
)
from habitcore.analytics.weight_progress import (
    normalize_progress_entries,
    parse_weight_progress_payload,
    weight_difference,
    with_today_progress_entry,
)
from tests.conftest import TODAY


class TestNormalizeProgressEntries:
    def test_sorted_oldest_first(self):
        result = normalize_progress_entries([
            {"dateKey": "2026-02-03", "weight": 79},
            {"dateKey": "2026-02-01", "weight": 80},
        ])
        assert [e.date_key for e in result] == ["2026-02-01", "2026-02-03"]

    def test_same_day_last_wins(self):
        result = normalize_progress_entries([
            {"dateKey": "2026-02-01", "weight": 80},
            {"date": "2026-02-01T20:00:00Z", "weight": 79.66},
        ])
        assert result == [ProgressEntry(date_key="2026-02-01", weight=79.7)]

    def test_invalid_skipped(self):
        result = normalize_progress_entries([
            {"dateKey": "2026-02-01", "weight": 0},
            {"dateKey": "whenever", "weight": 80},
            {"weight": 80},
            None,
        ])
        assert result == []

    def test_non_list(self):
        assert normalize_progress_entries("entries") == []


class TestPayload:
    def test_full(self):
        payload = parse_weight_progress_payload({
            "startingWeight": "82.04",
            "currentWeight": 79.5,
            "entries": [{"dateKey": "2026-02-01", "weight": 80}],
        })
        assert payload.starting_weight == 82.0
        assert payload.current_weight == 79.5
        assert len(payload.entries) == 1

    def test_garbage(self):
        payload = parse_weight_progress_payload("nope")
        assert payload.starting_weight is None
        assert payload.entries == []


class TestTodayEntry:
    def test_adds_today(self):
        result = with_today_progress_entry([{"dateKey": "2026-02-14", "weight": 80}], 79.84, on=TODAY)
        assert result[-1] == ProgressEntry(date_key="2026-02-15", weight=79.8)

    def test_replaces_today(self):
        entries = [{"dateKey": "2026-02-15", "weight": 80}]
        result = with_today_progress_entry(entries, 79, on=TODAY)
        assert result == [ProgressEntry(date_key="2026-02-15", weight=79.0)]

    def test_invalid_weight_keeps_list(self):
        entries = [{"dateKey": "2026-02-14", "weight": 80}]
        assert len(with_today_progress_entry(entries, "??", on=TODAY)) == 1

    def test_caps_to_newest(self):
        entries = [{"dateKey": (TODAY - timedelta(days=n)).isoformat(), "weight": 80} for n in range(1, 10)]
        result = with_today_progress_entry(entries, 79, max_entries=5, on=TODAY)
        assert len(result) == 5
        assert result[-1].date_key == TODAY.isoformat()
        assert result[0].date_key == (TODAY - timedelta(days=4)).isoformat()

    def test_no_cap(self):
        entries = [{"dateKey": (TODAY - timedelta(days=n)).isoformat(), "weight": 80} for n in range(1, 70)]
        assert len(with_today_progress_entry(entries, 79, max_entries=None, on=TODAY)) == 70
        assert len(with_today_progress_entry(entries, 79, on=TODAY)) == 60


class TestWeightDifference:
    def test_signed(self):
        assert weight_difference(82, 79.5) == -2.5
        assert weight_difference(70, 71.26) == 1.3

    def test_missing(self):
        assert weight_difference(None, 80) is None
        assert weight_difference(80, "") is None


class TestStorageKeys:
    def test_precedence(self):
        assert resolve_user_id("auth-1", "profile-1", "user-1") == "auth-1"
        assert resolve_user_id(None, "profile-1", "user-1") == "profile-1"
        assert resolve_user_id("", "  ", "user-1") == "user-1"
        assert resolve_user_id() == "default"

    def test_numeric_ids(self):
        assert resolve_user_id(42) == "42"

    def test_keys(self):
        assert weight_manager_state_key("u1") == "weight_manager_state:u1"
        assert weight_journey_history_key("u1") == "weight_manager_journey_history:u1"
        assert weight_progress_key() == "weight_progress_check:default"

    def test_users_isolated(self):
        assert weight_manager_state_key("a") != weight_manager_state_key("b")


def test_date_entries_accept_date_objects():
    result = normalize_progress_entries([{"date": date(2026, 2, 1), "weight": 80}])
    assert result[0].date_key == "2026-02-01"
