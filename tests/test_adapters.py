"""Tests for the payload adapters and model serialization."""

from datetime import date, datetime, timezone

import pytest

from habitcore.analytics.adapters import (
    coerce_habit,
    coerce_habits,
    coerce_weight_manager_state,
    key,
    parse_optional_number,
    parse_positive_number,
    parse_unit,
    resolve_first,
    round_weight,
)
from habitcore.analytics.models import GoalPeriod, JourneyGoalMode, WeightManagerState, WeightUnit
from tests.conftest import make_state


class TestNumbers:
    @pytest.mark.parametrize("value, expected", [("80.5", 80.5), (3, 3.0), (" 7 ", 7.0), (-2, -2.0)])
    def test_optional_number(self, value, expected):
        assert parse_optional_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "  ", "abc", True, float("nan"), float("-inf"), [], {}])
    def test_optional_number_missing(self, value):
        assert parse_optional_number(value) is None

    def test_positive(self):
        assert parse_positive_number(0) is None
        assert parse_positive_number(-1) is None
        assert parse_positive_number("0.1") == 0.1

    def test_round_weight(self):
        assert round_weight("72.46") == 72.5
        assert round_weight(0) is None


class TestUnit:
    def test_strict(self):
        assert parse_unit("lb") is WeightUnit.lb
        assert parse_unit("kg") is WeightUnit.kg
        assert parse_unit("LB") is None
        assert parse_unit(None) is None


class TestResolveFirst:
    def test_first_acceptable_wins(self):
        source = {"a": {"b": "junk"}, "c": "12"}
        assert resolve_first(source, [key("a.b"), key("c")], parse_optional_number) == 12.0

    def test_none_when_nothing_matches(self):
        assert resolve_first({}, [key("x"), key("y.z")], parse_optional_number) is None

    def test_path_through_non_mapping(self):
        assert key("a.b")({"a": 5}) is None


class TestCoerceHabit:
    def test_camel_case_payload(self):
        habit = coerce_habit({
            "id": "h1",
            "title": " Read ",
            "goalPeriod": "week",
            "streak": "4",
            "completedDates": ["2026-02-01", "bad", "2026-02-08T10:00:00Z"],
            "endDate": "2026-03-01",
        })
        assert habit.title == "Read"
        assert habit.goal_period is GoalPeriod.week
        assert habit.streak == 4
        assert habit.completed_dates == [date(2026, 2, 1), date(2026, 2, 8)]
        assert habit.end_date == date(2026, 3, 1)

    def test_snake_case_payload(self):
        habit = coerce_habit({"id": 7, "goal_period": "month", "completed_dates": ["2026-01-01"], "end_date": "x"})
        assert habit.id == "7"
        assert habit.goal_period is GoalPeriod.month
        assert habit.end_date is None

    def test_defaults(self):
        habit = coerce_habit({"streak": -3, "goalPeriod": "yearly"})
        assert habit.streak == 0
        assert habit.goal_period is GoalPeriod.day
        assert habit.completed_dates == []

    def test_duplicates_kept(self):
        habit = coerce_habit({"id": "h", "completedDates": ["2026-02-01", "2026-02-01"]})
        assert len(habit.completed_dates) == 2

    def test_non_mapping(self):
        assert coerce_habit("habit") is None

    def test_list(self):
        habits = coerce_habits([{"id": "a"}, None, {"id": "b"}])
        assert [h.id for h in habits] == ["a", "b"]
        assert coerce_habits({"id": "a"}) == []


class TestCoerceWeightManagerState:
    def test_stored_wins(self):
        state = coerce_weight_manager_state(
            {"currentWeight": "81", "targetWeight": 75, "weightUnit": "lb", "journeyGoalMode": "date",
             "journeyGoalDate": "2026-05-01", "savedAt": "2026-02-01T10:00:00Z"},
            {"weightManagerCurrentWeight": 90, "weightManagerUnit": "kg"},
        )
        assert state.current_weight == 81.0
        assert state.target_weight == 75.0
        assert state.weight_unit is WeightUnit.lb
        assert state.journey_goal_mode is JourneyGoalMode.date
        assert state.journey_goal_date == date(2026, 5, 1)
        assert state.saved_at == datetime(2026, 2, 1, 10, tzinfo=timezone.utc)

    def test_profile_fills_gaps(self):
        state = coerce_weight_manager_state(
            {"currentWeight": "oops"},
            {
                "weightManagerCurrentWeight": 90,
                "weightManagerTargetWeight": 80,
                "weightManagerUnit": "lb",
                "weightManagerTargetBodyType": "lean",
            },
        )
        assert state.current_weight == 90.0
        assert state.target_weight == 80.0
        assert state.weight_unit is WeightUnit.lb
        assert state.current_body_type == "muscular"
        assert state.target_body_type == "lean"

    def test_empty_sources(self):
        assert coerce_weight_manager_state(None) is None
        assert coerce_weight_manager_state({"weightUnit": "lb"}, {}) is None

    def test_body_type_only(self):
        state = coerce_weight_manager_state({"currentBodyType": "bulky"})
        assert state.current_body_type == "bulky"
        assert state.current_weight is None

    def test_invalid_duration_dropped(self):
        state = coerce_weight_manager_state({"currentWeight": 80, "journeyDurationWeeks": "-2"})
        assert state.journey_duration_weeks is None

    def test_accepts_model(self):
        state = coerce_weight_manager_state(make_state(starting_weight=85))
        assert state.starting_weight == 85.0
        assert state.target_body_type == "lean"


class TestSerialization:
    def test_camel_case_round_trip(self):
        state = make_state(journey_duration_weeks=12)
        data = state.model_dump(mode="json", by_alias=True)
        assert data["currentWeight"] == 80.0
        assert data["journeyDurationWeeks"] == 12
        assert data["weightUnit"] == "kg"
        assert WeightManagerState.model_validate(data) == state

    def test_populate_by_field_name(self):
        assert WeightManagerState(current_weight=70).current_weight == 70.0
        assert WeightManagerState(currentWeight=70).current_weight == 70.0
