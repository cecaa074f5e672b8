"""Progress analytics contract: Pydantic v2 models.

Models serialise with camelCase aliases (the storage wire shape) and accept
either the alias or the field name on construction.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GoalPeriod(str, Enum):
    day = "day"
    week = "week"
    month = "month"


class WeightUnit(str, Enum):
    kg = "kg"
    lb = "lb"


class JourneyGoalMode(str, Enum):
    duration = "duration"
    date = "date"


class JourneyStatus(str, Enum):
    active = "active"
    completed = "completed"


# ---------------------------------------------------------------------------
# Habits & achievements
# ---------------------------------------------------------------------------


class Habit(CamelModel):
    id: str
    title: str = ""
    goal_period: GoalPeriod = GoalPeriod.day
    streak: int = 0
    completed_dates: list[date] = Field(default_factory=list)
    end_date: date | None = None


class AchievementMetrics(CamelModel):
    longest_current_streak: int = 0
    longest_habit_streak: int = 0
    total_habit_completions: int = 0
    total_habits_achieved: int = 0
    account_age_months: int = 0


class BadgeDetails(CamelModel):
    badge_id: str
    achievement_id: str
    title: str
    slot_title: str
    milestone: int
    milestone_label: str
    variant: str


class Badge(BadgeDetails):
    unlocked: bool = False
    metric_value: int = 0
    equipped_slots: list[int] = Field(default_factory=list)  # 1-based


class AchievementSection(CamelModel):
    id: str
    title: str
    metric_value: int = 0
    badges: list[Badge] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Weight management
# ---------------------------------------------------------------------------


class WeightManagerState(CamelModel):
    """Snapshot of the live planning inputs. Weights are in `weight_unit`."""

    starting_weight: float | None = None
    current_weight: float | None = None
    target_weight: float | None = None
    weight_unit: WeightUnit = WeightUnit.kg
    current_body_type: str = "muscular"
    target_body_type: str = "muscular"
    journey_goal_mode: JourneyGoalMode = JourneyGoalMode.duration
    journey_duration_weeks: float | None = None
    journey_goal_date: date | None = None
    saved_at: datetime | None = None


class WeightPlan(CamelModel):
    maintenance_calories: int
    target_calories: int
    protein_grams: int
    carbs_grams: int
    fat_grams: int
    daily_calorie_delta: int
    weekly_weight_change_kg: float
    estimated_days: int
    timeline_target_days: int | None = None
    timeline_goal_met: bool = True
    projected_end_date_iso: str = Field(alias="projectedEndDateISO")
    journey_progress_percent: float
    starting_kg: float
    current_kg: float
    target_kg: float
    remaining_kg: float


class WeightCheckIn(CamelModel):
    logged_at: datetime
    date_key: str
    weight: float
    unit: WeightUnit = WeightUnit.kg


class JourneyEntry(CamelModel):
    """Immutable history snapshot of one weight journey."""

    model_config = ConfigDict(frozen=True)

    id: str
    status: JourneyStatus
    completed_reason: str | None = None
    created_at: datetime
    completed_at: datetime | None = None
    unit: WeightUnit = WeightUnit.kg
    starting_weight: float | None = None
    current_weight: float | None = None
    target_weight: float | None = None
    current_body_type: str = "muscular"
    target_body_type: str = "muscular"
    journey_goal_mode: JourneyGoalMode = JourneyGoalMode.duration
    journey_duration_weeks: float | None = None
    journey_goal_date: str | None = None

    # Plan fields frozen when the entry was built
    timeline_target_days: int | None = None
    estimated_days: int | None = None
    projected_end_date_iso: str | None = Field(default=None, alias="projectedEndDateISO")
    target_calories: int | None = None
    maintenance_calories: int | None = None
    protein_grams: int | None = None
    carbs_grams: int | None = None
    fat_grams: int | None = None
    daily_calorie_delta: int | None = None
    weekly_weight_change_kg: float | None = None
    timeline_goal_met: bool | None = None

    check_ins: list[WeightCheckIn] = Field(default_factory=list)

    @property
    def sort_timestamp(self) -> datetime:
        return self.completed_at or self.created_at


class ProgressEntry(CamelModel):
    date_key: str
    weight: float


class WeightProgressPayload(CamelModel):
    starting_weight: float | None = None
    current_weight: float | None = None
    entries: list[ProgressEntry] = Field(default_factory=list)


class WeightValue(CamelModel):
    value: float
    unit: WeightUnit


class WeightManagerOverview(CamelModel):
    unit: WeightUnit = WeightUnit.kg
    plan: WeightPlan | None = None
    target_body_type: str | None = None
    latest_log: WeightCheckIn | None = None
    earliest_log: WeightCheckIn | None = None
    starting_value: WeightValue | None = None
    current_value: WeightValue | None = None
    starting_display: str = "--"
    current_display: str = "--"
    target_display: str = "--"
