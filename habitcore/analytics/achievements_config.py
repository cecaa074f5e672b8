"""Static achievement catalog. Config only.

Each AchievementDefinition ties one metric of AchievementMetrics to the
milestones at which its badges unlock. Badge identity is the tagged
BadgeRef; the "<achievement_id>:<milestone>" string only exists at the
storage boundary (see achievements.parse_badge_id / format_badge_id).
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

LONGEST_CURRENT_STREAK = "longest_current_streak"
LONGEST_HABIT_STREAK = "longest_habit_streak"
TOTAL_HABIT_COMPLETIONS = "total_habit_completions"
TOTAL_HABITS_ACHIEVED = "total_habits_achieved"
ACCOUNT_AGE = "account_age"

BADGE_SLOT_COUNT = 3
EMPTY_BADGE_SLOTS: tuple[None, None, None] = (None, None, None)

_STREAK_MILESTONES = (2, 5, 7, 14, 30, 60, 90, 100, 180, 275, 365)


@dataclass(frozen=True, slots=True)
class AchievementDefinition:
    id: str
    title: str
    slot_title: str
    metric_key: str  # field name on AchievementMetrics
    milestones: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class BadgeRef:
    achievement_id: str
    milestone: int

    @property
    def badge_id(self) -> str:
        return f"{self.achievement_id}:{self.milestone}"


ACHIEVEMENTS_BY_ID = MappingProxyType({
    LONGEST_CURRENT_STREAK: AchievementDefinition(
        id=LONGEST_CURRENT_STREAK,
        title="Longest Current Streak",
        slot_title="Current Streak",
        metric_key="longest_current_streak",
        milestones=_STREAK_MILESTONES,
    ),
    LONGEST_HABIT_STREAK: AchievementDefinition(
        id=LONGEST_HABIT_STREAK,
        title="Longest Habit Streak",
        slot_title="Habit Streak",
        metric_key="longest_habit_streak",
        milestones=_STREAK_MILESTONES,
    ),
    TOTAL_HABIT_COMPLETIONS: AchievementDefinition(
        id=TOTAL_HABIT_COMPLETIONS,
        title="Total Habit Completions",
        slot_title="Completions",
        metric_key="total_habit_completions",
        milestones=(1, 5, 10, 25, 50, 100, 250, 500, 1000),
    ),
    TOTAL_HABITS_ACHIEVED: AchievementDefinition(
        id=TOTAL_HABITS_ACHIEVED,
        title="Total Habits Achieved",
        slot_title="Habits Achieved",
        metric_key="total_habits_achieved",
        milestones=(1, 3, 5, 10, 25, 50, 75, 100),
    ),
    # Milestones in months; 12 and above are shown as years
    ACCOUNT_AGE: AchievementDefinition(
        id=ACCOUNT_AGE,
        title="Account Age",
        slot_title="Account Age",
        metric_key="account_age_months",
        milestones=(1, 3, 6, 9, 12, 24, 36, 48, 60),
    ),
})


def get_achievement(achievement_id: str) -> AchievementDefinition | None:
    return ACHIEVEMENTS_BY_ID.get(achievement_id)


def list_achievements() -> list[AchievementDefinition]:
    return list(ACHIEVEMENTS_BY_ID.values())
