"""Achievement metrics, badge expansion and badge-slot validation.

Pure functions over Habit models; time-sensitive metrics take an explicit
`now` so results are reproducible.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Sequence

from habitcore.analytics.achievements_config import (
    ACCOUNT_AGE,
    BADGE_SLOT_COUNT,
    EMPTY_BADGE_SLOTS,
    LONGEST_CURRENT_STREAK,
    LONGEST_HABIT_STREAK,
    TOTAL_HABIT_COMPLETIONS,
    TOTAL_HABITS_ACHIEVED,
    AchievementDefinition,
    BadgeRef,
    get_achievement,
    list_achievements,
)
from habitcore.analytics.adapters import parse_optional_number, resolve_first
from habitcore.analytics.dates import to_start_of_local_day, to_utc_day_number
from habitcore.analytics.models import (
    AchievementMetrics,
    AchievementSection,
    Badge,
    BadgeDetails,
    Habit,
)
from habitcore.analytics.streaks import (
    compute_best_streak_from_date_keys,
    compute_longest_global_completion_streak,
)

BadgeSlots = list[str | None]

_MISSING = object()

_VARIANTS = {
    LONGEST_CURRENT_STREAK: "streak_current",
    LONGEST_HABIT_STREAK: "streak_habit",
    TOTAL_HABIT_COMPLETIONS: "habit_completions",
    TOTAL_HABITS_ACHIEVED: "habits_achieved",
}


def _now(now: datetime | date | None) -> datetime | date:
    return now if now is not None else datetime.now(timezone.utc)


def _metric_value(metrics: AchievementMetrics, definition: AchievementDefinition) -> int:
    value = parse_optional_number(getattr(metrics, definition.metric_key, 0))
    return max(0, int(value)) if value is not None else 0


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


def has_habit_lifecycle_completed(
    habit: Habit,
    now: datetime | date | None = None,
    tz_name: str | None = None,
) -> bool:
    """True once today's day number has reached the habit's end date."""
    if habit.end_date is None:
        return False
    end_day = to_utc_day_number(habit.end_date, tz_name)
    today = to_utc_day_number(_now(now), tz_name)
    if end_day is None or today is None:
        return False
    return today >= end_day


def get_account_age_months(
    created_at: Any,
    now: datetime | date | None = None,
    tz_name: str | None = None,
) -> int:
    """Whole months elapsed since `created_at`; 0 if unknown or in the future."""
    created = to_start_of_local_day(created_at, tz_name)
    today = to_start_of_local_day(_now(now), tz_name)
    if created is None or today is None:
        return 0
    months = (today.year - created.year) * 12 + (today.month - created.month)
    if today.day < created.day:
        months -= 1
    return max(0, months)


def compute_achievement_metrics(
    habits: Sequence[Habit],
    current_streak: Any = 0,
    profile_created_at: Any = None,
    auth_created_at: Any = None,
    now: datetime | date | None = None,
    tz_name: str | None = None,
) -> AchievementMetrics:
    """Aggregate the five achievement metrics.

    The supplied `current_streak` is a running counter kept elsewhere; it is
    a lower bound on the longest current streak, never a ceiling.
    """
    habits = list(habits or [])
    now = _now(now)

    supplied = parse_optional_number(current_streak) or 0.0
    global_best = compute_longest_global_completion_streak(habits, tz_name)
    longest_current = max(0, int(supplied), global_best)

    longest_habit = 0
    for habit in habits:
        from_dates = compute_best_streak_from_date_keys(habit.completed_dates, habit.goal_period, tz_name)
        longest_habit = max(longest_habit, habit.streak, from_dates)

    created_at = resolve_first(
        (profile_created_at, auth_created_at),
        [lambda s: s[0], lambda s: s[1]],
        lambda v: v if to_start_of_local_day(v, tz_name) is not None else None,
    )

    return AchievementMetrics(
        longest_current_streak=longest_current,
        longest_habit_streak=longest_habit,
        total_habit_completions=sum(len(h.completed_dates) for h in habits),
        total_habits_achieved=sum(1 for h in habits if has_habit_lifecycle_completed(h, now, tz_name)),
        account_age_months=get_account_age_months(created_at, now, tz_name),
    )


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def _plural(value: int, singular: str, plural: str) -> str:
    return f"{value} {singular if value == 1 else plural}"


def build_milestone_label(achievement_id: str, milestone: int) -> str:
    if achievement_id in (LONGEST_CURRENT_STREAK, LONGEST_HABIT_STREAK):
        return _plural(milestone, "day", "days")
    if achievement_id == TOTAL_HABIT_COMPLETIONS:
        return _plural(milestone, "habit completion", "habit completions")
    if achievement_id == TOTAL_HABITS_ACHIEVED:
        return _plural(milestone, "habit achieved", "habits achieved")
    if achievement_id == ACCOUNT_AGE:
        if milestone >= 12:
            return _plural(milestone // 12, "year", "years")
        return _plural(milestone, "month", "months")
    return str(milestone)


def get_badge_variant(achievement_id: str, milestone: int) -> str:
    if achievement_id == ACCOUNT_AGE:
        return "account_yearly" if milestone >= 12 else "account_monthly"
    return _VARIANTS.get(achievement_id, "default")


# ---------------------------------------------------------------------------
# Badge IDs
# ---------------------------------------------------------------------------


def format_badge_id(ref: BadgeRef) -> str:
    return ref.badge_id


def parse_badge_id(value: Any) -> BadgeRef | None:
    """Parse "<achievement_id>:<milestone>".

    The milestone must be one of the definition's own milestones; any other
    number is rejected even if it looks plausible.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    parts = text.split(":")
    if len(parts) != 2:
        return None
    achievement_id, raw_milestone = parts[0].strip(), parts[1]
    definition = get_achievement(achievement_id)
    milestone = parse_optional_number(raw_milestone)
    if definition is None or milestone is None or not milestone.is_integer():
        return None
    if int(milestone) not in definition.milestones:
        return None
    return BadgeRef(achievement_id=achievement_id, milestone=int(milestone))


def sanitize_badge_id(value: Any) -> str | None:
    """Canonical badge ID string, or None if `value` is not a catalog badge."""
    ref = parse_badge_id(value)
    return format_badge_id(ref) if ref is not None else None


def get_badge_details(badge_id: Any) -> BadgeDetails | None:
    ref = parse_badge_id(badge_id)
    if ref is None:
        return None
    definition = get_achievement(ref.achievement_id)
    return BadgeDetails(
        badge_id=ref.badge_id,
        achievement_id=ref.achievement_id,
        title=definition.title,
        slot_title=definition.slot_title or definition.title,
        milestone=ref.milestone,
        milestone_label=build_milestone_label(ref.achievement_id, ref.milestone),
        variant=get_badge_variant(ref.achievement_id, ref.milestone),
    )


def is_badge_unlocked(badge_id: Any, metrics: AchievementMetrics) -> bool:
    ref = parse_badge_id(badge_id)
    if ref is None:
        return False
    definition = get_achievement(ref.achievement_id)
    return _metric_value(metrics, definition) >= ref.milestone


# ---------------------------------------------------------------------------
# Badge slots
# ---------------------------------------------------------------------------


def _slot_source(value: Any) -> list[Any]:
    """Raw slot values by index; _MISSING marks a slot the payload omits."""
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, Mapping):
        slots: list[Any] = []
        for index in range(1, BADGE_SLOT_COUNT + 1):
            # slotN wins when set; an explicit badge_slot_N (even null) is present
            raw = value.get(f"slot{index}")
            if raw is None:
                raw = value.get(f"badge_slot_{index}", _MISSING)
            slots.append(raw)
        return slots
    return []


def normalize_badge_slots(
    value: Any,
    fallback: Iterable[Any] = EMPTY_BADGE_SLOTS,
) -> BadgeSlots:
    """Exactly three slots, each a valid badge ID or None.

    Accepts a list or a mapping with slot1..slot3 / badge_slot_1..3 keys. A
    slot the payload omits takes the fallback's slot; a slot that is present
    but invalid becomes None. Idempotent.
    """
    fallback_slots = list(fallback) if isinstance(fallback, (list, tuple)) else []
    fallback_slots = (fallback_slots + list(EMPTY_BADGE_SLOTS))[:BADGE_SLOT_COUNT]
    normalized: BadgeSlots = [sanitize_badge_id(slot) for slot in fallback_slots]

    source = _slot_source(value)
    for index in range(BADGE_SLOT_COUNT):
        raw = source[index] if index < len(source) else _MISSING
        if raw is _MISSING:
            continue
        normalized[index] = sanitize_badge_id(raw)
    return normalized


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def build_achievement_sections(
    metrics: AchievementMetrics,
    badge_slots: Any = EMPTY_BADGE_SLOTS,
) -> list[AchievementSection]:
    """One section per achievement, one badge per milestone."""
    equipped = normalize_badge_slots(badge_slots)
    sections: list[AchievementSection] = []

    for definition in list_achievements():
        metric_value = _metric_value(metrics, definition)
        badges: list[Badge] = []
        for milestone in definition.milestones:
            badge_id = BadgeRef(definition.id, milestone).badge_id
            badges.append(
                Badge(
                    badge_id=badge_id,
                    achievement_id=definition.id,
                    title=definition.title,
                    slot_title=definition.slot_title,
                    milestone=milestone,
                    milestone_label=build_milestone_label(definition.id, milestone),
                    variant=get_badge_variant(definition.id, milestone),
                    unlocked=metric_value >= milestone,
                    metric_value=metric_value,
                    equipped_slots=[i + 1 for i, slot in enumerate(equipped) if slot == badge_id],
                )
            )
        sections.append(
            AchievementSection(
                id=definition.id,
                title=definition.title,
                metric_value=metric_value,
                badges=badges,
            )
        )
    return sections
