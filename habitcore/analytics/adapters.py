"""Boundary adapters: loose stored/profile payloads → strict internal models.

Everything here is tolerant of aliased keys, strings in numeric fields and
missing values. Nothing raises; unusable values become None (or are
dropped from lists). Core modules only ever see the models these return.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Iterable, Mapping, Sequence, TypeVar

from pydantic import BaseModel

from habitcore.analytics.body_types import DEFAULT_BODY_TYPE
from habitcore.analytics.dates import normalize_goal_period, to_start_of_local_day, to_utc_timestamp
from habitcore.analytics.models import (
    Habit,
    JourneyGoalMode,
    JourneyStatus,
    WeightManagerState,
    WeightUnit,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Extractor = Callable[[Any], Any]


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def as_mapping(value: Any) -> Mapping[str, Any] | None:
    """Models are dumped by alias so every payload looks like stored JSON."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, Mapping):
        return value
    return None


def key(*path: str) -> Extractor:
    """Extractor reading a dot-path like 'profile.weightManagerUnit'."""

    def _extract(source: Any) -> Any:
        current = source
        for part in ".".join(path).split("."):
            if not isinstance(current, Mapping):
                return None
            current = current.get(part)
        return current

    return _extract


def resolve_first(
    source: Any,
    extractors: Sequence[Extractor],
    normalize: Callable[[Any], T | None],
) -> T | None:
    """Evaluate `extractors` in order; return the first value `normalize` accepts."""
    for extract in extractors:
        value = normalize(extract(source))
        if value is not None:
            return value
    return None


# ---------------------------------------------------------------------------
# Scalar normalizers
# ---------------------------------------------------------------------------


def parse_optional_number(value: Any) -> float | None:
    """Finite float or None. Empty strings and booleans count as missing."""
    if _missing(value) or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return parsed if math.isfinite(parsed) else None


def parse_positive_number(value: Any) -> float | None:
    parsed = parse_optional_number(value)
    if parsed is None or parsed <= 0:
        return None
    return parsed


def parse_optional_int(value: Any) -> int | None:
    parsed = parse_optional_number(value)
    return round(parsed) if parsed is not None else None


def round_weight(value: Any) -> float | None:
    """Positive weight rounded to one decimal, or None."""
    parsed = parse_positive_number(value)
    return round(parsed, 1) if parsed is not None else None


def parse_unit(value: Any) -> WeightUnit | None:
    """Strict: only 'kg' and 'lb' are recognised."""
    if value == "lb":
        return WeightUnit.lb
    if value == "kg":
        return WeightUnit.kg
    return None


def normalize_unit(value: Any) -> WeightUnit:
    return WeightUnit.lb if value == "lb" else WeightUnit.kg


def normalize_goal_mode(value: Any) -> JourneyGoalMode:
    return JourneyGoalMode.date if value == "date" else JourneyGoalMode.duration


def normalize_status(value: Any) -> JourneyStatus:
    return JourneyStatus.active if value == "active" else JourneyStatus.completed


def parse_body_type_key(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_text(value: Any) -> str | None:
    if _missing(value):
        return None
    return str(value).strip()


# ---------------------------------------------------------------------------
# Habits
# ---------------------------------------------------------------------------


def coerce_habit(raw: Any, tz_name: str | None = None) -> Habit | None:
    """Map a loosely-shaped habit payload onto Habit.

    Unparseable completion dates are dropped; same-day duplicates are kept
    (completion totals count every log entry).
    """
    data = as_mapping(raw)
    if data is None:
        return None

    completed: list = []
    raw_dates = resolve_first(data, [key("completedDates"), key("completed_dates")], _as_list) or []
    for value in raw_dates:
        day = to_start_of_local_day(value, tz_name)
        if day is None:
            logger.debug("Dropping unparseable completion date: %r", value)
            continue
        completed.append(day)

    streak = parse_optional_number(data.get("streak"))
    return Habit(
        id=parse_text(data.get("id")) or "",
        title=parse_text(data.get("title")) or "",
        goal_period=normalize_goal_period(
            resolve_first(data, [key("goalPeriod"), key("goal_period")], parse_text)
        ),
        streak=max(0, int(streak)) if streak is not None else 0,
        completed_dates=completed,
        end_date=resolve_first(
            data,
            [key("endDate"), key("end_date")],
            lambda v: to_start_of_local_day(v, tz_name),
        ),
    )


def coerce_habits(raw: Any, tz_name: str | None = None) -> list[Habit]:
    habits: list[Habit] = []
    for item in _as_list(raw) or []:
        habit = coerce_habit(item, tz_name)
        if habit is not None:
            habits.append(habit)
    return habits


def _as_list(value: Any) -> list | None:
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


# ---------------------------------------------------------------------------
# Weight manager state
# ---------------------------------------------------------------------------


def coerce_weight_manager_state(
    raw: Any,
    profile: Any = None,
) -> WeightManagerState | None:
    """Merge a stored planning state with the profile's weight-manager fields.

    Stored values win field by field; profile fields fill the gaps. Returns
    None when neither source carries a weight or a body type.
    """
    source = {"stored": as_mapping(raw) or {}, "profile": as_mapping(profile) or {}}

    current_weight = resolve_first(
        source,
        [key("stored.currentWeight"), key("profile.weightManagerCurrentWeight")],
        parse_positive_number,
    )
    target_weight = resolve_first(
        source,
        [key("stored.targetWeight"), key("profile.weightManagerTargetWeight")],
        parse_positive_number,
    )
    starting_weight = resolve_first(source, [key("stored.startingWeight")], parse_positive_number)
    current_body_type = resolve_first(
        source,
        [key("stored.currentBodyType"), key("profile.weightManagerCurrentBodyType")],
        parse_body_type_key,
    )
    target_body_type = resolve_first(
        source,
        [key("stored.targetBodyType"), key("profile.weightManagerTargetBodyType")],
        parse_body_type_key,
    )

    present = (current_weight, target_weight, starting_weight, current_body_type, target_body_type)
    if all(value is None for value in present):
        return None

    unit = resolve_first(
        source,
        [key("stored.weightUnit"), key("profile.weightManagerUnit")],
        parse_unit,
    )
    stored = source["stored"]
    return WeightManagerState(
        starting_weight=starting_weight,
        current_weight=current_weight,
        target_weight=target_weight,
        weight_unit=unit or WeightUnit.kg,
        current_body_type=current_body_type or DEFAULT_BODY_TYPE,
        target_body_type=target_body_type or DEFAULT_BODY_TYPE,
        journey_goal_mode=normalize_goal_mode(stored.get("journeyGoalMode")),
        journey_duration_weeks=parse_positive_number(stored.get("journeyDurationWeeks")),
        journey_goal_date=to_start_of_local_day(stored.get("journeyGoalDate")),
        saved_at=to_utc_timestamp(stored.get("savedAt")),
    )


def iter_mappings(values: Any) -> Iterable[Mapping[str, Any]]:
    """Mappings (or models) from a list payload; anything else is skipped."""
    for item in _as_list(values) or []:
        data = as_mapping(item)
        if data is not None:
            yield data
