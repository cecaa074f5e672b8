"""Weight-journey history: live state → immutable JourneyEntry, plus list hygiene.

History lists are de-duplicated by id (last write wins) and ordered newest
first by completed_at, falling back to created_at. Normalizing an already
normalized list returns it unchanged.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping

from habitcore.analytics.adapters import (
    as_mapping,
    iter_mappings,
    key,
    normalize_goal_mode,
    normalize_status,
    normalize_unit,
    parse_body_type_key,
    parse_optional_int,
    parse_optional_number,
    parse_positive_number,
    parse_text,
    resolve_first,
    round_weight,
)
from habitcore.analytics.body_types import DEFAULT_BODY_TYPE
from habitcore.analytics.dates import to_date_key, to_utc_timestamp
from habitcore.analytics.models import (
    JourneyEntry,
    JourneyGoalMode,
    JourneyStatus,
    WeightCheckIn,
    WeightManagerState,
    WeightPlan,
)
from habitcore.analytics.weight_plan import build_plan_for_state

logger = logging.getLogger(__name__)

CURRENT_JOURNEY_ID = "current-journey"
DEFAULT_COMPLETED_REASON = "goal_achieved"

_PLAN_INT_FIELDS = (
    "timelineTargetDays",
    "estimatedDays",
    "targetCalories",
    "maintenanceCalories",
    "proteinGrams",
    "carbsGrams",
    "fatGrams",
    "dailyCalorieDelta",
)


def has_journey_state(state: WeightManagerState | None) -> bool:
    """True when both current and target weight are usable positive numbers."""
    if state is None:
        return False
    return round_weight(state.current_weight) is not None and round_weight(state.target_weight) is not None


# ---------------------------------------------------------------------------
# Check-ins
# ---------------------------------------------------------------------------


def normalize_check_ins(entries: Any) -> list[WeightCheckIn]:
    """Rounded, newest-first check-ins. Entries without a finite weight or a
    parseable timestamp are dropped."""
    check_ins: list[WeightCheckIn] = []
    for data in iter_mappings(entries):
        weight = round_weight(data.get("weight"))
        logged_at = resolve_first(
            data,
            [key("loggedAt"), key("logDate"), key("created_at")],
            to_utc_timestamp,
        )
        if weight is None or logged_at is None:
            logger.debug("Dropping invalid check-in: %r", data)
            continue
        check_ins.append(
            WeightCheckIn(
                logged_at=logged_at,
                date_key=to_date_key(logged_at),
                weight=weight,
                unit=normalize_unit(data.get("unit")),
            )
        )
    check_ins.sort(key=lambda c: c.logged_at, reverse=True)
    return check_ins


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


def _optional_timestamp(data: Mapping[str, Any], field: str) -> tuple[bool, datetime | None]:
    """(ok, value): ok is False when the field is present but unparseable."""
    raw = data.get(field)
    if raw is None or raw == "":
        return True, None
    parsed = to_utc_timestamp(raw)
    return parsed is not None, parsed


def normalize_journey_entry(entry: Any) -> JourneyEntry | None:
    """Schema-normalize one stored entry; None if it has no id or bad dates."""
    data = as_mapping(entry)
    if data is None:
        return None
    entry_id = parse_text(data.get("id"))
    if not entry_id:
        return None

    created_ok, created_at = _optional_timestamp(data, "createdAt")
    completed_ok, completed_at = _optional_timestamp(data, "completedAt")
    if not (created_ok and completed_ok):
        logger.debug("Dropping journey %s with unparseable dates", entry_id)
        return None
    created_at = created_at or completed_at
    if created_at is None:
        logger.debug("Dropping journey %s without timestamps", entry_id)
        return None

    timeline_goal_met = data.get("timelineGoalMet")
    return JourneyEntry(
        id=entry_id,
        status=normalize_status(data.get("status")),
        completed_reason=parse_text(data.get("completedReason")),
        created_at=created_at,
        completed_at=completed_at,
        unit=normalize_unit(data.get("unit")),
        starting_weight=round_weight(data.get("startingWeight")),
        current_weight=round_weight(data.get("currentWeight")),
        target_weight=round_weight(data.get("targetWeight")),
        current_body_type=parse_body_type_key(data.get("currentBodyType")) or DEFAULT_BODY_TYPE,
        target_body_type=parse_body_type_key(data.get("targetBodyType")) or DEFAULT_BODY_TYPE,
        journey_goal_mode=normalize_goal_mode(data.get("journeyGoalMode")),
        journey_duration_weeks=parse_optional_number(data.get("journeyDurationWeeks")),
        journey_goal_date=to_date_key(data.get("journeyGoalDate")),
        projected_end_date_iso=to_date_key(data.get("projectedEndDateISO")),
        weekly_weight_change_kg=parse_optional_number(data.get("weeklyWeightChangeKg")),
        timeline_goal_met=timeline_goal_met if isinstance(timeline_goal_met, bool) else None,
        check_ins=normalize_check_ins(data.get("checkIns")),
        **{name: parse_optional_int(data.get(name)) for name in _PLAN_INT_FIELDS},
    )


def normalize_journey_history_entries(entries: Any) -> list[JourneyEntry]:
    by_id: dict[str, JourneyEntry] = {}
    for data in iter_mappings(entries):
        normalized = normalize_journey_entry(data)
        if normalized is None:
            continue
        by_id[normalized.id] = normalized
    # sorted() is stable, so entries sharing a timestamp keep insertion order
    return sorted(by_id.values(), key=lambda e: e.sort_timestamp, reverse=True)


def parse_weight_journey_history_payload(payload: Any) -> list[JourneyEntry]:
    """Accepts a bare list or {"journeys": [...]}; anything else is empty."""
    if isinstance(payload, (list, tuple)):
        return normalize_journey_history_entries(payload)
    if isinstance(payload, Mapping) and isinstance(payload.get("journeys"), (list, tuple)):
        return normalize_journey_history_entries(payload["journeys"])
    return []


def append_journey_history_entry(entries: Any, entry: JourneyEntry | Mapping[str, Any] | None) -> list[JourneyEntry]:
    existing = list(entries) if isinstance(entries, (list, tuple)) else []
    if entry is not None:
        existing.append(entry)
    return normalize_journey_history_entries(existing)


# ---------------------------------------------------------------------------
# Building entries from live state
# ---------------------------------------------------------------------------


def _base_entry(
    entry_id: str,
    status: JourneyStatus,
    state: WeightManagerState,
    plan: WeightPlan | None,
    created_at: datetime | date | str,
    today: date | datetime | None,
) -> dict[str, Any]:
    resolved_plan = plan or build_plan_for_state(state, today)
    mode = normalize_goal_mode(state.journey_goal_mode)
    plan_fields = resolved_plan.model_dump(by_alias=True) if resolved_plan is not None else {}

    return {
        **{name: plan_fields.get(name) for name in _PLAN_INT_FIELDS},
        "projectedEndDateISO": plan_fields.get("projectedEndDateISO"),
        "weeklyWeightChangeKg": plan_fields.get("weeklyWeightChangeKg"),
        "timelineGoalMet": plan_fields.get("timelineGoalMet"),
        "id": entry_id,
        "status": status.value,
        "createdAt": created_at,
        "unit": state.weight_unit.value,
        "startingWeight": state.starting_weight,
        "currentWeight": state.current_weight,
        "targetWeight": state.target_weight,
        "currentBodyType": state.current_body_type,
        "targetBodyType": state.target_body_type,
        "journeyGoalMode": mode.value,
        "journeyDurationWeeks": (
            parse_positive_number(state.journey_duration_weeks) if mode is JourneyGoalMode.duration else None
        ),
        "journeyGoalDate": state.journey_goal_date if mode is JourneyGoalMode.date else None,
    }


def build_current_journey_entry(
    state: WeightManagerState | None,
    plan: WeightPlan | None = None,
    logs: Iterable[Any] = (),
    now: datetime | None = None,
) -> JourneyEntry | None:
    """The live journey as an active entry with the fixed id "current-journey"."""
    if not has_journey_state(state):
        return None
    now = now or datetime.now(timezone.utc)
    created_at = state.saved_at or now
    return normalize_journey_entry({
        **_base_entry(CURRENT_JOURNEY_ID, JourneyStatus.active, state, plan, created_at, now),
        "checkIns": list(logs or ()),
    })


def new_journey_id(completed_at: datetime) -> str:
    millis = int(completed_at.timestamp() * 1000)
    return f"journey-{millis}-{uuid.uuid4().hex[:6]}"


def create_completed_journey_entry(
    state: WeightManagerState | None,
    plan: WeightPlan | None = None,
    logs: Iterable[Any] = (),
    completed_at: datetime | None = None,
    completed_reason: str = DEFAULT_COMPLETED_REASON,
) -> JourneyEntry | None:
    """Freeze a finished or abandoned journey under a fresh id.

    Clearing the live state afterwards is up to the caller.
    """
    if not has_journey_state(state):
        return None
    completed_at = to_utc_timestamp(completed_at) if completed_at is not None else None
    completed_at = completed_at or datetime.now(timezone.utc)
    return normalize_journey_entry({
        **_base_entry(
            new_journey_id(completed_at),
            JourneyStatus.completed,
            state,
            plan,
            state.saved_at or completed_at,
            completed_at,
        ),
        "completedAt": completed_at,
        "completedReason": completed_reason,
        "checkIns": list(logs or ()),
    })
