"""Weight-manager overview: plan plus the starting/current/target values a
summary card shows."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Sequence

from habitcore.analytics.adapters import key, parse_positive_number, resolve_first
from habitcore.analytics.body_types import get_body_type
from habitcore.analytics.models import (
    WeightCheckIn,
    WeightManagerOverview,
    WeightManagerState,
    WeightUnit,
    WeightValue,
)
from habitcore.analytics.weight_plan import build_plan_for_state

EMPTY_DISPLAY = "--"


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _display(value: WeightValue | None) -> str:
    if value is None:
        return EMPTY_DISPLAY
    return f"{_format_number(value.value)} {value.unit.value}"


def _weight_value(unit: WeightUnit):
    def _normalize(candidate: Any) -> WeightValue | None:
        if isinstance(candidate, WeightValue):
            return candidate
        if isinstance(candidate, WeightCheckIn):
            return WeightValue(value=candidate.weight, unit=candidate.unit)
        parsed = parse_positive_number(candidate)
        if parsed is None:
            return None
        return WeightValue(value=parsed, unit=unit)

    return _normalize


def build_weight_manager_overview(
    state: WeightManagerState | None,
    logs: Sequence[WeightCheckIn] = (),
    unit_fallback: WeightUnit = WeightUnit.kg,
    today: date | datetime | None = None,
) -> WeightManagerOverview:
    """`logs` are newest first (as normalize_check_ins returns them)."""
    logs = list(logs or ())
    unit = state.weight_unit if state is not None else unit_fallback
    latest = logs[0] if logs else None
    earliest = logs[-1] if logs else None

    source = {"state": state.model_dump(by_alias=True) if state else {}, "latest": latest, "earliest": earliest}
    normalize = _weight_value(unit)

    # Starting: the plan's own starting point, else the oldest check-in
    starting_value = resolve_first(
        source,
        [key("state.startingWeight"), key("state.currentWeight"), lambda s: s["earliest"]],
        normalize,
    )
    # Current: the newest check-in, else the starting point
    current_value = resolve_first(
        {**source, "starting": starting_value},
        [lambda s: s["latest"], lambda s: s["starting"]],
        normalize,
    )

    target = parse_positive_number(state.target_weight) if state is not None else None
    target_body = get_body_type(state.target_body_type) if state is not None else None

    return WeightManagerOverview(
        unit=unit,
        plan=build_plan_for_state(state, today),
        target_body_type=target_body.key if target_body else None,
        latest_log=latest,
        earliest_log=earliest,
        starting_value=starting_value,
        current_value=current_value,
        starting_display=_display(starting_value),
        current_display=_display(current_value),
        target_display=_display(WeightValue(value=target, unit=unit)) if target is not None else EMPTY_DISPLAY,
    )
