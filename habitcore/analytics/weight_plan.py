"""Weight-management calorie and macro planning. Math only, never raises.

Model:
  maintenance  = blend of current-weight/current-type and
                 target-weight/target-type maintenance (75/25 by default)
  daily delta  = deadline-driven (remaining kg * 7700 / days) or adaptive
                 (weekly rate from remaining distance and progress), then
                 clamped into the cut or bulk band
  target kcal  = maintenance + delta, clamped to [1200, 5000]
All downstream numbers (macros, timeline) use the realized delta
target - maintenance, never the requested one.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Any

from habitcore.analytics.adapters import (
    normalize_goal_mode,
    parse_optional_number,
    parse_positive_number,
)
from habitcore.analytics.body_types import DEFAULT_BODY_TYPE, resolve_body_type
from habitcore.analytics.dates import to_start_of_local_day
from habitcore.analytics.models import (
    JourneyGoalMode,
    WeightManagerState,
    WeightPlan,
    WeightUnit,
)
from habitcore.config import settings

logger = logging.getLogger(__name__)

KCAL_PER_KG = 7700.0
LB_PER_KG = 2.20462
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def to_weight_manager_kg(value: Any, unit: WeightUnit | str = WeightUnit.kg) -> float | None:
    """Kilograms for a weight given in `unit`. Anything but 'kg' is read as pounds."""
    parsed = parse_optional_number(value)
    if parsed is None:
        return None
    return parsed if unit == WeightUnit.kg else parsed / LB_PER_KG


def journey_progress_ratio(starting_kg: float, current_kg: float, target_kg: float) -> float:
    """Share (0–1) of the planned start→target distance already covered.

    A journey with no planned distance counts as fully progressed.
    """
    total = abs(target_kg - starting_kg)
    if total <= 0:
        return 1.0
    completed = (current_kg - starting_kg) * _sign(target_kg - starting_kg)
    return _clamp(completed / total, 0.0, 1.0)


def resolve_timeline_target_days(
    journey_duration_days: Any = None,
    journey_end_date: Any = None,
    today: date | None = None,
) -> int | None:
    """Explicit duration wins; else days until a future end date; else None."""
    duration = parse_positive_number(journey_duration_days)
    if duration is not None:
        return max(1, round(duration))
    end_day = to_start_of_local_day(journey_end_date)
    if end_day is None or today is None or end_day <= today:
        return None
    return (end_day - today).days


def _delta_band(direction: int, maintenance: float) -> tuple[float, float]:
    cfg = settings
    if direction < 0:
        high = min(cfg.weight_plan_cut_max_delta, maintenance * cfg.weight_plan_cut_max_ratio)
        return cfg.weight_plan_cut_min_delta, high
    high = min(cfg.weight_plan_bulk_max_delta, maintenance * cfg.weight_plan_bulk_max_ratio)
    return cfg.weight_plan_bulk_min_delta, high


def _adaptive_weekly_rate_kg(direction: int, remaining_kg: float, progress: float) -> float:
    cfg = settings
    if direction < 0:
        rate = (
            cfg.weight_plan_cut_rate_base
            + remaining_kg * cfg.weight_plan_cut_rate_per_kg
            + (1.0 - progress) * cfg.weight_plan_cut_rate_progress
        )
        return _clamp(rate, cfg.weight_plan_cut_rate_min, cfg.weight_plan_cut_rate_max)
    rate = cfg.weight_plan_bulk_rate_base + remaining_kg * cfg.weight_plan_bulk_rate_per_kg
    return _clamp(rate, cfg.weight_plan_bulk_rate_min, cfg.weight_plan_bulk_rate_max)


def requested_daily_delta(
    direction: int,
    remaining_kg: float,
    progress: float,
    timeline_days: int | None,
    maintenance: float,
) -> float:
    """Signed kcal/day change from maintenance, before the calorie bounds."""
    if direction == 0 or remaining_kg < settings.weight_plan_maintenance_threshold_kg:
        return 0.0
    if timeline_days is not None:
        magnitude = remaining_kg * KCAL_PER_KG / timeline_days
    else:
        magnitude = _adaptive_weekly_rate_kg(direction, remaining_kg, progress) * KCAL_PER_KG / 7.0
    low, high = _delta_band(direction, maintenance)
    return direction * _clamp(magnitude, low, high)


def split_macros(
    target_calories: int,
    realized_delta: int,
    current_kg: float,
    progress: float,
) -> tuple[int, int, int]:
    """(protein, carbs, fat) grams that add back up to `target_calories`.

    When protein and fat leave no room for carbs, fat drops toward its floor
    first, then protein toward its floor; carbs never go below zero.
    """
    cfg = settings
    threshold = cfg.weight_plan_regime_threshold_kcal
    is_cut = realized_delta < -threshold
    is_bulk = realized_delta > threshold

    if is_cut:
        protein_per_kg = cfg.weight_plan_protein_cut - progress * cfg.weight_plan_protein_cut_taper
        fat_per_kg = cfg.weight_plan_fat_cut
        protein_floor_per_kg = cfg.weight_plan_protein_floor_cut
    elif is_bulk:
        protein_per_kg = cfg.weight_plan_protein_bulk
        fat_per_kg = cfg.weight_plan_fat_bulk
        protein_floor_per_kg = cfg.weight_plan_protein_floor
    else:
        protein_per_kg = cfg.weight_plan_protein_maintenance
        fat_per_kg = cfg.weight_plan_fat_maintenance
        protein_floor_per_kg = cfg.weight_plan_protein_floor

    protein_floor = round(current_kg * protein_floor_per_kg)
    fat_floor = round(current_kg * cfg.weight_plan_fat_floor)
    protein = max(protein_floor, round(current_kg * protein_per_kg))
    fat = max(fat_floor, round(current_kg * fat_per_kg))

    def carb_kcal() -> int:
        return target_calories - protein * KCAL_PER_G_PROTEIN - fat * KCAL_PER_G_FAT

    if carb_kcal() < 0:
        fat = max(fat_floor, (target_calories - protein * KCAL_PER_G_PROTEIN) // KCAL_PER_G_FAT)
    if carb_kcal() < 0:
        protein = max(protein_floor, (target_calories - fat * KCAL_PER_G_FAT) // KCAL_PER_G_PROTEIN)

    carbs = max(0, round(carb_kcal() / KCAL_PER_G_CARBS))
    return int(protein), int(carbs), int(fat)


def compute_weight_manager_plan(
    *,
    current_weight: Any = None,
    target_weight: Any = None,
    starting_weight: Any = None,
    unit: WeightUnit | str = WeightUnit.kg,
    current_body_type_key: Any = DEFAULT_BODY_TYPE,
    target_body_type_key: Any = DEFAULT_BODY_TYPE,
    journey_duration_days: Any = None,
    journey_end_date: Any = None,
    today: date | datetime | None = None,
) -> WeightPlan | None:
    """Full calorie/macro/timeline plan, or None if a weight is missing or invalid."""
    cfg = settings
    current = parse_positive_number(current_weight)
    target = parse_positive_number(target_weight)
    if current is None or target is None:
        return None
    starting = parse_positive_number(starting_weight) or current

    current_kg = to_weight_manager_kg(current, unit)
    target_kg = to_weight_manager_kg(target, unit)
    starting_kg = to_weight_manager_kg(starting, unit)

    current_type = resolve_body_type(current_body_type_key)
    target_type = resolve_body_type(target_body_type_key)

    blend = cfg.weight_plan_maintenance_current_weight
    raw_maintenance = (
        current_kg * current_type.maintenance_multiplier * blend
        + target_kg * target_type.maintenance_multiplier * (1.0 - blend)
    )
    if not math.isfinite(raw_maintenance):
        logger.warning("Discarding weight plan with non-finite maintenance: %s", raw_maintenance)
        return None
    maintenance = round(raw_maintenance)

    diff_kg = target_kg - current_kg
    direction = _sign(diff_kg)
    remaining_kg = abs(diff_kg)
    progress = journey_progress_ratio(starting_kg, current_kg, target_kg)

    today_day = to_start_of_local_day(today) if today is not None else None
    if today_day is None:
        today_day = to_start_of_local_day(datetime.now(timezone.utc))
    timeline_days = resolve_timeline_target_days(journey_duration_days, journey_end_date, today_day)

    requested = requested_daily_delta(direction, remaining_kg, progress, timeline_days, maintenance)
    target_calories = round(
        _clamp(maintenance + requested, cfg.weight_plan_min_calories, cfg.weight_plan_max_calories)
    )
    realized = target_calories - maintenance

    protein, carbs, fat = split_macros(target_calories, realized, current_kg, progress)

    needs_change = direction != 0 and remaining_kg >= cfg.weight_plan_maintenance_threshold_kg
    moving_toward_goal = needs_change and _sign(realized) == direction
    estimated_days = 0
    if moving_toward_goal:
        raw_days = remaining_kg * KCAL_PER_KG / abs(realized)
        if not math.isfinite(raw_days):
            logger.warning("Discarding weight plan with non-finite timeline: %s", raw_days)
            return None
        estimated_days = round(raw_days)

    if timeline_days is None:
        timeline_goal_met = True
    else:
        reachable = moving_toward_goal or not needs_change
        timeline_goal_met = reachable and estimated_days <= timeline_days

    plan = WeightPlan(
        maintenance_calories=maintenance,
        target_calories=target_calories,
        protein_grams=protein,
        carbs_grams=carbs,
        fat_grams=fat,
        daily_calorie_delta=realized,
        weekly_weight_change_kg=round(realized * 7 / KCAL_PER_KG, 2),
        estimated_days=estimated_days,
        timeline_target_days=timeline_days,
        timeline_goal_met=timeline_goal_met,
        projected_end_date_iso=(today_day + timedelta(days=estimated_days)).isoformat(),
        journey_progress_percent=round(progress * 100.0, 1),
        starting_kg=round(starting_kg, 2),
        current_kg=round(current_kg, 2),
        target_kg=round(target_kg, 2),
        remaining_kg=round(remaining_kg, 2),
    )
    if not _all_finite(plan):
        logger.warning("Discarding weight plan with non-finite output: %s", plan)
        return None
    return plan


def _all_finite(plan: WeightPlan) -> bool:
    for value in plan.model_dump().values():
        if isinstance(value, float) and not math.isfinite(value):
            return False
    return True


def build_plan_for_state(
    state: WeightManagerState | None,
    today: date | datetime | None = None,
) -> WeightPlan | None:
    """Plan for a stored planning state, honouring its goal mode.

    Duration mode turns weeks into days (at least one); date mode uses the
    goal date as the deadline.
    """
    if state is None:
        return None
    mode = normalize_goal_mode(state.journey_goal_mode)
    weeks = parse_positive_number(state.journey_duration_weeks)
    duration_days = None
    if mode is JourneyGoalMode.duration and weeks is not None:
        duration_days = max(1, round(weeks * 7))
    end_date = state.journey_goal_date if mode is JourneyGoalMode.date else None

    return compute_weight_manager_plan(
        current_weight=state.current_weight,
        target_weight=state.target_weight,
        starting_weight=state.starting_weight,
        unit=state.weight_unit,
        current_body_type_key=state.current_body_type,
        target_body_type_key=state.target_body_type,
        journey_duration_days=duration_days,
        journey_end_date=end_date,
        today=today,
    )
