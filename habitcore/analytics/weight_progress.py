"""Daily weight progress check: one entry per date key, oldest first."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from habitcore.analytics.adapters import as_mapping, iter_mappings, key, resolve_first, round_weight
from habitcore.analytics.dates import to_date_key
from habitcore.analytics.models import ProgressEntry, WeightProgressPayload

DEFAULT_MAX_ENTRIES = 60


def normalize_progress_entries(entries: Any) -> list[ProgressEntry]:
    """Valid entries keyed by day; a later entry for the same day replaces
    the earlier one."""
    by_date: dict[str, ProgressEntry] = {}
    for data in iter_mappings(entries):
        date_key = resolve_first(data, [key("dateKey"), key("date"), key("loggedAt")], to_date_key)
        weight = round_weight(data.get("weight"))
        if date_key is None or weight is None:
            continue
        by_date[date_key] = ProgressEntry(date_key=date_key, weight=weight)
    return sorted(by_date.values(), key=lambda e: e.date_key)


def parse_weight_progress_payload(payload: Any) -> WeightProgressPayload:
    data = as_mapping(payload) or {}
    return WeightProgressPayload(
        starting_weight=round_weight(data.get("startingWeight")),
        current_weight=round_weight(data.get("currentWeight")),
        entries=normalize_progress_entries(data.get("entries")),
    )


def with_today_progress_entry(
    entries: Any,
    weight: Any,
    max_entries: int | None = DEFAULT_MAX_ENTRIES,
    on: date | datetime | None = None,
) -> list[ProgressEntry]:
    """Record `weight` for today (or `on`), keeping only the newest entries."""
    today_key = to_date_key(on if on is not None else datetime.now(timezone.utc))
    normalized_weight = round_weight(weight)
    current = normalize_progress_entries(entries)
    if today_key is None or normalized_weight is None:
        return current

    kept = [e for e in current if e.date_key != today_key]
    kept.append(ProgressEntry(date_key=today_key, weight=normalized_weight))
    updated = normalize_progress_entries(kept)

    if not max_entries or max_entries <= 0 or len(updated) <= max_entries:
        return updated
    return updated[-max_entries:]


def weight_difference(starting_weight: Any, current_weight: Any) -> float | None:
    """Signed change since the start, one decimal; None unless both are set."""
    start = round_weight(starting_weight)
    current = round_weight(current_weight)
    if start is None or current is None:
        return None
    return round(current - start, 1)
