"""Day and period indexing for completion dates. Never raises.

Every date-like input (date, datetime, ISO string, epoch milliseconds) is
reduced to the calendar day it falls on locally, then to an integer day
number counted from 1970-01-01. Day arithmetic on those integers is immune
to DST shifts.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from habitcore.analytics.models import GoalPeriod
from habitcore.config import settings

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str, int, float]

_EPOCH = date(1970, 1, 1)


def _local_tz(tz_name: str | None = None) -> tzinfo:
    name = tz_name or settings.default_tz
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using UTC", name)
        return timezone.utc


def _parse_iso(text: str) -> date | datetime | None:
    text = text.strip()
    if not text:
        return None
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _coerce(value: object, tz: tzinfo) -> date | datetime | None:
    """Reduce any accepted input to a date or datetime. None if unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (date, datetime)):
        return value
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000.0, tz)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        return _parse_iso(value)
    return None


def to_start_of_local_day(value: object, tz_name: str | None = None) -> date | None:
    """Calendar day that `value` falls on in the local zone.

    Timezone-aware datetimes are converted to `tz_name` (default
    settings.default_tz) first; naive datetimes are taken as already local.
    Returns None for anything unparseable.
    """
    tz = _local_tz(tz_name)
    parsed = _coerce(value, tz)
    if parsed is None:
        return None
    if isinstance(parsed, datetime):
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(tz)
        return parsed.date()
    return parsed


def to_utc_day_number(value: object, tz_name: str | None = None) -> int | None:
    day = to_start_of_local_day(value, tz_name)
    if day is None:
        return None
    return (day - _EPOCH).days


def from_utc_day_number(day_number: int) -> date:
    return _EPOCH + timedelta(days=day_number)


def to_date_key(value: object, tz_name: str | None = None) -> str | None:
    """Canonical YYYY-MM-DD key for `value`, or None."""
    day_number = to_utc_day_number(value, tz_name)
    if day_number is None:
        return None
    return from_utc_day_number(day_number).isoformat()


def to_utc_timestamp(value: object, tz_name: str | None = None) -> datetime | None:
    """Aware UTC datetime for `value`. Dates and naive datetimes are local."""
    tz = _local_tz(tz_name)
    parsed = _coerce(value, tz)
    if parsed is None:
        return None
    if not isinstance(parsed, datetime):
        parsed = datetime(parsed.year, parsed.month, parsed.day, tzinfo=tz)
    elif parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None


def normalize_goal_period(value: object) -> GoalPeriod:
    """Unknown or empty periods count as daily."""
    if isinstance(value, GoalPeriod):
        return value
    normalized = str(value or "day").strip().lower()
    if normalized == "week":
        return GoalPeriod.week
    if normalized == "month":
        return GoalPeriod.month
    return GoalPeriod.day


def get_streak_period_index(
    value: object,
    goal_period: GoalPeriod | str = GoalPeriod.day,
    tz_name: str | None = None,
) -> int | None:
    """Bucket `value` into the period used to test "consecutive".

    - day: the day number
    - week: ISO-week aligned, Thursday anchored: (day_number + 3) // 7
    - month: year * 12 + zero-based month
    """
    period = normalize_goal_period(goal_period)
    day = to_start_of_local_day(value, tz_name)
    if day is None:
        return None
    if period is GoalPeriod.month:
        return day.year * 12 + (day.month - 1)
    day_number = (day - _EPOCH).days
    if period is GoalPeriod.week:
        return (day_number + 3) // 7
    return day_number
