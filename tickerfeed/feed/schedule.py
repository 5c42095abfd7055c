"""
Schedule evaluation.

A schedule may narrow when a node is on air by date range, weekday and
time-of-day ranges. All three gates must pass. Missing, empty or malformed
schedules never take content off air: anything that cannot be evaluated
counts as active.

Schedule format::

    {
        "startDate": "2024-01-01T00:00:00",
        "endDate": "2024-12-31T23:59:59",
        "daysOfWeek": {"monday": true, "tuesday": true, ...},
        "timeRanges": [{"start": "22:00", "end": "06:00"}]
    }
"""

import json
import logging
from datetime import datetime, timezone as dt_timezone, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# Indexed by datetime.weekday()
WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def get_zone(name: Optional[str]) -> tzinfo:
    """
    Resolve an IANA zone name.

    Unknown names fall back to UTC.
    """
    if not name:
        return dt_timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(f"Unknown timezone {name!r}, using UTC: {e}")
        return dt_timezone.utc


def parse_schedule(raw: Any) -> Optional[dict[str, Any]]:
    """
    Normalize a stored schedule.

    Returns:
        The schedule mapping, or None when the node is unconditionally active
    """
    if not raw:
        return None

    if isinstance(raw, dict):
        return raw

    if not isinstance(raw, str):
        return None

    value = raw.strip()
    if not value or value in ("null", "undefined"):
        return None

    # Legacy free-text schedules ("Hourly", "Daily")
    if not value.startswith("{"):
        return None

    try:
        schedule = json.loads(value)
    except ValueError as e:
        logger.warning(f"Error parsing schedule JSON: {e}")
        return None

    if not isinstance(schedule, dict):
        return None
    return schedule


def is_active(
    schedule: Any,
    timezone: Optional[str] = "UTC",
    now: Optional[datetime] = None,
) -> bool:
    """
    Check whether a node with this schedule is on air.

    Args:
        schedule: Stored schedule (mapping, JSON text, legacy text or None)
        timezone: Zone the schedule is written in
        now: Reference instant (defaults to the current time)

    Returns:
        False only when a gate positively rules the node out
    """
    parsed = parse_schedule(schedule)
    if parsed is None:
        return True

    try:
        reference = now or datetime.now(dt_timezone.utc)
        if reference.tzinfo is None:
            reference = reference.replace(tzinfo=dt_timezone.utc)
        local_now = reference.astimezone(get_zone(timezone))

        if not is_within_date_range(local_now, parsed.get("startDate"), parsed.get("endDate")):
            return False
        if not is_active_on_day(local_now, parsed.get("daysOfWeek")):
            return False
        if not is_within_time_ranges(local_now, parsed.get("timeRanges")):
            return False
        return True
    except Exception as e:
        logger.warning(f"Error evaluating schedule, treating as active: {e}")
        return True


def _parse_boundary(value: Any, zone: Optional[tzinfo]) -> Optional[datetime]:
    """Parse a start/end date into naive local wall-clock time."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = date_parser.isoparse(value)
    except ValueError:
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is not None and zone is not None:
        parsed = parsed.astimezone(zone)
    return parsed.replace(tzinfo=None)


def is_within_date_range(local_now: datetime, start_date: Any, end_date: Any) -> bool:
    """Date-range gate; unparseable boundaries are ignored."""
    if not start_date and not end_date:
        return True

    try:
        wall_clock = local_now.replace(tzinfo=None)

        start = _parse_boundary(start_date, local_now.tzinfo)
        if start is not None and wall_clock < start:
            return False

        end = _parse_boundary(end_date, local_now.tzinfo)
        if end is not None and wall_clock > end:
            return False

        return True
    except Exception as e:
        logger.warning(f"Error checking date range: {e}")
        return True


def is_active_on_day(local_now: datetime, days_of_week: Any) -> bool:
    """Weekday gate; a schedule with no day selected runs every day."""
    if not days_of_week or not isinstance(days_of_week, dict):
        return True

    if not any(selected is True for selected in days_of_week.values()):
        return True

    return days_of_week.get(WEEKDAY_NAMES[local_now.weekday()]) is True


def is_within_time_ranges(local_now: datetime, time_ranges: Any) -> bool:
    """Time-of-day gate; passes when any valid range contains the current minute."""
    if not isinstance(time_ranges, list) or not time_ranges:
        return True

    valid_ranges = [
        r for r in time_ranges
        if isinstance(r, dict) and r.get("start") and r.get("end")
    ]
    if not valid_ranges:
        return True

    current = local_now.hour * 60 + local_now.minute
    return any(is_time_within_range(current, r["start"], r["end"]) for r in valid_ranges)


def _to_minutes(value: str) -> int:
    hours, minutes = str(value).split(":")[:2]
    return int(hours) * 60 + int(minutes)


def is_time_within_range(current: int, start_time: str, end_time: str) -> bool:
    """
    Check a minutes-since-midnight value against an ``HH:MM`` range.

    Both ends are inclusive. A range whose start is after its end spans
    midnight (22:00-06:00). Ranges that cannot be parsed pass.
    """
    try:
        start = _to_minutes(start_time)
        end = _to_minutes(end_time)
    except (ValueError, TypeError) as e:
        logger.warning(f"Error comparing times {start_time!r}-{end_time!r}: {e}")
        return True

    if start > end:
        return current >= start or current <= end
    return start <= current <= end
