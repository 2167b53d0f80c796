from __future__ import annotations

import re
from datetime import datetime
from zoneinfo import ZoneInfo

from app.economy.schedule.constants import MINUTES_PER_DAY

_TIME_PATTERN = re.compile(r"^(?P<hour>\d{1,2}):(?P<minute>\d{1,2})$")


def normalize_time(value: str) -> str:
    """Returns zero-padded ``HH:MM`` for ``H:MM``, ``HH:M`` or ``HH:MM`` input."""
    match = _TIME_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"invalid time value: {value!r}")

    hour = int(match.group("hour"))
    minute = int(match.group("minute"))
    if hour > 23 or minute > 59:
        raise ValueError(f"invalid time value: {value!r}")
    return f"{hour:02d}:{minute:02d}"


def minutes_of_day(value: str) -> int:
    normalized = normalize_time(value)
    hour, minute = normalized.split(":")
    return int(hour) * 60 + int(minute)


def local_weekday_and_minutes(instant: datetime, timezone_name: str) -> tuple[int, int]:
    """Resolves an aware instant to ISO weekday and minute-of-day in the given zone."""
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ValueError("instant must be timezone-aware")

    local = instant.astimezone(ZoneInfo(timezone_name))
    minutes = local.hour * 60 + local.minute
    if minutes >= MINUTES_PER_DAY:
        raise ValueError("minute of day out of range")
    return local.isoweekday(), minutes
