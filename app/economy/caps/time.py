from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo


def local_day_start_utc(now_utc: datetime, timezone_name: str) -> datetime:
    """Returns local midnight of ``now_utc``'s venue-local date as a UTC instant."""
    zone = ZoneInfo(timezone_name)
    local_date = now_utc.astimezone(zone).date()
    return datetime.combine(local_date, time.min, tzinfo=zone).astimezone(timezone.utc)


def local_hour_start_utc(now_utc: datetime, timezone_name: str) -> datetime:
    """Truncates to the start of the venue-local hour, returned in UTC."""
    local_now = now_utc.astimezone(ZoneInfo(timezone_name))
    return local_now.replace(minute=0, second=0, microsecond=0).astimezone(timezone.utc)


def local_week_start_utc(now_utc: datetime, timezone_name: str) -> datetime:
    zone = ZoneInfo(timezone_name)
    local_date = now_utc.astimezone(zone).date()
    monday = local_date - timedelta(days=local_date.weekday())
    return datetime.combine(monday, time.min, tzinfo=zone).astimezone(timezone.utc)


def local_month_start_utc(now_utc: datetime, timezone_name: str) -> datetime:
    zone = ZoneInfo(timezone_name)
    first_day = now_utc.astimezone(zone).date().replace(day=1)
    return datetime.combine(first_day, time.min, tzinfo=zone).astimezone(timezone.utc)
