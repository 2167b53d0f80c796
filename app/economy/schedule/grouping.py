from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from app.economy.schedule.constants import DAY_RANGE_MIN_RUN, ISO_WEEKDAYS, WEEKDAY_NAMES
from app.economy.schedule.time import local_weekday_and_minutes, minutes_of_day, normalize_time
from app.economy.schedule.types import DayGroup, DayHours


def parse_opening_hours(raw: Mapping[str, object] | None) -> dict[int, DayHours | None]:
    """Reads venue opening hours keyed by ISO weekday ("1".."7").

    Accepts both ``{"byDay": {...}}`` and the flat form with day keys at the
    root. A day with a missing or malformed ``open``/``close`` value is closed. Unknown
    day keys are ignored.
    """
    result: dict[int, DayHours | None] = {day: None for day in ISO_WEEKDAYS}
    if not raw:
        return result

    source = raw.get("byDay") if isinstance(raw.get("byDay"), Mapping) else raw
    for key, value in source.items():
        try:
            day = int(key)
        except (TypeError, ValueError):
            continue
        if day not in result or not isinstance(value, Mapping):
            continue
        open_raw = value.get("open")
        close_raw = value.get("close")
        if not isinstance(open_raw, str) or not isinstance(close_raw, str):
            continue
        if not open_raw or not close_raw:
            continue
        try:
            result[day] = DayHours(
                open_time=normalize_time(open_raw),
                close_time=normalize_time(close_raw),
            )
        except ValueError:
            continue
    return result


def _label_run(days: list[int]) -> str:
    if len(days) >= DAY_RANGE_MIN_RUN:
        return f"{WEEKDAY_NAMES[days[0]]} – {WEEKDAY_NAMES[days[-1]]}"
    return ", ".join(WEEKDAY_NAMES[day] for day in days)


def group_days(hours_by_day: Mapping[int, DayHours | None]) -> list[DayGroup]:
    """Collapses consecutive Monday..Sunday entries with identical hours."""
    groups: list[DayGroup] = []
    run: list[int] = []
    run_hours: DayHours | None = None

    for day in ISO_WEEKDAYS:
        hours = hours_by_day.get(day)
        if run and hours == run_hours:
            run.append(day)
            continue
        if run:
            groups.append(DayGroup(days=tuple(run), label=_label_run(run), hours=run_hours))
        run = [day]
        run_hours = hours

    if run:
        groups.append(DayGroup(days=tuple(run), label=_label_run(run), hours=run_hours))
    return groups


def is_open_now(
    hours_by_day: Mapping[int, DayHours | None],
    *,
    instant: datetime,
    timezone_name: str,
) -> bool:
    weekday, now_minutes = local_weekday_and_minutes(instant, timezone_name)

    # early hours may still belong to the previous day's overnight opening
    previous = hours_by_day.get(7 if weekday == 1 else weekday - 1)
    if previous is not None:
        previous_open = minutes_of_day(previous.open_time)
        previous_close = minutes_of_day(previous.close_time)
        if previous_close <= previous_open and now_minutes < previous_close:
            return True

    hours = hours_by_day.get(weekday)
    if hours is None:
        return False

    open_minutes = minutes_of_day(hours.open_time)
    close_minutes = minutes_of_day(hours.close_time)
    if close_minutes <= open_minutes:
        # closes after midnight; the part after midnight counts for the next day
        return now_minutes >= open_minutes
    return open_minutes <= now_minutes < close_minutes
