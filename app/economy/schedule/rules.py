from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from app.economy.schedule.time import local_weekday_and_minutes, minutes_of_day
from app.economy.schedule.types import ScheduleWindow


def is_active(window: ScheduleWindow, instant: datetime) -> bool:
    weekday, now_minutes = local_weekday_and_minutes(instant, window.timezone)
    if weekday not in window.days:
        return False
    return minutes_of_day(window.start_time) <= now_minutes <= minutes_of_day(window.end_time)


def find_active(windows: Iterable[ScheduleWindow], instant: datetime) -> ScheduleWindow | None:
    for window in windows:
        if is_active(window, instant):
            return window
    return None


def _shift_weekday(weekday: int, offset: int) -> int:
    return ((weekday - 1 + offset) % 7) + 1


def next_occurrence(
    windows: Sequence[ScheduleWindow], instant: datetime
) -> ScheduleWindow | None:
    """Returns the window that opens next, or None when one is active now.

    Later starts today win first. Otherwise the following days are scanned in
    order, wrapping through the week back to today's weekday, and the earliest
    starting window of the first matching day is returned.
    """
    if not windows:
        return None
    if find_active(windows, instant) is not None:
        return None

    local_positions = {
        window.id: local_weekday_and_minutes(instant, window.timezone) for window in windows
    }

    later_today = [
        window
        for window in windows
        if local_positions[window.id][0] in window.days
        and minutes_of_day(window.start_time) > local_positions[window.id][1]
    ]
    if later_today:
        return min(later_today, key=lambda window: minutes_of_day(window.start_time))

    for offset in range(1, 8):
        day_windows = [
            window
            for window in windows
            if _shift_weekday(local_positions[window.id][0], offset) in window.days
        ]
        if day_windows:
            return min(day_windows, key=lambda window: minutes_of_day(window.start_time))

    return None
