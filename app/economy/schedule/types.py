from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class ScheduleWindow:
    id: UUID
    venue_id: UUID
    days: frozenset[int]
    start_time: str
    end_time: str
    timezone: str
    drink_id: UUID | None = None

    def as_payload(self) -> dict[str, object]:
        return {
            "id": str(self.id),
            "drink_id": str(self.drink_id) if self.drink_id is not None else None,
            "days": sorted(self.days),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "timezone": self.timezone,
        }


@dataclass(frozen=True, slots=True)
class DayHours:
    open_time: str
    close_time: str


@dataclass(frozen=True, slots=True)
class DayGroup:
    days: tuple[int, ...]
    label: str
    hours: DayHours | None

    @property
    def is_closed(self) -> bool:
        return self.hours is None
