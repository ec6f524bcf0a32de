"""Trip record used for packing lists and travel-aware weather."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from models.clothing_item import new_record_id


def as_calendar_day(value: date | datetime | str) -> date:
    """Reduce a date-like value to its calendar day."""

    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass
class Trip:
    name: str
    start_date: date
    end_date: date
    location_name: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    trip_id: str = field(default_factory=new_record_id)

    def __post_init__(self) -> None:
        self.name = str(self.name or "").strip()
        if not self.name:
            raise ValueError("Trip name cannot be blank")
        self.start_date = as_calendar_day(self.start_date)
        self.end_date = as_calendar_day(self.end_date)
        if self.end_date < self.start_date:
            raise ValueError("Trip end_date cannot precede start_date")
        self.location_name = str(self.location_name or "").strip()

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def contains(self, day: date | datetime) -> bool:
        """Inclusive calendar-day range check."""

        target = as_calendar_day(day)
        return self.start_date <= target <= self.end_date


__all__ = ["Trip", "as_calendar_day"]
