from datetime import date, time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

class TimeSlot(BaseModel):
    """An opening interval. ``close <= open`` means it closes on the next day."""
    open: time
    close: time

    @property
    def crosses_midnight(self) -> bool:
        return self.close <= self.open

class DaySchedule(BaseModel):
    is_open: bool = True
    slots: list[TimeSlot] = Field(default_factory=list, max_length=2)

class WeeklySchedule(BaseModel):
    monday: DaySchedule
    tuesday: DaySchedule
    wednesday: DaySchedule
    thursday: DaySchedule
    friday: DaySchedule
    saturday: DaySchedule
    sunday: DaySchedule

    def for_day(self, day: date) -> DaySchedule:
        return getattr(self, WEEKDAYS[day.weekday()])

def _slots(*pairs):
    return [TimeSlot(open=time.fromisoformat(o), close=time.fromisoformat(c)) for o, c in pairs]

DEFAULT_WEEKLY_SCHEDULE = WeeklySchedule(
    monday=DaySchedule(is_open=True, slots=_slots(("18:00", "23:00"))),
    tuesday=DaySchedule(is_open=False, slots=_slots(("18:00", "23:00"))),
    wednesday=DaySchedule(is_open=True, slots=_slots(("18:00", "23:00"))),
    thursday=DaySchedule(is_open=True, slots=_slots(("18:00", "23:00"))),
    friday=DaySchedule(is_open=True, slots=_slots(("18:00", "23:59"))),
    saturday=DaySchedule(is_open=True, slots=_slots(("11:00", "23:59"))),
    sunday=DaySchedule(is_open=True, slots=_slots(("11:00", "23:00"))),
)

class ExceptionType(str, Enum):
    CLOSED = "CLOSED"
    SPECIAL_HOURS = "SPECIAL_HOURS"

class ScheduleException(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    name: str = ""
    start_date: date
    end_date: date
    type: ExceptionType
    slots: list[TimeSlot] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.type is ExceptionType.SPECIAL_HOURS and not self.slots:
            raise ValueError("special hours need at least one slot")
        return self

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @property
    def length_days(self) -> int:
        return (self.end_date - self.start_date).days + 1
