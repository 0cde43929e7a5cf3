from datetime import date, datetime
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class Weekday(IntEnum):
    """Day of the week, numbered from Sunday."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        return cls((value.weekday() + 1) % 7)


class Shift(BaseModel):
    """One scheduled shift with timezone-aware start and end."""

    model_config = ConfigDict(frozen=True)

    day: Weekday
    start_time: datetime
    end_time: datetime


class WeeklySchedule(BaseModel):
    """All shifts for one employee in one schedule week, in grid order."""

    employee: str
    shifts: list[Shift] = Field(default_factory=list)
