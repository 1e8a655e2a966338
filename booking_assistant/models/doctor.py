# booking_assistant/models/doctor.py

from datetime import date as Date, datetime, timedelta
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def weekday_name(day: Date) -> str:
    """Lower-case full English weekday name, independent of locale."""
    return WEEKDAYS[day.weekday()]


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


class Rating(BaseModel):
    average: float = 0.0
    count: int = 0


class DayAvailability(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    is_available: bool = Field(default=False, alias="isAvailable")
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    break_start_time: Optional[str] = Field(default=None, alias="breakStartTime")
    break_end_time: Optional[str] = Field(default=None, alias="breakEndTime")

    @property
    def is_open(self) -> bool:
        return self.is_available and bool(self.start_time) and bool(self.end_time)

    def in_break(self, minute_of_day: int) -> bool:
        if not (self.break_start_time and self.break_end_time):
            return False
        return _minutes(self.break_start_time) <= minute_of_day < _minutes(self.break_end_time)


class Doctor(BaseModel):
    """Read-only doctor record as served by the doctor directory."""

    model_config = ConfigDict(validate_by_name=True)

    id: Optional[str] = None
    name: str
    specialization: str
    rating: Rating = Field(default_factory=Rating)
    consultation_fee: float = Field(default=0, alias="consultationFee")
    experience: int = 0
    bio: Optional[str] = None
    languages: List[str] = Field(default_factory=list)
    availability: Dict[str, DayAvailability] = Field(default_factory=dict)
    consultation_duration: int = Field(default=30, alias="consultationDuration")

    @property
    def display_name(self) -> str:
        if self.name.lower().startswith(("dr.", "dr ")):
            return self.name
        return f"Dr. {self.name}"

    def day(self, day_name: str) -> DayAvailability:
        return self.availability.get(day_name.lower(), DayAvailability())

    def working_days(self) -> List[str]:
        return [name for name in WEEKDAYS if self.day(name).is_open]

    def is_available_at(self, day_name: str, hhmm: str) -> bool:
        window = self.day(day_name)
        if not window.is_open:
            return False
        requested = _minutes(hhmm)
        if requested < _minutes(window.start_time) or requested >= _minutes(window.end_time):
            return False
        return not window.in_break(requested)

    def available_slots(self, day_name: str) -> List[str]:
        """Slot start times for the day's window, skipping the break."""
        window = self.day(day_name)
        if not window.is_open or self.consultation_duration <= 0:
            return []

        slots = []
        anchor = datetime(2000, 1, 1)
        current = _minutes(window.start_time)
        end = _minutes(window.end_time)
        while current < end:
            if window.in_break(current):
                current = _minutes(window.break_end_time)
                continue
            slots.append((anchor + timedelta(minutes=current)).strftime("%H:%M"))
            current += self.consultation_duration
        return slots
