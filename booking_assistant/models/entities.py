# booking_assistant/models/entities.py

from datetime import date as Date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

# Slots that count as "new information" for continuing a multi-turn flow
DIALOGUE_SLOTS = ("specialization", "doctor_name", "date", "time")


class Entities(BaseModel):
    """Slots pulled out of a single message. Immutable once extracted."""

    model_config = ConfigDict(frozen=True, validate_by_name=True)

    specialization: Optional[str] = None
    doctor_name: Optional[str] = Field(default=None, alias="doctorName")
    date: Optional[Date] = None
    time: Optional[str] = None
    appointment_id: Optional[str] = Field(default=None, alias="appointmentId")

    @property
    def filled_slot_count(self) -> int:
        return sum(1 for value in self.model_dump().values() if value)

    @property
    def has_dialogue_slots(self) -> bool:
        return any(getattr(self, name) for name in DIALOGUE_SLOTS)

    def fill_missing(self, other: "Entities") -> "Entities":
        """Copy of these entities, taking `other`'s values only where this bag is empty."""
        own = self.model_dump()
        gaps = {
            key: value
            for key, value in other.model_dump().items()
            if value and not own.get(key)
        }
        return self.model_copy(update=gaps) if gaps else self

    def to_public(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
