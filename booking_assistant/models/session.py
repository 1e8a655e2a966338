# booking_assistant/models/session.py

from datetime import date as Date, datetime, timezone
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from booking_assistant.models.entities import Entities
from booking_assistant.models.intent import Intent


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationTurn(BaseModel):
    model_config = ConfigDict(frozen=True, validate_by_name=True)

    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=utcnow)
    intent: Optional[Intent] = None
    entities: Optional[Entities] = None


class SlotContext(BaseModel):
    """Slot values carried between turns of one session."""

    model_config = ConfigDict(validate_by_name=True)

    specialization: Optional[str] = None
    doctor_name: Optional[str] = Field(default=None, alias="doctorName")
    date: Optional[Date] = None
    time: Optional[str] = None
    last_intent: Optional[Intent] = Field(default=None, alias="lastIntent")

    @classmethod
    def from_entities(cls, entities: Entities, last_intent: Optional[Intent] = None) -> "SlotContext":
        return cls(
            specialization=entities.specialization,
            doctor_name=entities.doctor_name,
            date=entities.date,
            time=entities.time,
            last_intent=last_intent,
        )

    def merged_with(self, partial: "SlotContext") -> "SlotContext":
        # last non-empty value wins; empty values never overwrite
        updates = {key: value for key, value in partial.model_dump().items() if value}
        return self.model_copy(update=updates)


class Session(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    history: List[ConversationTurn] = Field(default_factory=list)
    context: SlotContext = Field(default_factory=SlotContext)
    created_at: datetime = Field(default_factory=utcnow)
    last_activity: datetime = Field(default_factory=utcnow, alias="lastActivity")

    def recent_history(self, limit: int) -> List[ConversationTurn]:
        return self.history[-limit:] if limit > 0 else []
