# booking_assistant/models/classification.py

from typing import Literal, Union
from pydantic import BaseModel, ConfigDict, Field
from booking_assistant.models.entities import Entities
from booking_assistant.models.intent import Intent


class AiClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: Literal["ai"] = "ai"
    intent: Intent
    entities: Entities = Field(default_factory=Entities)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class RuleClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: Literal["rules"] = "rules"
    intent: Intent
    entities: Entities = Field(default_factory=Entities)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


ClassificationResult = Union[AiClassification, RuleClassification]
