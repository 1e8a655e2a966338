# booking_assistant/schemas/chatbot.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

# ---------------------
# Request / Response Models
# ---------------------

class MessageRequest(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    message: str
    session_id: Optional[str] = Field(default=None, alias="sessionId")

class MessageResponse(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    response: str
    intent: str
    entities: Dict[str, Any] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)

class SessionRequest(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    session_id: str = Field(..., alias="sessionId")

class NewSessionResponse(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    session_id: str = Field(..., alias="sessionId")

class HistoryTurn(BaseModel):
    role: str
    content: str
    timestamp: str
    intent: Optional[str] = None

class HistoryResponse(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    messages: List[HistoryTurn]
    context: Dict[str, Any] = Field(default_factory=dict)
