# booking_assistant/routers/deps.py

from typing import Optional
from fastapi import Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from booking_assistant.core.jwt import decode_subject
from booking_assistant.services.chatbot_engine import ChatbotEngine

# Chat works signed out; the token only unlocks account-specific intents
bearer_scheme = HTTPBearer(auto_error=False)


def get_caller_identity(
    token: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> Optional[str]:
    if token is None:
        return None
    return decode_subject(token.credentials)


def get_chatbot(request: Request) -> ChatbotEngine:
    return request.app.state.chatbot
