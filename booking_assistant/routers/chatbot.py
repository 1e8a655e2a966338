# booking_assistant/routers/chatbot.py

from typing import Optional
from fastapi import APIRouter, Depends
from booking_assistant.core.logger import logger
from booking_assistant.routers.deps import get_caller_identity, get_chatbot
from booking_assistant.schemas.chatbot import (
    HistoryResponse,
    HistoryTurn,
    MessageRequest,
    MessageResponse,
    NewSessionResponse,
    SessionRequest,
)
from booking_assistant.services.chatbot_engine import ChatbotEngine
from booking_assistant.utils.errors import BadRequestError, NotFoundError
from booking_assistant.utils.responses import format_response

router = APIRouter(tags=["chatbot"])


@router.post("/message", summary="Send a message to the booking assistant")
async def send_message(
    req: MessageRequest,
    caller_identity: Optional[str] = Depends(get_caller_identity),
    chatbot: ChatbotEngine = Depends(get_chatbot),
):
    message = req.message.strip()
    if not message:
        raise BadRequestError("Message is required")

    session_id = req.session_id or await chatbot.create_session()
    reply = await chatbot.process_message(session_id, message, caller_identity)
    data = MessageResponse(
        session_id=reply.session_id,
        response=reply.response,
        intent=reply.intent.value,
        entities=reply.entities.to_public(),
        suggestions=reply.suggestions,
    )
    return format_response(True, data.model_dump(by_alias=True))


@router.post("/session/new", summary="Start a new chat session")
async def new_session(chatbot: ChatbotEngine = Depends(get_chatbot)):
    session_id = await chatbot.create_session()
    data = NewSessionResponse(session_id=session_id)
    return format_response(True, data.model_dump(by_alias=True), "Session created")


@router.get("/session/{session_id}", summary="Chat history of a session")
async def get_session_history(session_id: str, chatbot: ChatbotEngine = Depends(get_chatbot)):
    session = await chatbot.get_session(session_id)
    if session is None:
        raise NotFoundError("Session not found")

    data = HistoryResponse(
        session_id=session.session_id,
        messages=[
            HistoryTurn(
                role=turn.role,
                content=turn.content,
                timestamp=turn.timestamp.isoformat(),
                intent=turn.intent.value if turn.intent else None,
            )
            for turn in session.history
        ],
        context=session.context.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
    return format_response(True, data.model_dump(by_alias=True))


@router.post("/session/end", summary="End a chat session")
async def end_session(req: SessionRequest, chatbot: ChatbotEngine = Depends(get_chatbot)):
    removed = await chatbot.end_session(req.session_id)
    if not removed:
        logger.info("End requested for unknown session %s", req.session_id)
    return format_response(True, {"ended": removed}, "Session ended" if removed else "No such session")
