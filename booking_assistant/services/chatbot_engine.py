# booking_assistant/services/chatbot_engine.py

"""
Dialogue orchestration for the booking assistant.

Every turn is classified on its own. The only state carried between turns is
the session's slot context, including `last_intent`: an unclassifiable
follow-up that brings new slot values ("tomorrow at 3pm") continues the flow
that was last active. The engine never writes appointments; it prepares a
summary and hands the user over to the booking pages.
"""

import re
from datetime import date
from typing import Awaitable, Callable, Dict, List, NamedTuple, Optional, Tuple
from pydantic import BaseModel, Field
from booking_assistant.core.config import settings
from booking_assistant.core.logger import logger
from booking_assistant.core.policy import latest_booking_date
from booking_assistant.models.doctor import weekday_name
from booking_assistant.models.entities import Entities
from booking_assistant.models.intent import AUTH_REQUIRED_INTENTS, Intent
from booking_assistant.models.session import ConversationTurn, Session, SlotContext, utcnow
from booking_assistant.services import reply_templates as replies
from booking_assistant.services.ai_client import AssistantAI, build_assistant_ai
from booking_assistant.services.doctor_directory import DoctorDirectory, MongoDoctorDirectory
from booking_assistant.services.entity_extractor import extract_time
from booking_assistant.services.intent_classifier import IntentClassifier
from booking_assistant.services.prompt_templates import MEDICAL_INFO_PROMPT
from booking_assistant.services.response_builders import (
    format_availability,
    format_booking_summary,
    format_date,
    format_day_window,
    format_doctor_details,
    format_doctor_list,
    format_time,
)
from booking_assistant.services.session_store import SessionStore, build_session_store, new_session_id

# Canned small talk; named periods in it ("good morning") are never read as a time
SMALL_TALK_INTENTS = frozenset({Intent.GREETING, Intent.FAREWELL, Intent.THANKS})

STATIC_REPLIES = {
    Intent.GREETING: replies.GREETING,
    Intent.FAREWELL: replies.FAREWELL,
    Intent.THANKS: replies.THANKS,
    Intent.CANCEL_APPOINTMENT: replies.CANCEL_GUIDANCE,
    Intent.RESCHEDULE_APPOINTMENT: replies.RESCHEDULE_GUIDANCE,
    Intent.VIEW_APPOINTMENTS: replies.VIEW_APPOINTMENTS_GUIDANCE,
    Intent.HOW_TO_BOOK: replies.HOW_TO_BOOK,
    Intent.HOW_TO_CANCEL: replies.HOW_TO_CANCEL,
    Intent.HOW_TO_RESCHEDULE: replies.HOW_TO_RESCHEDULE,
    Intent.PAYMENT_INFO: replies.PAYMENT_INFO,
    Intent.REFUND_QUERY: replies.REFUND_POLICY,
    Intent.ACCOUNT_HELP: replies.ACCOUNT_HELP,
    Intent.PLATFORM_HELP: replies.PLATFORM_HELP,
    Intent.COMPLAINT: replies.COMPLAINT,
    Intent.URGENT_HELP: replies.URGENT_HELP,
}

LOGIN_ACTIONS = {
    Intent.BOOK_APPOINTMENT: "book an appointment",
    Intent.CANCEL_APPOINTMENT: "cancel an appointment",
    Intent.RESCHEDULE_APPOINTMENT: "reschedule an appointment",
    Intent.VIEW_APPOINTMENTS: "view your appointments",
}


class ChatbotReply(BaseModel):
    session_id: str
    response: str
    intent: Intent
    entities: Entities = Field(default_factory=Entities)
    suggestions: List[str] = Field(default_factory=list)


class Reply(NamedTuple):
    text: str
    suggestions: List[str]


class Turn(NamedTuple):
    """Everything a handler may look at for the current message."""

    message: str
    intent: Intent
    entities: Entities
    context: SlotContext
    caller_identity: Optional[str]
    history: List[ConversationTurn]
    today: date


def resolve_intent(classified: Intent, context: SlotContext, entities: Entities) -> Intent:
    """Continue the last active flow when an unclassified turn brings new slot values."""
    if classified == Intent.OTHER and context.last_intent and entities.has_dialogue_slots:
        return context.last_intent
    return classified


def _whole_words(*patterns: str) -> re.Pattern:
    return re.compile(r"\b(?:" + "|".join(patterns) + r")\b", re.IGNORECASE)


DOMAIN_HINT_RE = _whole_words(*replies.DOMAIN_HINTS)
OUT_OF_SCOPE_RE = _whole_words(*replies.OUT_OF_SCOPE_KEYWORDS)
SYMPTOM_RULES = [
    (_whole_words(pattern), specialization)
    for pattern, specialization in replies.SYMPTOM_SPECIALIZATIONS.items()
]

PROVIDER_SLOTS = ("doctor_name", "specialization")
SCHEDULE_SLOTS = ("date", "time")


def is_out_of_scope(message: str) -> bool:
    text = message or ""
    if DOMAIN_HINT_RE.search(text):
        return False
    return OUT_OF_SCOPE_RE.search(text) is not None


def suggest_specialization(message: str) -> Optional[str]:
    text = message or ""
    for pattern, specialization in SYMPTOM_RULES:
        if pattern.search(text):
            return specialization
    return None


def _provider_changed(context: SlotContext, entities: Entities) -> bool:
    old = ((context.doctor_name or "").lower(), (context.specialization or "").lower())
    new = ((entities.doctor_name or "").lower(), (entities.specialization or "").lower())
    return old != new


def stale_slots(context: SlotContext, entities: Entities, new_booking: bool = False) -> Tuple[str, ...]:
    """
    Context slots to clear before merging this turn's entities.

    A newly named provider replaces the stored doctor/specialization pair. When
    an explicit booking request switches to a different provider, the old date
    and time are dropped as well so they are asked for again.
    """
    if not (entities.doctor_name or entities.specialization):
        return ()
    stale = [slot for slot in PROVIDER_SLOTS if not getattr(entities, slot)]
    had_provider = context.doctor_name or context.specialization
    if new_booking and had_provider and _provider_changed(context, entities):
        stale += [slot for slot in SCHEDULE_SLOTS if not getattr(entities, slot)]
    return tuple(stale)


def small_talk_slots(message: str, entities: Entities) -> Entities:
    # "good morning" is a greeting, not a requested time
    return entities.model_copy(update={"time": extract_time(message, include_periods=False)})


def _with_article(noun: str) -> str:
    return f"an {noun}" if noun[:1].upper() in "AEIOU" else f"a {noun}"


def _describe_criteria(doctor_name: Optional[str], specialization: Optional[str]) -> str:
    parts = []
    if doctor_name:
        parts.append(f"the name \"{doctor_name}\"")
    if specialization:
        parts.append(f"the specialization \"{specialization}\"")
    return " and ".join(parts)


def _search_criteria(turn: Turn) -> Tuple[Optional[str], Optional[str]]:
    # new entities win as a pair so an old doctor name is never mixed with a new specialization
    if turn.entities.doctor_name or turn.entities.specialization:
        return turn.entities.doctor_name, turn.entities.specialization
    return turn.context.doctor_name, turn.context.specialization


def _provider_label(context: SlotContext) -> str:
    if context.doctor_name:
        return f"Dr. {context.doctor_name}"
    return _with_article(context.specialization)


class ChatbotEngine:
    def __init__(
        self,
        store: SessionStore,
        directory: DoctorDirectory,
        classifier: IntentClassifier,
        ai: Optional[AssistantAI] = None,
        clock=utcnow,
        doctor_limit: int = 5,
        ai_context_turns: int = 10,
    ):
        self.store = store
        self.directory = directory
        self.classifier = classifier
        self.ai = ai
        self.clock = clock
        self.doctor_limit = doctor_limit
        self.ai_context_turns = ai_context_turns

        handlers: Dict[Intent, Callable[[Turn], Awaitable[Reply]]] = {
            intent: self._static_reply for intent in STATIC_REPLIES
        }
        handlers.update({
            Intent.FIND_DOCTOR: self._find_doctor,
            Intent.BOOK_APPOINTMENT: self._book_appointment,
            Intent.CHECK_AVAILABILITY: self._check_availability,
            Intent.DOCTOR_DETAILS: self._doctor_details,
            Intent.MEDICAL_QUERY: self._medical_answer,
            Intent.SYMPTOM_ANALYSIS: self._medical_answer,
            Intent.OTHER: self._fallback,
        })
        self.handlers = handlers

    # ---------- sessions ----------

    async def create_session(self) -> str:
        session_id = new_session_id()
        await self.store.get_or_create(session_id)
        return session_id

    async def get_session(self, session_id: str) -> Optional[Session]:
        return await self.store.get(session_id)

    async def get_history(self, session_id: str) -> List[ConversationTurn]:
        session = await self.store.get(session_id)
        return session.history if session else []

    async def end_session(self, session_id: str) -> bool:
        removed = await self.store.delete(session_id)
        if removed:
            logger.info("Ended chat session %s", session_id)
        return removed

    # ---------- turns ----------

    async def process_message(
        self,
        session_id: str,
        message: str,
        caller_identity: Optional[str] = None,
    ) -> ChatbotReply:
        intent = Intent.OTHER
        entities = Entities()
        try:
            today = self.clock().date()
            session = await self.store.get_or_create(session_id)

            entities = self.classifier.extract(message, today)
            result = await self.classifier.classify(message, entities, today)
            entities = entities.fill_missing(result.entities)
            intent = resolve_intent(result.intent, session.context, entities)
            logger.info(
                "Session %s: intent=%s source=%s continued=%s",
                session_id, intent.value, result.source, intent != result.intent,
            )

            context = session.context
            if intent not in SMALL_TALK_INTENTS:
                partial = SlotContext.from_entities(
                    entities, last_intent=intent if intent != Intent.OTHER else None
                )
                clear = stale_slots(context, entities, new_booking=result.intent == Intent.BOOK_APPOINTMENT)
                context = await self.store.merge_context(session_id, partial, clear=clear)
            else:
                slots = small_talk_slots(message, entities)
                if slots.has_dialogue_slots:
                    # slots ride along; the flow in progress stays the one to continue
                    context = await self.store.merge_context(
                        session_id, SlotContext.from_entities(slots), clear=stale_slots(context, slots)
                    )
                elif intent != context.last_intent:
                    context = await self.store.merge_context(session_id, SlotContext(last_intent=intent))

            turn = Turn(
                message=message,
                intent=intent,
                entities=entities,
                context=context,
                caller_identity=caller_identity,
                history=session.recent_history(self.ai_context_turns),
                today=today,
            )
            reply = await self._dispatch(turn)
        except Exception:
            logger.exception("Failed to process message for session %s", session_id)
            intent = Intent.OTHER
            reply = Reply(replies.APOLOGY, replies.MAIN_MENU_SUGGESTIONS)

        await self._record(session_id, message, reply.text, intent, entities)
        return ChatbotReply(
            session_id=session_id,
            response=reply.text,
            intent=intent,
            entities=entities,
            suggestions=reply.suggestions,
        )

    async def _dispatch(self, turn: Turn) -> Reply:
        if turn.intent in AUTH_REQUIRED_INTENTS and not turn.caller_identity:
            return Reply(
                replies.LOGIN_REQUIRED.format(action=LOGIN_ACTIONS[turn.intent]),
                replies.LOGIN_SUGGESTIONS,
            )
        return await self.handlers[turn.intent](turn)

    async def _record(self, session_id: str, message: str, response: str, intent: Intent, entities: Entities) -> None:
        try:
            await self.store.append(
                session_id,
                ConversationTurn(role="user", content=message, intent=intent, entities=entities),
                ConversationTurn(role="assistant", content=response, intent=intent),
            )
        except Exception:
            logger.exception("Failed to record turn for session %s", session_id)

    # ---------- handlers ----------

    async def _static_reply(self, turn: Turn) -> Reply:
        return Reply(STATIC_REPLIES[turn.intent], replies.SUGGESTIONS[turn.intent])

    async def _find_doctor(self, turn: Turn) -> Reply:
        doctor_name, specialization = _search_criteria(turn)
        if not (doctor_name or specialization):
            return Reply(replies.FIND_DOCTOR_GUIDANCE, replies.SPECIALIZATION_SUGGESTIONS)

        doctors = await self.directory.find_doctors(
            doctor_name=doctor_name,
            specialization=specialization,
            limit=self.doctor_limit,
            sort="rating",
        )
        criteria = _describe_criteria(doctor_name, specialization)
        if not doctors:
            return Reply(
                replies.NO_DOCTORS_FOUND.format(criteria=criteria),
                replies.SPECIALIZATION_SUGGESTIONS,
            )

        text = replies.DOCTOR_RESULTS.format(
            count=len(doctors),
            plural="" if len(doctors) == 1 else "s",
            criteria=criteria,
            cards=format_doctor_list(doctors),
            next_actions=replies.DOCTOR_NEXT_ACTIONS,
        )
        return Reply(text, [f"Book with {d.display_name}" for d in doctors[:3]] + ["Check Availability"])

    async def _book_appointment(self, turn: Turn) -> Reply:
        context = turn.context
        if not (context.specialization or context.doctor_name):
            return Reply(replies.ASK_PROVIDER, replies.SPECIALIZATION_SUGGESTIONS)

        provider = _provider_label(context)
        if not context.date:
            return Reply(replies.ASK_DATE.format(provider=provider), replies.DATE_SUGGESTIONS)
        if context.date < turn.today:
            return Reply(replies.DATE_IN_PAST, replies.DATE_SUGGESTIONS)
        if context.date > latest_booking_date(turn.today):
            return Reply(replies.DATE_TOO_FAR, replies.DATE_SUGGESTIONS)

        if not context.time:
            return Reply(
                replies.ASK_TIME.format(provider=provider, day=format_date(context.date)),
                replies.TIME_SUGGESTIONS,
            )

        doctor = None
        if context.doctor_name:
            matches = await self.directory.find_doctors(doctor_name=context.doctor_name, limit=1)
            doctor = matches[0] if matches else None

        if doctor is not None:
            day = weekday_name(context.date)
            if not doctor.is_available_at(day, context.time):
                slots = doctor.available_slots(day)
                text = replies.DOCTOR_UNAVAILABLE_AT.format(
                    doctor=doctor.display_name,
                    time=format_time(context.time),
                    availability=format_availability(doctor, context.date, slots),
                )
                return Reply(text, [format_time(s) for s in slots[:3]] or replies.DATE_SUGGESTIONS)

        summary = format_booking_summary(
            context.date,
            context.time,
            doctor=doctor,
            doctor_name=context.doctor_name,
            specialization=context.specialization,
        )
        return Reply(
            replies.BOOKING_HANDOFF.format(summary=summary),
            ["Continue to booking", "Change date", "Change time"],
        )

    async def _check_availability(self, turn: Turn) -> Reply:
        doctor_name, specialization = _search_criteria(turn)
        if not (doctor_name or specialization):
            return Reply(replies.AVAILABILITY_ASK, replies.SPECIALIZATION_SUGGESTIONS)

        doctors = await self.directory.find_doctors(
            doctor_name=doctor_name,
            specialization=specialization,
            limit=self.doctor_limit,
        )
        if not doctors:
            criteria = f"any doctor matching {_describe_criteria(doctor_name, specialization)}"
            return Reply(
                replies.AVAILABILITY_NOT_FOUND.format(criteria=criteria),
                ["Find Doctors", "Show All Doctors"],
            )

        # today's window only, not the whole week
        day = weekday_name(turn.today)
        lines = "\n".join(f"• {format_day_window(doctor, day)}" for doctor in doctors)
        return Reply(
            replies.AVAILABILITY_TODAY.format(lines=lines),
            replies.SUGGESTIONS[Intent.CHECK_AVAILABILITY],
        )

    async def _doctor_details(self, turn: Turn) -> Reply:
        doctor_name, specialization = _search_criteria(turn)
        if not (doctor_name or specialization):
            return Reply(replies.DOCTOR_DETAILS_ASK, ["Find Doctors"])

        doctors = await self.directory.find_doctors(
            doctor_name=doctor_name,
            specialization=specialization,
            limit=1,
        )
        if not doctors:
            return Reply(
                replies.NO_DOCTORS_FOUND.format(criteria=_describe_criteria(doctor_name, specialization)),
                replies.SPECIALIZATION_SUGGESTIONS,
            )
        return Reply(format_doctor_details(doctors[0]), replies.SUGGESTIONS[Intent.DOCTOR_DETAILS])

    async def _medical_answer(self, turn: Turn) -> Reply:
        specialization = suggest_specialization(turn.message)
        answer = None
        if self.ai is not None:
            answer = await self.ai.generate_freeform(
                turn.message,
                recent_context=turn.history,
                instructions=MEDICAL_INFO_PROMPT,
            )

        who = _with_article(specialization) if specialization else "a doctor"
        text = "\n\n".join([
            answer or replies.MEDICAL_FALLBACK,
            replies.MEDICAL_DISCLAIMER,
            replies.MEDICAL_OFFER.format(who=who),
        ])
        suggestions = [f"Find {specialization}"] if specialization else []
        return Reply(text, suggestions + replies.SUGGESTIONS[turn.intent])

    async def _fallback(self, turn: Turn) -> Reply:
        if is_out_of_scope(turn.message):
            return Reply(replies.OUT_OF_SCOPE, replies.MAIN_MENU_SUGGESTIONS)

        if self.ai is not None:
            answer = await self.ai.generate_freeform(turn.message, recent_context=turn.history)
            if answer:
                return Reply(answer, replies.MAIN_MENU_SUGGESTIONS)
        return Reply(replies.GENERIC_FALLBACK, replies.MAIN_MENU_SUGGESTIONS)


def build_chatbot_engine() -> ChatbotEngine:
    from booking_assistant.db.mongo import doctors_collection

    ai = build_assistant_ai()
    return ChatbotEngine(
        store=build_session_store(
            settings.SESSION_BACKEND,
            history_limit=settings.SESSION_HISTORY_LIMIT,
            ttl_hours=settings.SESSION_TTL_HOURS,
        ),
        directory=MongoDoctorDirectory(doctors_collection),
        classifier=IntentClassifier(
            ai=ai,
            suppress_specialization_with_appointment=settings.SUPPRESS_SPECIALIZATION_WITH_APPOINTMENT,
        ),
        ai=ai,
        doctor_limit=settings.DOCTOR_RESULT_LIMIT,
        ai_context_turns=settings.AI_CONTEXT_TURNS,
    )
