# booking_assistant/services/intent_classifier.py

"""
Intent classification for assistant messages.

The external AI is tried first when configured. When it is missing, fails, or
returns something unusable, the deterministic rule cascade below decides.
The cascade is an ordered list of (name, predicate, intent) rules; the first
predicate that matches wins.
"""

import re
from datetime import date
from typing import Callable, List, NamedTuple, Optional
from booking_assistant.core.logger import logger
from booking_assistant.models.classification import ClassificationResult, RuleClassification
from booking_assistant.models.entities import Entities
from booking_assistant.models.intent import Intent
from booking_assistant.services.ai_client import AssistantAI
from booking_assistant.services import entity_extractor


def _compile(*patterns: str) -> re.Pattern:
    return re.compile("|".join(f"(?:{p})" for p in patterns), re.IGNORECASE)


GREETING_RE = _compile(
    r"^\s*(hi|hii+|hello|hey|hey there|hi there|hello there|greetings|namaste|hola|yo|"
    r"good (morning|afternoon|evening))\b[\s!.,?]*(assistant|bot|there)?[\s!.,?]*$"
)
FAREWELL_RE = _compile(
    r"^\s*(bye|goodbye|good bye|bye bye|see you|see ya|good night|take care|that'?s all|"
    r"i'?m done)\b[\s\w!.,?]{0,20}$"
)
THANKS_RE = _compile(
    r"^\s*(thanks|thank you|thank u|thx|ty|much appreciated|appreciate it)\b[\s\w!.,?]{0,30}$"
)

HOW_TO_BOOK_RE = _compile(
    r"\bhow (do|can|should|would) (i|we|one)\b.*\b(book|schedule|make)\b",
    r"\bhow to (book|schedule|make)\b",
    r"\b(steps|process|procedure) (to|for) (book|schedul)",
)
HOW_TO_CANCEL_RE = _compile(
    r"\bhow (do|can|should|would) (i|we|one)\b.*\bcancel",
    r"\bhow to cancel\b",
    r"\b(steps|process|procedure) (to|for) cancel",
)
HOW_TO_RESCHEDULE_RE = _compile(
    r"\bhow (do|can|should|would) (i|we|one)\b.*\b(reschedule|change|move)\b",
    r"\bhow to (reschedule|change|move)\b",
    r"\b(steps|process|procedure) (to|for) reschedul",
)

REFUND_RE = _compile(r"\brefund", r"\bmoney back\b", r"\bget (my )?money\b")
PAYMENT_RE = _compile(
    r"\bpayments?\b", r"\bpay\b", r"\bpaid\b", r"\bupi\b", r"\b(credit|debit) card\b",
    r"\binvoice\b", r"\breceipt\b", r"\bcharged?\b", r"\bpayment methods?\b",
)

AVAILABILITY_RE = _compile(
    r"\bavailab(le|ility)\b", r"\bfree (slots?|time)\b", r"\b(time )?slots?\b",
    r"\btimings?\b", r"\bwhen (is|does|can)\b.*\b(see|free|work|available)\b",
)

CANCEL_RE = _compile(r"\bcancel", r"\bcall off\b", r"\bdon'?t want (the|my) appointment\b")
RESCHEDULE_RE = _compile(
    r"\breschedul", r"\bpostpone\b",
    r"\b(change|move|shift|modify)\b.*\bappointment",
    r"\bappointment\b.*\b(different|another) (time|date|day)\b",
)
VIEW_APPOINTMENTS_RE = _compile(
    r"\bmy (upcoming |next |past |previous )?(appointments?|bookings?)\b",
    r"\b(show|list|view|check|see|display|get)\b.*\b(appointments|bookings)\b",
    r"\bupcoming appointments?\b",
    r"\bdo i have (an? |any )?appointments?\b",
    r"^\s*appointments?\s*[?!.]*$",
)

COMPLAINT_RE = _compile(
    r"\bcomplain", r"\bunhappy\b", r"\bnot happy\b", r"\bdissatisfied\b",
    r"\bbad experience\b", r"\bterrible\b", r"\bawful\b", r"\brude\b",
    r"\bworst\b", r"\bdisappointed\b", r"\bnot satisfied\b",
)

BOOK_RE = _compile(
    r"\bbook", r"\bschedule\b", r"\breserve\b",
    r"\b(make|need|want|get|fix) (an? |my )?appointment\b",
    r"\bappointment with\b",
    r"\bconsult(ation)? with\b",
)

DOCTOR_DETAILS_RE = _compile(
    r"\b(tell me about|who is|more about|information (on|about)|details (of|about|for)|profile of)\b.*\b(dr\.?|doctor)\b",
    r"\b(dr\.?|doctor)\b.*\b(details|profile|qualifications?|experience|bio|background|languages?)\b",
)

FIND_DOCTOR_RE = _compile(
    r"\b(find|search|look(ing)? for|show|list|recommend|suggest|need|want)\b.*\b(doctors?|specialists?|physicians?)\b",
    r"\b(available|best|good|top) (doctors|specialists)\b",
    r"\bwhich doctors?\b",
)

ACCOUNT_HELP_RE = _compile(
    r"\blog ?in\b", r"\bsign ?(in|up)\b", r"\bregister\b", r"\bpassword\b",
    r"\baccount\b", r"\bprofile\b", r"\botp\b", r"\bverif(y|ication) (my )?(email|phone)\b",
)
PLATFORM_HELP_RE = _compile(
    r"\bhelp\b", r"\bwhat can you do\b", r"\bhow does (this|it) work\b",
    r"\bhow (do i|to) use\b", r"\bfeatures?\b", r"\bsupport\b", r"\bassist\b",
)

URGENT_RE = _compile(
    r"\bemergency\b", r"\burgent", r"\bchest pain\b", r"\bheart attack\b", r"\bstroke\b",
    r"\b(can'?t|cannot|unable to|difficulty) breath", r"\bunconscious\b",
    r"\bsevere bleeding\b", r"\bbleeding (heavily|a lot)\b", r"\bsuicid", r"\boverdose\b",
    r"\bseizure\b", r"\bpassed out\b", r"\bambulance\b",
)
SYMPTOM_RE = _compile(
    r"\bi (have|had|am having|'?ve been having|'?m having|feel|am feeling|'?m feeling)\b.*"
    r"\b(pain|ache|fever|cough|cold|rash|itch|nausea|vomit|dizz|headache|swelling|tired|fatigue|sore|bleeding|diarrh|anxious|anxiety)",
    r"\bsymptoms?\b", r"\bsuffering from\b", r"\bpain in\b", r"\bhurts?\b",
)
MEDICAL_RE = _compile(
    r"\b(what|which) (is|are|causes?)\b.*\b(disease|condition|infection|syndrome|disorder|diabetes|"
    r"blood pressure|cholesterol|asthma|migraine|thyroid|allergy|allergies)\b",
    r"\btreatment (for|of)\b", r"\bside effects?\b", r"\bmedicines? for\b", r"\bmedication\b",
    r"\bis it (safe|normal|dangerous)\b", r"\bhealthy\b", r"\bdiet\b", r"\bvaccin",
    r"\bdiabetes\b", r"\bblood pressure\b", r"\bcholesterol\b", r"\bmigraine\b",
)


class IntentRule(NamedTuple):
    name: str
    predicate: Callable[[str, Entities], bool]
    intent: Intent


def _matches(pattern: re.Pattern) -> Callable[[str, Entities], bool]:
    return lambda text, entities: bool(pattern.search(text))


def _availability_for_doctor(text: str, entities: Entities) -> bool:
    # generic "are you available" must not trigger this rule
    return bool(AVAILABILITY_RE.search(text)) and bool(entities.doctor_name or entities.specialization)


def _find_doctor(text: str, entities: Entities) -> bool:
    return bool(FIND_DOCTOR_RE.search(text)) or bool(entities.specialization)


INTENT_RULES: List[IntentRule] = [
    IntentRule("greeting", _matches(GREETING_RE), Intent.GREETING),
    IntentRule("farewell", _matches(FAREWELL_RE), Intent.FAREWELL),
    IntentRule("thanks", _matches(THANKS_RE), Intent.THANKS),
    IntentRule("how_to_book", _matches(HOW_TO_BOOK_RE), Intent.HOW_TO_BOOK),
    IntentRule("how_to_cancel", _matches(HOW_TO_CANCEL_RE), Intent.HOW_TO_CANCEL),
    IntentRule("how_to_reschedule", _matches(HOW_TO_RESCHEDULE_RE), Intent.HOW_TO_RESCHEDULE),
    IntentRule("refund", _matches(REFUND_RE), Intent.REFUND_QUERY),
    IntentRule("payment", _matches(PAYMENT_RE), Intent.PAYMENT_INFO),
    IntentRule("availability", _availability_for_doctor, Intent.CHECK_AVAILABILITY),
    IntentRule("cancel", _matches(CANCEL_RE), Intent.CANCEL_APPOINTMENT),
    IntentRule("reschedule", _matches(RESCHEDULE_RE), Intent.RESCHEDULE_APPOINTMENT),
    IntentRule("view_appointments", _matches(VIEW_APPOINTMENTS_RE), Intent.VIEW_APPOINTMENTS),
    IntentRule("complaint", _matches(COMPLAINT_RE), Intent.COMPLAINT),
    IntentRule("book", _matches(BOOK_RE), Intent.BOOK_APPOINTMENT),
    IntentRule("doctor_details", _matches(DOCTOR_DETAILS_RE), Intent.DOCTOR_DETAILS),
    IntentRule("find_doctor", _find_doctor, Intent.FIND_DOCTOR),
    IntentRule("account_help", _matches(ACCOUNT_HELP_RE), Intent.ACCOUNT_HELP),
    IntentRule("platform_help", _matches(PLATFORM_HELP_RE), Intent.PLATFORM_HELP),
    IntentRule("urgent", _matches(URGENT_RE), Intent.URGENT_HELP),
    IntentRule("symptom", _matches(SYMPTOM_RE), Intent.SYMPTOM_ANALYSIS),
    IntentRule("medical", _matches(MEDICAL_RE), Intent.MEDICAL_QUERY),
]


def rule_confidence(intent: Intent, entities: Entities) -> float:
    confidence = 0.5
    if intent != Intent.OTHER:
        confidence += 0.3
    confidence += min(entities.filled_slot_count * 0.05, 0.2)
    return round(min(confidence, 1.0), 2)


def classify_by_rules(message: str, entities: Entities) -> RuleClassification:
    """Deterministic fallback classifier. Pure: no I/O, no AI."""
    text = (message or "").strip()
    intent = Intent.OTHER
    for rule in INTENT_RULES:
        if rule.predicate(text, entities):
            intent = rule.intent
            break
    else:
        if entities.doctor_name or entities.specialization:
            intent = Intent.FIND_DOCTOR

    return RuleClassification(
        intent=intent,
        entities=entities,
        confidence=rule_confidence(intent, entities),
    )


class IntentClassifier:
    def __init__(self, ai: Optional[AssistantAI] = None, suppress_specialization_with_appointment: bool = False):
        self.ai = ai
        self.suppress_specialization_with_appointment = suppress_specialization_with_appointment

    def extract(self, message: str, today: date) -> Entities:
        return entity_extractor.extract(
            message,
            today=today,
            suppress_specialization_with_appointment=self.suppress_specialization_with_appointment,
        )

    async def classify(
        self,
        message: str,
        entities: Optional[Entities] = None,
        today: Optional[date] = None,
    ) -> ClassificationResult:
        today = today or date.today()
        if entities is None:
            entities = self.extract(message, today)

        if self.ai is not None:
            result = await self.ai.classify_intent(message, today)
            if result is not None:
                return result
            logger.info("AI classification unavailable, using rule cascade")

        return classify_by_rules(message, entities)
