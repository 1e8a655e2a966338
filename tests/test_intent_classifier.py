# tests/test_intent_classifier.py

import pytest
from booking_assistant.models.classification import AiClassification
from booking_assistant.models.entities import Entities
from booking_assistant.models.intent import Intent
from booking_assistant.services.entity_extractor import extract
from booking_assistant.services.intent_classifier import (
    INTENT_RULES,
    IntentClassifier,
    classify_by_rules,
    rule_confidence,
)
from tests.conftest import TODAY, FakeAI


def rules(message):
    return classify_by_rules(message, extract(message, today=TODAY))


@pytest.mark.parametrize("message", ["hi", "Hi!", "HELLO.", "hey there", "Good morning!!", "hello assistant"])
def test_greetings_any_casing_and_punctuation(message):
    assert rules(message).intent == Intent.GREETING


def test_greeting_does_not_swallow_requests():
    assert rules("hi, I want to book a cardiologist").intent == Intent.BOOK_APPOINTMENT


@pytest.mark.parametrize("message,intent", [
    ("bye", Intent.FAREWELL),
    ("thanks a lot!", Intent.THANKS),
    ("how do I book an appointment?", Intent.HOW_TO_BOOK),
    ("how to cancel", Intent.HOW_TO_CANCEL),
    ("how can I reschedule my visit", Intent.HOW_TO_RESCHEDULE),
    ("can I get a refund?", Intent.REFUND_QUERY),
    ("which payment methods do you accept", Intent.PAYMENT_INFO),
    ("is Dr. Sharma available today?", Intent.CHECK_AVAILABILITY),
    ("cancel my appointment", Intent.CANCEL_APPOINTMENT),
    ("I need to reschedule", Intent.RESCHEDULE_APPOINTMENT),
    ("show my appointments", Intent.VIEW_APPOINTMENTS),
    ("I want to complain about the wait", Intent.COMPLAINT),
    ("book a cardiologist", Intent.BOOK_APPOINTMENT),
    ("tell me about Dr. Rao", Intent.DOCTOR_DETAILS),
    ("find me a doctor", Intent.FIND_DOCTOR),
    ("dermatologist", Intent.FIND_DOCTOR),
    ("I forgot my password", Intent.ACCOUNT_HELP),
    ("what can you do", Intent.PLATFORM_HELP),
    ("this is an emergency", Intent.URGENT_HELP),
    ("I have a fever and a bad cough", Intent.SYMPTOM_ANALYSIS),
    ("what is the treatment for migraine?", Intent.MEDICAL_QUERY),
    ("blah blah", Intent.OTHER),
])
def test_rule_cascade(message, intent):
    assert rules(message).intent == intent


def test_generic_availability_question_is_not_availability_check():
    # no doctor or specialization to check
    assert rules("are you available on weekends?").intent != Intent.CHECK_AVAILABILITY


def test_how_to_phrasing_beats_bare_action():
    assert rules("how do I cancel my appointment").intent == Intent.HOW_TO_CANCEL
    assert rules("cancel my appointment").intent == Intent.CANCEL_APPOINTMENT


def test_extracted_doctor_defaults_to_find_doctor():
    entities = Entities(doctor_name="Rao")
    assert classify_by_rules("Rao", entities).intent == Intent.FIND_DOCTOR


def test_rules_are_ordered_by_precedence():
    names = [rule.name for rule in INTENT_RULES]
    assert names[:3] == ["greeting", "farewell", "thanks"]
    assert names.index("refund") < names.index("payment") < names.index("availability")
    assert names.index("availability") < names.index("cancel")
    assert names.index("book") < names.index("find_doctor")
    assert names[-1] == "medical"


def test_rule_confidence():
    assert rule_confidence(Intent.OTHER, Entities()) == 0.5
    assert rule_confidence(Intent.GREETING, Entities()) == 0.8
    full = Entities(specialization="Cardiologist", doctor_name="Rao", time="10:00", appointment_id="1")
    assert rule_confidence(Intent.BOOK_APPOINTMENT, full) == 1.0


def test_rule_result_is_tagged():
    result = rules("book a cardiologist")
    assert result.source == "rules"
    assert result.entities.specialization == "Cardiologist"
    assert 0.0 <= result.confidence <= 1.0


@pytest.mark.asyncio
async def test_classifier_uses_ai_when_available():
    ai_result = AiClassification(intent=Intent.FIND_DOCTOR, entities=Entities(specialization="Dermatologist"), confidence=0.9)
    classifier = IntentClassifier(ai=FakeAI(classification=ai_result))
    result = await classifier.classify("something for my skin", today=TODAY)
    assert result.source == "ai"
    assert result.intent == Intent.FIND_DOCTOR


@pytest.mark.asyncio
async def test_classifier_falls_back_to_rules_when_ai_fails():
    classifier = IntentClassifier(ai=FakeAI(classification=None))
    result = await classifier.classify("cancel my appointment", today=TODAY)
    assert result.source == "rules"
    assert result.intent == Intent.CANCEL_APPOINTMENT


@pytest.mark.asyncio
async def test_classifier_without_ai():
    result = await IntentClassifier().classify("hi", today=TODAY)
    assert result.source == "rules"
    assert result.intent == Intent.GREETING
