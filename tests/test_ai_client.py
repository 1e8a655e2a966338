# tests/test_ai_client.py

from datetime import date
from types import SimpleNamespace
import pytest
from openai import OpenAIError
from booking_assistant.models.intent import Intent
from booking_assistant.services.ai_client import AssistantAI, clean_and_parse, entities_from_payload
from tests.conftest import TODAY


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_ai(content=None, error=None):
    completions = FakeCompletions(content, error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return AssistantAI(client, model="gpt-4o-mini", temperature=0.3, max_tokens=256), completions


def test_clean_and_parse_strips_markdown():
    raw = '```json\n{"intent": "greeting", "confidence": 0.9}\n```'
    assert clean_and_parse(raw) == {"intent": "greeting", "confidence": 0.9}


def test_clean_and_parse_rejects_prose():
    with pytest.raises(ValueError):
        clean_and_parse("I think this is a greeting")


def test_entities_from_payload_normalises_values():
    entities = entities_from_payload(
        {"specialization": "cardiologist", "doctorName": "Dr. Rao", "date": "2025-06-03", "time": "3pm", "appointmentId": None},
        TODAY,
    )
    assert entities.specialization == "Cardiologist"
    assert entities.doctor_name == "Rao"
    assert entities.date == date(2025, 6, 3)
    assert entities.time == "15:00"
    assert entities.appointment_id is None


def test_entities_from_payload_relative_date_and_junk():
    assert entities_from_payload({"date": "tomorrow"}, TODAY).date == date(2025, 6, 3)
    assert entities_from_payload({"date": "null", "time": "whenever"}, TODAY).filled_slot_count == 0
    assert entities_from_payload("not a dict", TODAY).filled_slot_count == 0


@pytest.mark.asyncio
async def test_classify_intent_parses_model_output():
    ai, completions = make_ai('{"intent": "book_appointment", "entities": {"specialization": "dermatologist"}, "confidence": 0.85}')
    result = await ai.classify_intent("book a skin doctor", TODAY)
    assert result.source == "ai"
    assert result.intent == Intent.BOOK_APPOINTMENT
    assert result.entities.specialization == "Dermatologist"
    assert result.confidence == 0.85
    assert completions.calls[0]["temperature"] == 0


@pytest.mark.asyncio
async def test_classify_intent_unknown_intent_is_unusable():
    ai, _ = make_ai('{"intent": "order_pizza", "entities": {}}')
    assert await ai.classify_intent("pizza please", TODAY) is None


@pytest.mark.asyncio
async def test_classify_intent_api_failure_is_unusable():
    ai, _ = make_ai(error=OpenAIError("connection reset"))
    assert await ai.classify_intent("hi", TODAY) is None


@pytest.mark.asyncio
async def test_generate_freeform_failure_returns_none():
    ai, _ = make_ai(error=OpenAIError("timeout"))
    assert await ai.generate_freeform("hello") is None


@pytest.mark.asyncio
async def test_generate_freeform_passes_context_and_instructions():
    from booking_assistant.models.session import ConversationTurn

    ai, completions = make_ai("  General info.  ")
    history = [ConversationTurn(role="user", content="hi"), ConversationTurn(role="assistant", content="Hello!")]
    answer = await ai.generate_freeform("what is diabetes?", recent_context=history, instructions="Be brief.")

    assert answer == "General info."
    messages = completions.calls[0]["messages"]
    assert messages[0]["role"] == "system" and messages[0]["content"].endswith("Be brief.")
    assert [m["content"] for m in messages[1:]] == ["hi", "Hello!", "what is diabetes?"]
