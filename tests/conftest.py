# tests/conftest.py

import os, sys
# Add the project root (the folder containing `booking_assistant/`) to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from datetime import date, datetime, timezone
import pytest
from booking_assistant.models.doctor import Doctor
from booking_assistant.services.chatbot_engine import ChatbotEngine
from booking_assistant.services.doctor_directory import InMemoryDoctorDirectory
from booking_assistant.services.intent_classifier import IntentClassifier
from booking_assistant.services.session_store import InMemorySessionStore

# A Monday
TODAY = date(2025, 6, 2)
NOW = datetime(2025, 6, 2, 10, 0, tzinfo=timezone.utc)

WEEKDAY_HOURS = {
    "isAvailable": True,
    "startTime": "09:00",
    "endTime": "17:00",
    "breakStartTime": "13:00",
    "breakEndTime": "14:00",
}


def make_doctors():
    return [
        Doctor.model_validate({
            "id": "d1",
            "name": "Anil Rao",
            "specialization": "Cardiologist",
            "rating": {"average": 4.8, "count": 120},
            "consultationFee": 800,
            "experience": 15,
            "bio": "Interventional cardiologist.",
            "languages": ["English", "Hindi"],
            "availability": {
                "monday": WEEKDAY_HOURS,
                "tuesday": WEEKDAY_HOURS,
                "wednesday": {"isAvailable": False},
            },
        }),
        Doctor.model_validate({
            "id": "d2",
            "name": "Meera Shah",
            "specialization": "Cardiologist",
            "rating": {"average": 4.2, "count": 40},
            "consultationFee": 600,
            "experience": 8,
            "availability": {"monday": {"isAvailable": True, "startTime": "10:00", "endTime": "12:00"}},
        }),
        Doctor.model_validate({
            "id": "d3",
            "name": "Dr. Kavita Iyer",
            "specialization": "Dermatologist",
            "rating": {"average": 4.5, "count": 75},
            "consultationFee": 500,
            "experience": 10,
            "availability": {"friday": {"isAvailable": True, "startTime": "11:00", "endTime": "15:00"}},
        }),
    ]


class FakeAI:
    """Stand-in for AssistantAI; records calls and returns canned answers."""

    def __init__(self, classification=None, freeform=None):
        self.classification = classification
        self.freeform = freeform
        self.freeform_calls = []

    async def classify_intent(self, message, today):
        return self.classification

    async def generate_freeform(self, prompt, recent_context=None, instructions=None):
        self.freeform_calls.append((prompt, recent_context, instructions))
        return self.freeform


class Clock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store(clock):
    return InMemorySessionStore(history_limit=20, clock=clock)


@pytest.fixture
def directory():
    return InMemoryDoctorDirectory(make_doctors())


@pytest.fixture
def make_engine(store, directory, clock):
    def _make(ai=None, directory=directory):
        return ChatbotEngine(
            store=store,
            directory=directory,
            classifier=IntentClassifier(ai=ai),
            ai=ai,
            clock=clock,
        )
    return _make


@pytest.fixture
def engine(make_engine):
    return make_engine()
