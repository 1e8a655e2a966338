# tests/test_chatbot_api.py

import pytest
from fastapi.testclient import TestClient
from booking_assistant.core.jwt import create_jwt_token
from booking_assistant.main import app
from booking_assistant.routers.deps import get_chatbot

client = TestClient(app)


@pytest.fixture(autouse=True)
def chatbot(engine):
    app.dependency_overrides[get_chatbot] = lambda: engine
    yield engine
    app.dependency_overrides.clear()


def auth_header(user_id="user-1"):
    return {"Authorization": f"Bearer {create_jwt_token({'sub': user_id})}"}


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "Booking Assistant"}


def test_message_creates_session_when_missing():
    response = client.post("/chatbot/message", json={"message": "hi"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["sessionId"]
    assert data["intent"] == "greeting"
    assert data["suggestions"]


def test_message_entities_use_camel_case():
    response = client.post(
        "/chatbot/message",
        json={"message": "is Dr. Rao available tomorrow at 3pm?", "sessionId": "s1"},
    )
    data = response.json()["data"]
    assert data["sessionId"] == "s1"
    assert data["intent"] == "check_availability"
    assert data["entities"] == {"doctorName": "Rao", "date": "2025-06-03", "time": "15:00"}


def test_booking_needs_token():
    response = client.post("/chatbot/message", json={"message": "book a cardiologist", "sessionId": "s1"})
    assert "Please log in" in response.json()["data"]["response"]


def test_booking_with_token_prompts_for_date():
    response = client.post(
        "/chatbot/message",
        json={"message": "book a cardiologist", "sessionId": "s1"},
        headers=auth_header(),
    )
    data = response.json()["data"]
    assert data["intent"] == "book_appointment"
    assert "Which date" in data["response"]


def test_invalid_token_is_treated_as_signed_out():
    response = client.post(
        "/chatbot/message",
        json={"message": "cancel my appointment", "sessionId": "s1"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 200
    assert "Please log in" in response.json()["data"]["response"]


def test_empty_message_is_rejected():
    response = client.post("/chatbot/message", json={"message": "   "})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["type"] == "BadRequestError"
    assert body["error"]["detail"] == "Message is required"


def test_missing_message_is_validation_error():
    response = client.post("/chatbot/message", json={"sessionId": "s1"})
    assert response.status_code == 422
    assert response.json()["success"] is False


def test_session_history_roundtrip():
    session_id = client.post("/chatbot/session/new").json()["data"]["sessionId"]
    client.post("/chatbot/message", json={"message": "find a cardiologist", "sessionId": session_id})

    response = client.get(f"/chatbot/session/{session_id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert [m["role"] for m in data["messages"]] == ["user", "assistant"]
    assert data["messages"][0]["intent"] == "find_doctor"
    assert data["context"]["specialization"] == "Cardiologist"
    assert data["context"]["lastIntent"] == "find_doctor"


def test_unknown_session_history_is_404():
    response = client.get("/chatbot/session/does-not-exist")
    assert response.status_code == 404
    assert response.json()["error"]["detail"] == "Session not found"


def test_end_session():
    session_id = client.post("/chatbot/session/new").json()["data"]["sessionId"]
    response = client.post("/chatbot/session/end", json={"sessionId": session_id})
    assert response.json()["data"] == {"ended": True}

    response = client.post("/chatbot/session/end", json={"sessionId": session_id})
    assert response.json()["data"] == {"ended": False}
