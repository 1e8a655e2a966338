# booking_assistant/services/ai_client.py

import json
import re
from datetime import date
from typing import Any, Dict, List, Optional
from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError
from booking_assistant.core.config import settings
from booking_assistant.core.logger import logger
from booking_assistant.models.classification import AiClassification
from booking_assistant.models.entities import Entities
from booking_assistant.models.session import ConversationTurn
from booking_assistant.services.entity_extractor import extract_date, extract_time
from booking_assistant.services.prompt_templates import (
    ASSISTANT_SYSTEM_PROMPT,
    INTENT_CLASSIFIER_PROMPT,
)

JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def clean_and_parse(raw: str) -> dict:
    """Pull the first JSON object out of a model reply (which may be wrapped in markdown)."""
    match = JSON_OBJECT_RE.search(raw or "")
    if not match:
        raise ValueError("No JSON object in model output")
    return json.loads(match.group(0))


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if not value or value.lower() in ("null", "none"):
        return None
    return value


def entities_from_payload(raw: Dict[str, Any], today: date) -> Entities:
    """Map the model's loosely typed entity dict onto Entities, dropping what does not parse."""
    if not isinstance(raw, dict):
        raw = {}
    raw_date = _text(raw.get("date"))
    raw_time = _text(raw.get("time"))

    parsed_date = None
    if raw_date:
        try:
            parsed_date = date.fromisoformat(raw_date)
        except ValueError:
            parsed_date = extract_date(raw_date, today)

    doctor_name = _text(raw.get("doctorName"))
    if doctor_name:
        doctor_name = re.sub(r"^(dr\.?|doctor)\s+", "", doctor_name, flags=re.IGNORECASE)

    specialization = _text(raw.get("specialization"))
    return Entities(
        specialization=specialization.title() if specialization else None,
        doctor_name=doctor_name or None,
        date=parsed_date,
        time=extract_time(raw_time) if raw_time else None,
        appointment_id=_text(raw.get("appointmentId")),
    )


class AssistantAI:
    """
    Thin wrapper over the OpenAI chat API.

    Every call is a single attempt with a bounded timeout. Any failure is
    logged and reported as None so callers can fall back to deterministic
    behaviour.
    """

    def __init__(self, client: AsyncOpenAI, model: str, temperature: float, max_tokens: int):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def _complete(self, messages: List[Dict[str, str]], temperature: float) -> Optional[str]:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.warning("OpenAI call failed: %s", e)
            return None

        if not response.choices:
            return None
        content = response.choices[0].message.content
        return content.strip() if content else None

    async def classify_intent(self, message: str, today: date) -> Optional[AiClassification]:
        system_content = f"{INTENT_CLASSIFIER_PROMPT}\nToday's date: {today.isoformat()}"
        raw = await self._complete(
            [
                {"role": "system", "content": system_content},
                {"role": "user", "content": message},
            ],
            temperature=0,
        )
        if raw is None:
            return None
        logger.debug("LLM raw classification: %s", raw)

        try:
            payload = clean_and_parse(raw)
            return AiClassification(
                intent=payload.get("intent"),
                entities=entities_from_payload(payload.get("entities"), today),
                confidence=float(payload.get("confidence", 0.5)),
            )
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning("Unparseable LLM classification %r: %s", raw, e)
            return None

    async def generate_freeform(
        self,
        prompt: str,
        recent_context: Optional[List[ConversationTurn]] = None,
        instructions: Optional[str] = None,
    ) -> Optional[str]:
        system_content = ASSISTANT_SYSTEM_PROMPT
        if instructions:
            system_content = f"{system_content}\n{instructions}"

        messages = [{"role": "system", "content": system_content}]
        for turn in recent_context or []:
            messages.append({"role": turn.role, "content": turn.content})
        messages.append({"role": "user", "content": prompt})

        return await self._complete(messages, temperature=self.temperature)


def build_assistant_ai() -> Optional[AssistantAI]:
    """Configured client, or None when no API key is set."""
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not set; assistant will use rule-based replies only")
        return None

    client = AsyncOpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        timeout=settings.LLM_TIMEOUT_SECONDS,
        max_retries=0,
    )
    return AssistantAI(
        client,
        model=settings.LLM_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
    )
