# booking_assistant/services/entity_extractor.py

"""
Rule-based slot extraction for chat messages.

Each slot is extracted independently; a slot that does not match is simply
left empty. Within a slot, the first matching rule wins.
"""

import re
from datetime import date, timedelta
from typing import Optional
from booking_assistant.models.doctor import WEEKDAYS
from booking_assistant.models.entities import Entities

# keyword -> canonical name; multi-word keywords come first so they win
SPECIALIZATIONS = {
    "general physician": "General Physician",
    "family medicine": "Family Medicine",
    "internal medicine": "Internal Medicine",
    "emergency medicine": "Emergency Medicine",
    "infectious disease": "Infectious Disease",
    "orthopedic surgeon": "Orthopedic Surgeon",
    "ent specialist": "ENT Specialist",
    "cardiologist": "Cardiologist",
    "pediatrician": "Pediatrician",
    "dermatologist": "Dermatologist",
    "orthopedic": "Orthopedic",
    "neurologist": "Neurologist",
    "gynecologist": "Gynecologist",
    "psychiatrist": "Psychiatrist",
    "oncologist": "Oncologist",
    "radiologist": "Radiologist",
    "anesthesiologist": "Anesthesiologist",
    "ophthalmologist": "Ophthalmologist",
    "urologist": "Urologist",
    "endocrinologist": "Endocrinologist",
    "gastroenterologist": "Gastroenterologist",
    "pulmonologist": "Pulmonologist",
    "rheumatologist": "Rheumatologist",
    "nephrologist": "Nephrologist",
    "hematologist": "Hematologist",
    "dentist": "Dentist",
    "ent": "ENT Specialist",
}

MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
}

NAMED_PERIODS = {
    "morning": "09:00",
    "afternoon": "14:00",
    "evening": "17:00",
    "noon": "12:00",
}

# Words that the name pattern can swallow but are never part of a name
NAME_STOPWORDS = {
    "available", "availability", "today", "tomorrow", "appointment", "appointments",
    "on", "at", "for", "in", "is", "are", "the", "and", "with", "please", "free",
    "next", "this", "slots", "slot", "tonight", "morning", "afternoon", "evening",
    "profile", "details", "info", "fee", "fees", "timings", "schedule",
    "a", "an", "to", "i", "me", "my", "you", "who", "that", "near", "about", "now",
    "visit", "consultation",
    # adverbs and verbs that follow a bare "doctor"
    "urgently", "asap", "immediately", "soon", "quickly", "today's", "nearby", "here",
    "who", "which", "whom", "specializing", "specialising", "specialized", "specialised",
    "can", "could", "should", "will", "would", "has", "have", "does", "do", "did",
    "was", "were", "said", "says", "told", "gave", "prescribed", "recommended",
    "visits", "appointment's", "or", "but", "if", "so", "then", "too", "also", "again",
    "of", "from", "by", "as", "it", "there", "nearest", "online", "tomorrow's",
}

_MONTH_ALT = "|".join(MONTHS)
_WEEKDAY_ALT = "|".join(WEEKDAYS)

DOCTOR_NAME_RE = re.compile(r"\b(?:dr\.?|doctor)\s+([a-z]+(?:\s+[a-z]+)?)", re.IGNORECASE)

TIME_12H_RE = re.compile(r"\b(\d{1,2}):(\d{2})\s*(am|pm)\b", re.IGNORECASE)
TIME_BARE_HOUR_RE = re.compile(r"\b(\d{1,2})\s*(am|pm)\b", re.IGNORECASE)
TIME_24H_RE = re.compile(r"\b([01]?\d|2[0-3]):([0-5]\d)\b")
TIME_PERIOD_RE = re.compile(r"\b(morning|afternoon|evening|noon)\b", re.IGNORECASE)

DAY_AFTER_TOMORROW_RE = re.compile(r"\bday after tomorrow\b", re.IGNORECASE)
TOMORROW_RE = re.compile(r"\btomorrow\b", re.IGNORECASE)
TODAY_RE = re.compile(r"\btoday\b", re.IGNORECASE)
NEXT_WEEKDAY_RE = re.compile(rf"\bnext\s+({_WEEKDAY_ALT})\b", re.IGNORECASE)
ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
MONTH_DAY_RE = re.compile(rf"\b({_MONTH_ALT})\s+(\d{{1,2}})(?:st|nd|rd|th)?\b", re.IGNORECASE)
DAY_MONTH_RE = re.compile(rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+(?:of\s+)?({_MONTH_ALT})\b", re.IGNORECASE)
NUMERIC_DATE_RE = re.compile(r"\b(\d{1,2})[/.\-](\d{1,2})[/.\-](\d{4})\b")

APPOINTMENT_ID_RE = re.compile(r"\bappointment\s*(?:id\s*)?#?\s*([a-f0-9]{24}|\d+)\b", re.IGNORECASE)


def _to_24h(hour: int, minute: int, period: Optional[str]) -> Optional[str]:
    if period:
        if not 1 <= hour <= 12:
            return None
        period = period.lower()
        if period == "pm" and hour != 12:
            hour += 12
        elif period == "am" and hour == 12:
            hour = 0
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return f"{hour:02d}:{minute:02d}"


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _upcoming(month: int, day: int, today: date) -> Optional[date]:
    # year inferred, rolled forward when the date has already passed
    candidate = _safe_date(today.year, month, day)
    if candidate is None:
        return None
    if candidate < today:
        candidate = _safe_date(today.year + 1, month, day)
    return candidate


def extract_specialization(message: str, suppress_with_appointment: bool = False) -> Optional[str]:
    text = message.lower()
    if suppress_with_appointment and "appointment" in text:
        return None
    for keyword, canonical in SPECIALIZATIONS.items():
        if re.search(rf"\b{re.escape(keyword)}s?\b", text):
            return canonical
    return None


def extract_doctor_name(message: str) -> Optional[str]:
    for match in DOCTOR_NAME_RE.finditer(message):
        # cut at the first token that cannot be part of a name
        name_tokens = []
        for token in match.group(1).split():
            if token.lower() in NAME_STOPWORDS:
                break
            name_tokens.append(token)
        if name_tokens:
            return " ".join(token.capitalize() for token in name_tokens)
    return None


def extract_time(message: str, include_periods: bool = True) -> Optional[str]:
    match = TIME_12H_RE.search(message)
    if match:
        return _to_24h(int(match.group(1)), int(match.group(2)), match.group(3))

    match = TIME_BARE_HOUR_RE.search(message)
    if match:
        return _to_24h(int(match.group(1)), 0, match.group(2))

    match = TIME_24H_RE.search(message)
    if match:
        return _to_24h(int(match.group(1)), int(match.group(2)), None)

    match = TIME_PERIOD_RE.search(message) if include_periods else None
    if match:
        return NAMED_PERIODS[match.group(1).lower()]
    return None


def extract_date(message: str, today: date) -> Optional[date]:
    if DAY_AFTER_TOMORROW_RE.search(message):
        return today + timedelta(days=2)
    if TOMORROW_RE.search(message):
        return today + timedelta(days=1)
    if TODAY_RE.search(message):
        return today

    match = NEXT_WEEKDAY_RE.search(message)
    if match:
        target = WEEKDAYS.index(match.group(1).lower())
        days_ahead = (target - today.weekday()) % 7 or 7
        return today + timedelta(days=days_ahead)

    match = ISO_DATE_RE.search(message)
    if match:
        return _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = MONTH_DAY_RE.search(message)
    if match:
        return _upcoming(MONTHS[match.group(1).lower()], int(match.group(2)), today)

    match = DAY_MONTH_RE.search(message)
    if match:
        return _upcoming(MONTHS[match.group(2).lower()], int(match.group(1)), today)

    match = NUMERIC_DATE_RE.search(message)
    if match:
        return _safe_date(int(match.group(3)), int(match.group(2)), int(match.group(1)))
    return None


def extract_appointment_id(message: str) -> Optional[str]:
    match = APPOINTMENT_ID_RE.search(message)
    return match.group(1) if match else None


def extract(
    message: str,
    today: Optional[date] = None,
    suppress_specialization_with_appointment: bool = False,
) -> Entities:
    """Pull every recognisable slot out of `message`. Pure; never raises."""
    if not message:
        return Entities()
    today = today or date.today()
    return Entities(
        specialization=extract_specialization(message, suppress_specialization_with_appointment),
        doctor_name=extract_doctor_name(message),
        date=extract_date(message, today),
        time=extract_time(message),
        appointment_id=extract_appointment_id(message),
    )
