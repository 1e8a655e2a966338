# booking_assistant/models/intent.py

from enum import Enum


class Intent(str, Enum):
    GREETING = "greeting"
    FAREWELL = "farewell"
    THANKS = "thanks"
    FIND_DOCTOR = "find_doctor"
    BOOK_APPOINTMENT = "book_appointment"
    CHECK_AVAILABILITY = "check_availability"
    CANCEL_APPOINTMENT = "cancel_appointment"
    RESCHEDULE_APPOINTMENT = "reschedule_appointment"
    VIEW_APPOINTMENTS = "view_appointments"
    HOW_TO_BOOK = "how_to_book"
    HOW_TO_CANCEL = "how_to_cancel"
    HOW_TO_RESCHEDULE = "how_to_reschedule"
    DOCTOR_DETAILS = "doctor_details"
    PAYMENT_INFO = "payment_info"
    REFUND_QUERY = "refund_query"
    ACCOUNT_HELP = "account_help"
    PLATFORM_HELP = "platform_help"
    MEDICAL_QUERY = "medical_query"
    SYMPTOM_ANALYSIS = "symptom_analysis"
    COMPLAINT = "complaint"
    URGENT_HELP = "urgent_help"
    OTHER = "other"


# Intents that need a signed-in caller before anything account-specific is said
AUTH_REQUIRED_INTENTS = frozenset({
    Intent.BOOK_APPOINTMENT,
    Intent.CANCEL_APPOINTMENT,
    Intent.RESCHEDULE_APPOINTMENT,
    Intent.VIEW_APPOINTMENTS,
})
