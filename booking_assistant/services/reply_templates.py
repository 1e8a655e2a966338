from booking_assistant.models.intent import Intent
from booking_assistant.core.policy import (
    CANCELLATION_LOCK_HOURS,
    MAX_BOOKING_AHEAD_MONTHS,
    REFUND_FULL_HOURS,
    REFUND_FULL_PERCENT,
    REFUND_NONE_PERCENT,
    REFUND_PARTIAL_HOURS,
    REFUND_PARTIAL_PERCENT,
    RESCHEDULE_MIN_NOTICE_HOURS,
)

GREETING = (
    "Hello! 👋 I'm your Healthcare Assistant. I can help you find doctors, check their "
    "availability, book appointments and answer questions about payments and refunds. "
    "How can I help you today?"
)
FAREWELL = "Goodbye! 👋 Take care, and come back any time you need help with your appointments."
THANKS = "You're welcome! 😊 Is there anything else I can help you with?"

MENU = """I can help you with:

📅 **Book Appointments** - Schedule a visit with a doctor
👨‍⚕️ **Find Doctors** - Search by specialization or name
⏰ **Check Availability** - See when a doctor is consulting today
📋 **View Appointments** - See your upcoming appointments
🔁 **Reschedule / ❌ Cancel** - Change or cancel an appointment
💳 **Payments & Refunds** - Fees, payment methods and refund policy

What would you like to do?"""

GENERIC_FALLBACK = f"I'm not sure I understood that. 🤔\n\n{MENU}"

APOLOGY = (
    "Sorry, something went wrong on my side. 😔 Let's try that again.\n\n"
    f"{MENU}"
)

OUT_OF_SCOPE = (
    "I can only help with this app and general health questions, like finding doctors or "
    "booking and managing appointments. What would you like to do?"
)

LOGIN_REQUIRED = (
    "🔒 Please log in to {action}. Open the **Login** page, sign in, and then ask me again."
)

FIND_DOCTOR_GUIDANCE = (
    "I can help you find a doctor! 👨‍⚕️ Tell me a specialization or a doctor's name, for example:\n"
    "• \"Find a cardiologist\"\n"
    "• \"Show me dermatologists\"\n"
    "• \"Find Dr. Sharma\""
)

NO_DOCTORS_FOUND = (
    "I couldn't find any doctors matching {criteria}. Would you like to:\n"
    "• Search with a different specialization\n"
    "• Check the spelling of the doctor's name\n"
    "• Browse all doctors on the **Doctors** page"
)

DOCTOR_RESULTS = "I found {count} doctor{plural} matching {criteria}:\n\n{cards}\n\n{next_actions}"

DOCTOR_NEXT_ACTIONS = (
    "What would you like to do next?\n"
    "• Book an appointment with one of them\n"
    "• Check a doctor's availability today\n"
    "• Ask for more details about a doctor"
)

ASK_PROVIDER = (
    "Sure, let's book an appointment! 📅 Which specialization or doctor would you like to see? "
    "(e.g. \"a cardiologist\" or \"Dr. Sharma\")"
)
ASK_DATE = (
    "Great, {provider}. 📅 Which date would you like? "
    "(e.g. \"tomorrow\", \"next Monday\", \"December 20\")"
)
ASK_TIME = "Got it, {provider} on {day}. 🕐 What time works best for you? (e.g. \"10:30 am\", \"3pm\", \"morning\")"
DATE_IN_PAST = "That date has already passed. Please pick a date from today onwards."
DATE_TOO_FAR = (
    f"Appointments can only be scheduled up to {MAX_BOOKING_AHEAD_MONTHS} months in advance. "
    "Please pick an earlier date."
)
DOCTOR_UNAVAILABLE_AT = "{doctor} doesn't consult at {time} on that day.\n\n{availability}"

BOOKING_HANDOFF = (
    "{summary}\n\n"
    "To confirm this booking and complete the payment, continue on the **Book Appointment** page. "
    "I haven't booked anything yet; the appointment is created once you confirm there."
)

AVAILABILITY_ASK = (
    "Which doctor would you like to check availability for? "
    "Tell me the doctor's name or a specialization."
)
AVAILABILITY_NOT_FOUND = (
    "I couldn't find {criteria}. Please check the spelling, or search on the **Doctors** page."
)
AVAILABILITY_TODAY = "Here's today's availability:\n\n{lines}\n\nWould you like to book with one of them?"

DOCTOR_DETAILS_ASK = "Which doctor would you like to know more about? Tell me their name, e.g. \"Dr. Sharma\"."

CANCEL_GUIDANCE = f"""To cancel an appointment:

1. Open **Appointments** from the navigation bar
2. Find the appointment and click **Cancel**
3. Confirm the cancellation

⚠️ Appointments can't be cancelled within {CANCELLATION_LOCK_HOURS} hours of booking.
💰 Refunds: {REFUND_FULL_PERCENT}% if you cancel more than {REFUND_FULL_HOURS} hours before the appointment, \
{REFUND_PARTIAL_PERCENT}% if {REFUND_PARTIAL_HOURS}-{REFUND_FULL_HOURS} hours before, \
{REFUND_NONE_PERCENT}% if less than {REFUND_PARTIAL_HOURS} hours before."""

RESCHEDULE_GUIDANCE = f"""To reschedule an appointment:

1. Open **Appointments** from the navigation bar
2. Find the appointment and click **Reschedule**
3. Pick a new date and time slot and confirm

⚠️ Rescheduling needs at least {RESCHEDULE_MIN_NOTICE_HOURS} hours' notice before the appointment."""

VIEW_APPOINTMENTS_GUIDANCE = """You can see all your appointments on the **Appointments** page:

• **Upcoming** - confirmed and pending visits
• **Past** - completed visits and prescriptions
• **Cancelled** - cancellations and refund status

From there you can also reschedule or cancel an appointment."""

HOW_TO_BOOK = """Booking an appointment takes a minute:

1. Go to **Doctors** and search by specialization or name
2. Open a doctor's profile and click **Book Appointment**
3. Choose a date and an available time slot
4. Add the reason for your visit and pay the consultation fee

You can also tell me the specialization, date and time and I'll prepare the booking for you."""

HOW_TO_CANCEL = CANCEL_GUIDANCE

HOW_TO_RESCHEDULE = RESCHEDULE_GUIDANCE

PAYMENT_INFO = """💳 **Payments**

• The consultation fee is shown on each doctor's profile and is paid when you book
• We accept credit/debit cards, UPI and net banking
• Your receipt is available under **Appointments** once the payment succeeds
• Failed payments are never charged; if money was deducted it is reversed automatically"""

REFUND_POLICY = f"""💰 **Refund Policy**

• More than {REFUND_FULL_HOURS} hours before the appointment: **{REFUND_FULL_PERCENT}% refund**
• Between {REFUND_PARTIAL_HOURS} and {REFUND_FULL_HOURS} hours before: **{REFUND_PARTIAL_PERCENT}% refund**
• Less than {REFUND_PARTIAL_HOURS} hours before: **{REFUND_NONE_PERCENT}% refund**

Appointments can't be cancelled within {CANCELLATION_LOCK_HOURS} hours of booking. \
Refunds go back to the original payment method within 5-7 business days."""

ACCOUNT_HELP = """👤 **Account help**

• **Sign up / Log in** - use the buttons at the top right of any page
• **Forgot password** - click **Forgot password?** on the login page to get a reset link
• **Update your profile** - open **Settings** to change your name, phone or email

Still stuck? Write to our support team from the **Contact** page."""

PLATFORM_HELP = MENU

COMPLAINT = """I'm sorry to hear about your experience. 😔 Your feedback matters to us.

Please describe the issue on the **Contact** page (include the appointment date and doctor's name if relevant). \
Our support team reviews every complaint and will get back to you within 24 hours."""

URGENT_HELP = """🚨 **If this is a medical emergency, call your local emergency number (112 / 108) or go to the nearest emergency room right away.**

This assistant can't provide emergency care. Once you're safe, I can help you find a doctor for a follow-up."""

MEDICAL_DISCLAIMER = (
    "⚠️ This is general information, not a diagnosis. Please consult a qualified doctor "
    "for advice about your situation."
)
MEDICAL_FALLBACK = "I can't give medical advice here, but a doctor can help you understand what's going on."
MEDICAL_OFFER = "Would you like me to find {who} for you?"

# Quick-reply chips shown under each answer
MAIN_MENU_SUGGESTIONS = ["📅 Book Appointment", "👨‍⚕️ Find Doctors", "📋 My Appointments", "❓ Help"]
SPECIALIZATION_SUGGESTIONS = ["Cardiologist", "Pediatrician", "General Physician", "Dermatologist"]
DATE_SUGGESTIONS = ["Today", "Tomorrow", "Next Monday"]
TIME_SUGGESTIONS = ["10:00 am", "2pm", "Evening"]
LOGIN_SUGGESTIONS = ["Login", "How to book", "Find Doctors"]

SUGGESTIONS = {
    Intent.GREETING: MAIN_MENU_SUGGESTIONS,
    Intent.FAREWELL: ["📅 Book Appointment", "👨‍⚕️ Find Doctors"],
    Intent.THANKS: MAIN_MENU_SUGGESTIONS,
    Intent.FIND_DOCTOR: ["Book Appointment", "Check Availability", "Doctor details"],
    Intent.BOOK_APPOINTMENT: SPECIALIZATION_SUGGESTIONS,
    Intent.CHECK_AVAILABILITY: ["Book Appointment", "Find other doctors"],
    Intent.CANCEL_APPOINTMENT: ["Refund policy", "View Appointments"],
    Intent.RESCHEDULE_APPOINTMENT: ["View Appointments", "Cancel instead"],
    Intent.VIEW_APPOINTMENTS: ["Upcoming Appointments", "Past Appointments", "Book Appointment"],
    Intent.HOW_TO_BOOK: ["Book Appointment", "Find Doctors"],
    Intent.HOW_TO_CANCEL: ["Refund policy", "View Appointments"],
    Intent.HOW_TO_RESCHEDULE: ["View Appointments", "How to cancel"],
    Intent.DOCTOR_DETAILS: ["Book with this doctor", "Find other doctors"],
    Intent.PAYMENT_INFO: ["Refund policy", "Book Appointment"],
    Intent.REFUND_QUERY: ["How to cancel", "Payment info"],
    Intent.ACCOUNT_HELP: ["Login", "Book Appointment"],
    Intent.PLATFORM_HELP: MAIN_MENU_SUGGESTIONS,
    Intent.MEDICAL_QUERY: ["Find Doctors", "Book Appointment"],
    Intent.SYMPTOM_ANALYSIS: ["Find Doctors", "Book Appointment"],
    Intent.COMPLAINT: ["Contact Support", "View Appointments"],
    Intent.URGENT_HELP: ["Find Doctors", "General Physician"],
    Intent.OTHER: MAIN_MENU_SUGGESTIONS,
}

# Whole-word symptom pattern -> specialization worth seeing, most specific first
SYMPTOM_SPECIALIZATIONS = {
    r"chest pains?": "Cardiologist",
    r"palpitations?": "Cardiologist",
    r"blood pressure": "Cardiologist",
    r"heart": "Cardiologist",
    r"rash(es)?": "Dermatologist",
    r"acne": "Dermatologist",
    r"itch(y|ing|es)?": "Dermatologist",
    r"skin": "Dermatologist",
    r"joints?": "Orthopedic Surgeon",
    r"back pain": "Orthopedic Surgeon",
    r"knees?": "Orthopedic Surgeon",
    r"fractured?|fractures": "Orthopedic Surgeon",
    r"migraines?": "Neurologist",
    r"seizures?": "Neurologist",
    r"numbness": "Neurologist",
    r"ears?|earache": "ENT Specialist",
    r"throat": "ENT Specialist",
    r"sinus(itis)?": "ENT Specialist",
    r"eyes?": "Ophthalmologist",
    r"vision": "Ophthalmologist",
    r"anxiety|anxious": "Psychiatrist",
    r"depressed|depression": "Psychiatrist",
    r"stomach": "Gastroenterologist",
    r"diarrh?o?ea": "Gastroenterologist",
    r"acidity": "Gastroenterologist",
    r"periods?|menstrual": "Gynecologist",
    r"pregnant|pregnancy": "Gynecologist",
    r"diabetes|diabetic": "Endocrinologist",
    r"thyroid": "Endocrinologist",
    r"child|children|kids?": "Pediatrician",
    r"baby|babies|infant": "Pediatrician",
    r"fever": "General Physician",
    r"cough(ing)?": "General Physician",
    r"cold": "General Physician",
    r"headaches?": "General Physician",
}

# Whole-word patterns; a domain hint anywhere keeps the message in scope
OUT_OF_SCOPE_KEYWORDS = (
    r"politics", r"stocks?", r"crypto", r"programming", r"math", r"physics", r"chemistry",
    r"celebrit(y|ies)", r"movies?", r"songs?", r"lyrics", r"recipes?", r"news", r"sports?",
    r"football", r"cricket", r"basketball", r"weather", r"lottery", r"gaming", r"games?",
    r"code", r"coding", r"javascript", r"python",
)
DOMAIN_HINTS = (
    r"appointments?", r"doctors?", r"clinics?", r"book(s|ed|ing)?", r"reschedul(e|ed|ing)",
    r"cancel(s|led|ling|lation)?", r"speciali[sz]ations?", r"profile", r"payments?", r"login",
    r"sign ?up", r"register", r"health", r"symptoms?",
)
