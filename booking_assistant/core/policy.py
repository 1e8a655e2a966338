# booking_assistant/core/policy.py

"""
Appointment and payment policy surfaced in assistant replies.

These numbers are enforced by the appointments/payments API, not here.
Keep them in sync with that service.
"""

import calendar
from datetime import date

# Cancellation is locked for this many hours after a booking is made
CANCELLATION_LOCK_HOURS = 12

# Refund tiers by hours of notice before the appointment
REFUND_FULL_HOURS = 24
REFUND_PARTIAL_HOURS = 2
REFUND_FULL_PERCENT = 100
REFUND_PARTIAL_PERCENT = 50
REFUND_NONE_PERCENT = 0

# Minimum notice for a reschedule
RESCHEDULE_MIN_NOTICE_HOURS = 2

# Bookings further out than this are rejected by the booking API
MAX_BOOKING_AHEAD_MONTHS = 3


def latest_booking_date(today: date) -> date:
    """Last day the booking API accepts, MAX_BOOKING_AHEAD_MONTHS calendar months out."""
    month_index = today.month - 1 + MAX_BOOKING_AHEAD_MONTHS
    year = today.year + month_index // 12
    month = month_index % 12 + 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
