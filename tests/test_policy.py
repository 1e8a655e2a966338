# tests/test_policy.py

from datetime import date
from booking_assistant.core.policy import latest_booking_date


def test_latest_booking_date():
    assert latest_booking_date(date(2025, 6, 2)) == date(2025, 9, 2)
    assert latest_booking_date(date(2025, 11, 30)) == date(2026, 2, 28)
    assert latest_booking_date(date(2025, 10, 15)) == date(2026, 1, 15)
