# booking_assistant/services/response_builders.py

"""Plain formatting of doctor and appointment data into chat text."""

from datetime import date
from typing import List, Optional
from booking_assistant.models.doctor import Doctor, weekday_name

MAX_LISTED_SLOTS = 8


def format_date(day: date) -> str:
    # e.g. "Monday, October 19, 2026"
    return f"{weekday_name(day).capitalize()}, {day.strftime('%B')} {day.day}, {day.year}"


def format_time(hhmm: str) -> str:
    hours, minutes = hhmm.split(":")
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minutes} {suffix}"


def format_fee(amount: float) -> str:
    return f"₹{amount:g}"


def format_doctor_card(doctor: Doctor) -> str:
    return "\n".join([
        f"**{doctor.display_name}**",
        doctor.specialization,
        f"⭐ {doctor.rating.average:.1f} ({doctor.rating.count} reviews)",
        f"💼 {doctor.experience} years experience",
        f"💰 {format_fee(doctor.consultation_fee)} consultation fee",
    ])


def format_doctor_list(doctors: List[Doctor]) -> str:
    return "\n\n".join(f"{i}. {format_doctor_card(d)}" for i, d in enumerate(doctors, start=1))


def format_doctor_details(doctor: Doctor) -> str:
    lines = [format_doctor_card(doctor)]
    if doctor.bio:
        lines.append(f"\n{doctor.bio}")
    if doctor.languages:
        lines.append(f"🗣️ Languages: {', '.join(doctor.languages)}")
    days = doctor.working_days()
    if days:
        lines.append(f"📅 Consults on: {', '.join(d.capitalize() for d in days)}")
    return "\n".join(lines)


def format_day_window(doctor: Doctor, day_name: str) -> str:
    window = doctor.day(day_name)
    if not window.is_open:
        return f"{doctor.display_name} is not consulting on {day_name.capitalize()}."
    text = (
        f"{doctor.display_name} ({doctor.specialization}) is available on "
        f"{day_name.capitalize()} from {format_time(window.start_time)} to {format_time(window.end_time)}"
    )
    if window.break_start_time and window.break_end_time:
        text += f" (break {format_time(window.break_start_time)} to {format_time(window.break_end_time)})"
    return f"{text} • Fee {format_fee(doctor.consultation_fee)}"


def format_availability(doctor: Doctor, day: date, slots: List[str]) -> str:
    if not slots:
        days = ", ".join(d.capitalize() for d in doctor.working_days()) or "no days right now"
        return (
            f"{doctor.display_name} is not available on {format_date(day)}. "
            f"They are available on: {days}.\n\nPlease choose a different date."
        )

    shown = ", ".join(format_time(slot) for slot in slots[:MAX_LISTED_SLOTS])
    more = ""
    if len(slots) > MAX_LISTED_SLOTS:
        more = f"\n\n...and {len(slots) - MAX_LISTED_SLOTS} more slots available!"
    return (
        f"{doctor.display_name} is available on {format_date(day)}.\n\n"
        f"Available time slots:\n{shown}{more}\n\nWhat time works best for you?"
    )


def format_booking_summary(
    day: date,
    hhmm: str,
    doctor: Optional[Doctor] = None,
    doctor_name: Optional[str] = None,
    specialization: Optional[str] = None,
) -> str:
    lines = ["**📋 Appointment Summary:**", ""]
    if doctor is not None:
        lines.append(f"👨‍⚕️ **Doctor:** {doctor.display_name}")
        lines.append(f"🏥 **Specialization:** {doctor.specialization}")
        lines.append(f"💰 **Fee:** {format_fee(doctor.consultation_fee)}")
    else:
        if doctor_name:
            lines.append(f"👨‍⚕️ **Doctor:** Dr. {doctor_name}")
        if specialization:
            lines.append(f"🏥 **Specialization:** {specialization}")
    lines.append(f"📅 **Date:** {format_date(day)}")
    lines.append(f"🕐 **Time:** {format_time(hhmm)}")
    return "\n".join(lines)
