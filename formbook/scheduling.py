"""Time slots of an event for a given day."""

from datetime import date
from typing import Iterable, List, Optional

from .availability import AvailabilityPicker
from .schemas import WEEKDAYS, DaySchedule, EventAvailability, TimeSlot

_WORKDAY_SLOTS = [
    "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
    "13:00", "13:30", "14:00", "14:30", "15:00", "15:30",
    "16:00", "16:30", "17:00",
]


def default_weekly_schedule() -> dict:
    schedule = {}
    for day in WEEKDAYS:
        workday = day not in ("saturday", "sunday")
        schedule[day] = {
            "enabled": workday,
            "timeSlots": list(_WORKDAY_SLOTS) if workday else [],
        }
    return schedule


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def _explicit_availability(available_times, day: date) -> Optional[EventAvailability]:
    for entry in available_times or []:
        entry = EventAvailability.model_validate(entry)
        if entry.date == day:
            return entry
    return None


def _day_schedule(weekly_schedule, day: date) -> Optional[DaySchedule]:
    raw = (weekly_schedule or {}).get(weekday_name(day))
    if raw is None:
        return None
    return DaySchedule.model_validate(raw)


def slots_for_date(event, day: date, booked_times: Iterable[str] = ()) -> List[TimeSlot]:
    """
    Explicit `available_times` entries for `day` win over the weekly schedule.
    Times in `booked_times` are returned flagged unavailable.
    """
    booked = set(booked_times)
    explicit = _explicit_availability(event.available_times, day)
    if explicit is not None:
        slots = [TimeSlot(time=s.time, available=s.available) for s in explicit.time_slots]
    else:
        schedule = _day_schedule(event.weekly_schedule, day)
        if schedule is None or not schedule.enabled:
            return []
        slots = [TimeSlot(time=label) for label in schedule.time_slots]
    for slot in slots:
        if slot.time in booked:
            slot.available = False
    return slots


def is_date_disabled(event, day: date) -> bool:
    """True when the event offers no slot at all on `day`."""
    explicit = _explicit_availability(event.available_times, day)
    if explicit is not None:
        return not explicit.time_slots
    schedule = _day_schedule(event.weekly_schedule, day)
    return schedule is None or not schedule.enabled or not schedule.time_slots


def build_picker(event, booked_times=None, on_selected=None, today: Optional[date] = None) -> AvailabilityPicker:
    """An AvailabilityPicker over the event's slots.

    `booked_times` maps a date to the times already taken on it.
    """
    booked_times = booked_times or {}
    return AvailabilityPicker(
        slots_for_date=lambda day: slots_for_date(event, day, booked_times.get(day, ())),
        on_selected=on_selected,
        is_date_disabled=lambda day: is_date_disabled(event, day),
        today=today,
    )
