from datetime import date
from types import SimpleNamespace

from formbook.scheduling import (
    build_picker,
    default_weekly_schedule,
    is_date_disabled,
    slots_for_date,
    weekday_name,
)

SATURDAY = date(2024, 6, 1)
SUNDAY = date(2024, 6, 2)
MONDAY = date(2024, 6, 3)


def make_event(available_times=None, weekly_schedule=None):
    return SimpleNamespace(
        available_times=available_times or [],
        weekly_schedule=weekly_schedule if weekly_schedule is not None else default_weekly_schedule(),
    )


def test_default_schedule_covers_weekdays_only():
    schedule = default_weekly_schedule()
    assert schedule["monday"]["enabled"] is True
    assert schedule["monday"]["timeSlots"][0] == "09:00"
    assert schedule["monday"]["timeSlots"][-1] == "17:00"
    assert "12:00" not in schedule["monday"]["timeSlots"]
    assert schedule["sunday"] == {"enabled": False, "timeSlots": []}


def test_weekday_name():
    assert weekday_name(MONDAY) == "monday"
    assert weekday_name(SUNDAY) == "sunday"


def test_weekly_schedule_supplies_slots():
    slots = slots_for_date(make_event(), MONDAY)
    assert len(slots) == 15
    assert all(slot.available for slot in slots)
    assert slots_for_date(make_event(), SATURDAY) == []
    assert is_date_disabled(make_event(), SATURDAY) is True
    assert is_date_disabled(make_event(), MONDAY) is False


def test_explicit_dates_override_the_weekly_schedule():
    event = make_event(
        available_times=[
            {"date": "2024-06-01", "timeSlots": [{"time": "12:00", "available": True}]},
            {"date": "2024-06-03", "timeSlots": []},
        ]
    )
    assert [slot.time for slot in slots_for_date(event, SATURDAY)] == ["12:00"]
    assert is_date_disabled(event, SATURDAY) is False
    assert is_date_disabled(event, MONDAY) is True


def test_missing_weekday_means_no_slots():
    event = make_event(weekly_schedule={"monday": {"enabled": True, "timeSlots": ["09:00"]}})
    assert slots_for_date(event, date(2024, 6, 4)) == []
    assert is_date_disabled(event, date(2024, 6, 4)) is True


def test_booked_times_are_marked_unavailable():
    slots = slots_for_date(make_event(), MONDAY, ["09:30"])
    by_time = {slot.time: slot.available for slot in slots}
    assert by_time["09:30"] is False
    assert by_time["09:00"] is True


def test_build_picker_wires_schedule_and_bookings():
    picked = []
    picker = build_picker(
        make_event(),
        booked_times={MONDAY: ["09:00"]},
        on_selected=lambda when, label: picked.append(label),
        today=SATURDAY,
    )
    assert picker.select_date(SUNDAY) is False
    assert picker.select_date(MONDAY) is True
    assert picker.select_time("09:00") is False
    assert picker.select_time("09:30") is True
    assert picked == ["09:30"]
