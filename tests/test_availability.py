from datetime import date, datetime, timedelta

from formbook.availability import NO_SLOTS_MESSAGE, AvailabilityPicker, PickerState, compose_datetime
from formbook.schemas import TimeSlot

TODAY = date(2024, 6, 1)
SUNDAY = date(2024, 6, 2)
MONDAY = date(2024, 6, 3)

SLOTS = {
    TODAY: [TimeSlot(time="10:00"), TimeSlot(time="10:30", available=False)],
    SUNDAY: [TimeSlot(time="09:00")],
}


def make_picker(**kwargs):
    fired = []
    picker = AvailabilityPicker(
        lambda day: SLOTS.get(day, []),
        on_selected=lambda when, label: fired.append((when, label)),
        today=TODAY,
        **kwargs,
    )
    return picker, fired


def test_starts_on_today_without_a_time():
    picker, fired = make_picker()
    assert picker.selected_date == TODAY
    assert picker.selected_time is None
    assert picker.state == PickerState.DATE_SELECTED_NO_TIME
    assert picker.selection is None
    assert fired == []


def test_defaults_today_to_the_current_date():
    assert AvailabilityPicker(lambda day: []).today == date.today()


def test_selecting_an_available_time_fires_the_callback():
    picker, fired = make_picker()
    assert picker.select_time("10:00") is True
    assert fired == [(datetime(2024, 6, 1, 10, 0), "10:00")]
    assert picker.state == PickerState.DATE_AND_TIME_SELECTED
    assert picker.selection == (datetime(2024, 6, 1, 10, 0), "10:00")


def test_selecting_a_new_date_clears_the_time():
    picker, _ = make_picker()
    picker.select_time("10:00")
    assert picker.select_date(SUNDAY) is True
    assert picker.selected_date == SUNDAY
    assert picker.selected_time is None
    assert picker.state == PickerState.DATE_SELECTED_NO_TIME


def test_unavailable_slot_cannot_be_selected():
    picker, fired = make_picker()
    picker.select_time("10:00")
    assert picker.select_time("10:30") is False
    assert picker.selected_time == "10:00"
    assert len(fired) == 1


def test_time_not_offered_on_the_date_is_refused():
    picker, fired = make_picker()
    assert picker.select_time("09:00") is False
    assert picker.selected_time is None
    assert fired == []


def test_past_dates_are_refused_and_keep_the_selection():
    picker, _ = make_picker()
    picker.select_time("10:00")
    assert picker.select_date(TODAY - timedelta(days=1)) is False
    assert picker.selected_date == TODAY
    assert picker.selected_time == "10:00"


def test_caller_can_disable_more_dates():
    picker, _ = make_picker(is_date_disabled=lambda day: day == SUNDAY)
    assert picker.is_selectable(SUNDAY) is False
    assert picker.select_date(SUNDAY) is False
    assert picker.select_date(MONDAY) is True


def test_empty_day_shows_a_message():
    picker, _ = make_picker()
    assert picker.empty_message is None
    picker.select_date(MONDAY)
    assert picker.time_slots == []
    assert picker.empty_message == NO_SLOTS_MESSAGE


def test_datetimes_are_reduced_to_their_date():
    picker, _ = make_picker()
    assert picker.select_date(datetime(2024, 6, 2, 15, 30)) is True
    assert picker.selected_date == SUNDAY


def test_compose_datetime():
    assert compose_datetime(SUNDAY, "09:05") == datetime(2024, 6, 2, 9, 5)
