"""Date/time slot selection for bookings."""

from datetime import date, datetime, time
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .schemas import TimeSlot

NO_SLOTS_MESSAGE = "No time slots available for this date"


class PickerState(str, Enum):
    DATE_SELECTED_NO_TIME = "dateSelectedNoTime"
    DATE_AND_TIME_SELECTED = "dateAndTimeSelected"


def compose_datetime(day: date, label: str) -> datetime:
    hours, minutes = (int(part) for part in label.split(":"))
    return datetime.combine(day, time(hours, minutes))


class AvailabilityPicker:
    """
    Holds a selected date (today by default) and an optional selected time.

    Dates before `today`, and dates the caller's `is_date_disabled` predicate
    rejects, cannot be selected. Accepting a date always clears the time.
    A time can only be picked from the current date's slots and only if the
    slot is available; once picked, `on_selected(datetime, "HH:MM")` fires.
    Refused selections leave the state untouched.
    """

    def __init__(
        self,
        slots_for_date: Callable[[date], Sequence[TimeSlot]],
        on_selected: Optional[Callable[[datetime, str], None]] = None,
        is_date_disabled: Optional[Callable[[date], bool]] = None,
        today: Optional[date] = None,
    ):
        self._slots_for_date = slots_for_date
        self._on_selected = on_selected
        self._is_date_disabled = is_date_disabled
        self.today = today or date.today()
        self.selected_date: date = self.today
        self.selected_time: Optional[str] = None

    @property
    def state(self) -> PickerState:
        if self.selected_time is None:
            return PickerState.DATE_SELECTED_NO_TIME
        return PickerState.DATE_AND_TIME_SELECTED

    @property
    def time_slots(self) -> List[TimeSlot]:
        return list(self._slots_for_date(self.selected_date))

    @property
    def empty_message(self) -> Optional[str]:
        return None if self.time_slots else NO_SLOTS_MESSAGE

    @property
    def selection(self) -> Optional[Tuple[datetime, str]]:
        if self.selected_time is None:
            return None
        return compose_datetime(self.selected_date, self.selected_time), self.selected_time

    def is_selectable(self, day: date) -> bool:
        if day < self.today:
            return False
        return not (self._is_date_disabled and self._is_date_disabled(day))

    def select_date(self, day: date) -> bool:
        if isinstance(day, datetime):
            day = day.date()
        if not self.is_selectable(day):
            return False
        self.selected_date = day
        self.selected_time = None
        return True

    def select_time(self, label: str) -> bool:
        slot = next((s for s in self.time_slots if s.time == label), None)
        if slot is None or not slot.available:
            return False
        self.selected_time = label
        if self._on_selected is not None:
            self._on_selected(compose_datetime(self.selected_date, label), label)
        return True
