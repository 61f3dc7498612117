from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from . import crud
from .models import Booking, Event, Form, Response
from .schemas import (
    AnswerValue,
    BookingStatus,
    EventCreate,
    EventUpdate,
    FormCreate,
    FormUpdate,
)


class DataAccess:
    """
    Data access for one request. Form and event lookups are memoized for the
    lifetime of the object, so handlers and helpers can ask for the same row
    repeatedly without hitting the database again. Writes keep the memo in sync.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self._forms: Dict[int, Optional[Form]] = {}
        self._form_ids_by_short_id: Dict[str, Optional[int]] = {}
        self._events: Dict[int, Optional[Event]] = {}
        self._event_ids_by_short_id: Dict[str, Optional[int]] = {}

    # --- Forms ---

    def _remember_form(self, form: Form) -> Form:
        stale = [sid for sid, fid in self._form_ids_by_short_id.items() if fid == form.id]
        for short_id in stale:
            del self._form_ids_by_short_id[short_id]
        self._forms[form.id] = form
        self._form_ids_by_short_id[form.short_id] = form.id
        return form

    async def get_form(self, form_id: int) -> Optional[Form]:
        if form_id not in self._forms:
            form = await crud.crud_form.get_form(self.db, form_id)
            if form is None:
                self._forms[form_id] = None
            else:
                self._remember_form(form)
        return self._forms[form_id]

    async def get_form_by_short_id(self, short_id: str) -> Optional[Form]:
        if short_id not in self._form_ids_by_short_id:
            form = await crud.crud_form.get_form_by_short_id(self.db, short_id)
            if form is None:
                self._form_ids_by_short_id[short_id] = None
            else:
                self._remember_form(form)
        form_id = self._form_ids_by_short_id[short_id]
        return None if form_id is None else self._forms.get(form_id)

    async def list_forms(self, user_id: int) -> List[Form]:
        return [self._remember_form(f) for f in await crud.crud_form.get_forms_for_user(self.db, user_id)]

    async def form_short_id_taken(self, short_id: str, exclude_id: Optional[int] = None) -> bool:
        return await crud.crud_form.short_id_taken(self.db, short_id, exclude_id)

    async def create_form(self, user_id: int, form_in: FormCreate) -> Form:
        return self._remember_form(await crud.crud_form.create_form(self.db, user_id, form_in))

    async def update_form(self, form: Form, form_in: FormUpdate) -> Form:
        return self._remember_form(await crud.crud_form.update_form(self.db, form, form_in))

    async def record_form_view(self, form: Form) -> Form:
        return await crud.crud_form.increment_views(self.db, form)

    async def delete_form(self, form: Form) -> None:
        self._forms[form.id] = None
        self._form_ids_by_short_id[form.short_id] = None
        await crud.crud_form.delete_form(self.db, form)

    # --- Responses ---

    async def create_response(self, form_id: int, answers: Dict[str, AnswerValue]) -> Response:
        return await crud.crud_response.create_response(self.db, form_id, answers)

    async def list_responses(self, form_id: int) -> List[Response]:
        return await crud.crud_response.get_responses_for_form(self.db, form_id)

    # --- Events ---

    def _remember_event(self, event: Event) -> Event:
        stale = [sid for sid, eid in self._event_ids_by_short_id.items() if eid == event.id]
        for short_id in stale:
            del self._event_ids_by_short_id[short_id]
        self._events[event.id] = event
        self._event_ids_by_short_id[event.short_id] = event.id
        return event

    async def get_event(self, event_id: int) -> Optional[Event]:
        if event_id not in self._events:
            event = await crud.crud_event.get_event(self.db, event_id)
            if event is None:
                self._events[event_id] = None
            else:
                self._remember_event(event)
        return self._events[event_id]

    async def get_event_by_short_id(self, short_id: str) -> Optional[Event]:
        if short_id not in self._event_ids_by_short_id:
            event = await crud.crud_event.get_event_by_short_id(self.db, short_id)
            if event is None:
                self._event_ids_by_short_id[short_id] = None
            else:
                self._remember_event(event)
        event_id = self._event_ids_by_short_id[short_id]
        return None if event_id is None else self._events.get(event_id)

    async def list_events(self, user_id: int) -> List[Event]:
        return [self._remember_event(e) for e in await crud.crud_event.get_events_for_user(self.db, user_id)]

    async def event_short_id_taken(self, short_id: str, exclude_id: Optional[int] = None) -> bool:
        return await crud.crud_event.short_id_taken(self.db, short_id, exclude_id)

    async def create_event(self, user_id: int, event_in: EventCreate) -> Event:
        return self._remember_event(await crud.crud_event.create_event(self.db, user_id, event_in))

    async def update_event(self, event: Event, event_in: EventUpdate) -> Event:
        return self._remember_event(await crud.crud_event.update_event(self.db, event, event_in))

    async def delete_event(self, event: Event) -> None:
        self._events[event.id] = None
        self._event_ids_by_short_id[event.short_id] = None
        await crud.crud_event.delete_event(self.db, event)

    # --- Bookings ---

    async def create_booking(self, event_id: int, name: str, email: str, day: date, time_label: str) -> Booking:
        return await crud.crud_booking.create_booking(self.db, event_id, name, email, day, time_label)

    async def get_booking(self, booking_id: int) -> Optional[Booking]:
        return await crud.crud_booking.get_booking(self.db, booking_id)

    async def list_bookings(self, event_id: int) -> List[Booking]:
        return await crud.crud_booking.get_bookings_for_event(self.db, event_id)

    async def list_bookings_on_date(self, event_ids: List[int], day: date) -> List[Booking]:
        return await crud.crud_booking.get_bookings_on_date(self.db, event_ids, day)

    async def booked_times(self, event_id: int, day: date) -> List[str]:
        return await crud.crud_booking.get_booked_times(self.db, event_id, day)

    async def update_booking_status(self, booking: Booking, status: BookingStatus) -> Booking:
        return await crud.crud_booking.update_booking_status(self.db, booking, status)
