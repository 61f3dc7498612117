import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError

from ...models import Event
from ...repository import DataAccess
from ...scheduling import build_picker
from ...schemas import BookingCreate, BookingOut, BookingStatusUpdate
from ..deps import get_current_user_id, get_data_access, get_owned_event

logger = logging.getLogger(__name__)

router = APIRouter()

SLOT_TAKEN_MESSAGE = "Selected time is not available"


async def book_event(data: DataAccess, event: Event, booking_in: BookingCreate):
    """Runs the requested date and time through the picker, then stores the booking."""
    if not event.published:
        raise HTTPException(status_code=403, detail="Event is not published")

    booked = await data.booked_times(event.id, booking_in.date)
    chosen = []
    picker = build_picker(
        event,
        booked_times={booking_in.date: booked},
        on_selected=lambda when, label: chosen.append((when, label)),
    )
    if not picker.select_date(booking_in.date):
        raise HTTPException(status_code=400, detail="Selected date is not available")
    if not picker.select_time(booking_in.time):
        raise HTTPException(status_code=400, detail=SLOT_TAKEN_MESSAGE)

    when, label = chosen[0]
    try:
        booking = await data.create_booking(
            event.id, booking_in.name, booking_in.email, when.date(), label
        )
    except IntegrityError:
        # a concurrent request took the slot after booked_times was read
        logger.info("Slot %s %s of event %s was taken concurrently", when.date(), label, event.id)
        raise HTTPException(status_code=400, detail=SLOT_TAKEN_MESSAGE)
    logger.info("Booking %s confirmed for event %s at %s", booking.id, event.id, when.isoformat())
    return booking


@router.post("/api/bookings", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
async def create_booking(booking_in: BookingCreate, data: DataAccess = Depends(get_data_access)):
    if booking_in.event_id is None:
        raise HTTPException(status_code=400, detail="Event ID is required")
    event = await data.get_event(booking_in.event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return await book_event(data, event, booking_in)


@router.post(
    "/api/events/{event_id}/bookings",
    response_model=BookingOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_event_booking(
    event_id: int,
    booking_in: BookingCreate,
    data: DataAccess = Depends(get_data_access),
):
    event = await data.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return await book_event(data, event, booking_in)


@router.get("/api/events/{event_id}/bookings", response_model=List[BookingOut])
async def list_event_bookings(
    event_id: int,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    event = await get_owned_event(data, event_id, user_id)
    return await data.list_bookings(event.id)


@router.get("/api/bookings/date/{day}", response_model=List[BookingOut])
async def list_bookings_on_date(
    day: date,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    """Bookings on one day across all of the caller's events."""
    events = await data.list_events(user_id)
    return await data.list_bookings_on_date([e.id for e in events], day)


@router.patch("/api/bookings/{booking_id}", response_model=BookingOut)
async def update_booking_status(
    booking_id: int,
    status_in: BookingStatusUpdate,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    booking = await data.get_booking(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    await get_owned_event(data, booking.event_id, user_id, action="modify")
    try:
        booking = await data.update_booking_status(booking, status_in.status)
    except IntegrityError:
        # re-activating a canceled booking whose slot has been taken since
        raise HTTPException(status_code=400, detail=SLOT_TAKEN_MESSAGE)
    logger.info("Booking %s set to %s", booking.id, status_in.status.value)
    return booking
