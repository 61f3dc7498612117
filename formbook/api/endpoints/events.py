import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models import Event
from ...repository import DataAccess
from ...schemas import (
    EventCreate,
    EventOut,
    EventUpdate,
    FormTheme,
    LogoUpdate,
    SlotListing,
)
from ...scheduling import build_picker, default_weekly_schedule
from ..deps import get_current_user_id, get_data_access, get_owned_event

logger = logging.getLogger(__name__)

router = APIRouter()

DATE_UNAVAILABLE_MESSAGE = "This date is not available for booking"


# --- Owner endpoints ---


@router.get("/api/events", response_model=List[EventOut])
async def list_events(
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    return await data.list_events(user_id)


@router.get("/api/events/new", response_model=EventOut)
async def new_event_template(user_id: int = Depends(get_current_user_id)):
    return EventOut(
        id=0,
        user_id=user_id,
        title="New Event",
        description="",
        short_id="",
        duration=30,
        location="",
        weekly_schedule=default_weekly_schedule(),
        theme=FormTheme(),
    )


@router.get("/api/events/by-shortid/{short_id}", response_model=EventOut)
async def read_event_by_short_id(short_id: str, data: DataAccess = Depends(get_data_access)):
    return await get_published_event(data, short_id)


@router.get("/api/events/{event_id}", response_model=EventOut)
async def read_event(
    event_id: int,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    return await get_owned_event(data, event_id, user_id)


@router.post("/api/events", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_in: EventCreate,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    if event_in.short_id and await data.event_short_id_taken(event_in.short_id):
        raise HTTPException(status_code=409, detail="shortId is already in use")
    event = await data.create_event(user_id, event_in)
    logger.info("Event %s (%s) created for user %s", event.id, event.short_id, user_id)
    return event


@router.patch("/api/events/{event_id}", response_model=EventOut)
async def update_event(
    event_id: int,
    event_in: EventUpdate,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    event = await get_owned_event(data, event_id, user_id, action="modify")
    if event_in.short_id and await data.event_short_id_taken(event_in.short_id, exclude_id=event.id):
        raise HTTPException(status_code=409, detail="shortId is already in use")
    return await data.update_event(event, event_in)


@router.patch("/api/events/{event_id}/logo", response_model=EventOut)
async def update_event_logo(
    event_id: int,
    logo_in: LogoUpdate,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    """Replaces the logo and keeps the rest of the theme."""
    event = await get_owned_event(data, event_id, user_id, action="modify")
    theme = FormTheme.model_validate(event.theme or {})
    theme.logo_url = logo_in.logo_url
    logger.info("Updating logo of event %s", event.id)
    return await data.update_event(event, EventUpdate(theme=theme))


@router.delete("/api/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    event = await get_owned_event(data, event_id, user_id, action="delete")
    await data.delete_event(event)
    logger.info("Event %s deleted by user %s", event_id, user_id)


# --- Public endpoints ---


async def get_published_event(data: DataAccess, short_id: str) -> Event:
    event = await data.get_event_by_short_id(short_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    if not event.published:
        raise HTTPException(status_code=403, detail="Event is not published")
    return event


@router.get("/api/e/{short_id}", response_model=EventOut)
async def read_published_event(short_id: str, data: DataAccess = Depends(get_data_access)):
    return await get_published_event(data, short_id)


@router.get("/api/e/{short_id}/slots", response_model=SlotListing)
async def list_time_slots(
    short_id: str,
    day: Optional[date] = Query(None, alias="date"),
    data: DataAccess = Depends(get_data_access),
):
    """Time slots of one day (today when no date is given)."""
    event = await get_published_event(data, short_id)
    day = day or date.today()
    booked = await data.booked_times(event.id, day)
    picker = build_picker(event, booked_times={day: booked})
    if not picker.select_date(day):
        return SlotListing(date=day, disabled=True, message=DATE_UNAVAILABLE_MESSAGE)
    return SlotListing(date=day, time_slots=picker.time_slots, message=picker.empty_message)
