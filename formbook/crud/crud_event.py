import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Event
from ..schemas import EventCreate, EventUpdate
from . import json_value

_COLUMN_NAMES = {"metadata": "event_metadata"}


def generate_short_id() -> str:
    return f"event-{uuid.uuid4().hex[:10]}"


async def get_event(db: AsyncSession, event_id: int) -> Optional[Event]:
    return await db.get(Event, event_id)


async def get_event_by_short_id(db: AsyncSession, short_id: str) -> Optional[Event]:
    result = await db.execute(select(Event).where(Event.short_id == short_id))
    return result.scalar_one_or_none()


async def get_events_for_user(db: AsyncSession, user_id: int) -> List[Event]:
    result = await db.execute(
        select(Event).where(Event.user_id == user_id).order_by(Event.updated_at.desc(), Event.id.desc())
    )
    return list(result.scalars().all())


async def short_id_taken(db: AsyncSession, short_id: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Event.id).where(Event.short_id == short_id)
    if exclude_id is not None:
        stmt = stmt.where(Event.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def create_event(db: AsyncSession, user_id: int, event_in: EventCreate) -> Event:
    db_event = Event(
        user_id=user_id,
        title=event_in.title,
        description=event_in.description,
        short_id=event_in.short_id or generate_short_id(),
        duration=event_in.duration,
        location=event_in.location,
        published=event_in.published,
        available_times=json_value(event_in.available_times),
        weekly_schedule=json_value(event_in.weekly_schedule),
        theme=json_value(event_in.theme),
        event_metadata=json_value(event_in.metadata),
    )
    db.add(db_event)
    await db.flush()
    await db.refresh(db_event)
    return db_event


async def update_event(db: AsyncSession, db_event: Event, event_in: EventUpdate) -> Event:
    for field in event_in.model_fields_set:
        value = getattr(event_in, field)
        if value is None and field not in ("description", "location"):
            continue
        setattr(db_event, _COLUMN_NAMES.get(field, field), json_value(value))
    await db.flush()
    await db.refresh(db_event)
    return db_event


async def delete_event(db: AsyncSession, db_event: Event) -> None:
    await db.delete(db_event)
    await db.flush()
