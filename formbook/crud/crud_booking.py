from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Booking
from ..schemas import BookingStatus


async def create_booking(
    db: AsyncSession, event_id: int, name: str, email: str, day: date, time_label: str
) -> Booking:
    db_booking = Booking(
        event_id=event_id,
        name=name,
        email=email,
        date=day,
        time=time_label,
        status=BookingStatus.CONFIRMED.value,
    )
    db.add(db_booking)
    await db.flush()
    await db.refresh(db_booking)
    return db_booking


async def get_booking(db: AsyncSession, booking_id: int) -> Optional[Booking]:
    return await db.get(Booking, booking_id)


async def get_bookings_for_event(db: AsyncSession, event_id: int) -> List[Booking]:
    result = await db.execute(
        select(Booking)
        .where(Booking.event_id == event_id)
        .order_by(Booking.date, Booking.time)
    )
    return list(result.scalars().all())


async def get_bookings_on_date(db: AsyncSession, event_ids: Sequence[int], day: date) -> List[Booking]:
    if not event_ids:
        return []
    result = await db.execute(
        select(Booking)
        .where(Booking.event_id.in_(event_ids), Booking.date == day)
        .order_by(Booking.time)
    )
    return list(result.scalars().all())


async def get_booked_times(db: AsyncSession, event_id: int, day: date) -> List[str]:
    """Times on `day` held by bookings that were not canceled."""
    result = await db.execute(
        select(Booking.time).where(
            Booking.event_id == event_id,
            Booking.date == day,
            Booking.status != BookingStatus.CANCELED.value,
        )
    )
    return [row[0] for row in result.all()]


async def update_booking_status(db: AsyncSession, db_booking: Booking, status: BookingStatus) -> Booking:
    db_booking.status = status.value
    await db.flush()
    await db.refresh(db_booking)
    return db_booking
