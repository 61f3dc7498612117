from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db_session
from ..models import Event, Form
from ..repository import DataAccess


async def get_data_access(db: AsyncSession = Depends(get_db_session)) -> DataAccess:
    return DataAccess(db)


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> int:
    """
    Owner identity. Authentication happens upstream; the gateway forwards the
    authenticated user's id in the X-User-Id header.
    """
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    try:
        return int(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid X-User-Id header"
        )


async def get_owned_form(data: DataAccess, form_id: int, user_id: int, action: str = "access") -> Form:
    form = await data.get_form(form_id)
    if form is None:
        raise HTTPException(status_code=404, detail="Form not found")
    if form.user_id != user_id:
        raise HTTPException(
            status_code=403, detail=f"You do not have permission to {action} this form"
        )
    return form


async def get_owned_event(data: DataAccess, event_id: int, user_id: int, action: str = "access") -> Event:
    event = await data.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    if event.user_id != user_id:
        raise HTTPException(
            status_code=403, detail=f"You do not have permission to {action} this event"
        )
    return event
