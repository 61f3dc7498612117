from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Response
from ..schemas import AnswerValue


async def create_response(db: AsyncSession, form_id: int, answers: Dict[str, AnswerValue]) -> Response:
    db_response = Response(form_id=form_id, answers=answers)
    db.add(db_response)
    await db.flush()
    await db.refresh(db_response)
    return db_response


async def get_responses_for_form(db: AsyncSession, form_id: int) -> List[Response]:
    result = await db.execute(
        select(Response).where(Response.form_id == form_id).order_by(Response.id)
    )
    return list(result.scalars().all())
