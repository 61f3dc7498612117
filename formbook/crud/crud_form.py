import uuid
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Form
from ..schemas import FormCreate, FormUpdate
from . import json_value

# schema attribute -> ORM column attribute, where they differ
_COLUMN_NAMES = {"metadata": "form_metadata"}


def generate_short_id() -> str:
    return f"form-{uuid.uuid4().hex[:10]}"


async def get_form(db: AsyncSession, form_id: int) -> Optional[Form]:
    return await db.get(Form, form_id)


async def get_form_by_short_id(db: AsyncSession, short_id: str) -> Optional[Form]:
    result = await db.execute(select(Form).where(Form.short_id == short_id))
    return result.scalar_one_or_none()


async def get_forms_for_user(db: AsyncSession, user_id: int) -> List[Form]:
    result = await db.execute(
        select(Form).where(Form.user_id == user_id).order_by(Form.updated_at.desc(), Form.id.desc())
    )
    return list(result.scalars().all())


async def short_id_taken(db: AsyncSession, short_id: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Form.id).where(Form.short_id == short_id)
    if exclude_id is not None:
        stmt = stmt.where(Form.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def create_form(db: AsyncSession, user_id: int, form_in: FormCreate) -> Form:
    db_form = Form(
        user_id=user_id,
        title=form_in.title,
        short_id=form_in.short_id or generate_short_id(),
        published=form_in.published,
        views=0,
        questions=json_value(form_in.questions),
        sections=json_value(form_in.sections),
        theme=json_value(form_in.theme),
        form_metadata=json_value(form_in.metadata),
    )
    db.add(db_form)
    await db.flush()
    await db.refresh(db_form)
    return db_form


async def update_form(db: AsyncSession, db_form: Form, form_in: FormUpdate) -> Form:
    for field in form_in.model_fields_set:
        value = getattr(form_in, field)
        if value is None:
            continue
        setattr(db_form, _COLUMN_NAMES.get(field, field), json_value(value))
    await db.flush()
    await db.refresh(db_form)
    return db_form


async def increment_views(db: AsyncSession, db_form: Form) -> Form:
    # updated_at is passed through so a view does not count as an edit
    await db.execute(
        update(Form)
        .where(Form.id == db_form.id)
        .values(views=Form.views + 1, updated_at=Form.updated_at)
    )
    await db.refresh(db_form)
    return db_form


async def delete_form(db: AsyncSession, db_form: Form) -> None:
    await db.delete(db_form)
    await db.flush()
