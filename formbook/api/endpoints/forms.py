import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ...assembler import ResponseAssembler
from ...models import Form
from ...repository import DataAccess
from ...schemas import (
    FormCreate,
    FormOut,
    FormTheme,
    FormUpdate,
    QuestionBase,
    RenderedForm,
)
from ..deps import get_current_user_id, get_data_access, get_owned_form

logger = logging.getLogger(__name__)

router = APIRouter()


def stored_questions(form: Form) -> List[QuestionBase]:
    return [QuestionBase.model_validate(q) for q in form.questions or []]


def render_form(form: Form, preview: bool = False) -> RenderedForm:
    form_out = FormOut.model_validate(form)
    assembler = ResponseAssembler(form_out.questions)
    return RenderedForm(
        form_id=form.id,
        short_id=form.short_id,
        title=form.title,
        theme=form_out.theme,
        sections=form_out.sections,
        preview=preview,
        controls=[bound.control for bound in assembler.render(preview=preview)],
    )


# --- Owner endpoints ---


@router.get("/api/forms", response_model=List[FormOut])
async def list_forms(
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    return await data.list_forms(user_id)


@router.get("/api/forms/new", response_model=FormOut)
async def new_form_template(user_id: int = Depends(get_current_user_id)):
    """Blank form the builder starts from. Nothing is stored."""
    return FormOut(
        id=0,
        user_id=user_id,
        title="New Form",
        short_id="",
        questions=[
            QuestionBase(id="q1", type="shortText", title="What's your name?", required=True)
        ],
        theme=FormTheme(primary_color="#0070f3", font_family="Alternate Gothic, sans-serif"),
    )


@router.get("/api/forms/{form_id}", response_model=FormOut)
async def read_form(
    form_id: int,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    return await get_owned_form(data, form_id, user_id)


@router.post("/api/forms", response_model=FormOut, status_code=status.HTTP_201_CREATED)
async def create_form(
    form_in: FormCreate,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    if form_in.short_id and await data.form_short_id_taken(form_in.short_id):
        raise HTTPException(status_code=409, detail="shortId is already in use")
    form = await data.create_form(user_id, form_in)
    logger.info("Form %s (%s) created for user %s", form.id, form.short_id, user_id)
    return form


@router.patch("/api/forms/{form_id}", response_model=FormOut)
async def update_form(
    form_id: int,
    form_in: FormUpdate,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    form = await get_owned_form(data, form_id, user_id, action="modify")
    if form_in.short_id and await data.form_short_id_taken(form_in.short_id, exclude_id=form.id):
        raise HTTPException(status_code=409, detail="shortId is already in use")
    return await data.update_form(form, form_in)


@router.delete("/api/forms/{form_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_form(
    form_id: int,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    form = await get_owned_form(data, form_id, user_id, action="delete")
    await data.delete_form(form)
    logger.info("Form %s deleted by user %s", form_id, user_id)


@router.get("/api/forms/{form_id}/preview", response_model=RenderedForm)
async def preview_form(
    form_id: int,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    """Read-only rendering for the owner, published or not."""
    form = await get_owned_form(data, form_id, user_id)
    return render_form(form, preview=True)


# --- Public endpoints ---


async def get_published_form(data: DataAccess, short_id: str) -> Form:
    form = await data.get_form_by_short_id(short_id)
    if form is None:
        raise HTTPException(status_code=404, detail="Form not found")
    if not form.published:
        raise HTTPException(status_code=403, detail="Form is not published")
    return form


@router.get("/api/f/{short_id}", response_model=FormOut)
async def read_published_form(short_id: str, data: DataAccess = Depends(get_data_access)):
    form = await get_published_form(data, short_id)
    return await data.record_form_view(form)


@router.get("/api/f/{short_id}/render", response_model=RenderedForm)
async def render_published_form(short_id: str, data: DataAccess = Depends(get_data_access)):
    form = await get_published_form(data, short_id)
    return render_form(form)
