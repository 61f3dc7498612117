import csv
import io
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from ...assembler import ResponseAssembler
from ...exceptions import ResponseValidationError
from ...repository import DataAccess
from ...schemas import ResponseCreate, ResponseOut
from ..deps import get_current_user_id, get_data_access, get_owned_form
from .forms import stored_questions

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/api/forms/{form_id}/responses",
    response_model=ResponseOut,
    status_code=status.HTTP_201_CREATED,
)
async def submit_response(
    form_id: int,
    response_in: ResponseCreate,
    data: DataAccess = Depends(get_data_access),
):
    """Public submission endpoint for published forms."""
    form = await data.get_form(form_id)
    if form is None:
        raise HTTPException(status_code=404, detail="Form not found")
    if not form.published:
        raise HTTPException(status_code=403, detail="Form is not published")

    assembler = ResponseAssembler(
        stored_questions(form),
        persist=lambda answers: data.create_response(form.id, answers),
    )
    assembler.update(response_in.answers)
    try:
        db_response = await assembler.submit()
    except ResponseValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Invalid response data",
                "questionIds": e.question_ids,
                "reasons": e.reasons,
            },
        )
    logger.info("Response %s stored for form %s", db_response.id, form.id)
    return db_response


@router.get("/api/forms/{form_id}/responses", response_model=List[ResponseOut])
async def list_responses(
    form_id: int,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    form = await get_owned_form(data, form_id, user_id)
    return await data.list_responses(form.id)


def _csv_cell(value):
    if value is None:
        return ""
    if isinstance(value, list):
        return "; ".join(str(v) for v in value)
    return value


@router.get(
    "/api/forms/{form_id}/responses/export",
    response_description="CSV file of form responses",
)
async def export_responses_to_csv(
    form_id: int,
    user_id: int = Depends(get_current_user_id),
    data: DataAccess = Depends(get_data_access),
):
    """One row per response, one column per question in form order."""
    form = await get_owned_form(data, form_id, user_id)
    questions = stored_questions(form)
    responses = await data.list_responses(form.id)

    question_headers = [q.variable_name or q.id for q in questions]
    headers = ["response_id", "submitted_at"] + question_headers

    output = io.StringIO()
    writer = csv.DictWriter(
        output, fieldnames=headers, extrasaction="ignore", quoting=csv.QUOTE_ALL
    )
    writer.writeheader()
    for response in responses:
        row = {
            "response_id": response.id,
            "submitted_at": response.created_at.isoformat() if response.created_at else "",
        }
        for question, header in zip(questions, question_headers):
            row[header] = _csv_cell(response.answers.get(question.id))
        writer.writerow(row)
    output.seek(0)

    logger.info("CSV export of %d response(s) for form %s", len(responses), form.id)
    # header values are latin-1 encoded, keep the file name ASCII
    safe_title = "".join(c if c.isascii() and c.isalnum() else "_" for c in form.title)
    filename = f"form_{form.id}_{safe_title}_responses.csv"
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
