"""
Field rendering: maps a question's declared type to a control description and
funnels edits back as normalized answer values.

Every FieldType needs an entry in CONTROL_SHAPES; the module refuses to import
otherwise. Types that are not FieldType members at all (rows written by an
older schema version) render as an "unsupported" placeholder instead.
"""

import logging
import re
from datetime import date, datetime
from enum import Enum
from typing import Callable, Optional

from .exceptions import AnswerTypeError
from .schemas import (
    DEFAULT_MAX_RATING,
    AnswerValue,
    ControlKind,
    FieldControl,
    FieldType,
    QuestionBase,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# declared type -> (control kind, input hint)
CONTROL_SHAPES = {
    FieldType.SHORT_TEXT: (ControlKind.TEXT, "text"),
    FieldType.NAME: (ControlKind.TEXT, "text"),
    FieldType.NUMBER: (ControlKind.TEXT, "number"),
    FieldType.PHONE: (ControlKind.TEXT, "tel"),
    FieldType.PARAGRAPH: (ControlKind.TEXTAREA, None),
    FieldType.ADDRESS: (ControlKind.TEXTAREA, None),
    FieldType.EMAIL: (ControlKind.EMAIL, "email"),
    FieldType.MULTIPLE_CHOICE: (ControlKind.CHOICE, None),
    FieldType.RATING: (ControlKind.RATING, None),
    FieldType.DATE: (ControlKind.DATE, "date"),
    FieldType.FILE_UPLOAD: (ControlKind.FILE, "file"),
}

_missing_shapes = set(FieldType) - set(CONTROL_SHAPES)
if _missing_shapes:
    raise RuntimeError(
        "No control shape registered for field type(s): "
        + ", ".join(sorted(t.value for t in _missing_shapes))
    )

OnChange = Callable[[AnswerValue], None]


def type_label(field_type) -> str:
    return field_type.value if isinstance(field_type, Enum) else str(field_type)


def resolve_field_type(field_type) -> Optional[FieldType]:
    """The FieldType for a declared type, or None when it is not recognized."""
    try:
        return FieldType(field_type)
    except ValueError:
        return None


def is_blank(value: AnswerValue) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return all(is_blank(item) for item in value)
    return False


def _normalize_choice(question: QuestionBase, value):
    options = question.options or []
    if isinstance(value, str):
        if not value.strip():
            return None
        selected = [value]
    elif isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        # blank entries select nothing
        selected = [v for v in value if v.strip()]
    else:
        raise AnswerTypeError(question.id, "expected an option or a list of options")
    for choice in selected:
        if choice not in options:
            raise AnswerTypeError(question.id, f"'{choice}' is not one of the options")
    return value if isinstance(value, str) else selected


def _normalize_rating(question: QuestionBase, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AnswerTypeError(question.id, "expected a numeric rating")
    if isinstance(value, float):
        if not value.is_integer():
            raise AnswerTypeError(question.id, "rating must be a whole number")
        value = int(value)
    max_rating = question.max_rating or DEFAULT_MAX_RATING
    if not 1 <= value <= max_rating:
        raise AnswerTypeError(question.id, f"rating must be between 1 and {max_rating}")
    return value


def _normalize_date(question: QuestionBase, value):
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        raise AnswerTypeError(question.id, "expected an ISO date string")
    if not value.strip():
        return value
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except ValueError:
        raise AnswerTypeError(question.id, f"'{value}' is not an ISO date (YYYY-MM-DD)")


def normalize_answer(question: QuestionBase, value) -> AnswerValue:
    """Checks `value` against the question type and returns its stored form.

    Raises AnswerTypeError on a mismatch. None always clears the answer and
    values for unrecognized types pass through untouched.
    """
    field_type = resolve_field_type(question.type)
    if value is None or field_type is None:
        return value

    if field_type == FieldType.MULTIPLE_CHOICE:
        return _normalize_choice(question, value)
    if field_type == FieldType.RATING:
        return _normalize_rating(question, value)
    if field_type == FieldType.DATE:
        return _normalize_date(question, value)

    if field_type == FieldType.NUMBER and isinstance(value, (int, float)):
        if isinstance(value, bool):
            raise AnswerTypeError(question.id, "expected a number")
        return str(value)
    if not isinstance(value, str):
        raise AnswerTypeError(
            question.id, f"expected text for a {field_type.value} question"
        )

    stripped = value.strip()
    if field_type == FieldType.EMAIL and stripped and not EMAIL_PATTERN.match(stripped):
        raise AnswerTypeError(question.id, "not a valid email address")
    if field_type == FieldType.NUMBER and stripped:
        try:
            float(stripped)
        except ValueError:
            raise AnswerTypeError(question.id, f"'{value}' is not a number")
    return value


class BoundField:
    """A rendered control together with its change callback."""

    def __init__(self, question: QuestionBase, control: FieldControl, on_change: Optional[OnChange]):
        self.question = question
        self.control = control
        self._on_change = on_change

    @property
    def editable(self) -> bool:
        return not self.control.read_only and self.control.kind != ControlKind.UNSUPPORTED

    def change(self, value) -> bool:
        """Applies an edit. Returns False when the control ignores edits."""
        if not self.editable:
            return False
        normalized = normalize_answer(self.question, value)
        self.control = self.control.model_copy(update={"value": normalized})
        if self._on_change is not None:
            self._on_change(normalized)
        return True


def render_field(
    question: QuestionBase,
    value: AnswerValue = None,
    on_change: Optional[OnChange] = None,
    preview: bool = False,
) -> BoundField:
    declared = type_label(question.type)
    field_type = resolve_field_type(question.type)
    common = dict(
        question_id=question.id,
        question_type=declared,
        title=question.title,
        description=question.description,
        required=question.required,
        value=value,
        read_only=preview,
    )

    if field_type is None:
        logger.warning("Unsupported field type %r on question %s", declared, question.id)
        control = FieldControl(
            kind=ControlKind.UNSUPPORTED,
            error=f"Unsupported field type: {declared}",
            **{**common, "read_only": True},
        )
        return BoundField(question, control, on_change)

    kind, input_type = CONTROL_SHAPES[field_type]
    control = FieldControl(kind=kind, input_type=input_type, **common)
    if kind == ControlKind.CHOICE:
        control.options = list(question.options or [])
    elif kind == ControlKind.RATING:
        control.max_rating = question.max_rating or DEFAULT_MAX_RATING
    return BoundField(question, control, on_change)
