import json
import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

TIME_LABEL_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
SHORT_ID_PATTERN = r"^[A-Za-z0-9_-]+$"
WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DEFAULT_MAX_RATING = 5
MIN_RATING_SCALE = 1
MAX_RATING_SCALE = 10

AnswerValue = Union[str, List[str], int, float, None]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Form definition ---


class FieldType(str, Enum):
    SHORT_TEXT = "shortText"
    PARAGRAPH = "paragraph"
    EMAIL = "email"
    MULTIPLE_CHOICE = "multipleChoice"
    FILE_UPLOAD = "fileUpload"
    RATING = "rating"
    NAME = "name"
    ADDRESS = "address"
    PHONE = "phone"
    DATE = "date"
    NUMBER = "number"


class QuestionBase(CamelModel):
    """A question as stored. `type` stays a plain string so rows written by an
    older schema version still load and render as unsupported."""

    id: str = Field(..., min_length=1)
    type: str
    title: str = ""
    description: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    max_rating: Optional[int] = None
    variable_name: Optional[str] = None
    section_id: Optional[str] = None


class FormQuestion(QuestionBase):
    """A question as authored."""

    type: FieldType
    max_rating: Optional[int] = Field(
        default=None, ge=MIN_RATING_SCALE, le=MAX_RATING_SCALE
    )

    @model_validator(mode="after")
    def check_type_specific_fields(self):
        if self.type == FieldType.MULTIPLE_CHOICE and not self.options:
            raise ValueError("options must not be empty for a multipleChoice question")
        if self.type == FieldType.RATING and self.max_rating is None:
            self.max_rating = DEFAULT_MAX_RATING
        return self


class FormSection(CamelModel):
    id: str = Field(..., min_length=1)
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None


class FormTheme(CamelModel):
    background_color: str = "#ffffff"
    text_color: str = "#000000"
    primary_color: str = "#3b82f6"
    font_family: str = "Inter, sans-serif"
    logo_url: Optional[str] = None


def _check_unique_question_ids(questions):
    if questions is None:
        return questions
    seen = set()
    for question in questions:
        if question.id in seen:
            raise ValueError(f"duplicate question id '{question.id}'")
        seen.add(question.id)
    return questions


class FormBase(CamelModel):
    title: str = Field("New Form", min_length=1)
    published: bool = False
    questions: List[FormQuestion] = Field(default_factory=list)
    sections: List[FormSection] = Field(default_factory=list)
    theme: FormTheme = Field(default_factory=FormTheme)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("questions")
    @classmethod
    def check_question_ids(cls, v):
        return _check_unique_question_ids(v)


class FormCreate(FormBase):
    short_id: Optional[str] = Field(default=None, pattern=SHORT_ID_PATTERN)


class FormUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    short_id: Optional[str] = Field(default=None, pattern=SHORT_ID_PATTERN)
    published: Optional[bool] = None
    questions: Optional[List[FormQuestion]] = None
    sections: Optional[List[FormSection]] = None
    theme: Optional[FormTheme] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("questions")
    @classmethod
    def check_question_ids(cls, v):
        return _check_unique_question_ids(v)


class FormOut(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    user_id: int
    title: str
    short_id: str
    published: bool = False
    views: int = 0
    questions: List[QuestionBase] = Field(default_factory=list)
    sections: List[FormSection] = Field(default_factory=list)
    theme: FormTheme = Field(default_factory=FormTheme)
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("form_metadata", "metadata"),
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Rendered controls ---


class ControlKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    CHOICE = "choice"
    RATING = "rating"
    DATE = "date"
    FILE = "file"
    UNSUPPORTED = "unsupported"


class FieldControl(CamelModel):
    question_id: str
    question_type: str
    kind: ControlKind
    title: str = ""
    description: Optional[str] = None
    required: bool = False
    value: AnswerValue = None
    read_only: bool = False
    input_type: Optional[str] = None
    options: Optional[List[str]] = None
    max_rating: Optional[int] = None
    error: Optional[str] = None


class RenderedForm(CamelModel):
    form_id: int
    short_id: str
    title: str
    theme: FormTheme
    sections: List[FormSection] = Field(default_factory=list)
    preview: bool = False
    controls: List[FieldControl] = Field(default_factory=list)


# --- Responses ---


class ResponseCreate(CamelModel):
    answers: Dict[str, AnswerValue] = Field(default_factory=dict)


class ResponseOut(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    form_id: int
    answers: Dict[str, AnswerValue]
    created_at: Optional[datetime] = None


# --- Events and time slots ---


def _check_time_label(label: str) -> str:
    if not TIME_LABEL_PATTERN.match(label):
        raise ValueError(f"time '{label}' must use the HH:MM format")
    return label


def _check_unique_labels(labels):
    if len(set(labels)) != len(labels):
        raise ValueError("time slots must be unique within a day")


class TimeSlot(CamelModel):
    time: str
    available: bool = True

    @field_validator("time")
    @classmethod
    def check_time(cls, v):
        return _check_time_label(v)


class EventAvailability(CamelModel):
    date: date
    time_slots: List[TimeSlot] = Field(default_factory=list)

    @field_validator("time_slots")
    @classmethod
    def check_unique_times(cls, v):
        _check_unique_labels([slot.time for slot in v])
        return v


class DaySchedule(CamelModel):
    enabled: bool = False
    time_slots: List[str] = Field(default_factory=list)

    @field_validator("time_slots")
    @classmethod
    def check_times(cls, v):
        for label in v:
            _check_time_label(label)
        _check_unique_labels(v)
        return v


def _parse_weekly_schedule(v):
    # Older clients send the schedule as a JSON string
    if isinstance(v, str):
        try:
            v = json.loads(v)
        except ValueError as e:
            raise ValueError(f"weeklySchedule is not valid JSON: {e}") from e
    if isinstance(v, dict):
        unknown = [day for day in v if day not in WEEKDAYS]
        if unknown:
            raise ValueError(f"unknown weekday(s) in weeklySchedule: {', '.join(unknown)}")
    return v


class EventBase(CamelModel):
    title: str = Field("New Event", min_length=1)
    description: Optional[str] = None
    duration: int = Field(30, gt=0)  # minutes
    location: Optional[str] = None
    published: bool = False
    available_times: List[EventAvailability] = Field(default_factory=list)
    weekly_schedule: Optional[Dict[str, DaySchedule]] = None
    theme: FormTheme = Field(default_factory=FormTheme)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("weekly_schedule", mode="before")
    @classmethod
    def parse_weekly_schedule(cls, v):
        return _parse_weekly_schedule(v)


class EventCreate(EventBase):
    short_id: Optional[str] = Field(default=None, pattern=SHORT_ID_PATTERN)


class EventUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    short_id: Optional[str] = Field(default=None, pattern=SHORT_ID_PATTERN)
    duration: Optional[int] = Field(default=None, gt=0)
    location: Optional[str] = None
    published: Optional[bool] = None
    available_times: Optional[List[EventAvailability]] = None
    weekly_schedule: Optional[Dict[str, DaySchedule]] = None
    theme: Optional[FormTheme] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("weekly_schedule", mode="before")
    @classmethod
    def parse_weekly_schedule(cls, v):
        return _parse_weekly_schedule(v)


class EventOut(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    short_id: str
    duration: int
    location: Optional[str] = None
    published: bool = False
    available_times: List[EventAvailability] = Field(default_factory=list)
    weekly_schedule: Optional[Dict[str, DaySchedule]] = None
    theme: Optional[FormTheme] = None
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("event_metadata", "metadata"),
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LogoUpdate(CamelModel):
    logo_url: str = Field(..., min_length=1)


class SlotListing(CamelModel):
    date: date
    disabled: bool = False
    time_slots: List[TimeSlot] = Field(default_factory=list)
    message: Optional[str] = None


# --- Bookings ---


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELED = "canceled"
    RESCHEDULED = "rescheduled"


class BookingCreate(CamelModel):
    event_id: Optional[int] = None  # required on POST /api/bookings only
    name: str
    email: str
    date: date
    time: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if not v.strip():
            raise ValueError("Name required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        v = v.strip()
        if not v or "@" not in v:
            raise ValueError("Valid email required")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        # Accept full ISO timestamps (e.g. "2024-06-01T00:00:00.000Z") as well as YYYY-MM-DD
        if isinstance(v, str) and "T" in v:
            try:
                return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
            except ValueError as e:
                raise ValueError("Invalid date format") from e
        return v

    @field_validator("time")
    @classmethod
    def check_time(cls, v):
        return _check_time_label(v)


class BookingOut(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    event_id: int
    name: str
    email: str
    date: date
    time: str
    status: str
    created_at: Optional[datetime] = None


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


# --- Uploads ---


class ImageUploadResponse(CamelModel):
    message: str = "File uploaded successfully"
    file_url: str
