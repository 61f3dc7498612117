from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Date,
    DateTime,
    Boolean,
    JSON,
    ForeignKey,
    Index,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Form(Base):
    __tablename__ = "forms"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # Owner id as issued by the upstream identity provider; users live outside this service
    user_id = Column(Integer, nullable=False, index=True)
    title = Column(String, nullable=False)
    short_id = Column(String, nullable=False, unique=True, index=True)
    published = Column(Boolean, default=False, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    questions = Column(JSON, nullable=False, default=list)  # ordered, display order
    sections = Column(JSON, nullable=False, default=list)
    theme = Column(JSON, nullable=False)
    # "metadata" is reserved on declarative classes
    form_metadata = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), onupdate=func.now(), server_default=func.now()
    )

    responses = relationship(
        "Response", back_populates="form", cascade="all, delete-orphan"
    )


class Response(Base):
    __tablename__ = "responses"

    id = Column(Integer, primary_key=True, index=True)
    form_id = Column(Integer, ForeignKey("forms.id"), nullable=False, index=True)
    # question id -> answer value (str, list of str, number or null)
    answers = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    form = relationship("Form", back_populates="responses")


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    short_id = Column(String, nullable=False, unique=True, index=True)
    duration = Column(Integer, nullable=False)  # minutes
    location = Column(String, nullable=True)
    published = Column(Boolean, default=False, nullable=False)
    available_times = Column(JSON, nullable=False, default=list)  # per-date slot lists
    weekly_schedule = Column(JSON, nullable=True)  # weekday -> {enabled, timeSlots}
    theme = Column(JSON, nullable=True)
    event_metadata = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), onupdate=func.now(), server_default=func.now()
    )

    bookings = relationship(
        "Booking", back_populates="event", cascade="all, delete-orphan"
    )


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String, nullable=False)  # HH:MM
    status = Column(String, default="confirmed", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="bookings")

    # One active booking per slot; canceled rows free the slot again
    __table_args__ = (
        Index(
            "uq_bookings_active_slot",
            "event_id",
            "date",
            "time",
            unique=True,
            sqlite_where=text("status != 'canceled'"),
            postgresql_where=text("status != 'canceled'"),
        ),
    )
