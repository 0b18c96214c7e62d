from sqlalchemy import (
    Column, String, Boolean, DateTime, Enum as SQLEnum, Integer, Text,
    ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from campus_events.core.database import Base
from campus_events.models.base import ID_TYPE, new_id


class EventCategory(str, enum.Enum):
    TECHNICAL = "technical"
    CULTURAL = "cultural"
    SPORTS = "sports"
    WORKSHOP = "workshop"
    SEMINAR = "seminar"


class Event(Base):
    """Campus event owned by the faculty/admin who created it"""
    __tablename__ = "events"

    id = Column(ID_TYPE, primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(String(20), nullable=False)
    time = Column(String(20), nullable=False)
    venue = Column(String(255), nullable=False)
    organizer = Column(String(255), nullable=False)
    category = Column(SQLEnum(EventCategory), default=EventCategory.TECHNICAL, nullable=False)
    registration_open = Column(Boolean, default=True, nullable=False)

    created_by_id = Column(ID_TYPE, ForeignKey("faculty.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    created_by = relationship("Faculty", lazy="joined")

    def __repr__(self):
        return f"<Event {self.title}>"


class EventRegistration(Base):
    """(event, student) pair in the Registered state"""
    __tablename__ = "event_registrations"
    __table_args__ = (
        UniqueConstraint("event_id", "student_id", name="uq_event_registration"),
    )

    seq = Column(Integer, primary_key=True, autoincrement=True)  # keeps insertion order
    event_id = Column(ID_TYPE, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(ID_TYPE, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    registered_at = Column(DateTime, default=datetime.utcnow, nullable=False)
