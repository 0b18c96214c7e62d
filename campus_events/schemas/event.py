from pydantic import AliasChoices, Field, field_validator
from typing import List, Optional
from datetime import datetime

from campus_events.models.event import Event, EventCategory
from campus_events.schemas.common import CamelModel, require_text


class EventCreate(CamelModel):
    title: str
    description: str
    date: str
    time: str
    venue: str
    organizer: str
    category: EventCategory = Field(
        EventCategory.TECHNICAL,
        validation_alias=AliasChoices("category", "type"),
    )
    registration_open: Optional[bool] = None  # None -> open

    @field_validator("title", "description", "date", "time", "venue", "organizer", mode="before")
    @classmethod
    def not_blank(cls, v, info):
        return require_text(v, info.field_name)


class EventUpdate(CamelModel):
    """
    Partial update. Text fields (and category) only apply when present and
    non-blank; registrationOpen applies whenever it is present and not null.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    venue: Optional[str] = None
    organizer: Optional[str] = None
    category: Optional[str] = Field(None, validation_alias=AliasChoices("category", "type"))
    registration_open: Optional[bool] = None


class CreatorSummary(CamelModel):
    id: str
    name: str


class RegisteredStudent(CamelModel):
    id: str
    name: str
    roll_number: str


class EventResponse(CamelModel):
    id: str
    title: str
    description: str
    date: str
    time: str
    venue: str
    organizer: str
    category: EventCategory
    registration_open: bool
    created_by: Optional[CreatorSummary] = None
    created_at: datetime
    registered_count: int = 0
    is_registered: Optional[bool] = None

    @classmethod
    def from_event(cls, event: Event, registered_count: int = 0,
                   is_registered: Optional[bool] = None) -> "EventResponse":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            date=event.date,
            time=event.time,
            venue=event.venue,
            organizer=event.organizer,
            category=event.category,
            registration_open=event.registration_open,
            created_by=CreatorSummary.model_validate(event.created_by) if event.created_by else None,
            created_at=event.created_at,
            registered_count=registered_count,
            is_registered=is_registered,
        )


class EventDetailResponse(EventResponse):
    registered_users: List[RegisteredStudent] = []
