"""
Event Service Layer
Event CRUD plus the per-(event, student) registration state machine
"""

from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_events.core.exceptions import (
    AlreadyRegisteredError,
    EventNotFoundError,
    ForbiddenError,
    NotRegisteredError,
    RegistrationClosedError,
    ValidationError,
)
from campus_events.core.logging_config import logger
from campus_events.models.event import Event, EventCategory, EventRegistration
from campus_events.models.principal import Student
from campus_events.modules.auth.identity import Actor
from campus_events.modules.auth.permissions import Action, Scope, require_permission
from campus_events.schemas.event import EventCreate, EventUpdate

UPDATABLE_TEXT_FIELDS = ("title", "description", "date", "time", "venue", "organizer")

STUDENTS_ONLY = "Only students can register for events"


class EventService:
    """Service for event-related operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =====================================================
    # READ
    # =====================================================

    async def list_events(self, actor: Optional[Actor] = None,
                          category: Optional[EventCategory] = None) -> List[Tuple[Event, int, Optional[bool]]]:
        """Events newest first with (registered count, is-registered-for-student)"""
        if actor is not None:
            require_permission(actor.role, Action.EVENT_READ)

        query = select(Event).order_by(Event.created_at.desc())
        if category is not None:
            query = query.where(Event.category == category)
        result = await self.db.execute(query)
        events = result.scalars().unique().all()

        counts = await self._registration_counts([e.id for e in events])
        registered: Set[str] = set()
        if actor is not None and actor.is_student:
            registered = await self._registered_event_ids(actor.principal_id)

        return [
            (
                event,
                counts.get(event.id, 0),
                (event.id in registered) if actor is not None and actor.is_student else None,
            )
            for event in events
        ]

    async def get_event(self, event_id: str) -> Event:
        result = await self.db.execute(
            select(Event)
            .where(Event.id == event_id)
            .execution_options(populate_existing=True)
        )
        event = result.scalars().unique().one_or_none()
        if not event:
            raise EventNotFoundError(event_id)
        return event

    async def get_registered_students(self, event_id: str) -> List[Student]:
        """Registered students in registration order"""
        result = await self.db.execute(
            select(Student)
            .join(EventRegistration, EventRegistration.student_id == Student.id)
            .where(EventRegistration.event_id == event_id)
            .order_by(EventRegistration.seq)
        )
        return list(result.scalars().all())

    async def _registration_counts(self, event_ids: List[str]) -> Dict[str, int]:
        if not event_ids:
            return {}
        result = await self.db.execute(
            select(EventRegistration.event_id, func.count(EventRegistration.seq))
            .where(EventRegistration.event_id.in_(event_ids))
            .group_by(EventRegistration.event_id)
        )
        return {event_id: count for event_id, count in result.all()}

    async def _registered_event_ids(self, student_id: str) -> Set[str]:
        result = await self.db.execute(
            select(EventRegistration.event_id).where(EventRegistration.student_id == student_id)
        )
        return set(result.scalars().all())

    # =====================================================
    # CREATE / UPDATE / DELETE
    # =====================================================

    async def create_event(self, data: EventCreate, actor: Actor) -> Event:
        require_permission(actor.role, Action.EVENT_CREATE, "Not authorized to create events")

        event = Event(
            title=data.title,
            description=data.description,
            date=data.date,
            time=data.time,
            venue=data.venue,
            organizer=data.organizer,
            category=data.category,
            registration_open=True if data.registration_open is None else data.registration_open,
            created_by_id=actor.principal_id,
        )
        self.db.add(event)
        await self.db.commit()

        logger.log_transition("event", event.id, "created", actor.principal_id, title=event.title)
        return await self.get_event(event.id)

    async def update_event(self, event_id: str, data: EventUpdate, actor: Actor) -> Event:
        """
        Partial update. Blank text fields are ignored (they cannot clear a
        value); registrationOpen applies whenever it is sent and not null.
        """
        event = await self._get_owned_event(
            event_id, actor, Action.EVENT_UPDATE, "Not authorized to update this event"
        )

        changed = []
        for field in UPDATABLE_TEXT_FIELDS:
            value = getattr(data, field)
            if value is not None and value.strip():
                setattr(event, field, value)
                changed.append(field)

        if data.category is not None and data.category.strip():
            try:
                event.category = EventCategory(data.category.strip().lower())
            except ValueError:
                raise ValidationError(f"Invalid category: {data.category}", field="category")
            changed.append("category")

        if data.registration_open is not None:
            event.registration_open = data.registration_open
            changed.append("registration_open")

        await self.db.commit()

        logger.log_transition("event", event.id, "updated", actor.principal_id, fields=changed)
        return await self.get_event(event.id)

    async def delete_event(self, event_id: str, actor: Actor) -> None:
        event = await self._get_owned_event(
            event_id, actor, Action.EVENT_DELETE, "Not authorized to delete this event"
        )

        await self.db.execute(delete(EventRegistration).where(EventRegistration.event_id == event.id))
        await self.db.execute(delete(Event).where(Event.id == event.id))
        await self.db.commit()

        logger.log_transition("event", event_id, "deleted", actor.principal_id)

    async def _get_owned_event(self, event_id: str, actor: Actor, action: Action, message: str) -> Event:
        scope = require_permission(actor.role, action, message)
        event = await self.get_event(event_id)
        if scope == Scope.OWN and event.created_by_id != actor.principal_id:
            raise ForbiddenError(message)
        return event

    # =====================================================
    # REGISTRATION STATE MACHINE
    # =====================================================

    async def register(self, event_id: str, actor: Actor) -> None:
        """NotRegistered -> Registered. A second call fails with AlreadyRegistered."""
        require_permission(actor.role, Action.EVENT_REGISTER, STUDENTS_ONLY)
        event = await self.get_event(event_id)

        if not event.registration_open:
            raise RegistrationClosedError()

        # The unique (event_id, student_id) constraint is the atomic check
        self.db.add(EventRegistration(event_id=event.id, student_id=actor.principal_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise AlreadyRegisteredError()

        logger.log_transition("event", event.id, "registered", actor.principal_id)

    async def cancel(self, event_id: str, actor: Actor) -> None:
        """Registered -> NotRegistered"""
        require_permission(actor.role, Action.EVENT_CANCEL, STUDENTS_ONLY)
        event = await self.get_event(event_id)

        result = await self.db.execute(
            delete(EventRegistration).where(
                EventRegistration.event_id == event.id,
                EventRegistration.student_id == actor.principal_id,
            )
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotRegisteredError()
        await self.db.commit()

        logger.log_transition("event", event.id, "cancelled", actor.principal_id)
