from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from campus_events.core.database import get_db
from campus_events.models.event import EventCategory
from campus_events.modules.auth import Actor, get_current_actor, get_optional_actor
from campus_events.schemas.common import MessageResponse
from campus_events.schemas.event import (
    EventCreate,
    EventDetailResponse,
    EventResponse,
    EventUpdate,
    RegisteredStudent,
)
from campus_events.services.event_service import EventService

router = APIRouter()


async def _event_detail(service: EventService, event_id: str,
                        actor: Optional[Actor] = None) -> EventDetailResponse:
    event = await service.get_event(event_id)
    students = await service.get_registered_students(event.id)

    is_registered = None
    if actor is not None and actor.is_student:
        is_registered = any(s.id == actor.principal_id for s in students)

    response = EventDetailResponse.from_event(
        event, registered_count=len(students), is_registered=is_registered
    )
    response.registered_users = [
        RegisteredStudent(id=s.id, name=s.name, roll_number=s.roll_number) for s in students
    ]
    return response


@router.get("", response_model=List[EventResponse], response_model_exclude_none=True)
async def list_events(
    category: Optional[EventCategory] = Query(None, description="Filter by category"),
    actor: Optional[Actor] = Depends(get_optional_actor),
    db: AsyncSession = Depends(get_db)
):
    """List events, newest first. Students also get isRegistered per event."""
    rows = await EventService(db).list_events(actor, category)
    return [
        EventResponse.from_event(event, registered_count=count, is_registered=registered)
        for event, count, registered in rows
    ]


@router.get("/{event_id}", response_model=EventDetailResponse, response_model_exclude_none=True)
async def get_event(
    event_id: str,
    actor: Optional[Actor] = Depends(get_optional_actor),
    db: AsyncSession = Depends(get_db)
):
    """Get event with its registered students"""
    return await _event_detail(EventService(db), event_id, actor)


@router.post("", response_model=EventDetailResponse, response_model_exclude_none=True,
             status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    service = EventService(db)
    event = await service.create_event(data, actor)
    return await _event_detail(service, event.id)


@router.put("/{event_id}", response_model=EventDetailResponse, response_model_exclude_none=True)
async def update_event(
    event_id: str,
    data: EventUpdate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    service = EventService(db)
    event = await service.update_event(event_id, data, actor)
    return await _event_detail(service, event.id)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    await EventService(db).delete_event(event_id, actor)
    return MessageResponse(message="Event removed")


@router.post("/{event_id}/register", response_model=MessageResponse)
async def register_for_event(
    event_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    await EventService(db).register(event_id, actor)
    return MessageResponse(message="Successfully registered for the event")


@router.post("/{event_id}/cancel", response_model=MessageResponse)
async def cancel_registration(
    event_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    await EventService(db).cancel(event_id, actor)
    return MessageResponse(message="Registration cancelled successfully")
