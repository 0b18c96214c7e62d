from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from campus_events.core.database import get_db
from campus_events.models.on_duty import OnDutyStatus
from campus_events.modules.auth import Actor, get_current_actor
from campus_events.schemas.on_duty import OnDutyRequestCreate, OnDutyRequestResponse, ResolveRequest
from campus_events.services.on_duty_service import OnDutyService

router = APIRouter()


@router.post("", response_model=OnDutyRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_on_duty_request(
    data: OnDutyRequestCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Submit an on-duty request (students only)"""
    request = await OnDutyService(db).create_request(data, actor)
    return OnDutyRequestResponse.from_request(request)


@router.get("", response_model=List[OnDutyRequestResponse])
async def list_on_duty_requests(
    status_filter: Optional[OnDutyStatus] = Query(None, alias="status"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Requests visible to the caller, newest first"""
    requests = await OnDutyService(db).list_visible(actor, status_filter)
    return [OnDutyRequestResponse.from_request(r) for r in requests]


@router.get("/{request_id}", response_model=OnDutyRequestResponse)
async def get_on_duty_request(
    request_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    request = await OnDutyService(db).get_visible(request_id, actor)
    return OnDutyRequestResponse.from_request(request)


@router.put("/{request_id}/approve", response_model=OnDutyRequestResponse)
async def approve_on_duty_request(
    request_id: str,
    data: Optional[ResolveRequest] = Body(None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    request = await OnDutyService(db).approve(request_id, actor, data.remarks if data else None)
    return OnDutyRequestResponse.from_request(request)


@router.put("/{request_id}/reject", response_model=OnDutyRequestResponse)
async def reject_on_duty_request(
    request_id: str,
    data: Optional[ResolveRequest] = Body(None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    request = await OnDutyService(db).reject(request_id, actor, data.remarks if data else None)
    return OnDutyRequestResponse.from_request(request)
