"""
On-Duty Request Service
Student submissions and the pending -> approved | rejected approval flow
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campus_events.core.exceptions import (
    AuthenticationError,
    ForbiddenError,
    OnDutyRequestNotFoundError,
    RequestAlreadyResolvedError,
)
from campus_events.core.logging_config import logger
from campus_events.models.on_duty import OnDutyRequest, OnDutyStatus
from campus_events.models.principal import Student
from campus_events.modules.auth.identity import Actor
from campus_events.modules.auth.permissions import Action, Scope, require_permission
from campus_events.schemas.on_duty import OnDutyRequestCreate


class OnDutyService:
    """Service for on-duty request operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_request(self, data: OnDutyRequestCreate, actor: Actor) -> OnDutyRequest:
        require_permission(actor.role, Action.ON_DUTY_CREATE, "Only students can submit on-duty requests")

        result = await self.db.execute(select(Student).where(Student.id == actor.principal_id))
        student = result.scalar_one_or_none()
        if not student:
            raise AuthenticationError("Principal not found")

        request = OnDutyRequest(
            reason=data.reason,
            event_name=data.event_name,
            from_date=data.from_date.isoformat(),
            to_date=data.to_date.isoformat(),
            from_time=data.from_time.isoformat(timespec="minutes") if data.from_time else None,
            to_time=data.to_time.isoformat(timespec="minutes") if data.to_time else None,
            description=data.description,
            attachment=data.attachment,
            student_id=student.id,
            student_name=student.name,
            roll_number=student.roll_number,
            registration_number=student.registration_number,
            department=student.department,
            status=OnDutyStatus.PENDING,
        )
        self.db.add(request)
        await self.db.commit()

        logger.log_transition(
            "on_duty_request", request.id, "submitted", actor.principal_id,
            department=request.department,
        )
        return request

    async def list_visible(self, actor: Actor, status: Optional[OnDutyStatus] = None) -> List[OnDutyRequest]:
        """Student: own requests. Faculty: own department. Admin: all."""
        scope = require_permission(actor.role, Action.ON_DUTY_READ)

        query = select(OnDutyRequest).order_by(OnDutyRequest.submitted_at.desc())
        if scope == Scope.OWN:
            query = query.where(OnDutyRequest.student_id == actor.principal_id)
        elif scope == Scope.OWN_DEPARTMENT:
            query = query.where(OnDutyRequest.department == actor.department)
        if status is not None:
            query = query.where(OnDutyRequest.status == status)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_visible(self, request_id: str, actor: Actor) -> OnDutyRequest:
        scope = require_permission(actor.role, Action.ON_DUTY_READ)
        request = await self._get(request_id)
        if not self._in_scope(request, actor, scope):
            raise ForbiddenError("Not authorized to view this request")
        return request

    async def approve(self, request_id: str, actor: Actor, remarks: Optional[str] = None) -> OnDutyRequest:
        return await self._resolve(request_id, actor, OnDutyStatus.APPROVED, remarks)

    async def reject(self, request_id: str, actor: Actor, remarks: Optional[str] = None) -> OnDutyRequest:
        return await self._resolve(request_id, actor, OnDutyStatus.REJECTED, remarks)

    async def _resolve(self, request_id: str, actor: Actor, outcome: OnDutyStatus,
                       remarks: Optional[str]) -> OnDutyRequest:
        """
        One-shot transition out of pending. After the role check, instance
        checks run in the order NotFound, department scope, state, so an
        out-of-scope resolver never learns the request's state.
        """
        scope = require_permission(actor.role, Action.ON_DUTY_RESOLVE, "Not authorized to resolve on-duty requests")
        request = await self._get(request_id)
        if not self._in_scope(request, actor, scope):
            raise ForbiddenError("Not authorized to resolve requests outside your department")

        # Conditional update keyed on the current state
        result = await self.db.execute(
            update(OnDutyRequest)
            .where(OnDutyRequest.id == request.id, OnDutyRequest.status == OnDutyStatus.PENDING)
            .values(
                status=outcome,
                resolved_by_id=actor.principal_id,
                resolved_by_name=actor.name,
                resolved_at=datetime.utcnow(),
                remarks=remarks,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            current = await self._get(request_id)
            raise RequestAlreadyResolvedError(current.status.value)
        await self.db.commit()

        logger.log_transition(
            "on_duty_request", request.id, outcome.value, actor.principal_id,
            department=request.department,
        )
        return await self._get(request_id)

    async def _get(self, request_id: str) -> OnDutyRequest:
        result = await self.db.execute(
            select(OnDutyRequest)
            .where(OnDutyRequest.id == request_id)
            .execution_options(populate_existing=True)
        )
        request = result.scalar_one_or_none()
        if not request:
            raise OnDutyRequestNotFoundError(request_id)
        return request

    @staticmethod
    def _in_scope(request: OnDutyRequest, actor: Actor, scope: Scope) -> bool:
        if scope == Scope.ANY:
            return True
        if scope == Scope.OWN_DEPARTMENT:
            return request.department == actor.department
        return request.student_id == actor.principal_id
