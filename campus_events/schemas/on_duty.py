from pydantic import field_validator, model_validator
from typing import Optional
from datetime import date, datetime, time

from campus_events.models.on_duty import OnDutyRequest, OnDutyReason, OnDutyStatus
from campus_events.schemas.common import CamelModel, require_text
from campus_events.schemas.event import CreatorSummary

TIME_FORMATS = ("%H:%M", "%H:%M:%S", "%I:%M %p")


class OnDutyRequestCreate(CamelModel):
    reason: OnDutyReason
    event_name: str
    from_date: date
    to_date: date
    from_time: Optional[time] = None
    to_time: Optional[time] = None
    description: Optional[str] = None
    attachment: Optional[str] = None

    @field_validator("event_name", mode="before")
    @classmethod
    def event_name_not_blank(cls, v):
        return require_text(v, "eventName")

    @field_validator("from_time", "to_time", mode="before")
    @classmethod
    def parse_clock_time(cls, v):
        """Accept 9:00 as well as 09:00; blank means not given"""
        if not isinstance(v, str):
            return v
        v = v.strip()
        if not v:
            return None
        for fmt in TIME_FORMATS:
            try:
                return datetime.strptime(v, fmt).time()
            except ValueError:
                continue
        raise ValueError(f"Invalid time: {v}")

    @model_validator(mode="after")
    def check_date_range(self):
        if self.from_date > self.to_date:
            raise ValueError("fromDate must not be after toDate")
        if self.from_date == self.to_date and self.from_time is not None and self.to_time is not None \
                and self.from_time > self.to_time:
            raise ValueError("fromTime must not be after toTime")
        return self


class ResolveRequest(CamelModel):
    remarks: Optional[str] = None


class OnDutyRequestResponse(CamelModel):
    id: str
    reason: OnDutyReason
    event_name: str
    from_date: str
    to_date: str
    from_time: Optional[str] = None
    to_time: Optional[str] = None
    description: Optional[str] = None
    attachment: Optional[str] = None
    student_id: str
    student_name: str
    roll_number: str
    registration_number: Optional[str] = None
    department: str
    status: OnDutyStatus
    submitted_at: datetime
    resolved_by: Optional[CreatorSummary] = None
    resolved_at: Optional[datetime] = None
    remarks: Optional[str] = None

    @classmethod
    def from_request(cls, request: OnDutyRequest) -> "OnDutyRequestResponse":
        resolved_by = None
        if request.resolved_by_id:
            resolved_by = CreatorSummary(id=request.resolved_by_id, name=request.resolved_by_name or "")
        return cls(
            id=request.id,
            reason=request.reason,
            event_name=request.event_name,
            from_date=request.from_date,
            to_date=request.to_date,
            from_time=request.from_time,
            to_time=request.to_time,
            description=request.description,
            attachment=request.attachment,
            student_id=request.student_id,
            student_name=request.student_name,
            roll_number=request.roll_number,
            registration_number=request.registration_number,
            department=request.department,
            status=request.status,
            submitted_at=request.submitted_at,
            resolved_by=resolved_by,
            resolved_at=request.resolved_at,
            remarks=request.remarks,
        )
