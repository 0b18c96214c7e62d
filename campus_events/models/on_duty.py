from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text, ForeignKey
from datetime import datetime
import enum

from campus_events.core.database import Base
from campus_events.models.base import ID_TYPE, new_id


class OnDutyReason(str, enum.Enum):
    EVENT_PARTICIPATION = "Event Participation"
    COMPETITION = "Competition"
    WORKSHOP = "Workshop"
    INTERNSHIP = "Internship"
    PROJECT_WORK = "Project Work"
    OTHER = "Other"


class OnDutyStatus(str, enum.Enum):
    """pending -> approved | rejected; both outcomes are terminal"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class OnDutyRequest(Base):
    """A student's application for excused absence"""
    __tablename__ = "on_duty_requests"

    id = Column(ID_TYPE, primary_key=True, default=new_id)
    reason = Column(SQLEnum(OnDutyReason), nullable=False)
    event_name = Column(String(255), nullable=False)
    from_date = Column(String(20), nullable=False)
    to_date = Column(String(20), nullable=False)
    from_time = Column(String(20), nullable=True)
    to_time = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    attachment = Column(String(500), nullable=True)

    # Snapshot of the requesting student at submission time
    student_id = Column(ID_TYPE, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    student_name = Column(String(255), nullable=False)
    roll_number = Column(String(50), nullable=False)
    registration_number = Column(String(50), nullable=True)
    department = Column(String(100), nullable=False, index=True)

    status = Column(SQLEnum(OnDutyStatus), default=OnDutyStatus.PENDING, nullable=False, index=True)
    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Set only on the transition out of pending
    resolved_by_id = Column(ID_TYPE, ForeignKey("faculty.id"), nullable=True)
    resolved_by_name = Column(String(255), nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    remarks = Column(Text, nullable=True)

    def __repr__(self):
        return f"<OnDutyRequest {self.id} {self.status}>"
