from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text
from datetime import datetime
import enum

from campus_events.core.database import Base
from campus_events.models.base import ID_TYPE


class CertificateType(str, enum.Enum):
    PARTICIPATION = "participation"
    ACHIEVEMENT = "achievement"

    @property
    def title(self) -> str:
        return f"Certificate of {self.value.capitalize()}"


class Certificate(Base):
    """Issued certificate. Read-only once created."""
    __tablename__ = "certificates"

    id = Column(String(40), primary_key=True)  # CERT-YYYYMMDD-XXXXXXXX
    title = Column(String(255), nullable=False)
    event_name = Column(String(255), nullable=False, index=True)  # free text, not a foreign key
    issue_date = Column(String(20), nullable=False)
    type = Column(SQLEnum(CertificateType), nullable=False)

    # Roster student identifier (roll number); matched against Student.roll_number on read
    student_identifier = Column(String(50), nullable=False, index=True)
    student_name = Column(String(255), nullable=False)
    student_email = Column(String(255), nullable=True)
    department = Column(String(100), nullable=True)
    registration_number = Column(String(50), nullable=True)

    artifact_path = Column(Text, nullable=True)
    issued_by_id = Column(ID_TYPE, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Certificate {self.id}>"
